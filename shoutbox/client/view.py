"""Rendering of the message list."""

import sys
from datetime import datetime, tzinfo
from typing import List, Optional, Protocol, TextIO

from shoutbox.client.state import ShoutboxState
from shoutbox.core.message import Message


def format_time(created_at: datetime, tz: Optional[tzinfo] = None) -> str:
    """Time of day as HH:MM on a 24-hour clock, in local time unless `tz` is given."""
    return created_at.astimezone(tz).strftime("%H:%M")


def render_message(message: Message, tz: Optional[tzinfo] = None) -> List[str]:
    return [message.username, message.content, format_time(message.created_at, tz)]


class ShoutboxView(Protocol):
    """What the controller needs from a UI."""

    def render(self, state: ShoutboxState) -> None: ...

    def scroll_to_end(self) -> None: ...


class ConsoleView:
    """Prints messages as they appear, newest last."""

    def __init__(self, stream: Optional[TextIO] = None, tz: Optional[tzinfo] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.tz = tz
        self._shown: set[int] = set()
        self._errors: dict[str, str] = {}
        self._notice = ""

    def render(self, state: ShoutboxState) -> None:
        for message in state.messages:
            if message.id in self._shown:
                continue
            self._shown.add(message.id)
            username, content, time_of_day = render_message(message, self.tz)
            self.stream.write(f"[{time_of_day}] {username}: {content}\n")

        if state.errors and state.errors != self._errors:
            for field, reason in state.errors.items():
                self.stream.write(f"! {field}: {reason}\n")
        self._errors = state.errors

        if state.notice and state.notice != self._notice:
            self.stream.write(f"! {state.notice}\n")
        self._notice = state.notice

    def scroll_to_end(self) -> None:
        # Terminal output is already at the newest entry
        self.stream.flush()
