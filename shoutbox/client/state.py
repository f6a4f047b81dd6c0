"""
Client state container.

State is immutable; every change goes through `reduce`. The message list is
the last server snapshot plus an overlay of optimistically appended records,
reconciled by id whenever a new snapshot arrives.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, unique
from typing import Dict, Iterable, Tuple, Union

from shoutbox.core.message import Message


@unique
class Status(Enum):
    idle = "idle"
    submitting = "submitting"


GENERIC_ERROR_NOTICE = "Something went wrong, please try again."
REFRESH_ERROR_NOTICE = "Could not refresh messages."


def _ordered(messages: Iterable[Message]) -> Tuple[Message, ...]:
    return tuple(sorted(messages, key=lambda m: (m.created_at, m.id)))


@dataclass(frozen=True)
class ShoutboxState:
    server_messages: Tuple[Message, ...] = ()
    pending: Tuple[Message, ...] = ()
    username: str = ""
    content: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    status: Status = Status.idle
    notice: str = ""

    @property
    def messages(self) -> Tuple[Message, ...]:
        """Server snapshot merged with pending records not yet confirmed."""
        known = {m.id for m in self.server_messages}
        extra = [m for m in self.pending if m.id not in known]
        if not extra:
            return self.server_messages
        return _ordered((*self.server_messages, *extra))

    @property
    def can_submit(self) -> bool:
        return bool(self.username) and bool(self.content) and self.status is Status.idle


@dataclass(frozen=True)
class MessagesLoaded:
    messages: Tuple[Message, ...]


@dataclass(frozen=True)
class MessageReceived:
    message: Message


@dataclass(frozen=True)
class UsernameChanged:
    username: str


@dataclass(frozen=True)
class ContentChanged:
    content: str


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class SubmitSucceeded:
    message: Message


@dataclass(frozen=True)
class SubmitRejected:
    errors: Dict[str, str]


@dataclass(frozen=True)
class SubmitFailed:
    reason: str = GENERIC_ERROR_NOTICE


@dataclass(frozen=True)
class RefreshFailed:
    reason: str = REFRESH_ERROR_NOTICE


Action = Union[
    MessagesLoaded,
    MessageReceived,
    UsernameChanged,
    ContentChanged,
    SubmitStarted,
    SubmitSucceeded,
    SubmitRejected,
    SubmitFailed,
    RefreshFailed,
]


def reduce(state: ShoutboxState, action: Action) -> ShoutboxState:
    """Returns the state that results from applying `action`."""
    if isinstance(action, MessagesLoaded):
        snapshot = tuple(action.messages)
        known = {m.id for m in snapshot}
        # A refresh that went out before the last append may not include it yet
        pending = tuple(m for m in state.pending if m.id not in known)
        notice = "" if state.notice == REFRESH_ERROR_NOTICE else state.notice
        return replace(state, server_messages=snapshot, pending=pending, notice=notice)

    if isinstance(action, MessageReceived):
        if any(m.id == action.message.id for m in state.server_messages):
            return state
        pending = tuple(m for m in state.pending if m.id != action.message.id)
        return replace(state, server_messages=_ordered((*state.server_messages, action.message)), pending=pending)

    if isinstance(action, UsernameChanged):
        return replace(state, username=action.username)

    if isinstance(action, ContentChanged):
        return replace(state, content=action.content)

    if isinstance(action, SubmitStarted):
        return replace(state, status=Status.submitting, errors={}, notice="")

    if isinstance(action, SubmitSucceeded):
        already_known = any(m.id == action.message.id for m in state.server_messages)
        pending = state.pending if already_known else (*state.pending, action.message)
        return replace(state, status=Status.idle, content="", pending=tuple(pending))

    if isinstance(action, SubmitRejected):
        return replace(state, status=Status.idle, errors=dict(action.errors))

    if isinstance(action, SubmitFailed):
        return replace(state, status=Status.idle, notice=action.reason)

    if isinstance(action, RefreshFailed):
        return replace(state, notice=action.reason)

    raise TypeError(f"Unknown action: {action!r}")
