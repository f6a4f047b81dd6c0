"""Unit tests for message rendering."""

import io
from datetime import datetime, timedelta, timezone

from shoutbox.client.state import ShoutboxState
from shoutbox.client.view import ConsoleView, format_time, render_message
from shoutbox.core.message import Message

CREATED = datetime(2024, 5, 1, 21, 7, 45, tzinfo=timezone.utc)
MESSAGE = Message(id=1, username="alice", content="hi", created_at=CREATED, updated_at=CREATED)


def test_format_time_is_24_hour():
    assert format_time(CREATED, timezone.utc) == "21:07"


def test_format_time_uses_given_zone():
    assert format_time(CREATED, timezone(timedelta(hours=5))) == "02:07"


def test_render_message():
    assert render_message(MESSAGE, timezone.utc) == ["alice", "hi", "21:07"]


def test_console_view_prints_each_message_once():
    stream = io.StringIO()
    view = ConsoleView(stream=stream, tz=timezone.utc)
    state = ShoutboxState(server_messages=(MESSAGE,))

    view.render(state)
    view.render(state)

    assert stream.getvalue() == "[21:07] alice: hi\n"


def test_console_view_prints_errors_and_notice():
    stream = io.StringIO()
    view = ConsoleView(stream=stream, tz=timezone.utc)

    view.render(ShoutboxState(errors={"username": "The username field is required."}, notice="Oops"))

    output = stream.getvalue()
    assert "! username: The username field is required." in output
    assert "! Oops" in output
