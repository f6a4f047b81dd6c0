"""Unit tests for client settings derived values."""

from urllib.parse import parse_qs, urlsplit

from shoutbox.client.settings import ClientSettings


def test_realtime_requires_key_and_host():
    assert not ClientSettings(app_key=None, host=None).realtime_enabled
    assert not ClientSettings(app_key="key", host=None).realtime_enabled
    assert not ClientSettings(app_key=None, host="push.test").realtime_enabled
    assert ClientSettings(app_key="key", host="push.test").realtime_enabled


def test_push_url_secure_default_port():
    settings = ClientSettings(app_key="key", host="push.test", port=None, scheme="https")

    assert settings.push_url == "wss://push.test:443/api/ws?key=key"


def test_push_url_plain_default_port():
    settings = ClientSettings(app_key="key", host="push.test", port=None, scheme="http")

    assert settings.push_url == "ws://push.test:80/api/ws?key=key"


def test_push_url_explicit_port():
    settings = ClientSettings(app_key="key", host="localhost", port=8080, scheme="http")

    assert settings.push_url == "ws://localhost:8080/api/ws?key=key"


def test_push_url_encodes_key():
    """Reserved characters in the key stay inside the query value."""
    settings = ClientSettings(app_key="a&b#c%d", host="push.test", port=None, scheme="https")

    parts = urlsplit(settings.push_url)
    assert parts.fragment == ""
    assert parse_qs(parts.query) == {"key": ["a&b#c%d"]}
