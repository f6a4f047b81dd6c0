"""Client settings"""

from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """
    Client configuration, read from SHOUTBOX_* env variables.
    Realtime credentials are optional; without them the client only polls.
    """

    api_url: str = "http://localhost:8000/api"
    refresh_interval: float = 5.0
    scroll_delay: float = 0.1
    request_timeout: float = 5.0
    storage_path: Path = Path.home() / ".shoutbox" / "storage.json"

    app_key: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    scheme: str = "https"

    model_config = {"env_prefix": "SHOUTBOX_", "env_file": ".env", "extra": "ignore"}

    @property
    def realtime_enabled(self) -> bool:
        return bool(self.app_key and self.host)

    @property
    def push_url(self) -> str:
        """WebSocket URL of the push channel."""
        ws_scheme = "wss" if self.scheme == "https" else "ws"
        port = self.port or (443 if ws_scheme == "wss" else 80)
        query = urlencode({"key": self.app_key or ""})
        return f"{ws_scheme}://{self.host}:{port}/api/ws?{query}"
