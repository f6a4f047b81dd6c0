"""Global server settings"""

from typing import Dict, List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized configuration.
    Reads configs from env variables.
    """

    app_name: str = "Shoutbox"
    server_host: str = "0.0.0.0"
    server_port: int = 8000

    db_name: str = "shoutbox.db"

    redis_url: str = "redis://localhost:6379"

    # When set, WebSocket subscribers must present it as ?key=
    realtime_app_key: str | None = None

    # token -> username
    auth_tokens: Dict[str, str] = {}

    cors_origins: List[str] = ["*"]

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
