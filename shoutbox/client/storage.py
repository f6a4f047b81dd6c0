"""Local client storage, a small JSON key/value file that survives restarts."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

USERNAME_KEY = "username"


class LocalStorage:
    """Persists string values under fixed keys."""

    def __init__(self, path: Path):
        self.path = path

    def _load(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as fd:
                data = json.load(fd)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable client storage %s: %s", self.path, e)
            return {}

        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fd:
            json.dump(data, fd)
