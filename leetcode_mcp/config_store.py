from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional

from .config_dir import get_config_dir

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://leetcode.com"


@dataclass(frozen=True, slots=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    max_poll_attempts: int = 30
    poll_interval: float = 1.0


class ConfigStore:
    """Simple dotfile-backed config store for judge connection settings.

    Stores a small JSON blob at <config dir>/config.json. The file contains
    keys: base_url, timeout, max_poll_attempts, poll_interval. Missing or
    malformed values fall back to the defaults.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path else get_config_dir() / "config.json"

    @property
    def path(self) -> Path:
        return self._path

    def save(self, settings: Settings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(asdict(settings), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        # try to restrict permissions on POSIX
        try:
            if os.name == "posix":
                os.chmod(self._path, 0o600)
        except OSError:
            LOGGER.debug("could not chmod %s", self._path)

    def load_raw(self) -> Optional[Dict[str, object]]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable config file %s: %s", self._path, exc)
            return None
        if not isinstance(data, dict):
            return None
        return data

    def load(self) -> Settings:
        data = self.load_raw() or {}
        defaults = Settings()

        base_url = data.get("base_url")
        if not isinstance(base_url, str) or not base_url.strip():
            base_url = defaults.base_url

        return Settings(
            base_url=base_url.strip().rstrip("/"),
            timeout=_positive(data.get("timeout"), float, defaults.timeout),
            max_poll_attempts=_positive(
                data.get("max_poll_attempts"), int, defaults.max_poll_attempts
            ),
            poll_interval=_non_negative(
                data.get("poll_interval"), defaults.poll_interval
            ),
        )

    def delete(self) -> None:
        if self._path.exists():
            self._path.unlink()


def _positive(value, cast, default):
    if isinstance(value, bool):
        return default
    try:
        parsed = cast(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _non_negative(value, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default
