"""Persistent storage for LeetCode session credentials."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from .config_dir import get_config_dir
from .credentials import SessionIdentity
from .errors import LeetCodeError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoredCredentials:
    """A cookie pair as saved on disk, plus who it belonged to and when."""

    csrftoken: str = field(repr=False)
    leetcode_session: str = field(repr=False)
    stored_at: datetime
    username: Optional[str] = None

    @property
    def identity(self) -> SessionIdentity:
        return SessionIdentity(self.csrftoken, self.leetcode_session)

    def to_dict(self) -> Dict[str, object]:
        return {
            "csrftoken": self.csrftoken,
            "LEETCODE_SESSION": self.leetcode_session,
            "username": self.username,
            "createdAt": self.stored_at.astimezone(timezone.utc).isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> Optional["StoredCredentials"]:
        csrf = data.get("csrftoken")
        session = data.get("LEETCODE_SESSION")
        if not isinstance(csrf, str) or not isinstance(session, str):
            return None
        stored_at_raw = data.get("createdAt")
        try:
            stored_at = (
                datetime.fromisoformat(stored_at_raw)
                if isinstance(stored_at_raw, str)
                else datetime.now(timezone.utc)
            )
        except ValueError:
            stored_at = datetime.now(timezone.utc)
        username = data.get("username")
        return cls(
            csrftoken=csrf,
            leetcode_session=session,
            stored_at=stored_at,
            username=username if isinstance(username, str) else None,
        )


class CredentialStore:
    """Manages on-disk persistence of `StoredCredentials`."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._file = Path(path) if path else get_config_dir() / "credentials.json"

    @property
    def file_path(self) -> Path:
        """Path to the single JSON file storing the credentials."""
        return self._file

    def save(self, credentials: StoredCredentials) -> None:
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            self._file.write_text(
                json.dumps(credentials.to_dict(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            if os.name == "posix":
                os.chmod(self._file, 0o600)
        except OSError as exc:
            raise LeetCodeError(f"Failed to save credentials: {exc}") from exc
        LOGGER.info("Saved credentials to %s", self._file)

    def load(self) -> Optional[StoredCredentials]:
        """Load the stored credentials, or None if missing or unreadable."""
        if not self._file.exists():
            return None
        try:
            data = json.loads(self._file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable credentials file: %s", exc)
            return None
        if not isinstance(data, dict):
            return None
        return StoredCredentials.from_dict(data)

    def clear(self) -> None:
        """Delete the stored credentials file if present."""
        try:
            self._file.unlink()
        except FileNotFoundError:
            return
        LOGGER.info("Removed credentials file %s", self._file)
