"""Short-lived records of authorization flows started via the browser."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

SESSION_TIMEOUT = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AuthSession:
    session_id: str
    created_at: datetime
    expires_at: datetime


class AuthSessionRegistry:
    def __init__(
        self,
        *,
        timeout: timedelta = SESSION_TIMEOUT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._timeout = timeout
        self._clock = clock
        self._sessions: Dict[str, AuthSession] = {}

    def create(self) -> str:
        created_at = self._clock()
        session_id = f"auth-{int(created_at.timestamp() * 1000)}"
        # two starts within the same millisecond
        suffix = 1
        base_id = session_id
        while session_id in self._sessions:
            session_id = f"{base_id}-{suffix}"
            suffix += 1
        self._sessions[session_id] = AuthSession(
            session_id=session_id,
            created_at=created_at,
            expires_at=created_at + self._timeout,
        )
        return session_id

    def get(self, session_id: str) -> Optional[AuthSession]:
        """Return the session if it exists and has not expired."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._clock() > session.expires_at:
            del self._sessions[session_id]
            return None
        return session

    def clear(self, session_id: Optional[str] = None) -> None:
        if session_id is None:
            self._sessions.clear()
        else:
            self._sessions.pop(session_id, None)
