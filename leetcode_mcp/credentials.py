"""In-memory holder for the LeetCode session identity."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SessionIdentity:
    """A csrftoken / LEETCODE_SESSION cookie pair."""

    csrf_token: str = field(default="", repr=False)
    session_token: str = field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.csrf_token) and bool(self.session_token)

    def cookie_header(self) -> str:
        return f"csrftoken={self.csrf_token}; LEETCODE_SESSION={self.session_token}"


class Credential:
    """Single shared owner of the current `SessionIdentity`.

    The identity itself is immutable; `update` swaps the reference so readers
    always see either the old pair or the new pair, never a mix.
    """

    def __init__(self, csrf_token: str = "", session_token: str = "") -> None:
        self._identity = SessionIdentity(csrf_token or "", session_token or "")

    @property
    def identity(self) -> SessionIdentity:
        return self._identity

    def is_authenticated(self) -> bool:
        return self._identity.is_complete

    def update(self, csrf_token: str, session_token: str) -> None:
        self._identity = SessionIdentity(csrf_token or "", session_token or "")

    def clear(self) -> None:
        self._identity = SessionIdentity()

    def __repr__(self) -> str:
        return f"Credential(authenticated={self.is_authenticated()})"
