"""Wires the credential holder, judge client and submission engine together.

`app.py` (MCP tools) and `main.py` (CLI) both go through `LeetCodeService`
so the auth flow and the submit flow behave the same on either surface.
"""

from __future__ import annotations

import logging
import time
import webbrowser
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .auth_state import SESSION_TIMEOUT, AuthSessionRegistry
from .client import LeetCodeClient
from .config_store import ConfigStore, Settings
from .credentials import Credential
from .models import SubmissionResult
from .session_store import CredentialStore, StoredCredentials
from .submission import SubmissionEngine

LOGGER = logging.getLogger(__name__)

MANUAL_STEPS = [
    "1. Log in to LeetCode in your browser",
    "2. Open DevTools (F12) -> Application -> Cookies -> https://leetcode.com",
    "3. Copy the values of csrftoken and LEETCODE_SESSION",
    "4. Call save_leetcode_credentials with both values",
]


class LeetCodeService:
    def __init__(
        self,
        settings: Settings,
        *,
        credential_store: CredentialStore,
        credential: Optional[Credential] = None,
        client: Optional[LeetCodeClient] = None,
        auth_sessions: Optional[AuthSessionRegistry] = None,
        sleep: Optional[Callable[[float], None]] = None,
        open_browser: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self.settings = settings
        self.credential_store = credential_store
        self.credential = credential or Credential()
        self.client = client or LeetCodeClient(
            settings.base_url, timeout=settings.timeout
        )
        self.auth_sessions = auth_sessions or AuthSessionRegistry()
        self.engine = SubmissionEngine(
            self.client,
            self.credential,
            max_attempts=settings.max_poll_attempts,
            poll_interval=settings.poll_interval,
            sleep=sleep or time.sleep,
        )
        self._open_browser = open_browser

    @classmethod
    def from_config(
        cls,
        config_store: Optional[ConfigStore] = None,
        credential_store: Optional[CredentialStore] = None,
    ) -> "LeetCodeService":
        settings = (config_store or ConfigStore()).load()
        service = cls(settings, credential_store=credential_store or CredentialStore())
        service.load_stored_credentials()
        return service

    @property
    def login_url(self) -> str:
        return self.client.login_url

    # ------------------------------------------------------------------
    # Credential lifecycle
    # ------------------------------------------------------------------
    def load_stored_credentials(self) -> bool:
        stored = self.credential_store.load()
        if stored is None:
            return False
        identity = stored.identity
        self.credential.update(identity.csrf_token, identity.session_token)
        LOGGER.debug("Loaded stored credentials")
        return self.credential.is_authenticated()

    def start_auth(self) -> Dict[str, object]:
        session_id = self.auth_sessions.create()
        minutes = int(SESSION_TIMEOUT.total_seconds() // 60)
        result: Dict[str, object] = {
            "ok": True,
            "status": "pending",
            "sessionId": session_id,
            "loginUrl": self.login_url,
            "expiresIn": f"{minutes} minutes",
            "manualSteps": MANUAL_STEPS,
        }
        try:
            opened = self._open_browser(self.login_url)
        except webbrowser.Error as exc:
            LOGGER.warning("Could not open browser: %s", exc)
            opened = False
        result["browserOpened"] = bool(opened)
        if opened:
            result["message"] = (
                "Browser opened to the LeetCode login page. After logging in, "
                "copy your cookies and call save_leetcode_credentials."
            )
        else:
            result["message"] = (
                f"Could not open a browser automatically. Visit {self.login_url}, "
                "log in, then call save_leetcode_credentials."
            )
        return result

    def save_credentials(
        self,
        csrftoken: str,
        leetcode_session: str,
        session_id: Optional[str] = None,
    ) -> Dict[str, object]:
        if session_id is not None and self.auth_sessions.get(session_id) is None:
            return {
                "ok": False,
                "error": "Authorization session expired or not found. "
                "Please run start_leetcode_auth again.",
            }

        username = self.client.validate_credentials(csrftoken, leetcode_session)
        if username is None:
            return {
                "ok": False,
                "error": "The provided cookies are invalid or expired. Please log in "
                "to LeetCode again and copy fresh values.",
            }

        self.credential_store.save(
            StoredCredentials(
                csrftoken=csrftoken,
                leetcode_session=leetcode_session,
                stored_at=datetime.now(timezone.utc),
                username=username,
            )
        )
        self.credential.update(csrftoken, leetcode_session)
        if session_id is not None:
            self.auth_sessions.clear(session_id)
        return {
            "ok": True,
            "username": username,
            "message": f"Authorized as {username}.",
        }

    def auth_status(self) -> Dict[str, object]:
        if not self.credential.is_authenticated():
            return {
                "ok": True,
                "authenticated": False,
                "message": "No credentials found. Run start_leetcode_auth first.",
            }
        identity = self.credential.identity
        username = self.client.validate_credentials(
            identity.csrf_token, identity.session_token
        )
        if username is None:
            return {
                "ok": True,
                "authenticated": False,
                "message": "Stored credentials are expired or invalid. "
                "Run start_leetcode_auth to re-authorize.",
            }
        return {"ok": True, "authenticated": True, "username": username}

    def clear_credentials(self) -> Dict[str, object]:
        self.credential_store.clear()
        self.credential.clear()
        self.auth_sessions.clear()
        return {"ok": True}

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def submit_solution(
        self, problem_slug: str, code: str, language: str
    ) -> SubmissionResult:
        return self.engine.submit(problem_slug, code, language)
