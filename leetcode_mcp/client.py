"""HTTP client abstraction for interacting with the LeetCode judge."""

from __future__ import annotations

import logging
from typing import Dict, Optional
from urllib.parse import urljoin

import requests
from requests import Session
from requests.exceptions import RequestException

from .config_store import DEFAULT_BASE_URL
from .credentials import SessionIdentity
from .models import CheckResponse, QuestionIdResponse, SubmitResponse

LOGGER = logging.getLogger(__name__)

QUESTION_ID_QUERY = """
query questionTitle($titleSlug: String!) {
    question(titleSlug: $titleSlug) {
        questionId
        questionFrontendId
    }
}
"""

USER_STATUS_QUERY = """
query globalData {
    userStatus {
        username
        isSignedIn
    }
}
"""


def _normalize_base_url(domain: str) -> str:
    url = (domain or "").strip()
    if not url:
        raise ValueError("base url must not be empty")
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url.rstrip("/")


def is_unauthorized(exc: BaseException) -> bool:
    """True when `exc` is an HTTP error caused by a 401 response."""
    response = getattr(exc, "response", None)
    return response is not None and response.status_code == 401


class LeetCodeClient:
    """Thin wrapper around the judge endpoints used for submissions.

    Every call takes the `SessionIdentity` explicitly; the client never reads
    shared credential state on its own.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 10.0,
        session: Optional[Session] = None,
    ) -> None:
        self.base_url = _normalize_base_url(base_url)
        self.timeout = timeout
        self._session = session

    # ------------------------------------------------------------------
    # Session helpers
    # ------------------------------------------------------------------
    def _new_session(self) -> Session:
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": "leetcode-mcp/0.1",
                "Accept-Language": "en-US,en;q=0.9",
            }
        )
        return session

    def _ensure_session(self) -> Session:
        if self._session is None:
            self._session = self._new_session()
        return self._session

    def _url(self, path: str) -> str:
        return urljoin(self.base_url + "/", path.lstrip("/"))

    @property
    def login_url(self) -> str:
        return self._url("accounts/login/")

    def problem_url(self, problem_slug: str) -> str:
        return self._url(f"problems/{problem_slug}/")

    @staticmethod
    def _auth_headers(identity: SessionIdentity) -> Dict[str, str]:
        return {
            "Cookie": identity.cookie_header(),
            "X-CSRFToken": identity.csrf_token,
        }

    def _post_json(self, path: str, body: Dict[str, object], headers: Dict[str, str]):
        response = self._ensure_session().post(
            self._url(path),
            json=body,
            headers={"Content-Type": "application/json", **headers},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    # ------------------------------------------------------------------
    # Judge endpoints
    # ------------------------------------------------------------------
    def fetch_question_id(
        self, problem_slug: str, identity: SessionIdentity
    ) -> Optional[str]:
        """Resolve a title slug to the judge's internal question id."""
        headers = self._auth_headers(identity)
        headers["Referer"] = self.problem_url(problem_slug)
        payload = self._post_json(
            "graphql",
            {"query": QUESTION_ID_QUERY, "variables": {"titleSlug": problem_slug}},
            headers,
        )
        question_id = QuestionIdResponse.from_payload(payload).question_id
        LOGGER.debug("question id for %s: %s", problem_slug, question_id)
        return question_id

    def submit_code(
        self,
        problem_slug: str,
        question_id: str,
        lang: str,
        code: str,
        identity: SessionIdentity,
    ) -> int:
        headers = self._auth_headers(identity)
        headers["Referer"] = self.problem_url(problem_slug)
        LOGGER.debug(
            "Submitting %s (question %s, %s, <source %d bytes>)",
            problem_slug,
            question_id,
            lang,
            len(code),
        )
        payload = self._post_json(
            f"problems/{problem_slug}/submit/",
            {"lang": lang, "question_id": question_id, "typed_code": code},
            headers,
        )
        submission_id = SubmitResponse.from_payload(payload).submission_id
        LOGGER.debug("submission id: %s", submission_id)
        return submission_id

    def check_submission(
        self, submission_id: int, identity: SessionIdentity
    ) -> CheckResponse:
        response = self._ensure_session().get(
            self._url(f"submissions/detail/{submission_id}/check/"),
            headers={"Cookie": identity.cookie_header()},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return CheckResponse.from_payload(response.json())

    # ------------------------------------------------------------------
    # Credential validation
    # ------------------------------------------------------------------
    def validate_credentials(
        self, csrf_token: str, session_token: str
    ) -> Optional[str]:
        """Return the signed-in username for the given cookie pair, else None.

        Any transport failure or unexpected payload counts as "not live".
        """
        identity = SessionIdentity(csrf_token or "", session_token or "")
        try:
            payload = self._post_json(
                "graphql", {"query": USER_STATUS_QUERY}, self._auth_headers(identity)
            )
        except (RequestException, ValueError) as exc:
            LOGGER.debug("credential validation request failed: %s", exc)
            return None

        data = payload.get("data") if isinstance(payload, dict) else None
        status = data.get("userStatus") if isinstance(data, dict) else None
        if not isinstance(status, dict):
            return None
        username = status.get("username")
        if status.get("isSignedIn") is True and isinstance(username, str) and username:
            return username
        return None
