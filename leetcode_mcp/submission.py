"""Submit code and poll the judge until a verdict is available."""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Optional

from requests.exceptions import RequestException

from .client import LeetCodeClient, is_unauthorized
from .credentials import Credential, SessionIdentity
from .errors import ProblemNotFoundError, ProtocolError
from .languages import normalize_language
from .models import (
    ACCEPTED,
    AUTHORIZATION_REQUIRED,
    ERROR,
    INVALID_LANGUAGE,
    SUBMISSION_FAILED,
    TIMEOUT,
    UNAUTHORIZED,
    CheckResponse,
    PollState,
    SubmissionRequest,
    SubmissionResult,
)

LOGGER = logging.getLogger(__name__)

MAX_POLL_ATTEMPTS = 30
POLL_INTERVAL = 1.0

NOT_AUTHORIZED_MESSAGE = "Not authorized. Please run authorization first."
SESSION_EXPIRED_MESSAGE = "Session expired. Please re-authorize."


class SubmissionEngine:
    """Drives one submission from language check to final verdict.

    The engine keeps no per-call state, so one instance can serve concurrent
    callers. `sleep` is called once before every poll and can be swapped out
    in tests.
    """

    def __init__(
        self,
        client: LeetCodeClient,
        credential: Credential,
        *,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        poll_interval: float = POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.credential = credential
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self._sleep = sleep

    def submit(self, problem_slug: str, code: str, language: str) -> SubmissionResult:
        return self.submit_request(
            SubmissionRequest(problem_slug=problem_slug, code=code, language=language)
        )

    def submit_request(self, request: SubmissionRequest) -> SubmissionResult:
        """Submit `request` and return its verdict.

        Raises ProblemNotFoundError when the slug does not name a problem;
        every other outcome is reported through the returned result.
        """
        if not self.credential.is_authenticated():
            return SubmissionResult.failure(
                AUTHORIZATION_REQUIRED, NOT_AUTHORIZED_MESSAGE
            )

        lang = normalize_language(request.language)
        if lang is None:
            return SubmissionResult.failure(
                INVALID_LANGUAGE, f"Unsupported language: {request.language}"
            )

        # one snapshot per call so a concurrent update cannot mix token pairs
        identity = self.credential.identity
        try:
            question_id = self.client.fetch_question_id(request.problem_slug, identity)
            if not question_id:
                raise ProblemNotFoundError(request.problem_slug)
            submission_id = self.client.submit_code(
                request.problem_slug, question_id, lang, request.code, identity
            )
            return self._poll(submission_id, identity)
        except RequestException as exc:
            if is_unauthorized(exc):
                LOGGER.warning("Judge rejected the session for %s", request.problem_slug)
                return SubmissionResult.failure(UNAUTHORIZED, SESSION_EXPIRED_MESSAGE)
            LOGGER.error("Submission request failed: %s", exc)
            return SubmissionResult.failure(SUBMISSION_FAILED, str(exc))
        except ProtocolError as exc:
            LOGGER.error("Unexpected judge response: %s", exc)
            return SubmissionResult.failure(ERROR, str(exc))

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------
    def _poll(self, submission_id: int, identity: SessionIdentity) -> SubmissionResult:
        for attempt in range(1, self.max_attempts + 1):
            self._sleep(self.poll_interval)
            check = self.client.check_submission(submission_id, identity)
            state = check.poll_state
            LOGGER.debug(
                "submission %s attempt %d/%d: %s",
                submission_id,
                attempt,
                self.max_attempts,
                check.state,
            )
            if state is None:
                LOGGER.warning(
                    "submission %s reported unknown state %r", submission_id, check.state
                )
                return SubmissionResult.failure(
                    ERROR, f"Unexpected submission state: {check.state}"
                )
            if state is PollState.SUCCESS:
                return verdict_from_check(check)

        LOGGER.warning(
            "submission %s still pending after %d attempts",
            submission_id,
            self.max_attempts,
        )
        return SubmissionResult.failure(
            TIMEOUT,
            "Submission check timed out after "
            f"{self.max_attempts * self.poll_interval:g} seconds",
        )


def verdict_from_check(check: CheckResponse) -> SubmissionResult:
    """Translate a finished check response into a `SubmissionResult`."""
    if check.status_msg == ACCEPTED:
        return SubmissionResult(
            accepted=True,
            status_message=ACCEPTED,
            runtime=check.runtime,
            memory=check.memory,
            runtime_percentile=check.runtime_percentile,
            memory_percentile=check.memory_percentile,
            total_correct=check.total_correct,
            total_testcases=check.total_testcases,
        )

    return SubmissionResult(
        accepted=False,
        status_message=check.status_msg or ERROR,
        total_correct=check.total_correct,
        total_testcases=check.total_testcases,
        failed_test_case=format_failed_test_case(check),
        error_message=diagnostic_message(check),
    )


def format_failed_test_case(check: CheckResponse) -> Optional[str]:
    if not check.input:
        return None
    text = f"Input: {check.input}"
    if check.expected_answer and check.code_answer:
        text += f"\nExpected: {_compact_json(check.expected_answer)}"
        text += f"\nGot: {_compact_json(check.code_answer)}"
    return text


def diagnostic_message(check: CheckResponse) -> Optional[str]:
    # most specific first
    return (
        check.full_compile_error
        or check.compile_error
        or check.full_runtime_error
        or check.runtime_error
        or check.std_output
        or None
    )


def _compact_json(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
