from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests

# Ensure repository root is on sys.path so the local package can be imported
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from leetcode_mcp.client import LeetCodeClient
from leetcode_mcp.credentials import Credential
from leetcode_mcp.errors import ProblemNotFoundError
from leetcode_mcp.models import CheckResponse, SubmissionRequest, SubmissionResult
from leetcode_mcp.submission import (
    SESSION_EXPIRED_MESSAGE,
    SubmissionEngine,
    diagnostic_message,
    verdict_from_check,
)

QUESTION = {"data": {"question": {"questionId": "1", "questionFrontendId": "1"}}}
SUBMITTED = {"submission_id": 987654}
ACCEPTED_CHECK = {
    "state": "SUCCESS",
    "status_msg": "Accepted",
    "runtime": "72 ms",
    "memory": "42.5 MB",
    "runtime_percentile": 91.2,
    "memory_percentile": 55.0,
    "total_correct": 63,
    "total_testcases": 63,
}
WRONG_ANSWER_CHECK = {
    "state": "SUCCESS",
    "status_msg": "Wrong Answer",
    "input": "[2,7,11,15]",
    "expected_answer": "[0,1]",
    "code_answer": "[0,2]",
    "total_correct": 12,
    "total_testcases": 63,
}


class SleepRecorder:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_engine(fake_session, sleeper):
    def _make(credential=None, **kwargs) -> SubmissionEngine:
        client = LeetCodeClient("https://leetcode.com", session=fake_session)
        return SubmissionEngine(
            client,
            credential or Credential("csrf", "sess"),
            sleep=sleeper,
            **kwargs,
        )

    return _make


def _poll_calls(fake_session):
    return [c for c in fake_session.calls if c["method"] == "GET"]


def test_unauthenticated_makes_no_network_call(make_engine, fake_session, sleeper) -> None:
    engine = make_engine(credential=Credential())

    result = engine.submit("two-sum", "class Solution: pass", "python3")

    assert result.accepted is False
    assert result.status_message == "Authorization Required"
    assert fake_session.calls == []
    assert sleeper.calls == []


def test_unsupported_language_makes_no_network_call(make_engine, fake_session) -> None:
    result = make_engine().submit("two-sum", "code", "brainfuck")

    assert result.status_message == "Invalid Language"
    assert result.error_message == "Unsupported language: brainfuck"
    assert fake_session.calls == []


def test_accepted_after_pending_and_started(make_engine, fake_session, sleeper) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.extend([{"state": "PENDING"}, {"state": "STARTED"}, ACCEPTED_CHECK])

    result = make_engine().submit("two-sum", "class Solution: pass", "Python")

    assert result.accepted is True
    assert result.status_message == "Accepted"
    assert result.runtime == "72 ms"
    assert result.memory == "42.5 MB"
    assert result.runtime_percentile == 91.2
    assert result.total_correct == 63
    assert result.failed_test_case is None
    assert len(_poll_calls(fake_session)) == 3
    assert sleeper.calls == [1.0, 1.0, 1.0]


def test_submit_request_shape(make_engine, fake_session) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.append(ACCEPTED_CHECK)

    make_engine().submit_request(
        SubmissionRequest(problem_slug="two-sum", code="int x;", language="C++")
    )

    graphql, submit, check = fake_session.calls
    assert graphql["url"] == "https://leetcode.com/graphql"
    assert submit["url"] == "https://leetcode.com/problems/two-sum/submit/"
    assert submit["json"] == {"lang": "cpp", "question_id": "1", "typed_code": "int x;"}
    assert submit["headers"]["Cookie"] == "csrftoken=csrf; LEETCODE_SESSION=sess"
    assert submit["headers"]["X-CSRFToken"] == "csrf"
    assert submit["headers"]["Referer"] == "https://leetcode.com/problems/two-sum/"
    assert check["url"] == "https://leetcode.com/submissions/detail/987654/check/"
    assert check["headers"] == {"Cookie": "csrftoken=csrf; LEETCODE_SESSION=sess"}


def test_wrong_answer(make_engine, fake_session) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.append(WRONG_ANSWER_CHECK)

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.accepted is False
    assert result.status_message == "Wrong Answer"
    assert "Input: [2,7,11,15]" in result.failed_test_case
    assert 'Expected: "[0,1]"' in result.failed_test_case
    assert 'Got: "[0,2]"' in result.failed_test_case
    assert result.total_correct == 12
    assert result.total_testcases == 63
    assert result.runtime_percentile is None
    assert result.memory_percentile is None
    assert len(_poll_calls(fake_session)) == 1


def test_failed_case_without_expected_output(make_engine, fake_session) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.append(
        {
            "state": "SUCCESS",
            "status_msg": "Runtime Error",
            "input": "[1]",
            "runtime_error": "IndexError",
            "full_runtime_error": "IndexError: list index out of range\nLine 3",
            "std_output": "debug",
        }
    )

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.failed_test_case == "Input: [1]"
    assert result.error_message == "IndexError: list index out of range\nLine 3"


def test_timeout_after_thirty_pending_polls(make_engine, fake_session, sleeper) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.extend([{"state": "PENDING"}] * 30)

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.status_message == "Timeout"
    assert result.accepted is False
    assert len(_poll_calls(fake_session)) == 30
    assert len(sleeper.calls) == 30
    # a 31st poll would have hit an empty queue and raised
    assert fake_session.gets == []


def test_custom_attempt_cap(make_engine, fake_session) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.extend([{"state": "STARTED"}] * 3)

    result = make_engine(max_attempts=3, poll_interval=0.5).submit("a", "b", "java")

    assert result.status_message == "Timeout"
    assert result.error_message == "Submission check timed out after 1.5 seconds"


def test_unknown_state_stops_polling(make_engine, fake_session) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.extend([{"state": "PENDING"}, {"state": "FAILURE"}, ACCEPTED_CHECK])

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.status_message == "Error"
    assert result.error_message == "Unexpected submission state: FAILURE"
    assert len(_poll_calls(fake_session)) == 2


def test_unauthorized_on_submit(make_engine, fake_session, fake_response) -> None:
    fake_session.posts.extend([QUESTION, fake_response({}, status_code=401)])

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.status_message == "Unauthorized"
    assert result.error_message == SESSION_EXPIRED_MESSAGE
    assert _poll_calls(fake_session) == []


def test_unauthorized_on_question_lookup(make_engine, fake_session, fake_response) -> None:
    fake_session.posts.append(fake_response({}, status_code=401))

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.status_message == "Unauthorized"
    assert result.error_message == SESSION_EXPIRED_MESSAGE
    assert len(fake_session.calls) == 1
    assert _poll_calls(fake_session) == []


def test_unauthorized_while_polling(make_engine, fake_session, fake_response) -> None:
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.extend([{"state": "PENDING"}, fake_response({}, status_code=401)])

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.status_message == "Unauthorized"
    assert result.error_message == SESSION_EXPIRED_MESSAGE


def test_other_transport_errors(make_engine, fake_session, fake_response) -> None:
    fake_session.posts.extend([QUESTION, fake_response({}, status_code=500)])
    result = make_engine().submit("two-sum", "code", "python3")
    assert result.status_message == "Submission Failed"
    assert "500" in result.error_message

    fake_session.posts.append(requests.ConnectionError("connection reset"))
    result = make_engine().submit("two-sum", "code", "python3")
    assert result.status_message == "Submission Failed"
    assert result.error_message == "connection reset"


def test_missing_submission_id_is_protocol_error(make_engine, fake_session) -> None:
    fake_session.posts.extend([QUESTION, {"error": "nope"}])

    result = make_engine().submit("two-sum", "code", "python3")

    assert result.status_message == "Error"
    assert "submission_id" in result.error_message


def test_unknown_problem_raises(make_engine, fake_session) -> None:
    fake_session.posts.append({"data": {"question": None}})

    with pytest.raises(ProblemNotFoundError, match="no-such-problem"):
        make_engine().submit("no-such-problem", "code", "python3")
    assert len(fake_session.calls) == 1


def test_identity_is_read_once_per_call(make_engine, fake_session) -> None:
    credential = Credential("old-csrf", "old-sess")
    engine = make_engine(credential=credential)

    class RotatingSleep:
        def __call__(self, seconds):
            credential.update("new-csrf", "new-sess")

    engine._sleep = RotatingSleep()
    fake_session.posts.extend([QUESTION, SUBMITTED])
    fake_session.gets.extend([{"state": "PENDING"}, ACCEPTED_CHECK])

    assert engine.submit("two-sum", "code", "python3").accepted is True
    cookies = {c["headers"]["Cookie"] for c in fake_session.calls}
    assert cookies == {"csrftoken=old-csrf; LEETCODE_SESSION=old-sess"}


def test_diagnostic_priority() -> None:
    check = CheckResponse(
        state="SUCCESS",
        status_msg="Compile Error",
        compile_error="short",
        full_compile_error="long compile error",
        runtime_error="rt",
    )
    assert diagnostic_message(check) == "long compile error"
    assert diagnostic_message(CheckResponse(state="SUCCESS", compile_error="short")) == "short"
    assert diagnostic_message(CheckResponse(state="SUCCESS", std_output="out")) == "out"
    assert diagnostic_message(CheckResponse(state="SUCCESS")) is None


def test_compile_error_verdict_has_no_test_case() -> None:
    result = verdict_from_check(
        CheckResponse.from_payload(
            {"state": "SUCCESS", "status_msg": "Compile Error", "compile_error": "Line 1: x"}
        )
    )
    assert result.accepted is False
    assert result.failed_test_case is None
    assert result.error_message == "Line 1: x"


def test_result_invariants() -> None:
    with pytest.raises(ValueError):
        SubmissionResult(accepted=True, status_message="Wrong Answer")
    with pytest.raises(ValueError):
        SubmissionResult(accepted=True, status_message="Accepted", failed_test_case="x")
    with pytest.raises(ValueError):
        SubmissionResult(accepted=False, status_message="Timeout", runtime_percentile=1.0)


def test_result_to_dict_omits_absent_fields() -> None:
    result = SubmissionResult.failure("Timeout", "too slow")
    assert result.to_dict() == {
        "accepted": False,
        "statusMessage": "Timeout",
        "errorMessage": "too slow",
    }
