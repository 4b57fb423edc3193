"""Typed views of submission inputs, judge responses and verdicts.

Judge payloads are loosely typed JSON. Each endpoint gets its own small
dataclass with a ``from_payload`` constructor that maps missing or
wrongly-typed optional fields to ``None`` instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .errors import ProtocolError


class PollState(str, Enum):
    PENDING = "PENDING"
    STARTED = "STARTED"
    SUCCESS = "SUCCESS"

    @classmethod
    def parse(cls, raw: object) -> Optional["PollState"]:
        try:
            return cls(raw)
        except ValueError:
            return None


ACCEPTED = "Accepted"
AUTHORIZATION_REQUIRED = "Authorization Required"
INVALID_LANGUAGE = "Invalid Language"
UNAUTHORIZED = "Unauthorized"
TIMEOUT = "Timeout"
ERROR = "Error"
SUBMISSION_FAILED = "Submission Failed"


@dataclass(frozen=True, slots=True)
class SubmissionRequest:
    problem_slug: str
    code: str
    language: str


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    accepted: bool
    status_message: str
    runtime: Optional[str] = None
    memory: Optional[str] = None
    runtime_percentile: Optional[float] = None
    memory_percentile: Optional[float] = None
    total_correct: Optional[int] = None
    total_testcases: Optional[int] = None
    failed_test_case: Optional[str] = None
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.accepted:
            if self.status_message != ACCEPTED:
                raise ValueError("an accepted result must carry status 'Accepted'")
            if self.failed_test_case is not None:
                raise ValueError("an accepted result cannot carry a failed test case")
        elif self.runtime_percentile is not None or self.memory_percentile is not None:
            raise ValueError("percentiles are only reported for accepted results")

    @classmethod
    def failure(
        cls, status_message: str, error_message: Optional[str] = None
    ) -> "SubmissionResult":
        return cls(
            accepted=False, status_message=status_message, error_message=error_message
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "accepted": self.accepted,
            "statusMessage": self.status_message,
        }
        optional = {
            "runtime": self.runtime,
            "memory": self.memory,
            "runtimePercentile": self.runtime_percentile,
            "memoryPercentile": self.memory_percentile,
            "totalCorrect": self.total_correct,
            "totalTestcases": self.total_testcases,
            "failedTestCase": self.failed_test_case,
            "errorMessage": self.error_message,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload


# ----------------------------------------------------------------------
# Judge responses
# ----------------------------------------------------------------------
def _opt_str(value: object) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value)
    return text if text else None


def _opt_int(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_float(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_mapping(payload: object, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ProtocolError(f"{what} response is not a JSON object")
    return payload


@dataclass(frozen=True, slots=True)
class QuestionIdResponse:
    question_id: Optional[str]

    @classmethod
    def from_payload(cls, payload: object) -> "QuestionIdResponse":
        body = _as_mapping(payload, "questionTitle")
        data = body.get("data")
        question = data.get("question") if isinstance(data, Mapping) else None
        if not isinstance(question, Mapping):
            return cls(question_id=None)
        return cls(question_id=_opt_str(question.get("questionId")))


@dataclass(frozen=True, slots=True)
class SubmitResponse:
    submission_id: int

    @classmethod
    def from_payload(cls, payload: object) -> "SubmitResponse":
        body = _as_mapping(payload, "submit")
        submission_id = _opt_int(body.get("submission_id"))
        if submission_id is None:
            raise ProtocolError("submit response did not contain a submission_id")
        return cls(submission_id=submission_id)


@dataclass(frozen=True, slots=True)
class CheckResponse:
    state: Optional[str]
    status_msg: Optional[str] = None
    runtime: Optional[str] = None
    memory: Optional[str] = None
    runtime_percentile: Optional[float] = None
    memory_percentile: Optional[float] = None
    total_correct: Optional[int] = None
    total_testcases: Optional[int] = None
    input: Optional[str] = None
    expected_answer: Any = None
    code_answer: Any = None
    compile_error: Optional[str] = None
    full_compile_error: Optional[str] = None
    runtime_error: Optional[str] = None
    full_runtime_error: Optional[str] = None
    std_output: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: object) -> "CheckResponse":
        body = _as_mapping(payload, "check")
        return cls(
            state=_opt_str(body.get("state")),
            status_msg=_opt_str(body.get("status_msg")),
            runtime=_opt_str(body.get("runtime")),
            memory=_opt_str(body.get("memory")),
            runtime_percentile=_opt_float(body.get("runtime_percentile")),
            memory_percentile=_opt_float(body.get("memory_percentile")),
            total_correct=_opt_int(body.get("total_correct")),
            total_testcases=_opt_int(body.get("total_testcases")),
            input=_opt_str(body.get("input")),
            expected_answer=body.get("expected_answer") or None,
            code_answer=body.get("code_answer") or None,
            compile_error=_opt_str(body.get("compile_error")),
            full_compile_error=_opt_str(body.get("full_compile_error")),
            runtime_error=_opt_str(body.get("runtime_error")),
            full_runtime_error=_opt_str(body.get("full_runtime_error")),
            std_output=_opt_str(body.get("std_output")),
        )

    @property
    def poll_state(self) -> Optional[PollState]:
        return PollState.parse(self.state)
