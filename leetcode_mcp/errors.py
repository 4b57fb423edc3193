from __future__ import annotations


class LeetCodeError(RuntimeError):
    """Base class for errors raised by this package."""


class ProblemNotFoundError(LeetCodeError):
    def __init__(self, problem_slug: str) -> None:
        super().__init__(f'Problem slug "{problem_slug}" not found or invalid.')
        self.problem_slug = problem_slug


class ProtocolError(LeetCodeError):
    """The judge answered with a payload that does not match the expected shape."""
