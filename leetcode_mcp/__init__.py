"""Core package for the leetcode MCP server."""

from .client import LeetCodeClient
from .config_store import ConfigStore, Settings
from .credentials import Credential, SessionIdentity
from .errors import LeetCodeError, ProblemNotFoundError, ProtocolError
from .languages import normalize_language
from .models import SubmissionRequest, SubmissionResult
from .service import LeetCodeService
from .session_store import CredentialStore, StoredCredentials
from .submission import SubmissionEngine

__all__ = [
    "LeetCodeClient",
    "ConfigStore",
    "Settings",
    "Credential",
    "SessionIdentity",
    "LeetCodeError",
    "ProblemNotFoundError",
    "ProtocolError",
    "normalize_language",
    "SubmissionRequest",
    "SubmissionResult",
    "LeetCodeService",
    "CredentialStore",
    "StoredCredentials",
    "SubmissionEngine",
]
