"""User-facing language labels mapped to LeetCode language codes."""

from __future__ import annotations

from typing import Dict, List, Optional

LANGUAGE_MAP: Dict[str, str] = {
    "java": "java",
    "python": "python3",
    "python3": "python3",
    "py": "python3",
    "python2": "python",
    "c": "c",
    "cpp": "cpp",
    "c++": "cpp",
    "csharp": "csharp",
    "c#": "csharp",
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "php": "php",
    "swift": "swift",
    "kotlin": "kotlin",
    "dart": "dart",
    "golang": "golang",
    "go": "golang",
    "ruby": "ruby",
    "scala": "scala",
    "rust": "rust",
    "racket": "racket",
    "erlang": "erlang",
    "elixir": "elixir",
}


def normalize_language(label: object) -> Optional[str]:
    """Return the LeetCode code for `label`, or None when it is unsupported."""
    if not isinstance(label, str):
        return None
    return LANGUAGE_MAP.get(label.strip().lower())


def supported_languages() -> List[str]:
    return sorted(LANGUAGE_MAP)
