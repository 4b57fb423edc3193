"""MCP adapter using the Model Context Protocol Python SDK (FastMCP).

This module registers the authorization and submission tools of
leetcode-mcp so MCP-aware clients can call them.

Usage:
    uv run app.py
or
    python app.py

Note: requires `mcp` package to be installed in the environment.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional

import anyio.to_thread
from mcp.server.fastmcp import FastMCP

from leetcode_mcp import LeetCodeService

LOGGER = logging.getLogger(__name__)

mcp = FastMCP("leetcode-mcp")

_service: Optional[LeetCodeService] = None
_service_lock = threading.Lock()


def get_service() -> LeetCodeService:
    """Return the process-wide service, loading stored credentials once."""
    global _service
    # tools run in worker threads
    with _service_lock:
        if _service is None:
            _service = LeetCodeService.from_config()
    return _service


async def _run(func, *args):
    # requests and the poll delay block; keep them off the event loop
    return await anyio.to_thread.run_sync(func, *args)


@mcp.tool()
async def start_leetcode_auth() -> dict:
    """Open the LeetCode login page and start a 5 minute authorization window.

    After logging in, copy the csrftoken and LEETCODE_SESSION cookies and call
    save_leetcode_credentials with the returned sessionId.
    """
    return await _run(lambda: get_service().start_auth())


def _save_credentials(
    csrftoken: str, leetcode_session: str, session_id: Optional[str]
) -> dict:
    try:
        return get_service().save_credentials(csrftoken, leetcode_session, session_id)
    except Exception as exc:
        LOGGER.exception("saving credentials failed")
        return {"ok": False, "error": str(exc)}


@mcp.tool()
async def save_leetcode_credentials(
    csrftoken: str,
    leetcode_session: str,
    session_id: Optional[str] = None,
) -> dict:
    """Validate and store LeetCode cookies (csrftoken, LEETCODE_SESSION)."""
    return await _run(_save_credentials, csrftoken, leetcode_session, session_id)


@mcp.tool()
async def check_auth_status() -> dict:
    """Report whether the stored LeetCode session is still signed in."""
    return await _run(lambda: get_service().auth_status())


@mcp.tool()
async def clear_leetcode_credentials() -> dict:
    """Forget the stored LeetCode cookies."""
    return await _run(lambda: get_service().clear_credentials())


def _submit(problem_slug: str, code: str, language: str) -> dict:
    try:
        result = get_service().submit_solution(problem_slug, code, language)
    except Exception as exc:
        LOGGER.exception("submission of %s failed", problem_slug)
        return {"ok": False, "error": "Failed to submit solution", "message": str(exc)}
    return {"ok": True, "result": result.to_dict()}


@mcp.tool()
async def submit_solution(problem_slug: str, code: str, language: str) -> dict:
    """Submit a solution to a LeetCode problem and wait for the verdict.

    problem_slug: the problem slug, e.g. "two-sum"
    language: python3, java, cpp, c, csharp, javascript, typescript, golang,
        rust, kotlin, swift, ... (aliases such as "python", "js", "c++" work)

    Returns acceptance status, runtime/memory stats, or failed test case
    details. Polls for up to about 30 seconds.
    """
    return await _run(_submit, problem_slug, code, language)


def _configure_logging() -> None:
    # stdout carries the stdio transport; keep logs on stderr
    level_name = os.getenv("LEETCODE_MCP_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def main():
    _configure_logging()
    # stdio by default; MCP_TRANSPORT=http serves streamable HTTP on MCP_HOST:MCP_PORT
    transport = os.getenv("MCP_TRANSPORT", "stdio").lower()
    if transport in {"http", "streamable-http"}:
        mcp.settings.host = os.getenv("MCP_HOST", "127.0.0.1")
        port_str = os.getenv("MCP_PORT", "8001")
        try:
            mcp.settings.port = int(port_str)
        except ValueError:
            mcp.settings.port = 8001
        mcp.run(transport="streamable-http")
    else:
        mcp.run()


if __name__ == "__main__":
    main()
