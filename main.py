from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from leetcode_mcp import ConfigStore, CredentialStore, LeetCodeService, Settings
from leetcode_mcp.languages import supported_languages


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _print(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _cmd_config(args: argparse.Namespace) -> int:
    cfg = ConfigStore()
    if args.action == "show":
        _print(asdict(cfg.load()))
        return 0

    if args.action == "delete":
        cfg.delete()
        print(f"Removed config file: {cfg.path}")
        return 0

    current = cfg.load()
    settings = Settings(
        base_url=args.base_url or current.base_url,
        timeout=args.timeout if args.timeout is not None else current.timeout,
        max_poll_attempts=(
            args.max_poll_attempts
            if args.max_poll_attempts is not None
            else current.max_poll_attempts
        ),
        poll_interval=(
            args.poll_interval
            if args.poll_interval is not None
            else current.poll_interval
        ),
    )
    cfg.save(settings)
    print(f"Saved config to {cfg.path}")
    return 0


def _cmd_auth(args: argparse.Namespace) -> int:
    """Manage the locally stored LeetCode cookies: set, show, check, delete."""
    store = CredentialStore()
    if args.action == "show":
        stored = store.load()
        if stored is None:
            print("No stored credentials.")
            print(f"Expected file: {store.file_path}")
            return 0
        _print(
            {
                "username": stored.username,
                "createdAt": stored.stored_at.isoformat(),
                "file": str(store.file_path),
            }
        )
        return 0

    service = LeetCodeService.from_config(credential_store=store)
    if args.action == "delete":
        service.clear_credentials()
        print(f"Removed credentials file: {store.file_path}")
        return 0

    if args.action == "check":
        status = service.auth_status()
        _print(status)
        return 0 if status.get("authenticated") else 1

    csrftoken = args.csrftoken or getpass.getpass("csrftoken: ")
    leetcode_session = args.session or getpass.getpass("LEETCODE_SESSION: ")
    result = service.save_credentials(csrftoken, leetcode_session)
    if not result.get("ok"):
        logging.error("%s", result.get("error"))
        return 1
    logging.info("%s", result.get("message"))
    return 0


def _cmd_submit(args: argparse.Namespace) -> int:
    service = LeetCodeService.from_config()
    try:
        code = Path(args.file).read_text(encoding="utf-8")
    except OSError as exc:
        logging.error("Could not read %s: %s", args.file, exc)
        return 1

    try:
        result = service.submit_solution(args.slug, code, args.language)
    except Exception as exc:
        logging.error("Submission failed: %s", exc)
        return 1

    _print(result.to_dict())
    return 0 if result.accepted else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LeetCode MCP helper CLI")
    parser.add_argument("--verbose", action="store_true", help="show debug logs")

    subparsers = parser.add_subparsers(dest="command", required=True)

    config_parser = subparsers.add_parser(
        "config", help="manage local settings (base url, timeouts, polling)"
    )
    config_parser.add_argument(
        "action", choices=["set", "show", "delete"], help="set/show/delete"
    )
    config_parser.add_argument("--base-url", dest="base_url", help="judge base url")
    config_parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    config_parser.add_argument(
        "--max-poll-attempts", dest="max_poll_attempts", type=int,
        help="verdict polls before giving up",
    )
    config_parser.add_argument(
        "--poll-interval", dest="poll_interval", type=float,
        help="seconds to wait before each poll",
    )
    config_parser.set_defaults(func=_cmd_config)

    auth_parser = subparsers.add_parser(
        "auth", help="manage stored cookies (set validates before saving)"
    )
    auth_parser.add_argument(
        "action", choices=["set", "show", "check", "delete"],
        help="set/show/check/delete",
    )
    auth_parser.add_argument("--csrftoken", help="csrftoken cookie (prompted if omitted)")
    auth_parser.add_argument(
        "--session", help="LEETCODE_SESSION cookie (prompted if omitted)"
    )
    auth_parser.set_defaults(func=_cmd_auth)

    submit_parser = subparsers.add_parser("submit", help="submit a solution file")
    submit_parser.add_argument("--slug", required=True, help='problem slug, e.g. "two-sum"')
    submit_parser.add_argument("--file", required=True, help="file containing the code")
    submit_parser.add_argument(
        "--language",
        type=str.lower,
        choices=supported_languages(),
        default="python3",
        help="language label, default python3",
    )
    submit_parser.set_defaults(func=_cmd_submit)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
