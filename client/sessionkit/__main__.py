"""Command-line entry point for sessionkit.

Usage:
    python -m sessionkit [options] {status,login,register,logout}

Options:
    --api-url URL        Authentication service URL (default: SESSIONKIT_API_URL or http://localhost:8000)
    --timeout SECS       Per-request timeout in seconds (default: SESSIONKIT_TIMEOUT or 10)
    --state-dir DIR      Where the cookie jar and last username are kept (default: ~/.sessionkit)
    --log-dir DIR        Also write logs to files in DIR
    --verbose            Show debug output on the console

Commands:
    status                              Restore the saved session and print it
    login [USERNAME] [--password-stdin] Log in (USERNAME defaults to the last one used)
    register USERNAME [--name NAME] [--password-stdin]
    logout

The final session is printed as JSON on stdout. Exit status is 1 when the
command ended with an error.
"""

import argparse
import asyncio
import getpass
import json
import logging
import sys
from typing import Optional

import httpx

from .config import SessionConfig
from .logging import get_log_dir, get_logger, setup_logging
from .persistence import get_last_username, load_cookies, save_cookies, save_last_username
from .session import Session, SessionStore, create_session_store

logger = get_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sessionkit", description="Client-side session manager")
    parser.add_argument("--api-url", default="", help="Authentication service URL")
    parser.add_argument("--timeout", type=float, default=0.0, help="Request timeout (seconds)")
    parser.add_argument("--state-dir", default="", help="Directory for the cookie jar")
    parser.add_argument("--log-dir", default=None, help="Write log files to this directory")
    parser.add_argument("--verbose", action="store_true", help="Debug output on the console")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("status", help="Restore the saved session and print it")

    login = commands.add_parser("login", help="Log in")
    login.add_argument("username", nargs="?", default=None)
    login.add_argument("--password-stdin", action="store_true", help="Read the password from stdin")

    register = commands.add_parser("register", help="Create an account and log in")
    register.add_argument("username")
    register.add_argument("--name", default=None, help="Display name")
    register.add_argument("--password-stdin", action="store_true", help="Read the password from stdin")

    commands.add_parser("logout", help="Log out")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> tuple[argparse.Namespace, SessionConfig]:
    args = build_parser().parse_args(argv)
    config = SessionConfig(
        api_url=args.api_url,
        request_timeout=args.timeout,
        state_dir=args.state_dir,
    )
    return args, config


def resolve_username(args: argparse.Namespace, config: SessionConfig) -> None:
    """Fill in the last used username for ``login`` when none was given."""
    if args.command != "login" or args.username:
        return
    args.username = get_last_username(config.state_path)
    if not args.username:
        sys.exit("sessionkit: a username is required (none saved from a previous login)")


def read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    return getpass.getpass("Password: ")


async def execute(args: argparse.Namespace, store: SessionStore, config: SessionConfig) -> Session:
    """Run one command against an entered store."""
    if args.command == "status":
        return await store.wait_restored()

    if args.command == "logout":
        return await store.logout()

    username = args.username
    password = read_password(args.password_stdin)

    if args.command == "register":
        session = await store.register(username, password, display_name=args.name)
    else:
        session = await store.login(username, password)

    if session.is_authenticated:
        save_last_username(username, config.state_path)
    return session


async def run(
    args: argparse.Namespace,
    config: SessionConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Session:
    cookies = load_cookies(config.state_path)
    store = create_session_store(config, transport=transport, cookies=cookies)

    logger.debug(f"Service: {config.api_url} (timeout {config.request_timeout}s)")

    async with store:
        # The CLI always wants to know the saved session's state before acting
        store.start()
        unsubscribe = store.subscribe(
            lambda s: logger.debug(f"Session: {s.status.value} user={s.user.username if s.user else None}")
        )
        try:
            session = await execute(args, store, config)
        finally:
            unsubscribe()
            save_cookies(store.client.cookies, config.state_path)

    return session


def main(argv: Optional[list[str]] = None) -> int:
    args, config = parse_args(argv)
    resolve_username(args, config)
    setup_logging(
        log_dir=args.log_dir,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    if get_log_dir():
        logger.info(f"Logs in {get_log_dir()}")

    try:
        session = asyncio.run(run(args, config))
    except KeyboardInterrupt:
        return 130

    print(json.dumps(session.to_dict(), indent=2))
    return 1 if session.last_error else 0


if __name__ == "__main__":
    sys.exit(main())
