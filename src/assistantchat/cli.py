"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from .config import Settings, load_settings
from .console import Console
from .directory import describe_assistants
from .exceptions import AssistantChatError, ConfigurationError, RemoteServiceError
from .session import Session, SessionContext
from .sync_client import AssistantsClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assistantchat",
        description="Chat with a hosted assistant from the terminal.",
    )
    parser.add_argument("--api-key", help="API key (default: $OPENAI_API_KEY)")
    parser.add_argument("--base-url", help="API base URL")
    parser.add_argument("--env-file", help="Path to a .env file to load")
    parser.add_argument("--poll-interval", type=float, help="Seconds between run status checks")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for messages on stderr",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the available assistants and exit",
    )
    return parser


def list_only(settings: Settings) -> int:
    with AssistantsClient(
        settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
        organization=settings.organization,
    ) as client:
        print(describe_assistants(client.list_assistants()))
    return 0


async def run_session(context: SessionContext) -> int:
    try:
        return await Session(context).run()
    finally:
        await context.aclose()


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = load_settings(
            args.env_file,
            api_key=args.api_key,
            base_url=args.base_url,
            poll_interval=args.poll_interval,
            timeout=args.timeout,
        )
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        if console is not None:
            console.close()
        return 2

    if args.list:
        try:
            return list_only(settings)
        except RemoteServiceError as exc:
            print(f"Error listing assistants: {exc}", file=sys.stderr)
            return 1

    context = SessionContext.from_settings(settings, console=console)
    try:
        return asyncio.run(run_session(context))
    except RemoteServiceError as exc:
        logger.error("remote call failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except AssistantChatError as exc:
        logger.error("session failed: %s", exc)
        print(f"An error occurred: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        context.console.close()
        return 130
