"""
AI Code Review - Command Line
=============================

Usage:
    aicr review <file>            Review a single file
    aicr diff [--target REF]      Review the current git changes
    aicr ask "<request>"          Send a free-form review request

Run with:
    python -m aicr.main review main.go

The review is printed to stdout, progress logs go to stderr. The exit
status is 1 when configuration is missing or the review fails.
"""

import argparse
import asyncio
import sys

from aicr.utils.logger import Logger

main_logger = Logger("Main")


def build_request(args: argparse.Namespace) -> str:
    """Turn the parsed command line into the request sent to the model."""
    if args.command == "review":
        return f"Please review the file: {args.path}"
    if args.command == "diff":
        if args.target and args.target != "HEAD":
            return f"Please review the current git diff changes against {args.target}"
        return "Please review the current git diff changes"
    return args.request


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aicr",
        description="Review code with an LLM that can read files, search and run linters."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline for the review in seconds"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    review = subparsers.add_parser("review", help="Review a single file")
    review.add_argument("path", help="File to review")

    diff = subparsers.add_parser("diff", help="Review the current git changes")
    diff.add_argument("--target", default="HEAD", help="Revision to diff against (default: HEAD)")

    ask = subparsers.add_parser("ask", help="Send a free-form review request")
    ask.add_argument("request", help="What to review")

    return parser


async def main(argv: list[str] | None = None) -> int:
    """
    Main async entry point.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    from aicr.utils.config import get_config

    try:
        config = get_config()
    except ValueError as e:
        main_logger.error("Configuration error", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    from aicr.agent import Agent, ReviewError

    agent = Agent.from_config(config)
    request = build_request(args)

    print("Starting code review...", file=sys.stderr)
    try:
        review = await agent.review(request, timeout=args.timeout)
    except ReviewError as e:
        main_logger.error("Review failed", e)
        print(f"Review failed: {e}", file=sys.stderr)
        return 1
    finally:
        await agent.model_client.close()

    print(review)
    return 0


def run():
    """
    Synchronous entry point.

    This is called when running the ``aicr`` command.
    """
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
