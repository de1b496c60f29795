"""Command line entry point."""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

from .config import (
    DEFAULT_ARCHITECTURE,
    DEFAULT_MAX_REQUEST_DELAY,
    DEFAULT_REQUEST_DELAY,
    DEFAULT_TIMEOUT,
    env_inputs,
    load_options,
    parse_bool,
    parse_float,
)
from .exceptions import ConfigurationError, RegistryError
from .prune import prune

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; every flag falls back to its ``INPUT_*`` variable."""
    parser = argparse.ArgumentParser(
        prog="registry-tag-pruner",
        description="Delete every tag of an image that the keep pattern does not protect",
    )
    parser.add_argument("--domain", help="Registry domain, https:// is assumed")
    parser.add_argument("--user", help="User name for HTTP Basic auth")
    parser.add_argument("--password", help="Password for HTTP Basic auth")
    parser.add_argument("--image", help="Image whose tags are pruned, e.g. team/app")
    parser.add_argument("--regex", help="Keep pattern for tag names")
    parser.add_argument(
        "--architecture",
        help=f"Platform tracked for multi-arch tags (default: {DEFAULT_ARCHITECTURE})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Compute the kill list without deleting anything",
    )
    parser.add_argument(
        "--request-delay",
        type=float,
        help=f"Backoff step between requests in seconds (default: {DEFAULT_REQUEST_DELAY})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    return parser


def setup_logging(level: Optional[str]) -> None:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        level = "INFO"
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one prune pass and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    inputs = env_inputs()

    try:
        options = load_options(
            domain=args.domain or inputs["domain"],
            image=args.image or inputs["image"],
            regex=args.regex or inputs["regex"],
            user=args.user or inputs["user"],
            password=args.password or inputs["password"],
            architecture=args.architecture
            or inputs["architecture"]
            or DEFAULT_ARCHITECTURE,
            dry_run=args.dry_run if args.dry_run is not None else parse_bool(inputs["dry_run"]),
            request_delay=(
                args.request_delay
                if args.request_delay is not None
                else parse_float("request_delay", inputs["request_delay"], DEFAULT_REQUEST_DELAY)
            ),
            max_request_delay=DEFAULT_MAX_REQUEST_DELAY,
            timeout=(
                args.timeout
                if args.timeout is not None
                else parse_float("timeout", inputs["timeout"], DEFAULT_TIMEOUT)
            ),
        )
        logging.getLogger(__name__).debug("Parsed input: %r", options)
        asyncio.run(prune(options))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except RegistryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
