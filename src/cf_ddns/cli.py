"""
CLI entry point for cf-ddns.

This module provides the command-line interface for running one update.
"""

from __future__ import annotations

import asyncio
import sys

from cf_ddns.config import API_TOKEN_ENV, ConfigValidationError, build_parser, load_config
from cf_ddns.errors import StepFailedError
from cf_ddns.logging_config import setup_logging
from cf_ddns.updater import run_update


def main(argv: list[str] | None = None) -> None:
    """
    Run one dynamic DNS update.

    Parse command-line arguments, load configuration, resolve both public
    addresses and update the A and AAAA records. Exits with status 1 on
    missing configuration or on the first failing step.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. If None, uses sys.argv.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args)
    except ConfigValidationError as e:
        print(e, file=sys.stderr)  # noqa: T201
        if e.missing:
            parser.print_usage(sys.stderr)
            print(  # noqa: T201
                f"\nSet {API_TOKEN_ENV} environment variable or use -api-token flag",
                file=sys.stderr,
            )
        sys.exit(1)

    setup_logging(config.logging)

    try:
        summary = asyncio.run(run_update(config))
    except StepFailedError as e:
        print(e, file=sys.stderr)  # noqa: T201
        sys.exit(1)

    print("\nSuccessfully updated all DNS records!")  # noqa: T201
    print(f"A record:    {summary.name} -> {summary.ipv4}")  # noqa: T201
    print(f"AAAA record: {summary.name} -> {summary.ipv6}")  # noqa: T201


if __name__ == "__main__":
    main()
