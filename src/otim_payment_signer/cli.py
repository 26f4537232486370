"""Command-line entry point: build, sign and submit one payment request.

Usage:
    otim-payment-signer [--dry-run] [--log-level LEVEL]

Settings are read from the environment or a .env file (see Config).
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from .config import LOG_LEVELS, Config
from .exceptions import ConfigError, OtimSignerError
from .flow import PaymentFlow
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="otim-payment-signer",
        description="Build an OTIM payment request, sign it with Turnkey and submit it.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Stop after signing; do not submit the payment request",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


async def run(config: Config, submit: bool = True) -> dict:
    async with PaymentFlow(config) as flow:
        result = await flow.run(submit=submit)
    return result.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = Config.from_env()
    except ConfigError as e:
        setup_logging(args.log_level or logging.INFO)
        logger.error("%s", e)
        return 2

    setup_logging(args.log_level or config.log_level)
    logger.info("Initializing OTIM API client...")

    try:
        result = asyncio.run(run(config, submit=not args.dry_run))
    except OtimSignerError as e:
        logger.error("Error: %s", e)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
