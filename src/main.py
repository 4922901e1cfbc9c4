import sys
import argparse
import logging
from typing import List, Optional

from config import EngineConfig, configure_logging
from payments_engine import PaymentsEngine
from report import write_accounts

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Apply a transactions CSV to client accounts and print the final balances.",
    )
    parser.add_argument("input", help="path to the transactions CSV")
    parser.add_argument(
        "--allow-overdraft",
        action="store_true",
        help="let withdrawals take available funds below zero",
    )
    parser.add_argument(
        "--reject-locked",
        action="store_true",
        help="reject every record for a client after a chargeback locks its account",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="diagnostics verbosity on stderr (default: WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = EngineConfig(
        allow_overdraft=args.allow_overdraft,
        reject_locked_accounts=args.reject_locked,
        log_level=args.log_level,
    )
    configure_logging(config.log_level)

    engine = PaymentsEngine(config)
    try:
        accounts = engine.process_file(args.input)
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    write_accounts(accounts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
