import sys
import logging
from dataclasses import dataclass

LOG_FORMAT = "%(levelname)s: %(message)s"


@dataclass(frozen=True)
class EngineConfig:
    """
    Runtime switches for the ledger.

    allow_overdraft: let withdrawals take available funds below zero.
    reject_locked_accounts: treat a charged-back (locked) account as frozen
        and reject every later record for that client. When off, locking
        only marks the account.
    """

    allow_overdraft: bool = False
    reject_locked_accounts: bool = False
    log_level: str = "WARNING"


def configure_logging(level: str = "WARNING") -> None:
    """Diagnostics go to stderr; stdout carries the account table."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
