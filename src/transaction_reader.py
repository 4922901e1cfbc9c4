import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import Transaction, TransactionType, MalformedRecord, Record

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
AMOUNT_DECIMAL_PLACES = 4
FOUR_PLACES = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)
# Keeps every balance (up to 2**32 amounts summed) within Decimal's 28 digits.
AMOUNT_MAX_INTEGER_DIGITS = 14

FUNDS_MOVEMENT_TYPES = {TransactionType.DEPOSIT, TransactionType.WITHDRAWAL}


def read_transactions(filepath: str) -> Iterator[Record]:
    """Lazily read a transactions CSV, yielding one record per data row."""
    # Undecodable bytes become U+FFFD and fail field parsing on their own row.
    with open(filepath, "r", newline="", errors="replace") as f:
        yield from read_transaction_stream(f)


def read_transaction_stream(stream: TextIO) -> Iterator[Record]:
    """
    Parse rows of `type, client, tx, amount` from an open text stream.
    Rows that fail to parse come out as MalformedRecord instead of raising.
    """
    reader = csv.DictReader(stream)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.debug(f"Unreadable CSV row on line {reader.line_num}: {e}")
            yield MalformedRecord(line_number=reader.line_num, raw="", error=f"unreadable CSV row: {e}")
            continue
        yield parse_csv_row(row, reader.line_num)


def parse_csv_row(row: Dict[Optional[str], object], line_number: int = 0) -> Record:
    """Parse CSV row into Transaction."""
    try:
        if None in row:
            raise ValueError(f"unexpected extra fields {row[None]}")
        normalized = {k.strip(): (v or "").strip() for k, v in row.items()}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID)

        amount = None
        if transaction_type in FUNDS_MOVEMENT_TYPES:
            amount = _parse_amount(normalized.get("amount", ""))

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError) as e:
        raw = ",".join(str(v) for v in row.values() if v is not None)
        logger.debug(f"Failed to parse row {row}: {e}")
        return MalformedRecord(line_number=line_number, raw=raw, error=str(e) or type(e).__name__)


def _parse_id(value: str, field_name: str, upper_bound: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{field_name} id {value!r} is not an unsigned integer")
    parsed = int(value)
    if parsed > upper_bound:
        raise ValueError(f"{field_name} id {parsed} out of range 0..{upper_bound}")
    return parsed


def _parse_amount(value: str) -> Decimal:
    if not value:
        raise ValueError("missing amount")
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"amount {value!r} is not a decimal number")
    if not amount.is_finite():
        raise ValueError(f"amount {value!r} is not a finite number")
    if amount and amount.adjusted() >= AMOUNT_MAX_INTEGER_DIGITS:
        raise ValueError(f"amount {value!r} has more than {AMOUNT_MAX_INTEGER_DIGITS} integer digits")
    if amount.quantize(FOUR_PLACES) != amount:
        raise ValueError(f"amount {value!r} has more than {AMOUNT_DECIMAL_PLACES} decimal places")
    return amount
