import sys
from decimal import Decimal
from typing import Dict, Optional, TextIO

from models import ClientAccount

HEADER = "client,available,held,total,locked"
FOUR_PLACES = Decimal("0.0001")


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(FOUR_PLACES):f}"


def format_account(account: ClientAccount) -> str:
    return (
        f"{account.client_id},"
        f"{format_decimal(account.available)},"
        f"{format_decimal(account.held)},"
        f"{format_decimal(account.total)},"
        f"{str(account.locked).lower()}"
    )


def write_accounts(accounts: Dict[int, ClientAccount], stream: Optional[TextIO] = None) -> None:
    """Write one row per client, ordered by client id."""
    stream = stream or sys.stdout
    print(HEADER, file=stream)
    for client_id in sorted(accounts.keys()):
        print(format_account(accounts[client_id]), file=stream)
