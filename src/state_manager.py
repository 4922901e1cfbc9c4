from typing import Dict, Optional

from models import Transaction, StoredTransaction, ClientAccount, DisputeStatus


class StateManager:
    """
    Owns the account store and the transaction history for one run.
    Stores client accounts and deposit/withdrawal history for dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, StoredTransaction] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Retrieve account without creating it."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def store_transaction(self, transaction: Transaction) -> StoredTransaction:
        """
        Store a deposit or withdrawal for future dispute lookups.
        Raises KeyError if the id is already taken; stored entries are never overwritten.
        """
        if transaction.transaction_id in self._transactions:
            raise KeyError(transaction.transaction_id)
        stored = StoredTransaction.from_transaction(transaction)
        self._transactions[transaction.transaction_id] = stored
        return stored

    def get_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def set_dispute_status(self, transaction_id: int, status: DisputeStatus) -> None:
        self._transactions[transaction_id].dispute_status = status

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
