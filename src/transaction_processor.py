import logging
from decimal import Decimal
from typing import Optional

from config import EngineConfig
from models import (
    Transaction,
    TransactionType,
    MalformedRecord,
    Record,
    StoredTransaction,
    DisputeStatus,
    ProcessingOutcome,
    RejectionReason,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies records to state one at a time, in arrival order.
    Every record yields a ProcessingOutcome; rejected records leave state
    untouched and log exactly one warning describing why.
    """

    def __init__(self, state: StateManager, config: Optional[EngineConfig] = None):
        self._state = state
        self._config = config or EngineConfig()

    def process_transaction(self, record: Record) -> ProcessingOutcome:
        """
        Process a single record.

        Returns:
            APPLIED: state was mutated
            REJECTED: state untouched, reason says why
        """
        if isinstance(record, MalformedRecord):
            return self._reject(
                RejectionReason.MALFORMED_RECORD,
                f"Skipping malformed record on line {record.line_number} ({record.raw!r}): {record.error}",
            )

        if self._config.reject_locked_accounts:
            account = self._state.get_account(record.client_id)
            if account is not None and account.locked:
                return self._reject(
                    RejectionReason.ACCOUNT_LOCKED,
                    f"Skipping transaction for frozen account: {record.client_id}",
                )

        match record.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(record)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(record)
            case TransactionType.DISPUTE:
                return self._handle_dispute(record)
            case TransactionType.RESOLVE:
                return self._handle_resolve(record)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(record)

        return self._reject(
            RejectionReason.MALFORMED_RECORD,
            f"Skipping unknown transaction type: {record.transaction_type}",
        )

    def _reject(self, reason: RejectionReason, detail: str) -> ProcessingOutcome:
        logger.warning(detail)
        return ProcessingOutcome.rejected(reason, detail)

    def _check_new_funds_movement(self, transaction: Transaction) -> Optional[ProcessingOutcome]:
        label = transaction.transaction_type.value.capitalize()
        if transaction.amount is None or transaction.amount <= 0:
            return self._reject(
                RejectionReason.MALFORMED_RECORD,
                f"{label} tx {transaction.transaction_id}: invalid amount {transaction.amount}",
            )

        if self._state.has_transaction(transaction.transaction_id):
            return self._reject(
                RejectionReason.DUPLICATE_TRANSACTION_ID,
                f"Skipping duplicate transaction: {transaction.transaction_id}",
            )
        return None

    def _handle_deposit(self, transaction: Transaction) -> ProcessingOutcome:
        rejection = self._check_new_funds_movement(transaction)
        if rejection is not None:
            return rejection

        account = self._state.get_or_create_account(transaction.client_id)
        account.credit(transaction.amount)
        self._state.store_transaction(transaction)
        logger.debug(f"Deposit tx {transaction.transaction_id}: client {transaction.client_id} +{transaction.amount}")
        return ProcessingOutcome.applied()

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingOutcome:
        rejection = self._check_new_funds_movement(transaction)
        if rejection is not None:
            return rejection

        account = self._state.get_account(transaction.client_id)
        available = account.available if account is not None else Decimal("0")
        if available < transaction.amount and not self._config.allow_overdraft:
            return self._reject(
                RejectionReason.INSUFFICIENT_FUNDS,
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds for client "
                f"{transaction.client_id} (available {available}, requested {transaction.amount})",
            )

        account = self._state.get_or_create_account(transaction.client_id)
        account.debit(transaction.amount)
        self._state.store_transaction(transaction)
        logger.debug(f"Withdrawal tx {transaction.transaction_id}: client {transaction.client_id} -{transaction.amount}")
        return ProcessingOutcome.applied()

    def _find_referenced(self, transaction: Transaction) -> tuple[Optional[StoredTransaction], Optional[ProcessingOutcome]]:
        """Look up the deposit/withdrawal a dispute, resolve or chargeback points at."""
        original = self._state.get_transaction(transaction.transaction_id)

        if original is None:
            return None, self._reject(
                RejectionReason.UNKNOWN_REFERENCED_TRANSACTION,
                f"Transaction ID {transaction.transaction_id} not found in transaction history. "
                f"Skipping {transaction.transaction_type.value}",
            )

        if original.client_id != transaction.client_id:
            return None, self._reject(
                RejectionReason.CLIENT_MISMATCH,
                f"Client ID, {transaction.client_id}, given does not match the disputed transaction. "
                f"Skipping {transaction.transaction_type.value} for tx {transaction.transaction_id}",
            )
        return original, None

    def _handle_dispute(self, transaction: Transaction) -> ProcessingOutcome:
        original, rejection = self._find_referenced(transaction)
        if rejection is not None:
            return rejection

        if original.dispute_status == DisputeStatus.DISPUTED:
            return self._reject(
                RejectionReason.INVALID_DISPUTE_STATE,
                f"Dispute for tx {transaction.transaction_id}: transaction already disputed",
            )
        if original.dispute_status == DisputeStatus.CHARGED_BACK:
            return self._reject(
                RejectionReason.INVALID_DISPUTE_STATE,
                f"Dispute for tx {transaction.transaction_id}: transaction already charged back",
            )

        account = self._state.get_or_create_account(original.client_id)
        account.hold(original.amount)
        self._state.set_dispute_status(original.transaction_id, DisputeStatus.DISPUTED)
        return ProcessingOutcome.applied()

    def _handle_resolve(self, transaction: Transaction) -> ProcessingOutcome:
        original, rejection = self._find_referenced(transaction)
        if rejection is not None:
            return rejection

        if original.dispute_status != DisputeStatus.DISPUTED:
            return self._reject(
                RejectionReason.INVALID_DISPUTE_STATE,
                f"Skipping resolve transaction for non-disputed transaction: {transaction.transaction_id}",
            )

        account = self._state.get_or_create_account(original.client_id)
        account.release_hold(original.amount)
        self._state.set_dispute_status(original.transaction_id, DisputeStatus.CLEAN)
        return ProcessingOutcome.applied()

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingOutcome:
        original, rejection = self._find_referenced(transaction)
        if rejection is not None:
            return rejection

        if original.dispute_status != DisputeStatus.DISPUTED:
            return self._reject(
                RejectionReason.INVALID_DISPUTE_STATE,
                f"Skipping chargeback transaction for non-disputed transaction: {transaction.transaction_id}",
            )

        account = self._state.get_or_create_account(original.client_id)
        account.remove_held(original.amount)
        account.lock()
        # Terminal: a charged-back transaction can never be disputed again.
        self._state.set_dispute_status(original.transaction_id, DisputeStatus.CHARGED_BACK)
        return ProcessingOutcome.applied()
