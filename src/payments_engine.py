import sys
import logging
from typing import Dict, Iterable, Optional

from config import EngineConfig
from models import ClientAccount, ProcessingStats, Record
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Drives the transaction processor over a record stream.
    Records are pulled one at a time and applied in arrival order; the
    input is never buffered.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state, self._config)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        accounts = self.process_records(read_transactions(filepath))

        # Final processing report to stderr
        print(self._stats.summary(), file=sys.stderr)
        return accounts

    def process_records(self, records: Iterable[Record]) -> Dict[int, ClientAccount]:
        """Apply every record in order and return final account states."""
        for record in records:
            outcome = self._processor.process_transaction(record)
            self._stats.record(outcome)

        logger.info(f"Processing complete: {self._stats.summary()}")
        for reason, count in self._stats.rejections_by_reason.items():
            logger.info(f"  {reason.value}: {count}")

        return self._state.get_all_accounts()
