"""
Transaction Ledger

Append-only in-memory record of every processed charge for the lifetime
of the process. Transactions are never modified or removed.
"""
import logging
import threading
from typing import Dict, List, Optional, Tuple

from ..models.transactions import Transaction

logger = logging.getLogger(__name__)


class TransactionLedger:
    """
    Thread-safe ledger shared by all pipeline invocations.

    Appends are atomic with respect to each other and snapshot() copies
    under the same lock, so a snapshot is always a consistent prefix of
    arrival order and is unaffected by later appends.
    """

    def __init__(self):
        self._transactions: List[Transaction] = []
        self._by_id: Dict[str, Transaction] = {}
        self._lock = threading.Lock()

    def append(self, transaction: Transaction) -> None:
        with self._lock:
            self._transactions.append(transaction)
            self._by_id[transaction.id] = transaction

        logger.debug(f"Ledger append: {transaction.id}")

    def snapshot(self) -> Tuple[Transaction, ...]:
        """Return all transactions, oldest first."""
        with self._lock:
            return tuple(self._transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            return self._by_id.get(transaction_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)
