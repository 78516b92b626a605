"""Process-lifetime in-memory storage backend"""

import logging
import dataclasses
from typing import Dict, Iterable, List, Optional

from vfcash_gateway.domain.models import Limits, Transaction, UpsertSummary
from vfcash_gateway.infrastructure.storage.base import LimitsStore, TransactionStore


class BoundedTransactionStore(TransactionStore):
    """
    Newest-first list with an id index.

    Positions are tracked through the index so replacing a record keeps its slot.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._items: List[Transaction] = []  # newest first
        self._ids: Dict[str, Transaction] = {}

    def list(self) -> List[Transaction]:
        return list(self._items)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._ids.get(transaction_id)

    def count(self) -> int:
        return len(self._items)

    def _apply(self, transaction: Transaction) -> bool:
        existing = self._ids.get(transaction.id)
        if existing is not None:
            position = next(i for i, txn in enumerate(self._items) if txn.id == transaction.id)
            self._items[position] = transaction
            self._ids[transaction.id] = transaction
            self._log_mutation(transaction.id, "updated")
            return False

        self._items.insert(0, transaction)
        self._ids[transaction.id] = transaction
        self._log_mutation(transaction.id, "added")
        return True

    def _log_mutation(self, transaction_id: str, outcome: str) -> None:
        logging.info(
            f"Transaction {outcome}: {transaction_id}",
            extra={"transaction_id": transaction_id, "outcome": outcome, "store_size": len(self._items)},
        )

    def _trim(self) -> None:
        if len(self._items) <= self.capacity:
            return
        evicted = self._items[self.capacity:]
        del self._items[self.capacity:]
        for txn in evicted:
            del self._ids[txn.id]
        logging.info(
            "Evicted oldest transactions over capacity",
            extra={"evicted": len(evicted), "capacity": self.capacity},
        )

    def upsert_one(self, transaction: Transaction) -> bool:
        added = self._apply(transaction)
        self._trim()
        return added

    def upsert_many(self, transactions: Iterable[Transaction]) -> UpsertSummary:
        added = updated = 0
        for txn in transactions:
            if self._apply(txn):
                added += 1
            else:
                updated += 1
        self._trim()
        return UpsertSummary(added=added, updated=updated, total=len(self._items))

    def clear(self) -> None:
        self._items.clear()
        self._ids.clear()
        logging.info("All transactions cleared")


class InMemoryLimitsStore(LimitsStore):
    """Holds one Limits record for the life of the process"""

    def __init__(self, defaults: Limits):
        self._limits = dataclasses.replace(defaults)

    def get(self) -> Limits:
        return dataclasses.replace(self._limits)

    def replace(self, limits: Limits) -> Limits:
        self._limits = dataclasses.replace(limits)
        logging.info("Limits updated", extra=limits.to_dict())
        return self.get()
