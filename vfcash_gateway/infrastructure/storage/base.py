"""Storage interfaces shared by the in-memory and SQL backends"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from vfcash_gateway.domain.models import Limits, Transaction, UpsertSummary


class TransactionStore(ABC):
    """
    Ordered newest-first collection of transactions keyed by id.

    Inserting a new id puts it at the front. Upserting an existing id replaces
    the record in place. Once the collection grows past its capacity the oldest
    entries (the tail) are dropped.
    """

    capacity: int

    @abstractmethod
    def list(self) -> List[Transaction]:
        """All records, newest first"""

    @abstractmethod
    def get(self, transaction_id: str) -> Optional[Transaction]:
        """Record with this id, or None"""

    @abstractmethod
    def upsert_one(self, transaction: Transaction) -> bool:
        """Insert or replace one record, then trim. Returns True if it was added."""

    @abstractmethod
    def upsert_many(self, transactions: Iterable[Transaction]) -> UpsertSummary:
        """Upsert in input order with a single trim pass at the end"""

    @abstractmethod
    def clear(self) -> None:
        """Remove every record"""

    @abstractmethod
    def count(self) -> int:
        """Number of stored records"""


class LimitsStore(ABC):
    """Single limits record, replaced wholesale"""

    @abstractmethod
    def get(self) -> Limits:
        """Current limits"""

    @abstractmethod
    def replace(self, limits: Limits) -> Limits:
        """Swap in a new record and return it"""
