"""SQL-backed transaction and limits stores"""

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from vfcash_gateway.domain.models import Limits, Transaction, UpsertSummary
from vfcash_gateway.infrastructure.database.models import LimitsRecord, TransactionRecord
from vfcash_gateway.infrastructure.storage.base import LimitsStore, TransactionStore
from vfcash_gateway.utils.date_utils import to_utc

LIMITS_ROW_ID = 1


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Commit on success, roll back on any error"""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _to_domain(row: TransactionRecord) -> Transaction:
    return Transaction(
        id=row.id,
        type=row.type,
        amount=row.amount,
        phone_number=row.phone_number,
        date=row.date,
        timestamp=to_utc(row.occurred_at),
        balance_before=row.balance_before,
        balance_after=row.balance_after,
        sender_name=row.sender_name,
        transaction_number=row.transaction_number,
        service_fees=row.service_fees,
    )


def _copy_fields(row: TransactionRecord, transaction: Transaction) -> None:
    row.type = transaction.type
    row.amount = transaction.amount
    row.phone_number = transaction.phone_number
    row.date = transaction.date
    row.occurred_at = transaction.timestamp
    row.balance_before = transaction.balance_before
    row.balance_after = transaction.balance_after
    row.sender_name = transaction.sender_name
    row.transaction_number = transaction.transaction_number
    row.service_fees = transaction.service_fees


class SqlTransactionStore(TransactionStore):
    """Transaction store over a SQL table ordered by insertion sequence"""

    def __init__(self, session_factory: sessionmaker, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.session_factory = session_factory
        self.capacity = capacity

    def list(self) -> List[Transaction]:
        with session_scope(self.session_factory) as db:
            rows = db.query(TransactionRecord).order_by(TransactionRecord.sequence.desc()).all()
            return [_to_domain(row) for row in rows]

    def get(self, transaction_id: str) -> Optional[Transaction]:
        with session_scope(self.session_factory) as db:
            row = db.get(TransactionRecord, transaction_id)
            return _to_domain(row) if row else None

    def count(self) -> int:
        with session_scope(self.session_factory) as db:
            return db.query(func.count(TransactionRecord.id)).scalar()

    def _apply(self, db: Session, transaction: Transaction) -> bool:
        row = db.get(TransactionRecord, transaction.id)
        if row is not None:
            _copy_fields(row, transaction)
            db.flush()
            self._log_mutation(db, transaction.id, "updated")
            return False

        last_sequence = db.query(func.max(TransactionRecord.sequence)).scalar() or 0
        row = TransactionRecord(id=transaction.id, sequence=last_sequence + 1)
        _copy_fields(row, transaction)
        db.add(row)
        db.flush()
        self._log_mutation(db, transaction.id, "added")
        return True

    @staticmethod
    def _log_mutation(db: Session, transaction_id: str, outcome: str) -> None:
        logging.info(
            f"Transaction {outcome}: {transaction_id}",
            extra={
                "transaction_id": transaction_id,
                "outcome": outcome,
                "store_size": db.query(func.count(TransactionRecord.id)).scalar(),
            },
        )

    def _trim(self, db: Session) -> int:
        # Pending updates must reach the table before rows are bulk-deleted
        db.flush()
        evicted_ids = [
            row_id
            for (row_id,) in db.query(TransactionRecord.id)
            .order_by(TransactionRecord.sequence.desc())
            .offset(self.capacity)
            .all()
        ]
        if evicted_ids:
            db.query(TransactionRecord).filter(TransactionRecord.id.in_(evicted_ids)).delete(
                synchronize_session=False
            )
            logging.info(
                "Evicted oldest transactions over capacity",
                extra={"evicted": len(evicted_ids), "capacity": self.capacity},
            )
        return db.query(func.count(TransactionRecord.id)).scalar()

    def upsert_one(self, transaction: Transaction) -> bool:
        with session_scope(self.session_factory) as db:
            added = self._apply(db, transaction)
            self._trim(db)
            return added

    def upsert_many(self, transactions: Iterable[Transaction]) -> UpsertSummary:
        added = updated = 0
        with session_scope(self.session_factory) as db:
            for txn in transactions:
                if self._apply(db, txn):
                    added += 1
                else:
                    updated += 1
            total = self._trim(db)
        return UpsertSummary(added=added, updated=updated, total=total)

    def clear(self) -> None:
        with session_scope(self.session_factory) as db:
            db.query(TransactionRecord).delete(synchronize_session=False)
        logging.info("All transactions cleared")


class SqlLimitsStore(LimitsStore):
    """Limits store over a single-row table, seeded with defaults on first use"""

    def __init__(self, session_factory: sessionmaker, defaults: Limits):
        self.session_factory = session_factory
        with session_scope(self.session_factory) as db:
            if db.get(LimitsRecord, LIMITS_ROW_ID) is None:
                db.add(self._to_row(defaults))

    @staticmethod
    def _to_row(limits: Limits) -> LimitsRecord:
        return LimitsRecord(
            id=LIMITS_ROW_ID,
            daily_transfer_limit=limits.daily_transfer_limit,
            monthly_transfer_limit=limits.monthly_transfer_limit,
            daily_receive_limit=limits.daily_receive_limit,
            monthly_receive_limit=limits.monthly_receive_limit,
        )

    def get(self) -> Limits:
        with session_scope(self.session_factory) as db:
            row = db.get(LimitsRecord, LIMITS_ROW_ID)
            return Limits(
                daily_transfer_limit=row.daily_transfer_limit,
                monthly_transfer_limit=row.monthly_transfer_limit,
                daily_receive_limit=row.daily_receive_limit,
                monthly_receive_limit=row.monthly_receive_limit,
            )

    def replace(self, limits: Limits) -> Limits:
        with session_scope(self.session_factory) as db:
            db.merge(self._to_row(limits))
        logging.info("Limits updated", extra=limits.to_dict())
        return self.get()
