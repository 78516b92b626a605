"""Build the process-wide stores for the configured backend"""

from typing import Tuple

from vfcash_gateway.config import Settings
from vfcash_gateway.domain.models import Limits
from vfcash_gateway.infrastructure.storage.base import LimitsStore, TransactionStore
from vfcash_gateway.infrastructure.storage.memory import BoundedTransactionStore, InMemoryLimitsStore


def default_limits(app_settings: Settings) -> Limits:
    return Limits(
        daily_transfer_limit=app_settings.default_daily_transfer_limit,
        monthly_transfer_limit=app_settings.default_monthly_transfer_limit,
        daily_receive_limit=app_settings.default_daily_receive_limit,
        monthly_receive_limit=app_settings.default_monthly_receive_limit,
    )


def create_stores(app_settings: Settings) -> Tuple[TransactionStore, LimitsStore]:
    """Instantiate the transaction and limits stores once per process"""
    defaults = default_limits(app_settings)

    if app_settings.storage_backend == "sql":
        # Imported lazily so the in-memory backend does not touch SQLAlchemy
        from vfcash_gateway.infrastructure.database.repositories import SqlLimitsStore, SqlTransactionStore
        from vfcash_gateway.infrastructure.database.session import build_engine, build_session_factory

        session_factory = build_session_factory(build_engine(app_settings.database_url))
        return (
            SqlTransactionStore(session_factory, capacity=app_settings.max_transactions),
            SqlLimitsStore(session_factory, defaults),
        )

    return BoundedTransactionStore(capacity=app_settings.max_transactions), InMemoryLimitsStore(defaults)
