"""SQLAlchemy ORM models for the SQL storage backend"""

from sqlalchemy import JSON, BigInteger, Column, DateTime, Float, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class TransactionRecord(Base):
    """Stored transaction; higher sequence = newer"""

    __tablename__ = "transactions"

    id = Column(Text, primary_key=True)
    sequence = Column(BigInteger, nullable=False, index=True)
    type = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    phone_number = Column(Text, nullable=False)
    date = Column(JSON, nullable=False)  # As submitted (string or epoch millis)
    occurred_at = Column(DateTime(timezone=True), nullable=False)
    balance_before = Column(Float, nullable=False)
    balance_after = Column(Float, nullable=False)
    sender_name = Column(Text, nullable=True)
    transaction_number = Column(Text, nullable=True)
    service_fees = Column(Float, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class LimitsRecord(Base):
    """Single-row table holding the current limits"""

    __tablename__ = "limits"

    id = Column(Integer, primary_key=True)
    daily_transfer_limit = Column(Float, nullable=False)
    monthly_transfer_limit = Column(Float, nullable=False)
    daily_receive_limit = Column(Float, nullable=False)
    monthly_receive_limit = Column(Float, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
