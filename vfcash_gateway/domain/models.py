"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

TRANSFER = "transfer"
RECEIVED = "received"
TRANSACTION_TYPES = (TRANSFER, RECEIVED)


@dataclass
class Transaction:
    """Mobile-money movement reported by the companion app"""

    id: str
    type: str  # "transfer" or "received"
    amount: float
    phone_number: str
    date: Union[str, int, float]  # As submitted, echoed back unchanged
    timestamp: datetime  # Parsed from date, timezone-aware UTC
    balance_before: float
    balance_after: float
    sender_name: Optional[str] = None
    transaction_number: Optional[str] = None
    service_fees: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation, optional fields omitted when unset"""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "amount": self.amount,
            "phoneNumber": self.phone_number,
            "date": self.date,
            "balanceBefore": self.balance_before,
            "balanceAfter": self.balance_after,
        }
        if self.sender_name is not None:
            data["senderName"] = self.sender_name
        if self.transaction_number is not None:
            data["transactionNumber"] = self.transaction_number
        if self.service_fees is not None:
            data["serviceFees"] = self.service_fees
        return data


@dataclass
class Limits:
    """Daily and monthly caps used to compute usage"""

    daily_transfer_limit: float
    monthly_transfer_limit: float
    daily_receive_limit: float
    monthly_receive_limit: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "dailyTransferLimit": self.daily_transfer_limit,
            "monthlyTransferLimit": self.monthly_transfer_limit,
            "dailyReceiveLimit": self.daily_receive_limit,
            "monthlyReceiveLimit": self.monthly_receive_limit,
        }


@dataclass
class UpsertSummary:
    """Outcome of applying a batch to the transaction store"""

    added: int
    updated: int
    total: int


@dataclass
class LimitUsage:
    """Usage of a single limit within its window"""

    used: float
    limit: float
    percentage: float
    remaining: float
    level: str  # ok | warning | critical


@dataclass
class UsageReport:
    """Daily and monthly usage against the configured limits"""

    reference_time: datetime
    daily_transfer: LimitUsage
    monthly_transfer: LimitUsage
    daily_receive: LimitUsage
    monthly_receive: LimitUsage

    def is_within_limits(self, transaction_type: str, amount: float) -> bool:
        """True if amount fits in both the remaining daily and monthly allowance"""
        if transaction_type == TRANSFER:
            daily, monthly = self.daily_transfer, self.monthly_transfer
        else:
            daily, monthly = self.daily_receive, self.monthly_receive
        return amount <= daily.remaining and amount <= monthly.remaining
