"""Usage computation - daily and monthly sums against the configured limits"""

from datetime import datetime
from typing import Iterable

from vfcash_gateway.domain.models import RECEIVED, TRANSFER, LimitUsage, Limits, Transaction, UsageReport
from vfcash_gateway.utils.date_utils import is_same_day, is_same_month, to_utc

# Usage level thresholds (percent of limit)
WARNING_THRESHOLD = 70.0
CRITICAL_THRESHOLD = 90.0


def usage_level(percentage: float) -> str:
    """Map a usage percentage to ok / warning / critical"""
    if percentage >= CRITICAL_THRESHOLD:
        return "critical"
    if percentage >= WARNING_THRESHOLD:
        return "warning"
    return "ok"


def summarize_limit(used: float, limit: float) -> LimitUsage:
    """Usage of one limit; percentages are not capped at 100"""
    if limit > 0:
        percentage = used / limit * 100
    else:
        percentage = 100.0 if used > 0 else 0.0

    return LimitUsage(
        used=used,
        limit=limit,
        percentage=percentage,
        remaining=max(0.0, limit - used),
        level=usage_level(percentage),
    )


def compute_usage(transactions: Iterable[Transaction], limits: Limits, now: datetime) -> UsageReport:
    """
    Sum transfers and receipts for the calendar day and month of `now`.

    Windows are evaluated in UTC.
    """
    now = to_utc(now)
    daily_transferred = monthly_transferred = 0.0
    daily_received = monthly_received = 0.0

    for txn in transactions:
        if not is_same_month(txn.timestamp, now):
            continue
        today = is_same_day(txn.timestamp, now)

        if txn.type == TRANSFER:
            monthly_transferred += txn.amount
            if today:
                daily_transferred += txn.amount
        elif txn.type == RECEIVED:
            monthly_received += txn.amount
            if today:
                daily_received += txn.amount

    return UsageReport(
        reference_time=now,
        daily_transfer=summarize_limit(daily_transferred, limits.daily_transfer_limit),
        monthly_transfer=summarize_limit(monthly_transferred, limits.monthly_transfer_limit),
        daily_receive=summarize_limit(daily_received, limits.daily_receive_limit),
        monthly_receive=summarize_limit(monthly_received, limits.monthly_receive_limit),
    )
