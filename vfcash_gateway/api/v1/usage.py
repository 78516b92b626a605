"""GET /usage - daily and monthly usage against the configured limits"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from vfcash_gateway.api.dependencies import get_limits_store, get_request_id, get_transaction_store
from vfcash_gateway.api.errors import error_response
from vfcash_gateway.api.v1.schemas import ErrorResponse, LimitUsageSchema, UsageResponse, UsageSchema
from vfcash_gateway.domain.models import LimitUsage
from vfcash_gateway.domain.usage import compute_usage
from vfcash_gateway.infrastructure.storage.base import LimitsStore, TransactionStore
from vfcash_gateway.utils.date_utils import parse_timestamp, utc_now

router = APIRouter()


def _to_schema(usage: LimitUsage) -> LimitUsageSchema:
    return LimitUsageSchema(
        used=usage.used,
        limit=usage.limit,
        percentage=usage.percentage,
        remaining=usage.remaining,
        level=usage.level,
    )


@router.get("/usage", response_model=UsageResponse, responses={400: {"model": ErrorResponse}})
def get_usage(
    request: Request,
    now: Optional[str] = Query(None, description="Reference time (ISO-8601), defaults to the current time"),
    transactions: TransactionStore = Depends(get_transaction_store),
    limits: LimitsStore = Depends(get_limits_store),
):
    """
    Summarise today's and this month's transfers and receipts.

    Returns:
        Used amount, percentage, remaining allowance and level for each limit
    """
    if now is None:
        reference_time = utc_now()
    else:
        try:
            reference_time = parse_timestamp(now)
        except ValueError:
            return error_response(400, "Invalid date format")

    try:
        report = compute_usage(transactions.list(), limits.get(), reference_time)
        return UsageResponse(
            usage=UsageSchema(
                reference_time=report.reference_time,
                daily_transfer=_to_schema(report.daily_transfer),
                monthly_transfer=_to_schema(report.monthly_transfer),
                daily_receive=_to_schema(report.daily_receive),
                monthly_receive=_to_schema(report.monthly_receive),
            )
        )
    except Exception as e:
        logging.error(f"Error computing usage: {e}", extra={"request_id": get_request_id(request)})
        return error_response(500, "Failed to compute usage")
