"""Validation rules for inbound transaction and limits records"""

import logging
import math
import re
from typing import Any, List, Optional, Tuple

from vfcash_gateway.config import settings
from vfcash_gateway.domain.exceptions import (
    BatchValidationError,
    InvalidLimitsError,
    InvalidTransactionDataError,
)
from vfcash_gateway.domain.models import TRANSACTION_TYPES, Limits, Transaction
from vfcash_gateway.utils.date_utils import parse_timestamp

LIMIT_FIELDS = (
    "dailyTransferLimit",
    "monthlyTransferLimit",
    "dailyReceiveLimit",
    "monthlyReceiveLimit",
)

_phone_pattern = re.compile(settings.phone_number_pattern)


def is_number(value: Any) -> bool:
    """JSON number check: bool is not a number, NaN and infinity are rejected"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def is_valid_phone_number(phone_number: str) -> bool:
    return bool(_phone_pattern.match(phone_number))


def validate_transaction(record: Any) -> Transaction:
    """
    Check a submitted transaction and build the domain record.

    Rules are checked in order and the first failure is raised. A phone number
    that does not match the national mobile pattern only logs a warning.

    Raises:
        InvalidTransactionDataError: With the first failing rule's message
    """
    if not isinstance(record, dict):
        raise InvalidTransactionDataError("Transaction must be an object")

    transaction_id = record.get("id")
    if not transaction_id or not isinstance(transaction_id, str):
        raise InvalidTransactionDataError("Transaction ID is required and must be a string")

    transaction_type = record.get("type")
    if transaction_type not in TRANSACTION_TYPES:
        raise InvalidTransactionDataError('Transaction type must be either "transfer" or "received"')

    amount = record.get("amount")
    if not is_number(amount) or amount <= 0:
        raise InvalidTransactionDataError("Amount must be a positive number")

    phone_number = record.get("phoneNumber")
    if not phone_number or not isinstance(phone_number, str):
        raise InvalidTransactionDataError("Phone number is required and must be a string")

    date = record.get("date")
    if not date:
        raise InvalidTransactionDataError("Date is required")
    try:
        timestamp = parse_timestamp(date)
    except ValueError as e:
        raise InvalidTransactionDataError("Invalid date format") from e

    balance_before = record.get("balanceBefore")
    if not is_number(balance_before) or balance_before < 0:
        raise InvalidTransactionDataError("Balance before must be a non-negative number")

    balance_after = record.get("balanceAfter")
    if not is_number(balance_after) or balance_after < 0:
        raise InvalidTransactionDataError("Balance after must be a non-negative number")

    if not is_valid_phone_number(phone_number):
        logging.warning(
            f"Phone number format warning: {phone_number}",
            extra={"transaction_id": transaction_id},
        )

    return Transaction(
        id=transaction_id,
        type=transaction_type,
        amount=amount,
        phone_number=phone_number,
        date=date,
        timestamp=timestamp,
        balance_before=balance_before,
        balance_after=balance_after,
        sender_name=_optional_text(record, "senderName"),
        transaction_number=_optional_text(record, "transactionNumber"),
        service_fees=_optional_number(record, "serviceFees"),
    )


def validate_batch(records: List[Any]) -> List[Transaction]:
    """
    Validate every record independently.

    Raises:
        BatchValidationError: Listing (index, message) for every failing record
    """
    transactions: List[Transaction] = []
    failures: List[Tuple[int, str]] = []

    for index, record in enumerate(records):
        try:
            transactions.append(validate_transaction(record))
        except InvalidTransactionDataError as e:
            failures.append((index, str(e)))

    if failures:
        raise BatchValidationError(failures)
    return transactions


def validate_limits(record: Any, max_value: Optional[float] = None) -> Limits:
    """
    Check a limits record and build the domain record.

    Unknown fields are ignored, missing known fields fail.

    Raises:
        InvalidLimitsError: With the first failing rule's message
    """
    max_value = settings.max_limit_value if max_value is None else max_value

    if not isinstance(record, dict):
        raise InvalidLimitsError("Invalid limits data")

    for field in LIMIT_FIELDS:
        if field not in record:
            raise InvalidLimitsError(f"Missing required field: {field}")

        value = record[field]
        if not is_number(value) or value < 0:
            raise InvalidLimitsError(f"{field} must be a non-negative number")

        if value > max_value:
            raise InvalidLimitsError(f"{field} seems unreasonably high")

    if record["dailyTransferLimit"] > record["monthlyTransferLimit"]:
        raise InvalidLimitsError("Daily transfer limit cannot exceed monthly transfer limit")

    if record["dailyReceiveLimit"] > record["monthlyReceiveLimit"]:
        raise InvalidLimitsError("Daily receive limit cannot exceed monthly receive limit")

    return Limits(
        daily_transfer_limit=record["dailyTransferLimit"],
        monthly_transfer_limit=record["monthlyTransferLimit"],
        daily_receive_limit=record["dailyReceiveLimit"],
        monthly_receive_limit=record["monthlyReceiveLimit"],
    )


def _optional_text(record: dict, field: str) -> Optional[str]:
    value = record.get(field)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if is_number(value):
        return str(value)
    logging.warning(f"Ignoring malformed optional field {field}", extra={"transaction_id": record.get("id")})
    return None


def _optional_number(record: dict, field: str) -> Optional[float]:
    value = record.get(field)
    if value is None:
        return None
    if is_number(value):
        return value
    logging.warning(f"Ignoring malformed optional field {field}", extra={"transaction_id": record.get("id")})
    return None
