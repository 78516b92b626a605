"""Vodafone Cash SMS parsing into transaction records"""

import re
from datetime import datetime
from typing import Any, Dict, Optional

from vfcash_gateway.domain.exceptions import SmsParseError
from vfcash_gateway.domain.models import RECEIVED, TRANSFER
from vfcash_gateway.utils.date_utils import epoch_millis, to_utc

TRANSFER_PATTERN = re.compile(
    r"EGP\s+(\d+(?:\.\d+)?)\s+has been transferred to number\s+(\d+).*?"
    r"Service fees are\s+(\d+(?:\.\d+)?)\s+EGP.*?"
    r"Your current Vodafone Cash account balance is\s+(\d+(?:\.\d+)?)",
    re.IGNORECASE | re.DOTALL,
)

RECEIVED_PATTERN = re.compile(
    r"EGP\s+(\d+(?:\.\d+)?)\s+has been received from number\s+(\d+)(?:;\s*registered to\s+([^.]+))?.*?"
    r"Your current balance is\s+(\d+(?:\.\d+)?)\s+EGP.*?"
    r"Transaction date\s+(\d{2}/\d{2}/\d{2})\s+(\d{2}:\d{2}).*?"
    r"Transaction number:\s*(\d+)",
    re.IGNORECASE | re.DOTALL,
)


def is_vf_cash_message(text: str) -> bool:
    lower = text.lower()
    return (
        "vodafone cash" in lower
        or "vf-cash" in lower
        or ("egp" in lower and ("transferred" in lower or "received" in lower))
    )


def parse_transfer_message(text: str, now: datetime) -> Dict[str, Any]:
    match = TRANSFER_PATTERN.search(text)
    if not match:
        raise SmsParseError("Transfer message format not recognized")

    amount = float(match.group(1))
    service_fees = float(match.group(3))
    balance_after = float(match.group(4))

    return {
        "type": TRANSFER,
        "amount": amount,
        "phoneNumber": match.group(2),
        "serviceFees": service_fees,
        "balanceAfter": balance_after,
        "balanceBefore": balance_after + amount + service_fees,
        "date": to_utc(now).isoformat(),
    }


def parse_received_message(text: str) -> Dict[str, Any]:
    match = RECEIVED_PATTERN.search(text)
    if not match:
        raise SmsParseError("Received message format not recognized")

    amount = float(match.group(1))
    balance_after = float(match.group(4))
    try:
        occurred_at = datetime.strptime(f"{match.group(5)} {match.group(6)}", "%m/%d/%y %H:%M")
    except ValueError as e:
        raise SmsParseError(f"Error parsing values from received message: {e}") from e

    record: Dict[str, Any] = {
        "type": RECEIVED,
        "amount": amount,
        "phoneNumber": match.group(2),
        "balanceAfter": balance_after,
        "balanceBefore": balance_after - amount,
        "date": to_utc(occurred_at).isoformat(),
        "transactionNumber": match.group(7),
    }
    if match.group(3):
        record["senderName"] = match.group(3).strip()
    return record


def parse_sms(text: str, now: datetime, transaction_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Parse a VF-Cash SMS into a transaction record in wire format.

    Transfer messages are tried first, then received messages. The record is
    not validated here; callers run it through the regular validator.

    Raises:
        SmsParseError: If the text is not a VF-Cash message or matches neither format
    """
    if not is_vf_cash_message(text):
        raise SmsParseError("Not a VF-Cash message")

    try:
        record = parse_transfer_message(text, now)
    except SmsParseError:
        try:
            record = parse_received_message(text)
        except SmsParseError:
            raise SmsParseError("Unable to parse VF-Cash message format")

    record["id"] = transaction_id or str(epoch_millis(to_utc(now)))
    return record
