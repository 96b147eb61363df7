"""
Transaction and receipt identifiers.
Format: prefix + 13-digit epoch milliseconds + 6 random uppercase alphanumeric.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import NamedTuple, Optional

TRANSACTION_PREFIX = "TXN"
RECEIPT_PREFIX = "RCP"
RANDOM_SUFFIX_LENGTH = 6


class PaymentIdentifiers(NamedTuple):
    transaction_id: str
    receipt_number: str


def _timestamp_part(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return str(int(now.timestamp() * 1000)).zfill(13)


def _random_part() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(RANDOM_SUFFIX_LENGTH))


def generate_payment_identifiers(now: Optional[datetime] = None) -> PaymentIdentifiers:
    """
    Generate a transaction id and receipt number for one payment.

    Rules:
    - Both carry the same millisecond timestamp, so ids sort chronologically.
    - Each gets its own random suffix (secrets).
    - No lookup against stored payments: two ids in the same millisecond are
      distinct only through the random suffix.

    Examples:
        TXN1760870400000K7Q2ZD
        RCP17608704000009XA1PL
    """
    timestamp = _timestamp_part(now or datetime.now(timezone.utc))
    return PaymentIdentifiers(
        transaction_id=TRANSACTION_PREFIX + timestamp + _random_part(),
        receipt_number=RECEIPT_PREFIX + timestamp + _random_part(),
    )
