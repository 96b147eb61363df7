from enum import Enum


class ProfileRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class FeeStatus(str, Enum):
    """Stored fee status. Overdue is derived, see EffectiveFeeStatus."""

    pending = "pending"
    paid = "paid"


class EffectiveFeeStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    overdue = "overdue"


class PaymentStatus(str, Enum):
    completed = "completed"


class ChangeEventType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
