from feeledger.core.models.profile import Profile
from feeledger.core.models.fee import Fee
from feeledger.core.models.payment import Payment

__all__ = [
    "Profile",
    "Fee",
    "Payment",
]
