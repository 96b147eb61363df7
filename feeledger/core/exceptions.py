from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


PAYMENT_FAILED_MESSAGE = "Payment failed. Please try again."


class StoreUnavailableError(ServiceError):
    """The backing store rejected a read or write. Safe to retry from scratch."""

    def __init__(self, message: str = PAYMENT_FAILED_MESSAGE) -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)
