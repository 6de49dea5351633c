"""Errors raised by the payment workflow.

Route handlers catch ``PaymentServiceError`` and turn it into the
``{"success": false, "message": ...}`` envelope.
"""


class PaymentServiceError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PaymentServiceError):
    """Order or invoice does not exist."""


class InvalidStateError(PaymentServiceError):
    """Order status does not allow the requested transition."""


class PaymentDeclinedError(PaymentServiceError):
    """Gateway rejected the charge."""


class ConfirmationFailedError(PaymentServiceError):
    """Transaction id mismatch or payment not completed."""


class PaymentValidationError(PaymentServiceError):
    """Required payment fields are missing."""
