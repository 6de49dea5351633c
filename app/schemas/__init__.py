from app.schemas.payments import (
    ConfirmPaymentResponse,
    InvoiceResponse,
    OrderCreateRequest,
    OrderResponse,
    PaymentCreateRequest,
    PaymentResponse,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
)

__all__ = [
    "ConfirmPaymentResponse",
    "InvoiceResponse",
    "OrderCreateRequest",
    "OrderResponse",
    "PaymentCreateRequest",
    "PaymentResponse",
    "ProcessPaymentRequest",
    "ProcessPaymentResponse",
]
