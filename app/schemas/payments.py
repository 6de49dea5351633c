from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models import OrderPaymentStatus, OrderStatus, PaymentStatus

CENTS = Decimal("0.01")


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _MoneyModel(CamelModel):
    @field_serializer("amount", "total_amount", "unit_price", check_fields=False)
    def serialize_money(self, value: Decimal) -> str:
        return format(Decimal(value).quantize(CENTS), "f")


class OrderItem(_MoneyModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(alias="unitPrice", ge=0)


class UserResponse(CamelModel):
    id: int
    email: str
    display_name: str | None = Field(default=None, alias="displayName")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class OrderResponse(_MoneyModel):
    id: int
    user_id: int = Field(alias="userId")
    items: list[dict[str, Any]]
    total_amount: Decimal = Field(alias="totalAmount")
    status: OrderStatus
    payment_status: OrderPaymentStatus = Field(alias="paymentStatus")
    transaction_id: str | None = Field(default=None, alias="transactionId")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PaymentResponse(_MoneyModel):
    id: int
    order_id: int = Field(alias="orderId")
    user_id: int = Field(alias="userId")
    transaction_id: str = Field(alias="transactionId")
    amount: Decimal
    payment_method: str = Field(alias="paymentMethod")
    status: PaymentStatus
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PaymentDetailResponse(PaymentResponse):
    order: OrderResponse | None = None
    user: UserResponse | None = None


class InvoiceResponse(_MoneyModel):
    id: int
    order_id: int = Field(alias="orderId")
    user_id: int = Field(alias="userId")
    items: list[dict[str, Any]]
    total_amount: Decimal = Field(alias="totalAmount")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    order: OrderResponse | None = None
    user: UserResponse | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProcessPaymentRequest(CamelModel):
    order_id: int = Field(alias="orderId")
    user_id: int = Field(alias="userId")
    payment_method: str = Field(alias="paymentMethod", min_length=1, max_length=50)

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"orderId": 1, "userId": 7, "paymentMethod": "credit_card"}]},
        populate_by_name=True,
    )


class CancelPaymentRequest(CamelModel):
    order_id: int = Field(alias="orderId")


class PaymentCreateRequest(CamelModel):
    """All fields optional so that missing ones reach the service and come back as a 400."""

    order_id: int | None = Field(default=None, alias="orderId")
    user_id: int | None = Field(default=None, alias="userId")
    amount: Decimal | None = None
    payment_method: str | None = Field(default=None, alias="paymentMethod", max_length=50)
    transaction_id: str | None = Field(default=None, alias="transactionId", max_length=64)
    status: PaymentStatus | None = None


class OrderCreateRequest(CamelModel):
    user_id: int = Field(alias="userId")
    items: list[OrderItem] = Field(min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "userId": 1,
                    "items": [{"name": "Notebook", "quantity": 2, "unitPrice": "50.00"}],
                }
            ]
        },
        populate_by_name=True,
    )


class ErrorResponse(CamelModel):
    success: Literal[False] = False
    message: str


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class ProcessPaymentResponse(CamelModel):
    success: bool = True
    message: str
    transaction_id: str = Field(alias="transactionId")
    invoice_id: int = Field(alias="invoiceId")


class ConfirmPaymentResponse(CamelModel):
    success: bool = True
    message: str
    order: OrderResponse


class InvoiceEnvelope(CamelModel):
    success: bool = True
    invoice: InvoiceResponse


class PaymentEnvelope(CamelModel):
    success: bool = True
    payment: PaymentResponse


class PaymentListResponse(CamelModel):
    success: bool = True
    payments: list[PaymentDetailResponse]


class OrderEnvelope(CamelModel):
    success: bool = True
    order: OrderResponse
