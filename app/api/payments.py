import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.responses import ERROR_RESPONSES, error_response
from app.dependencies import get_payment_service
from app.schemas.payments import (
    CancelPaymentRequest,
    ConfirmPaymentResponse,
    MessageResponse,
    OrderResponse,
    PaymentCreateRequest,
    PaymentDetailResponse,
    PaymentEnvelope,
    PaymentListResponse,
    PaymentResponse,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
)
from app.services.exceptions import PaymentServiceError, PaymentValidationError
from app.services.payment_service import PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)

DATABASE_ERROR = "Database error"


@router.post(
    "/process",
    response_model=ProcessPaymentResponse,
    responses=ERROR_RESPONSES,
    summary="Pay for an order",
)
def process_payment(
    body: ProcessPaymentRequest,
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """
    Charge a pending order through the gateway.
    On success the order is marked paid and a payment record and invoice are created.
    """
    try:
        result = service.process_payment(body.order_id, body.user_id, body.payment_method)
    except PaymentServiceError as e:
        logger.warning("Payment for order %s failed: %s", body.order_id, e.message)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Payment processing failed: {e.message}")
    except SQLAlchemyError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Payment processing failed: {DATABASE_ERROR}")

    return ProcessPaymentResponse(
        success=result.success,
        message=result.message,
        transaction_id=result.transaction_id,
        invoice_id=result.invoice_id,
    )


@router.post(
    "/cancel",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    summary="Cancel an unpaid order",
)
def cancel_payment(
    body: CancelPaymentRequest,
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """Cancel an order that has not been paid. Cancelling twice is allowed."""
    try:
        service.cancel_payment(body.order_id)
    except PaymentServiceError as e:
        logger.warning("Cancellation of order %s failed: %s", body.order_id, e.message)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Payment cancellation failed: {e.message}")
    except SQLAlchemyError:
        logger.exception("Cancellation of order %s failed", body.order_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Payment cancellation failed: {DATABASE_ERROR}")

    return MessageResponse(message="Payment cancelled successfully")


@router.get(
    "/confirm",
    response_model=ConfirmPaymentResponse,
    responses=ERROR_RESPONSES,
    summary="Confirm a completed payment",
)
def confirm_payment(
    order_id: Annotated[int, Query(alias="orderId")],
    transaction_id: Annotated[str, Query(alias="transactionId")],
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """Check that the order was paid with the given transaction id."""
    try:
        order = service.confirm_payment(order_id, transaction_id)
    except PaymentServiceError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Payment confirmation failed: {e.message}")
    except SQLAlchemyError:
        logger.exception("Confirmation of order %s failed", order_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Payment confirmation failed: {DATABASE_ERROR}")

    return ConfirmPaymentResponse(message="Payment confirmed", order=OrderResponse.model_validate(order))


@router.get(
    "",
    response_model=PaymentListResponse,
    responses=ERROR_RESPONSES,
    summary="List all payments",
)
def list_payments(
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """Returns every payment record with its order and user."""
    try:
        payments = service.get_all_payments()
    except SQLAlchemyError:
        logger.exception("Failed to list payments")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to retrieve payments: {DATABASE_ERROR}")

    return PaymentListResponse(payments=[PaymentDetailResponse.model_validate(p) for p in payments])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PaymentEnvelope,
    responses=ERROR_RESPONSES,
    summary="Record a payment transaction",
)
def create_payment(
    body: PaymentCreateRequest,
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """
    Record a payment against an order without going through the gateway.
    orderId, userId, amount and paymentMethod are required; status defaults to pending.
    """
    try:
        payment = service.create_payment(
            order_id=body.order_id,
            user_id=body.user_id,
            amount=body.amount,
            payment_method=body.payment_method,
            transaction_id=body.transaction_id,
            status=body.status.value if body.status else None,
        )
    except PaymentValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, e.message)
    except PaymentServiceError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, f"Failed to create payment: {e.message}")
    except SQLAlchemyError:
        return error_response(status.HTTP_400_BAD_REQUEST, f"Failed to create payment: {DATABASE_ERROR}")

    return PaymentEnvelope(payment=PaymentResponse.model_validate(payment))
