import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.responses import ERROR_RESPONSES, error_response
from app.dependencies import get_payment_service
from app.schemas.payments import OrderCreateRequest, OrderEnvelope, OrderResponse
from app.services.exceptions import PaymentServiceError
from app.services.payment_service import PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)

DATABASE_ERROR = "Database error"


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=OrderEnvelope,
    responses=ERROR_RESPONSES,
    summary="Create a pending order",
)
def create_order(
    body: OrderCreateRequest,
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """Create an order from line items. The total is computed from unitPrice * quantity."""
    items = [item.model_dump(mode="json", by_alias=True) for item in body.items]
    try:
        order = service.create_order(body.user_id, items)
    except PaymentServiceError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, f"Order creation failed: {e.message}")
    return OrderEnvelope(order=OrderResponse.model_validate(order))


@router.get(
    "/{order_id}",
    response_model=OrderEnvelope,
    responses=ERROR_RESPONSES,
    summary="Get order by ID",
)
def get_order(
    order_id: int,
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    try:
        order = service.get_order(order_id)
    except PaymentServiceError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to retrieve order: {e.message}")
    except SQLAlchemyError:
        logger.exception("Failed to load order %s", order_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to retrieve order: {DATABASE_ERROR}")
    return OrderEnvelope(order=OrderResponse.model_validate(order))
