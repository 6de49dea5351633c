import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.responses import ERROR_RESPONSES, error_response
from app.dependencies import get_payment_service
from app.schemas.payments import InvoiceEnvelope, InvoiceResponse
from app.services.exceptions import PaymentServiceError
from app.services.payment_service import PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceEnvelope,
    responses=ERROR_RESPONSES,
    summary="Get invoice by ID",
)
def get_invoice(
    invoice_id: int,
    service: Annotated[PaymentService, Depends(get_payment_service)],
):
    """Returns the invoice with the order and user it belongs to."""
    try:
        invoice = service.get_invoice(invoice_id)
    except PaymentServiceError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to retrieve invoice: {e.message}")
    except SQLAlchemyError:
        logger.exception("Failed to load invoice %s", invoice_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve invoice: Database error")

    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))
