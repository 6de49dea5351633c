from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.models import get_db
from app.services.payment_gateway import PaymentGatewaySimulator
from app.services.payment_service import PaymentService


def get_payment_gateway() -> PaymentGatewaySimulator:
    return PaymentGatewaySimulator()


def get_payment_service(
    db: Annotated[Session, Depends(get_db)],
    gateway: Annotated[PaymentGatewaySimulator, Depends(get_payment_gateway)],
) -> PaymentService:
    return PaymentService(db=db, gateway=gateway)
