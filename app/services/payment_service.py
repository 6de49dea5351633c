import copy
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models import Invoice, Order, OrderPaymentStatus, OrderStatus, Payment, PaymentStatus, User
from app.services.exceptions import (
    ConfirmationFailedError,
    InvalidStateError,
    NotFoundError,
    PaymentDeclinedError,
    PaymentValidationError,
)
from app.services.payment_gateway import PaymentGatewaySimulator, generate_transaction_id

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    message: str
    transaction_id: str
    invoice_id: int


class PaymentService:
    """Moves an order through payment and keeps its Payment and Invoice rows consistent.

    Holds no state of its own: every call works against the injected session
    and gateway, so one instance per request is enough.
    """

    def __init__(self, db: Session, gateway: PaymentGatewaySimulator):
        self.db = db
        self.gateway = gateway

    def _get_order(self, order_id: int, for_update: bool = False) -> Order:
        query = self.db.query(Order).filter(Order.id == order_id)
        if for_update:
            query = query.with_for_update()
        order = query.first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _add_payment(
        self,
        order_id: int,
        user_id: int,
        amount: Decimal,
        payment_method: str,
        transaction_id: str | None = None,
        status: str | None = None,
    ) -> Payment:
        payment = Payment(
            order_id=order_id,
            user_id=user_id,
            transaction_id=transaction_id or generate_transaction_id(),
            amount=amount,
            payment_method=payment_method,
            status=status or PaymentStatus.PENDING.value,
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def _add_invoice(self, order: Order, user_id: int) -> Invoice:
        invoice = Invoice(
            order_id=order.id,
            user_id=user_id,
            items=copy.deepcopy(order.items),
            total_amount=order.total_amount,
        )
        self.db.add(invoice)
        self.db.flush()
        return invoice

    def create_order(self, user_id: int, items: list[dict]) -> Order:
        if not items:
            raise PaymentValidationError("Order must contain at least one item")
        if not self.db.query(User).filter(User.id == user_id).first():
            raise NotFoundError("User not found")

        total = sum(
            (Decimal(str(item["unitPrice"])) * int(item["quantity"]) for item in items),
            Decimal("0"),
        ).quantize(CENTS)
        order = Order(
            user_id=user_id,
            items=items,
            total_amount=total,
            status=OrderStatus.PENDING.value,
            payment_status=OrderPaymentStatus.PENDING.value,
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info("Order %s created for user %s: total=%s", order.id, user_id, total)
        return order

    def get_order(self, order_id: int) -> Order:
        return self._get_order(order_id)

    def process_payment(self, order_id: int, user_id: int, payment_method: str) -> PaymentResult:
        order = self._get_order(order_id, for_update=True)
        if order.status != OrderStatus.PENDING.value:
            self.db.rollback()
            logger.warning("Order %s is %s, refusing payment", order_id, order.status)
            raise InvalidStateError("Order is not in a payable state")

        result = self.gateway.simulate(order.id, order.total_amount, payment_method)

        if not result.success:
            order.payment_status = OrderPaymentStatus.FAILED.value
            self.db.commit()
            logger.warning("Payment for order %s declined: %s", order_id, result.message)
            raise PaymentDeclinedError(result.message)

        # order, payment and invoice are committed together or not at all
        try:
            order.status = OrderStatus.PAID.value
            order.payment_status = OrderPaymentStatus.COMPLETED.value
            order.transaction_id = result.transaction_id
            self._add_payment(
                order_id=order.id,
                user_id=user_id,
                amount=order.total_amount,
                payment_method=payment_method,
                transaction_id=result.transaction_id,
                status=PaymentStatus.COMPLETED.value,
            )
            invoice = self._add_invoice(order, user_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to record payment for order %s", order_id)
            raise

        logger.info(
            "Order %s paid: transaction=%s invoice=%s",
            order_id,
            result.transaction_id,
            invoice.id,
        )
        return PaymentResult(
            success=True,
            message=result.message,
            transaction_id=result.transaction_id,
            invoice_id=invoice.id,
        )

    def cancel_payment(self, order_id: int) -> Order:
        order = self._get_order(order_id, for_update=True)
        if order.status == OrderStatus.PAID.value:
            self.db.rollback()
            raise InvalidStateError("Cannot cancel a completed payment")

        order.status = OrderStatus.CANCELLED.value
        order.payment_status = OrderPaymentStatus.CANCELLED.value
        self.db.commit()
        self.db.refresh(order)
        logger.info("Order %s cancelled", order_id)
        return order

    def confirm_payment(self, order_id: int, transaction_id: str) -> Order:
        order = self._get_order(order_id)
        if (
            order.transaction_id != transaction_id
            or order.payment_status != OrderPaymentStatus.COMPLETED.value
        ):
            raise ConfirmationFailedError("Invalid transaction")
        return order

    def create_invoice(self, order_id: int, user_id: int) -> Invoice:
        order = self._get_order(order_id)
        invoice = self._add_invoice(order, user_id)
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = (
            self.db.query(Invoice)
            .options(joinedload(Invoice.order), joinedload(Invoice.user))
            .filter(Invoice.id == invoice_id)
            .first()
        )
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    def get_all_payments(self) -> list[Payment]:
        return (
            self.db.query(Payment)
            .options(joinedload(Payment.order), joinedload(Payment.user))
            .order_by(Payment.id)
            .all()
        )

    def create_payment(
        self,
        order_id: int | None = None,
        user_id: int | None = None,
        amount: Decimal | None = None,
        payment_method: str | None = None,
        transaction_id: str | None = None,
        status: str | None = None,
    ) -> Payment:
        # keyed by the request field names the client sent
        required = {
            "orderId": order_id,
            "userId": user_id,
            "amount": amount,
            "paymentMethod": payment_method,
        }
        missing = [
            name
            for name, value in required.items()
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise PaymentValidationError(f"Missing required fields: {', '.join(missing)}")
        if Decimal(str(amount)) <= 0:
            raise PaymentValidationError("Amount must be greater than zero")
        if status is not None:
            try:
                status = PaymentStatus(status).value
            except ValueError:
                raise PaymentValidationError(f"Unknown payment status: {status}") from None

        self._get_order(order_id)
        try:
            payment = self._add_payment(
                order_id=order_id,
                user_id=user_id,
                amount=Decimal(str(amount)).quantize(CENTS),
                payment_method=payment_method,
                transaction_id=transaction_id,
                status=status,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create payment for order %s", order_id)
            raise
        self.db.refresh(payment)
        logger.info("Payment %s recorded for order %s: status=%s", payment.id, order_id, payment.status)
        return payment
