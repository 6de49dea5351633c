from app.models.database import Base, get_db
from app.models.user import User
from app.models.order import Order, OrderPaymentStatus, OrderStatus
from app.models.payment import Payment, PaymentStatus
from app.models.invoice import Invoice

__all__ = [
    "Base",
    "get_db",
    "User",
    "Order",
    "OrderStatus",
    "OrderPaymentStatus",
    "Payment",
    "PaymentStatus",
    "Invoice",
]
