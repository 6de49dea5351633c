import logging
import random
import time
import uuid
from dataclasses import dataclass
from decimal import Decimal

from app.config import settings

logger = logging.getLogger(__name__)

MESSAGE_SUCCESS = "Payment successful"
MESSAGE_DECLINED = "Payment failed due to insufficient funds"


def generate_transaction_id() -> str:
    """Return ``TRANS_<epoch ms>_<8 hex>``."""
    return f"TRANS_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class GatewayResult:
    success: bool
    transaction_id: str
    message: str


class PaymentGatewaySimulator:
    """Stand-in for a third-party processor that approves a fixed share of charges."""

    def __init__(self, success_rate: float | None = None, rng: random.Random | None = None):
        if success_rate is None:
            success_rate = settings.GATEWAY_SUCCESS_RATE
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")
        self.success_rate = success_rate
        self._rng = rng or random.Random()

    def simulate(self, order_id: int, amount: Decimal, payment_method: str) -> GatewayResult:
        # one draw decides both the flag and the message
        success = self._rng.random() < self.success_rate
        result = GatewayResult(
            success=success,
            transaction_id=generate_transaction_id(),
            message=MESSAGE_SUCCESS if success else MESSAGE_DECLINED,
        )
        logger.info(
            "Gateway %s order %s: amount=%s method=%s transaction=%s",
            "approved" if success else "declined",
            order_id,
            amount,
            payment_method,
            result.transaction_id,
        )
        return result
