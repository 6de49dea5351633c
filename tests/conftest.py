import os
from decimal import Decimal
from typing import Generator

# Override settings for tests before importing app modules
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["GATEWAY_SUCCESS_RATE"] = "0.8"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.dependencies import get_payment_gateway
from app.main import app
from app.models import Order, OrderPaymentStatus, OrderStatus, User
from app.models.database import Base, get_db
from app.services.payment_gateway import GatewayResult, MESSAGE_DECLINED, MESSAGE_SUCCESS
from app.services.payment_service import PaymentService

# Create test database engine
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

ORDER_ITEMS = [
    {"name": "Notebook", "quantity": 2, "unitPrice": "25.00"},
    {"name": "Fountain pen", "quantity": 1, "unitPrice": "50.00"},
]


class StubGateway:
    """Gateway with a fixed outcome that remembers what it was asked to charge."""

    def __init__(self, success: bool, transaction_id: str = "TRANS_TEST_0001"):
        self.success = success
        self.transaction_id = transaction_id
        self.calls = []

    def simulate(self, order_id, amount, payment_method) -> GatewayResult:
        self.calls.append((order_id, amount, payment_method))
        return GatewayResult(
            success=self.success,
            transaction_id=self.transaction_id,
            message=MESSAGE_SUCCESS if self.success else MESSAGE_DECLINED,
        )


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db_session = TestSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def approving_gateway() -> StubGateway:
    return StubGateway(success=True)


@pytest.fixture
def declining_gateway() -> StubGateway:
    return StubGateway(success=False)


@pytest.fixture
def approving_client(client: TestClient, approving_gateway: StubGateway) -> TestClient:
    """Client whose gateway approves every charge."""
    app.dependency_overrides[get_payment_gateway] = lambda: approving_gateway
    return client


@pytest.fixture
def declining_client(client: TestClient, declining_gateway: StubGateway) -> TestClient:
    """Client whose gateway declines every charge."""
    app.dependency_overrides[get_payment_gateway] = lambda: declining_gateway
    return client


@pytest.fixture
def approving_service(db: Session, approving_gateway: StubGateway) -> PaymentService:
    return PaymentService(db=db, gateway=approving_gateway)


@pytest.fixture
def declining_service(db: Session, declining_gateway: StubGateway) -> PaymentService:
    return PaymentService(db=db, gateway=declining_gateway)


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    user = User(email="test@example.com", display_name="Test User")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _make_order(db: Session, user: User, status: str, payment_status: str, transaction_id=None) -> Order:
    order = Order(
        user_id=user.id,
        items=[dict(item) for item in ORDER_ITEMS],
        total_amount=Decimal("100.00"),
        status=status,
        payment_status=payment_status,
        transaction_id=transaction_id,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


@pytest.fixture
def pending_order(db: Session, test_user: User) -> Order:
    return _make_order(db, test_user, OrderStatus.PENDING.value, OrderPaymentStatus.PENDING.value)


@pytest.fixture
def paid_order(db: Session, test_user: User) -> Order:
    return _make_order(
        db,
        test_user,
        OrderStatus.PAID.value,
        OrderPaymentStatus.COMPLETED.value,
        transaction_id="TRANS_PAID_0001",
    )


@pytest.fixture
def cancelled_order(db: Session, test_user: User) -> Order:
    return _make_order(db, test_user, OrderStatus.CANCELLED.value, OrderPaymentStatus.CANCELLED.value)
