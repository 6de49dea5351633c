import logging
import time
from decimal import Decimal
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.models.database import Base, _normalize_database_url, engine
from app.models import Invoice, Order, OrderPaymentStatus, OrderStatus, Payment, User  # noqa: F401 - register models

logger = logging.getLogger(__name__)


def wait_for_db(retries: int, retry_delay_seconds: int) -> None:
    """Wait for database to accept connections before running migrations."""
    last_error = None
    for attempt in range(1, retries + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established on attempt %s", attempt)
            return
        except OperationalError as exc:
            last_error = exc
            logger.warning(
                "Database not reachable yet (attempt %s/%s): %s",
                attempt,
                retries,
                exc,
            )
            if attempt < retries:
                time.sleep(retry_delay_seconds)

    raise RuntimeError(
        "Database is unreachable after "
        f"{retries} attempts. Check DATABASE_URL and ensure the DB server is running."
    ) from last_error


def init_db():
    wait_for_db(
        retries=settings.DB_CONNECT_RETRIES,
        retry_delay_seconds=settings.DB_CONNECT_RETRY_DELAY_SECONDS,
    )
    if settings.DATABASE_URL.startswith("sqlite://"):
        Base.metadata.create_all(bind=engine)
        return

    run_migrations()


def run_migrations() -> None:
    """Apply Alembic migrations to the latest revision."""
    from alembic import command
    from alembic.config import Config

    project_root = Path(__file__).resolve().parent.parent
    alembic_ini = project_root / "alembic.ini"
    script_location = project_root / "alembic"
    if not alembic_ini.exists() or not script_location.exists():
        raise RuntimeError("Alembic configuration is missing (alembic.ini or alembic/ directory not found).")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(script_location))
    config.set_main_option("sqlalchemy.url", _normalize_database_url(settings.DATABASE_URL))
    command.upgrade(config, "head")


def seed_demo_data(db_session) -> None:
    """Insert a demo customer with one pending order when the database is empty."""
    if db_session.query(User).first():
        return
    user = User(email="demo@example.com", display_name="Demo Customer")
    db_session.add(user)
    db_session.flush()
    order = Order(
        user_id=user.id,
        items=[
            {"name": "Notebook", "quantity": 2, "unitPrice": "25.00"},
            {"name": "Fountain pen", "quantity": 1, "unitPrice": "50.00"},
        ],
        total_amount=Decimal("100.00"),
        status=OrderStatus.PENDING.value,
        payment_status=OrderPaymentStatus.PENDING.value,
    )
    db_session.add(order)
    db_session.commit()
    logger.info("Seeded demo user %s with pending order %s", user.id, order.id)
