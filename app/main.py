import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import invoices, orders, payments
from app.config import settings
from app.db_init import init_db, seed_demo_data
from app.models import get_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("app.startup")


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


def _get_cors_origins(cors_raw: str) -> list[str]:
    return [origin.strip() for origin in cors_raw.split(",") if origin.strip()]


def _validate_database_url_for_runtime(database_url: str) -> None:
    parsed = urlparse(database_url)
    scheme = parsed.scheme
    postgres_schemes = {"postgres", "postgresql", "postgresql+psycopg"}

    if not scheme:
        raise RuntimeError("DATABASE_URL is missing URL scheme (expected postgresql:// or postgresql+psycopg://).")
    if scheme == "sqlite":
        return
    if scheme not in postgres_schemes:
        raise RuntimeError(
            f"DATABASE_URL has unsupported scheme '{scheme}' "
            "(expected postgresql:// or postgresql+psycopg://)."
        )
    if not parsed.hostname:
        raise RuntimeError("DATABASE_URL is missing host.")
    if not parsed.path.lstrip("/"):
        raise RuntimeError("DATABASE_URL is missing database name in path.")


def _db_url_diagnostics(database_url: str) -> str:
    parsed = urlparse(database_url)
    host = parsed.hostname or "<missing>"
    port = parsed.port or "<missing>"
    db_name = parsed.path.lstrip("/") or "<missing>"
    scheme = parsed.scheme or "<missing>"
    return f"scheme={scheme}, host={host}, port={port}, database={db_name}"


def _validate_required_env_for_runtime() -> None:
    errors = []

    origins = _get_cors_origins(settings.CORS_ORIGINS)
    if not origins:
        errors.append("CORS_ORIGINS must contain at least one comma-separated origin URL.")
    else:
        invalid_origins = [origin for origin in origins if not _is_http_url(origin)]
        if invalid_origins:
            errors.append(f"CORS_ORIGINS contains invalid URL(s): {', '.join(invalid_origins)}")

    try:
        success_rate = settings.GATEWAY_SUCCESS_RATE
    except ValueError:
        errors.append("GATEWAY_SUCCESS_RATE must be a number.")
    else:
        if not 0.0 <= success_rate <= 1.0:
            errors.append("GATEWAY_SUCCESS_RATE must be between 0 and 1.")

    if errors:
        raise RuntimeError("Startup environment validation failed: " + " | ".join(errors))


@asynccontextmanager
async def lifespan(app: FastAPI):
    database_url = "<unavailable>"
    logger.info("Application startup initiated.")
    try:
        database_url = settings.DATABASE_URL
        logger.info("DATABASE_URL diagnostics at startup: %s", _db_url_diagnostics(database_url))
        _validate_database_url_for_runtime(database_url)
        _validate_required_env_for_runtime()
        init_db()
    except Exception as exc:
        logger.exception("Database initialization failed: %s", str(exc))
        raise
    if settings.SEED_DEMO_DATA:
        db = next(get_db())
        try:
            seed_demo_data(db)
        finally:
            db.close()
    logger.info("Application startup completed successfully.")
    yield


app = FastAPI(
    title="Order Payment API",
    description=(
        "Pays orders through a simulated gateway, records payment transactions "
        "and issues invoices."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Orders", "description": "Create and inspect orders."},
        {"name": "Payments", "description": "Process, cancel and confirm payments; list and record transactions."},
        {"name": "Invoices", "description": "Invoices issued for paid orders."},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(settings.CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(invoices.router, prefix="/api/invoices", tags=["Invoices"])


@app.get("/")
def root():
    return {"status": "ok", "service": "Order Payment API"}


@app.get("/health")
def health():
    return {"status": "ok"}
