import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_ordering.core.config import CORS_ORIGINS, DATABASE_URL
from food_ordering.core.database import Base, engine
from food_ordering.core.logging_setup import configure_logging
from food_ordering.core.startup_checks import (
    apply_migrations,
    ensure_migrations_applied,
    validate_runtime_environment,
)
from food_ordering.middleware.observability import ObservabilityMiddleware
import food_ordering.models  # registers every model before create_all

from food_ordering.routers.auth import router as auth_router
from food_ordering.routers.internal_metrics import router as internal_metrics_router
from food_ordering.routers.menu import router as menu_router
from food_ordering.routers.orders import router as orders_router
from food_ordering.routers.users import router as users_router
from food_ordering.services.orders import OrderError

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


def _startup_tasks() -> None:
    try:
        validate_runtime_environment()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
            logger.info("%s sqlite schema ensured", STARTUP_PREFIX)
            return
        apply_migrations(alembic_config_path=ALEMBIC_CONFIG_PATH)
        ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Food Ordering API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)


@app.exception_handler(OrderError)
async def order_error_handler(_: Request, exc: OrderError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location) or "request"
    message = first.get("msg", "Invalid request")
    logger.info("request rejected endpoint=%s field=%s", request.url.path, field)
    return JSONResponse(status_code=400, content={"error": f"{field}: {message}"})


# Routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
