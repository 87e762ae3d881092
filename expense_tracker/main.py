import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .dependencies import build_store
from .logging_config import configure_logging
from .routers import expenses, health, upi_payments

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "store", None) is None:
            app.state.store = build_store(settings)
        logger.info("Expense store ready (backend=%s)", settings.store_backend)
        yield

    app = FastAPI(title="UPI Expense Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = None

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(health.router, tags=["health"])
    app.include_router(upi_payments.router, tags=["upi-payments"])
    app.include_router(expenses.router, tags=["expenses"])

    return app


app = create_app()
