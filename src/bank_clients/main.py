"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bank_clients.api.clients import router as clients_router
from bank_clients.api.external_users import close_external_users_api
from bank_clients.api.external_users import router as external_users_router
from bank_clients.config import settings
from bank_clients.database.engine import async_session_factory, init_db
from bank_clients.database.seed import seed_if_empty
from bank_clients.services.errors import (
    ClientValidationError,
    ServiceError,
    fields_from_errors,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    logger.info("Starting %s …", settings.app_name)
    await init_db()
    logger.info("Database initialised")
    if settings.seed_demo_data:
        async with async_session_factory() as session:
            await seed_if_empty(session)
    yield
    logger.info("Shutting down %s …", settings.app_name)
    await close_external_users_api()


app = FastAPI(
    title=settings.app_name,
    description="Bank client records plus a proxy to an external user directory",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(clients_router)
app.include_router(external_users_router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render any service error as ``{"error": kind, "message": ...}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report every invalid field of a request in the same shape as service errors."""
    error = ClientValidationError("Invalid request", fields=fields_from_errors(exc.errors()))
    logger.info("Rejected %s %s: %s", request.method, request.url.path, error.fields)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.get("/health")
async def health_check():
    """Simple liveness probe."""
    return {"status": "healthy", "app": settings.app_name}
