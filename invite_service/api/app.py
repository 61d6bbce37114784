import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invite_service.libs.result import Error

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error: {exc.base_error.code} on {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.base_error.message, "code": exc.base_error.code},
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": exc.base_error.code},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Body and query validation failures use the same 400 error shape as business errors"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    # loc is ("body" | "query" | "path", field, ...); input values are never echoed
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    error = Error(
        "VALIDATION_ERROR", f"Invalid {field}: {first.get('msg', 'malformed request')}"
    )
    return await handle_client_error(request, ClientError(error))


async def log_requests(request: Request, call_next):
    """Log method, path, status and duration (never query strings or bodies)."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=getattr(logging, ApplicationConfig.LOG_LEVEL.upper(), logging.INFO))

    app = FastAPI(title="Invite Service", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(log_requests)

    from invite_service.api.routes import health_check, invitation, tenant

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(invitation.router, tags=["Invitations"])
    app.include_router(tenant.router, tags=["Tenant"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app
