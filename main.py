import logging

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from apps.articles.router import router as articles_router
from apps.auth.router import router as auth_router
from apps.auth.service import AuthService
from apps.dashboard.router import router as dashboard_router
from apps.invoices.router import router as invoices_router
from apps.orders.router import router as orders_router
from apps.payments.router import router as payments_router
from apps.receivables.router import router as receivables_router
from apps.third_parties.router import router as third_parties_router
from apps.warehouse_entries.router import router as warehouse_entries_router
from apps.warehouses.router import router as warehouses_router
from common.errors import AppError, StoreUnavailable
from common.responses import error_response
from models import admin, article, invoice, payment, purchase_order, third_party, warehouse, warehouse_entry  # noqa: F401
from models.base import Base, engine, SessionLocal
from settings.config import get_settings
from utils.logging import setup_logging

logger = logging.getLogger(__name__)

HTTP_ERROR_KINDS = {
    401: "Unauthorized",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
}


def validation_details(exc: RequestValidationError) -> list:
    """
    Location, message and type of each validation error. The rejected input
    is left out since it may not be JSON-safe (inf, NaN, bytes).
    """
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """
    Every error leaves the API as {"message", "kind", "details"?}.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
        else:
            logger.info("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(error_response(exc.message, exc.kind, exc.details)),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=error_response("Request validation failed.", "ValidationError", validation_details(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(str(exc.detail), HTTP_ERROR_KINDS.get(exc.status_code, "HTTPError")),
            headers=getattr(exc, "headers", None),
        )

    async def store_error_handler(request: Request, exc: Exception):
        logger.exception("Data store failure on %s %s", request.method, request.url.path)
        error = StoreUnavailable()
        return JSONResponse(status_code=error.status_code, content=error_response(error.message, error.kind))

    app.add_exception_handler(OperationalError, store_error_handler)
    app.add_exception_handler(InterfaceError, store_error_handler)


def create_app() -> FastAPI:
    """
    Application factory to build a FastAPI app with all middlewares and routers.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, sql_level=settings.SQL_LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version="1.0.0",
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "X-Actor-Id", "X-Actor-Name"],
        expose_headers=["Content-Disposition"],
    )

    # Security headers middleware (helmet-like)
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains; preload"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cache-Control"] = "no-store"
        return response

    # Optional SlowAPI rate limiter
    if settings.ENABLE_RATE_LIMITER:
        req = settings.RATE_LIMIT_REQUESTS
        win = settings.RATE_LIMIT_WINDOW_SECONDS
        units = {1: "second", 60: "minute", 3600: "hour", 86400: "day"}
        default_limit = f"{req}/{units[win]}" if win in units else f"{req} per {win} seconds"

        limiter = Limiter(
            key_func=get_remote_address,
            default_limits=[default_limit],
            storage_uri=settings.RATE_LIMIT_STORAGE_URI or "memory://",
        )
        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
        app.add_middleware(SlowAPIMiddleware)

    register_exception_handlers(app)

    # Routers
    app.include_router(auth_router)
    app.include_router(third_parties_router)
    app.include_router(articles_router)
    app.include_router(warehouses_router)
    app.include_router(orders_router)
    app.include_router(payments_router)
    app.include_router(warehouse_entries_router)
    app.include_router(invoices_router)
    app.include_router(receivables_router)
    app.include_router(dashboard_router)

    @app.on_event("startup")
    async def on_startup():
        # Local/dev convenience; deployed databases are managed by Alembic
        if settings.DB_CREATE_ALL:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        async with SessionLocal() as db:
            await AuthService.ensure_bootstrap_admin(db)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
