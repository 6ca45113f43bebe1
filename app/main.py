from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import order_routes as order_router
from app.api.order_routes import get_order_service
from app.core.config import settings
from app.core.database import engine, init_db
from app.core.exceptions import AppException
from app.core.log import setup_logging, access_log_middleware
from app.services.order_services import OrderService

# --- Logging ---
setup_logging()
logger = logging.getLogger(__name__)

# --- Prometheus ---
REQUEST_COUNT = Counter(
    "http_requests_total", "Total de requisições HTTP", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latência das requisições HTTP", ["method", "path"]
)

INTERNAL_ERROR_MSG = "Erro interno do servidor"

ENDPOINTS = {
    "create": "POST /order",
    "read": "GET /order/:orderId",
    "list": "GET /order/list",
    "update": "PUT /order/:orderId",
    "delete": "DELETE /order/:orderId",
}

AVAILABLE_ENDPOINTS = [
    "POST   /order",
    "GET    /order/:orderId",
    "GET    /order/list",
    "PUT    /order/:orderId",
    "DELETE /order/:orderId",
    "GET    /health",
]


def _log_banner() -> None:
    logger.info("=" * 60)
    logger.info("%s v%s", settings.APP_TITLE, settings.APP_VERSION)
    logger.info("Banco de dados: %s (%s)", settings.database_kind, engine.url.render_as_string(hide_password=True))
    for endpoint in AVAILABLE_ENDPOINTS:
        logger.info("  %s", endpoint)
    logger.info("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("database connection OK")
        init_db()
    except Exception:
        logger.exception("database connectivity check failed")

    _log_banner()

    yield  # Application runs here

    # --- Shutdown ---
    engine.dispose()
    logger.info("database engine disposed")


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    root_path=os.getenv("ROOT_PATH", ""),
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
    openapi_url="/openapi.json" if settings.is_dev else None,
)

# --- Middlewares ---
app.middleware("http")(access_log_middleware)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.time()
    response: Response = await call_next(request)
    duration = time.time() - start

    # Chemin templaté (/order/{order_id}) pour limiter la cardinalité
    route = request.scope.get("route")
    path = getattr(route, "path", None) or "unmatched"

    REQUEST_COUNT.labels(request.method, path, str(response.status_code)).inc()
    REQUEST_LATENCY.labels(request.method, path).observe(duration)
    return response


# --- CORS ---
allow_methods = (
    ["*"]
    if settings.CORS_ALLOW_METHODS == "*"
    else [m.strip() for m in settings.CORS_ALLOW_METHODS.split(",") if m.strip()]
)
allow_headers = (
    ["*"]
    if settings.CORS_ALLOW_HEADERS == "*"
    else [h.strip() for h in settings.CORS_ALLOW_HEADERS.split(",") if h.strip()]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=allow_methods,
    allow_headers=allow_headers,
)


# --- Exception handlers ---
def _error_response(status_code: int, error: str, **extra) -> JSONResponse:
    body = {"success": False, "error": error}
    body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=body)


def _validation_details(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]


def _internal_error(detail: str) -> JSONResponse:
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR_MSG,
        details=detail if settings.is_dev else None,
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(
            "Erro ao processar requisição: %s", exc.message,
            exc_info=exc, extra={"path": request.url.path},
        )
        return _internal_error(exc.message)

    logger.warning("%s", exc.message, extra={"path": request.url.path, "status": exc.status_code})
    return _error_response(exc.status_code, exc.message, **exc.extra)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("corpo da requisição inválido", extra={"path": request.url.path})
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "O corpo da requisição deve ser um objeto JSON",
        details=_validation_details(exc),
    )


@app.exception_handler(StarletteHTTPException)
async def fallback_handler(request: Request, exc: StarletteHTTPException):
    # 404 et 405 : aucune route ne correspond à (méthode, chemin)
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error_response(
            status.HTTP_404_NOT_FOUND,
            "Endpoint não encontrado",
            availableEndpoints=AVAILABLE_ENDPOINTS,
        )
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Erro inesperado", extra={"path": request.url.path})
    return _internal_error(str(exc))


# --- Tech endpoints ---
@app.get("/metrics", include_in_schema=False)
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health", tags=["health"])
def health(svc: OrderService = Depends(get_order_service)):
    return {
        "success": True,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "service": settings.APP_TITLE,
        "database": settings.database_kind,
        "totalPedidos": svc.count_orders(),
        "endpoints": ENDPOINTS,
    }


# --- Routes ---
app.include_router(order_router.router)


def run() -> None:
    """Point d'entrée console (`pedidos-api`)."""
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
