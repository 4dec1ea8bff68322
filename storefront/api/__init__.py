# storefront/api/__init__.py
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.routers import assistant, carts, health, orders, products, users
from storefront.data.database import init_db
from storefront.utils.logging import get_logger
from storefront.utils.settings import API_PREFIX, CORS_ORIGINS, ENVIRONMENT

logger = get_logger(__name__)


def _envelope(status_code: int, message: str, details=None) -> JSONResponse:
    body = {"error": HTTPStatus(status_code).phrase, "message": message}
    # internals only leak in development
    if details is not None and ENVIRONMENT == "development":
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, str):
        return _envelope(exc.status_code, exc.detail)
    message = "Invalid request" if exc.status_code == 400 else HTTPStatus(exc.status_code).phrase
    return _envelope(exc.status_code, message, exc.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return _envelope(400, "Invalid request", details)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return _envelope(500, "Internal server error", str(exc))


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="BigShop API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(products.router, prefix=API_PREFIX)
    app.include_router(carts.router, prefix=API_PREFIX)
    app.include_router(assistant.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(orders.router, prefix=API_PREFIX)

    return app
