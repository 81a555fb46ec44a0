import logging

uvicorn_logger = logging.getLogger("uvicorn")

app_logger = logging.getLogger("medstore")
app_logger.setLevel(logging.DEBUG)
app_logger.handlers = uvicorn_logger.handlers
app_logger.propagate = False

from fastapi import FastAPI, HTTPException, status, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from medstore.core.config import settings
from medstore.core.exceptions import StoreError, StoreUnavailable
from medstore.api.v1.auth import router as auth_router
from medstore.api.v1.analytics import router as analytics_router
from medstore.api.v1.orders import router as orders_router
from medstore.api.v1.customers import router as customers_router
from medstore.api.v1.products import router as products_router

logger = logging.getLogger(__name__)
logger.info("Application startup - logging configured")


app = FastAPI(
    title=f"{settings.SHOP_NAME} Admin",
    description="Back office API: sales analytics, orders, customers and catalog management",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.include_router(auth_router)
app.include_router(analytics_router)
app.include_router(orders_router)
app.include_router(customers_router)
app.include_router(products_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, StoreUnavailable):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    # clients get a generic failure; the cause stays in the logs
    return JSONResponse(
        status_code=status_code,
        content={"detail": "Internal server error"},
    )
