# app/main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.encoders import jsonable_encoder

from app.api.router import api_router
from app.core.config import settings
from app.core.cache import ProductCache
from app.services.products import ProductService

# --- Настройка логирования ---
log_level = settings.LOGGING_LEVEL.upper()
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.info(f"Starting application with log level: {log_level}")

STATIC_DIR = Path(__file__).resolve().parent / "static"


# --- Lifespan для управления ресурсами ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup: Initializing resources...")
    cache = ProductCache(ttl=settings.PRODUCTS_CACHE_TTL)
    product_service = ProductService(cache=cache)
    app.state.product_service = product_service
    logger.info(f"ProductService initialized with cache TTL {settings.PRODUCTS_CACHE_TTL}s.")

    try:
        yield
    finally:
        logger.info("Application shutdown: Cleaning up resources...")
        await product_service.close_client()
        logger.info("Resources cleaned up successfully.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Caching proxy for a third-party products REST API with a table UI.",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

# --- Настройка CORS ---
origins = settings.CORS_ORIGINS
logger.info(f"Allowed CORS origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# --- Обработчики ошибок ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Request validation error: {exc.errors()} for {request.method} {request.url}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc} for {request.method} {request.url}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error."},
    )

# --- Подключение роутеров ---
app.include_router(api_router, prefix=settings.API_PREFIX)
logger.info(f"Included API router at prefix: {settings.API_PREFIX}")

# Статика UI монтируется последней, чтобы не перекрывать /api
app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
