# app/api/endpoints/health.py
from fastapi import APIRouter, Depends

from app.core.config import settings
from app.services.products import ProductService
from app.dependencies import get_product_service

router = APIRouter()

@router.get("/health", summary="Health check")
async def health(product_service: ProductService = Depends(get_product_service)):
    """Статус сервиса и статистика кэша списка товаров."""
    return {
        "status": "ok",
        "project": settings.PROJECT_NAME,
        "upstream": product_service.base_url,
        "cache": product_service.cache.stats(),
    }
