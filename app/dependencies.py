# app/dependencies.py
import logging
from fastapi import Request, HTTPException, status
from app.services.products import ProductService

logger = logging.getLogger(__name__)

async def get_product_service(request: Request) -> ProductService:
    service = getattr(request.app.state, 'product_service', None)
    if not service or not isinstance(service, ProductService):
        logger.error("ProductService is not initialized on app.state.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Products service is unavailable."
        )
    return service
