# app/api/endpoints/products.py
import logging
import math
from fastapi import APIRouter, Depends, Query, HTTPException, status, Response
from typing import Optional

from app.core.config import settings
from app.services.products import ProductService, ProductServiceError
from app.services.table import build_page, to_csv
from app.dependencies import get_product_service
from app.models.pagination import ProductPage
from app.models.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

# --- Разбор параметров запроса ---

def parse_int(value: Optional[str], default: int) -> int:
    """Нечисловое или пустое значение заменяется значением по умолчанию (без 422)."""
    if value is None or not value.strip():
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    if not math.isfinite(number):
        return default
    return int(number)

def parse_refresh(value: Optional[str]) -> bool:
    return value in ('1', 'true')

def _http_error(e: ProductServiceError, message: str, pass_client_errors: bool = True) -> HTTPException:
    """4xx от внешнего API сохраняют код, всё остальное превращается в 500."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if pass_client_errors and e.status_code and 400 <= e.status_code < 500:
        status_code = e.status_code
    return HTTPException(status_code=status_code, detail=message)

async def _load_products(
    product_service: ProductService,
    offset: Optional[str],
    limit: Optional[str],
    refresh: Optional[str],
):
    try:
        return await product_service.list_products(
            offset=parse_int(offset, settings.DEFAULT_OFFSET),
            limit=parse_int(limit, settings.DEFAULT_LIMIT),
            refresh=parse_refresh(refresh),
        )
    except ProductServiceError as e:
        logger.error(f"Products service error fetching products: {e}", exc_info=True)
        raise _http_error(e, "Failed to fetch products", pass_client_errors=False) from e

# --- Чтение ---

@router.get(
    "",
    summary="List products",
    description="Returns a page of products from the upstream API, cached by offset/limit.",
)
async def list_products(
    offset: Optional[str] = Query(None, description="Upstream offset"),
    limit: Optional[str] = Query(None, description="Upstream page size"),
    refresh: Optional[str] = Query(None, description="'1' or 'true' bypasses the cache"),
    product_service: ProductService = Depends(get_product_service),
):
    return await _load_products(product_service, offset, limit, refresh)


@router.get(
    "/table",
    response_model=ProductPage,
    summary="Products table page",
    description="Searches, sorts and paginates the cached product list for the table UI.",
)
async def products_table(
    offset: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    refresh: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Case-insensitive title search"),
    sort: Optional[str] = Query(None, description="Sort field: title or price"),
    direction: str = Query('asc', alias="dir", pattern="^(asc|desc)$", description="Sort direction"),
    page: int = Query(1, description="Page number, clamped to the available range"),
    page_size: int = Query(10, ge=1, le=500, description="Rows per page"),
    product_service: ProductService = Depends(get_product_service),
):
    products = await _load_products(product_service, offset, limit, refresh)
    return build_page(products, query=q, sort=sort, direction=direction, page=page, page_size=page_size)


@router.get(
    "/export.csv",
    summary="Export table page as CSV",
    response_class=Response,
)
async def export_products_csv(
    offset: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    refresh: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query('asc', alias="dir", pattern="^(asc|desc)$"),
    page: int = Query(1),
    page_size: int = Query(10, ge=1, le=500),
    product_service: ProductService = Depends(get_product_service),
):
    products = await _load_products(product_service, offset, limit, refresh)
    table_page = build_page(products, query=q, sort=sort, direction=direction, page=page, page_size=page_size)
    return Response(
        content=to_csv(table_page.results),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="products.csv"'},
    )


@router.get(
    "/{product_id}",
    summary="Get product by ID",
)
async def get_product_details(
    product_id: int,
    product_service: ProductService = Depends(get_product_service),
):
    try:
        product = await product_service.get_product(product_id)
    except ProductServiceError as e:
        logger.warning(f"Products service error fetching product {product_id}: {e}")
        raise _http_error(e, "Failed to fetch product") from e
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product

# --- Запись ---

@router.post(
    "",
    summary="Create product",
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    payload: ProductCreate,
    product_service: ProductService = Depends(get_product_service),
):
    try:
        return await product_service.create_product(payload)
    except ProductServiceError as e:
        logger.error(f"Products service error creating product: {e}", exc_info=True)
        raise _http_error(e, "Failed to create product") from e


@router.put(
    "/{product_id}",
    summary="Update product",
)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    product_service: ProductService = Depends(get_product_service),
):
    try:
        return await product_service.update_product(product_id, payload)
    except ProductServiceError as e:
        logger.error(f"Products service error updating product {product_id}: {e}", exc_info=True)
        raise _http_error(e, "Failed to update product") from e


@router.delete(
    "/{product_id}",
    summary="Delete product",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_product(
    product_id: int,
    product_service: ProductService = Depends(get_product_service),
):
    try:
        await product_service.delete_product(product_id)
    except ProductServiceError as e:
        logger.error(f"Products service error deleting product {product_id}: {e}", exc_info=True)
        raise _http_error(e, "Failed to delete product") from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
