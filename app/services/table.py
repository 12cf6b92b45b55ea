# app/services/table.py
"""Search, sort, pagination and CSV export for the product table UI."""
import logging
import math
import re
import unicodedata
from typing import Any, Dict, List, Optional

from app.models.pagination import ProductPage

logger = logging.getLogger(__name__)

SORT_FIELDS = ('title', 'price')
CSV_HEADER = ['id', 'title', 'price', 'category', 'image']
_CSV_SPECIAL = re.compile(r'[",\n\r]')


def safe_text(value: Any) -> str:
    return '' if value is None else str(value)


def first_image(product: Dict[str, Any]) -> str:
    images = product.get('images')
    if isinstance(images, list) and images and isinstance(images[0], str):
        return images[0]
    return ''


def category_name(product: Dict[str, Any]) -> str:
    category = product.get('category')
    if isinstance(category, dict):
        return safe_text(category.get('name'))
    return ''


def _price(product: Dict[str, Any]) -> float:
    try:
        value = float(product.get('price') or 0)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def title_key(value: Any) -> tuple:
    """Ключ сортировки названий: без диакритики и регистра, 'Écharpe' рядом с 'echarpe'."""
    folded = safe_text(value).casefold()
    base = ''.join(c for c in unicodedata.normalize('NFKD', folded) if not unicodedata.combining(c))
    return (base, folded)


def filter_products(products: List[Dict[str, Any]], query: Optional[str]) -> List[Dict[str, Any]]:
    """Оставляет товары, в названии которых есть подстрока (без учёта регистра)."""
    q = (query or '').strip().lower()
    if not q:
        return list(products)
    return [p for p in products if q in safe_text(p.get('title')).lower()]


def sort_products(
    products: List[Dict[str, Any]],
    field: Optional[str],
    direction: str = 'asc',
) -> List[Dict[str, Any]]:
    """
    Сортирует по 'title' или 'price'. Неизвестное поле сохраняет исходный порядок.
    Сортировка стабильная в обоих направлениях.
    """
    if field not in SORT_FIELDS:
        return list(products)
    reverse = direction == 'desc'
    if field == 'price':
        return sorted(products, key=_price, reverse=reverse)
    return sorted(products, key=lambda p: title_key(p.get('title')), reverse=reverse)


def paginate(products: List[Dict[str, Any]], page: int, page_size: int) -> ProductPage:
    page_size = max(1, page_size)
    pages = max(1, math.ceil(len(products) / page_size))
    page = min(max(page, 1), pages)
    start = (page - 1) * page_size
    return ProductPage(
        count=len(products),
        page=page,
        pages=pages,
        page_size=page_size,
        results=products[start:start + page_size],
    )


def build_page(
    products: Any,
    query: Optional[str] = None,
    sort: Optional[str] = None,
    direction: str = 'asc',
    page: int = 1,
    page_size: int = 10,
) -> ProductPage:
    """Поиск -> сортировка -> пагинация, как в таблице UI."""
    if not isinstance(products, list):
        logger.warning(f"Expected a list of products, got {type(products)}. Rendering an empty table.")
        products = []
    rows = [p for p in products if isinstance(p, dict)]
    rows = filter_products(rows, query)
    rows = sort_products(rows, sort, direction)
    return paginate(rows, page, page_size)


def csv_escape(value: Any) -> str:
    """Поле с кавычкой, запятой, CR или LF берётся в кавычки, кавычки удваиваются."""
    text = safe_text(value)
    if _CSV_SPECIAL.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(products: List[Dict[str, Any]]) -> str:
    """CSV: id,title,price,category,image, строки разделены '\\n'."""
    lines = [','.join(CSV_HEADER)]
    for p in products:
        lines.append(','.join(csv_escape(v) for v in (
            p.get('id'),
            p.get('title'),
            p.get('price'),
            category_name(p),
            first_image(p),
        )))
    return '\n'.join(lines) + '\n'
