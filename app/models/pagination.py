# app/models/pagination.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List

class ProductPage(BaseModel):
    """
    Одна страница таблицы товаров после поиска и сортировки.
    """
    count: int = Field(..., description="Number of products matching the search.")
    page: int = Field(..., description="Current page, clamped to the available range.")
    pages: int = Field(..., description="Total number of pages (at least 1).")
    page_size: int = Field(..., description="Number of rows per page.")
    results: List[Dict[str, Any]] = Field(..., description="Products on the current page.")
