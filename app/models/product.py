# app/models/product.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union

# Схема принадлежит внешнему API (id, title, price, description, category, images).
# Модели проверяют только поля, которые шлёт UI. Наружу уходят лишь ключи,
# присланные клиентом (exclude_unset), неизвестные ключи пропускаются как есть.

class ProductCreate(BaseModel):
    """Тело запроса на создание товара."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    title: str
    price: Union[int, float]
    description: Optional[str] = None
    category_id: Optional[int] = Field(None, alias="categoryId")
    images: Optional[List[str]] = None

class ProductUpdate(BaseModel):
    """Тело запроса на обновление товара. Все поля опциональны."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    title: Optional[str] = None
    price: Optional[Union[int, float]] = None
    description: Optional[str] = None
    category_id: Optional[int] = Field(None, alias="categoryId")
    images: Optional[List[str]] = None
