# app/services/products.py
import httpx
import json
import logging
from typing import Dict, Optional, Any, Union
from pydantic import BaseModel
from app.core.config import settings
from app.core.cache import ProductCache

logger = logging.getLogger(__name__)

class ProductServiceError(Exception):
    """Ошибка при обращении к внешнему API товаров."""
    def __init__(self, message="Error communicating with the products API", status_code=None, details=None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ProductService:
    """
    Асинхронный прокси к внешнему REST API товаров.
    Списки кэшируются по (offset, limit), любая успешная запись очищает кэш.
    """
    def __init__(
        self,
        cache: Optional[ProductCache] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.PRODUCTS_API_URL).rstrip('/')
        self.cache = cache if cache is not None else ProductCache(ttl=settings.PRODUCTS_CACHE_TTL)
        timeouts = httpx.Timeout(settings.HTTP_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT)
        self._client = httpx.AsyncClient(timeout=timeouts, transport=transport)
        logger.info(f"ProductService initialized for URL: {self.base_url}")

    async def close_client(self):
        """Закрывает httpx клиент."""
        if hasattr(self, '_client') and self._client:
            await self._client.aclose()
            logger.info("Products HTTP client closed.")

    def _url(self, product_id: Optional[int] = None) -> str:
        if product_id is None:
            return self.base_url
        return f"{self.base_url}/{product_id}"

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict] = None,
        json_data: Optional[Union[Dict, BaseModel]] = None
    ) -> Optional[Any]:
        """
        Выполняет запрос к API и возвращает декодированное тело.
        Для 204 или пустого тела возвращает None. Ошибки -> ProductServiceError.
        """
        payload_dict: Optional[Dict] = None
        if json_data is not None:
            if isinstance(json_data, BaseModel):
                payload_dict = json_data.model_dump(exclude_unset=True, by_alias=True)
            else:
                payload_dict = json_data

        logger.debug(f"Requesting {method} {url} | Params: {params} | Payload: {payload_dict!r}")

        try:
            response = await self._client.request(method, url, params=params, json=payload_dict)
            response.raise_for_status()

            if response.status_code == 204 or not response.content:
                logger.debug(f"Received {response.status_code} with empty body for {method} {url}")
                return None

            content_type = response.headers.get("Content-Type", "")
            if "application/json" not in content_type:
                logger.warning(f"Unexpected Content-Type '{content_type}' for {method} {url}. Response text: {response.text[:500]}...")
                return response.text
            try:
                data = response.json()
            except json.JSONDecodeError as json_err:
                logger.error(f"Failed to decode JSON response for {method} {url}. Status: {response.status_code}. Error: {json_err}. Response text: {response.text[:500]}...")
                raise ProductServiceError("Invalid JSON in products API response", status_code=response.status_code, details=response.text) from json_err
            logger.debug(f"Received {response.status_code} JSON response for {method} {url}. Body sample: {str(data)[:200]}...")
            return data

        except httpx.HTTPStatusError as e:
            error_status_code = e.response.status_code
            error_message = f"HTTP error {error_status_code} from products API"
            error_details: Any = e.response.text
            try:
                api_error = e.response.json()
                if isinstance(api_error, dict):
                    upstream_message = api_error.get("message", error_message)
                    # API иногда отдаёт список сообщений валидации
                    if isinstance(upstream_message, list):
                        upstream_message = "; ".join(map(str, upstream_message))
                    error_message = str(upstream_message)
                error_details = api_error
            except ValueError:
                logger.debug(f"Error body from {e.request.url} is not JSON.")
            logger.error(f"Products API error: {error_status_code} - {error_message} for {e.request.url}")
            raise ProductServiceError(
                message=error_message,
                status_code=error_status_code,
                details=error_details
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {e} for {method} {url}")
            raise ProductServiceError("Products API request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Network error: {e} for {method} {url}")
            raise ProductServiceError("Network error while connecting to products API") from e

    # --- Чтение ---

    async def list_products(self, offset: int, limit: int, refresh: bool = False) -> Any:
        """
        Возвращает страницу товаров. Без refresh сначала смотрит в кэш.
        Список сортируется по id, чтобы повторные запросы давали тот же порядок.
        """
        if not refresh:
            cached = self.cache.get(offset, limit)
            if cached is not None:
                return cached

        logger.info(f"Fetching products from upstream: offset={offset} limit={limit} refresh={refresh}")
        data = await self._request("GET", self._url(), params={'offset': offset, 'limit': limit})

        if isinstance(data, list):
            data = sorted(data, key=_product_id)
        self.cache.set(offset, limit, data)
        return data

    async def get_product(self, product_id: int) -> Optional[Dict]:
        logger.info(f"Fetching product with ID: {product_id}")
        return await self._request("GET", self._url(product_id))

    # --- Запись (каждая успешная запись очищает кэш) ---

    async def create_product(self, payload: Union[Dict, BaseModel]) -> Any:
        logger.info("Creating product")
        data = await self._request("POST", self._url(), json_data=payload)
        self.cache.clear()
        return data

    async def update_product(self, product_id: int, payload: Union[Dict, BaseModel]) -> Any:
        logger.info(f"Updating product {product_id}")
        data = await self._request("PUT", self._url(product_id), json_data=payload)
        self.cache.clear()
        return data

    async def delete_product(self, product_id: int) -> None:
        logger.info(f"Deleting product {product_id}")
        await self._request("DELETE", self._url(product_id))
        self.cache.clear()


def _product_id(product: Any) -> float:
    """Ключ сортировки: id товара, отсутствующий id считается 0."""
    if isinstance(product, dict):
        value = product.get('id')
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
    return 0
