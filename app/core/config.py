# app/core/config.py
import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Product Table Proxy"
    API_PREFIX: str = "/api"
    LOGGING_LEVEL: str = os.getenv("LOGGING_LEVEL", "INFO")

    # --- Upstream Products API ---
    PRODUCTS_API_URL: str = "https://api.escuelajs.co/api/v1/products"
    HTTP_TIMEOUT: float = 10.0
    HTTP_CONNECT_TIMEOUT: float = 5.0

    # --- Кэш списка товаров ---
    PRODUCTS_CACHE_TTL: float = 5 * 60  # секунды
    DEFAULT_OFFSET: int = 0
    DEFAULT_LIMIT: int = 50

    # --- Server Settings ---
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 3000
    CORS_ORIGINS_STR: str = "*"

    # --- Derived/Helper Settings ---
    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Преобразует строку origins в список."""
        return [origin.strip().rstrip('/') for origin in self.CORS_ORIGINS_STR.split(',') if origin.strip()]

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

settings = Settings()
if settings.PRODUCTS_CACHE_TTL <= 0:
    print("WARNING: PRODUCTS_CACHE_TTL is not positive. Cached product pages will expire immediately.")
