# app/api/router.py
from fastapi import APIRouter
from app.api.endpoints import products, health

api_router = APIRouter()

api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(health.router, tags=["Health"])
