"""API routes."""
from fastapi import APIRouter

from locallibrary.api.catalog import router as catalog_router

api_router = APIRouter()
api_router.include_router(catalog_router)

__all__ = ["api_router"]
