"""Shared FastAPI dependencies."""
from locallibrary.database import AsyncSessionLocal
from locallibrary.store import Store


def get_store() -> Store:
    """Dependency that provides the record store."""
    return Store(AsyncSessionLocal)
