"""
Dependency providers for FastAPI routes.
"""

from fastapi import Depends, Request
import logging

from app.core.exceptions import StoreNotConfiguredError
from app.core.kv_store import KVStore
from app.services.favorite_service import FavoriteService


logger = logging.getLogger(__name__)


def get_kv_store(request: Request) -> KVStore:
    """
    Return the key-value store bound at startup.

    Raises:
        StoreNotConfiguredError: when no store is bound to the application
    """
    store = getattr(request.app.state, "kv_store", None)
    if store is None:
        logger.error("Key-value store binding not found on application state")
        raise StoreNotConfiguredError()
    return store


def get_favorite_service(store: KVStore = Depends(get_kv_store)) -> FavoriteService:
    return FavoriteService(store)
