# Business logic services

from .favorite_index import (
    FAVORITE_LINKS_KEY,
    link_key,
    read_favorite_slugs,
    write_favorite_slugs,
)
from .favorite_service import FavoriteService

__all__ = [
    "FAVORITE_LINKS_KEY",
    "link_key",
    "read_favorite_slugs",
    "write_favorite_slugs",
    "FavoriteService",
]
