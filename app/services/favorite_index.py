"""
Storage keys and the shared reader for the favorite index.

The favorite index is a JSON array of slugs kept under a single key. It is a
denormalized view of the ``isFavorite`` flag of each link record and is
maintained by explicit dual writes, so it may drift from the records.
"""

import logging
from typing import List

from app.core.kv_store import KVStore

FAVORITE_LINKS_KEY = "system:favorite_slugs"
LINK_KEY_PREFIX = "link:"

logger = logging.getLogger(__name__)


def link_key(slug: str) -> str:
    return f"{LINK_KEY_PREFIX}{slug}"


async def read_favorite_slugs(store: KVStore) -> List[str]:
    """
    Load the favorite index as an ordered, deduplicated list of slugs.

    A missing index yields an empty list. A stored value that is not a JSON
    array is logged and treated as empty; non-string members are dropped.
    Store failures propagate to the caller.
    """
    raw = await store.get(FAVORITE_LINKS_KEY)
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning(
            f"Value for {FAVORITE_LINKS_KEY} is not an array, treating as empty: {raw!r}"
        )
        return []
    return list(dict.fromkeys(slug for slug in raw if isinstance(slug, str)))


async def write_favorite_slugs(store: KVStore, slugs: List[str]) -> None:
    await store.put(FAVORITE_LINKS_KEY, list(dict.fromkeys(slugs)))
