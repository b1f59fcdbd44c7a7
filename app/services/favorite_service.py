"""
Favorite Service - Toggles, lists and reconciles favorite links
"""
import asyncio
import json
import logging
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Tuple, TypeVar

from app.core.exceptions import (
    FavoriteListError,
    FavoriteUpdateError,
    KVStoreError,
    LinkNotFoundError,
)
from app.core.kv_store import KVStore
from app.schemas.favorite import LinkRecord
from app.services.favorite_index import (
    FAVORITE_LINKS_KEY,
    link_key,
    read_favorite_slugs,
    write_favorite_slugs,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def _gather_all(coros: Iterable[Awaitable[T]]) -> List[T]:
    """Await every coroutine, then raise the first failure in input order."""
    results = await asyncio.gather(*coros, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class FavoriteService:
    """
    Maintains the favorite index alongside each link record's ``isFavorite`` flag.

    The index and the record are written one after the other with no
    transaction between them. A failure after the index write leaves the two
    out of step until the next toggle or a call to ``reconcile``.
    """

    def __init__(self, store: KVStore):
        self.store = store

    async def toggle_favorite(self, slug: str, is_favorite: bool) -> Tuple[LinkRecord, str]:
        """
        Set the favorite state of a link.

        Args:
            slug: Link slug
            is_favorite: True to favorite, False to unfavorite

        Returns:
            Tuple of the updated link record and a confirmation message

        Raises:
            LinkNotFoundError: no record exists for the slug (the index has
                already been written at that point)
            FavoriteUpdateError: any store failure
        """
        try:
            slugs = await read_favorite_slugs(self.store)
            if is_favorite:
                if slug not in slugs:
                    slugs.append(slug)
            else:
                slugs = [s for s in slugs if s != slug]
            await write_favorite_slugs(self.store, slugs)

            record, metadata = await self.store.get_with_metadata(link_key(slug))
            if record is None:
                raise LinkNotFoundError(slug)
            if not isinstance(record, dict):
                raise FavoriteUpdateError(slug, f"Link record for '{slug}' is not a JSON object")

            updated = {**record, "isFavorite": is_favorite}
            await self.store.put(link_key(slug), updated, metadata=metadata)
        except KVStoreError as e:
            logger.error(f"Store error while toggling favorite for slug {slug}: {e}", extra={"slug": slug})
            raise FavoriteUpdateError(slug, str(e)) from e

        message = (
            f"Favorite state of link '{slug}' set to {json.dumps(is_favorite)}; "
            "favorite index updated."
        )
        logger.info(message, extra={"slug": slug})
        return updated, message

    async def list_favorites(self) -> List[LinkRecord]:
        """
        Hydrate every slug in the favorite index into its link record.

        Metadata fields are merged under the record fields and ``isFavorite``
        is forced to True. Slugs without a record are logged and skipped; the
        index itself is left untouched. A store failure on any single slug
        fails the whole listing.
        """
        try:
            slugs = await read_favorite_slugs(self.store)
        except KVStoreError as e:
            logger.error(f"Store error while reading {FAVORITE_LINKS_KEY}: {e}")
            raise FavoriteListError(str(e)) from e

        if not slugs:
            return []

        hydrated = await _gather_all(self._hydrate(slug) for slug in slugs)
        return [link for link in hydrated if link is not None]

    async def _hydrate(self, slug: str) -> Optional[LinkRecord]:
        try:
            record, metadata = await self.store.get_with_metadata(link_key(slug))
        except KVStoreError as e:
            logger.error(f"Store error while loading favorite slug {slug}: {e}", extra={"slug": slug})
            raise FavoriteListError(str(e), slug=slug) from e

        if not isinstance(record, dict):
            logger.warning(
                f"Favorite slug '{slug}' has no link record, skipping", extra={"slug": slug}
            )
            return None

        link: Dict[str, Any] = dict(metadata) if isinstance(metadata, dict) else {}
        link.update(record)
        link["isFavorite"] = True
        return link

    async def reconcile(self) -> Tuple[List[str], List[str]]:
        """
        Drop index entries whose link record is missing or not marked favorite.

        Link records are never modified. The index is rewritten only when at
        least one slug is removed.

        Returns:
            Tuple of (kept slugs, removed slugs)
        """
        try:
            slugs = await read_favorite_slugs(self.store)
            entries = await _gather_all(
                self.store.get_with_metadata(link_key(slug)) for slug in slugs
            )

            kept: List[str] = []
            removed: List[str] = []
            for slug, (record, _metadata) in zip(slugs, entries):
                if isinstance(record, dict) and record.get("isFavorite"):
                    kept.append(slug)
                else:
                    removed.append(slug)

            if removed:
                await write_favorite_slugs(self.store, kept)
                logger.warning(f"Removed {len(removed)} stale slugs from {FAVORITE_LINKS_KEY}: {removed}")
        except KVStoreError as e:
            logger.error(f"Store error while reconciling {FAVORITE_LINKS_KEY}: {e}")
            raise FavoriteUpdateError(e.key or FAVORITE_LINKS_KEY, str(e)) from e

        return kept, removed
