"""
Link favorite API endpoints

- POST /api/link/favorite: set the favorite state of one link
- GET /api/link/favorites: list all favorite links
- POST /api/link/favorites/reconcile: prune stale slugs from the favorite index
"""
from fastapi import APIRouter, Depends

from app.core.dependencies import get_favorite_service
from app.schemas.favorite import (
    FavoriteListResponse,
    FavoriteReconcileResponse,
    FavoriteToggleRequest,
    FavoriteToggleResponse,
)
from app.services.favorite_service import FavoriteService

router = APIRouter(prefix="/api/link", tags=["favorites"])


@router.post("/favorite", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    body: FavoriteToggleRequest,
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Favorite or unfavorite a link

    - **slug**: Slug of the link
    - **isFavorite**: true to favorite, false to unfavorite
    """
    link, message = await service.toggle_favorite(body.slug, body.is_favorite)
    return FavoriteToggleResponse(message=message, link=link)


@router.get("/favorites", response_model=FavoriteListResponse)
async def list_favorites(
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    List every favorite link in a single page
    """
    links = await service.list_favorites()
    return FavoriteListResponse(links=links)


@router.post("/favorites/reconcile", response_model=FavoriteReconcileResponse)
async def reconcile_favorites(
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Remove index entries whose link is missing or no longer marked favorite.
    Link records are not modified.
    """
    kept, removed = await service.reconcile()
    return FavoriteReconcileResponse(kept=kept, removed=removed)
