from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

# Link records carry attributes owned by other parts of the shortener;
# only ``isFavorite`` is read or written here.
LinkRecord = Dict[str, Any]


class FavoriteToggleRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    slug: str = Field(min_length=1)
    is_favorite: StrictBool = Field(alias="isFavorite")  # true favorites, false unfavorites


class FavoriteToggleResponse(BaseModel):
    success: bool = True
    message: str
    link: LinkRecord


class FavoriteListResponse(BaseModel):
    links: List[LinkRecord] = Field(default_factory=list)
    # No pagination: the whole index is returned in one response
    cursor: Optional[str] = None
    list_complete: bool = True


class FavoriteReconcileResponse(BaseModel):
    success: bool = True
    kept: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
