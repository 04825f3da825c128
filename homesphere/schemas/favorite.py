from pydantic import Field
from typing import List, Optional
from homesphere.schemas.common import CamelModel, PageMeta
from homesphere.schemas.property import PropertyResponse


class FavoriteCreateRequest(CamelModel):
    property_id: str = Field(..., min_length=1)


class FavoriteResponse(CamelModel):
    id: str
    property_id: str
    created_at: Optional[str] = None
    property: Optional[PropertyResponse] = None


class FavoriteListResponse(PageMeta):
    favorites: List[FavoriteResponse]


class FavoriteEnvelope(CamelModel):
    message: str
    favorite: FavoriteResponse


class FavoriteCheckResponse(CamelModel):
    is_favorited: bool
    favorite_id: Optional[str] = None


class FeaturedPropertiesResponse(CamelModel):
    properties: List[PropertyResponse]
    total: int
