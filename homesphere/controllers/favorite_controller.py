"""
Favorite Controller - saved properties and the public featured list
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.user import User
from homesphere.schemas.common import MessageResponse
from homesphere.schemas.favorite import (
    FavoriteCheckResponse,
    FavoriteCreateRequest,
    FavoriteEnvelope,
    FavoriteListResponse,
    FeaturedPropertiesResponse,
)
from homesphere.services import favorite_service
from homesphere.utils.dependencies import get_current_user

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("/admin", response_model=FeaturedPropertiesResponse)
async def list_featured(session: AsyncSession = Depends(get_db)):
    """Featured listings curated through the admin account's favorites"""
    properties = await favorite_service.list_featured_properties(session)
    return FeaturedPropertiesResponse(properties=properties, total=len(properties))


@router.get("/check/{property_id}", response_model=FavoriteCheckResponse)
async def check_favorite(
    property_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    return FavoriteCheckResponse(**await favorite_service.check_favorite(session, user, property_id))


@router.get("", response_model=FavoriteListResponse)
async def list_favorites(
    request: Request,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    result = await favorite_service.list_favorites(session, user, request.query_params)
    return FavoriteListResponse(**result.to_dict("favorites"))


@router.post("", response_model=FavoriteEnvelope, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    request: FavoriteCreateRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    favorite = await favorite_service.add_favorite(session, user, request.property_id)
    return FavoriteEnvelope(message="Property added to favorites", favorite=favorite)


@router.delete("/{property_id}", response_model=MessageResponse)
async def remove_favorite(
    property_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    await favorite_service.remove_favorite(session, user, property_id)
    return MessageResponse(message="Property removed from favorites")
