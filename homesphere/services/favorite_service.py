"""
Favorite Service - a user's saved properties
"""
import logging
from typing import Dict, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.database.connection import commit_session
from homesphere.models.enums import PropertyStatus, UserRole
from homesphere.models.favorite import Favorite
from homesphere.models.property import Property
from homesphere.models.user import User
from homesphere.query.collections import FAVORITES, favorite_load_options
from homesphere.query.executor import fetch_all, fetch_page
from homesphere.query.pagination import PageResult, parse_page_request
from homesphere.query.predicate import Condition, Op, Predicate
from homesphere.query.projection import project_favorite, project_property
from homesphere.utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 12


async def list_favorites(session: AsyncSession, user: User, params: Mapping[str, Optional[str]]) -> PageResult:
    predicate = Predicate().where(Condition("user_id", Op.EQ, user.id))
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=20)
    result = await fetch_page(
        session, FAVORITES, predicate, page_request, sort=params.get("sort"), options=favorite_load_options()
    )
    result.items = [project_favorite(f) for f in result.items]
    return result


async def _find(session: AsyncSession, user_id: str, property_id: str) -> Optional[Favorite]:
    result = await session.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.property_id == property_id)
    )
    return result.scalar_one_or_none()


async def add_favorite(session: AsyncSession, user: User, property_id: str) -> Dict:
    result = await session.execute(select(Property.status).where(Property.id == property_id))
    status = result.scalar_one_or_none()
    if status is None or status != PropertyStatus.ACTIVE:
        raise NotFoundError("Property not found")

    if await _find(session, user.id, property_id):
        raise ConflictError("Property already in favorites")

    favorite = Favorite(user_id=user.id, property_id=property_id)
    session.add(favorite)
    # The unique constraint catches a concurrent duplicate insert
    await commit_session(session, "Property already in favorites")

    reloaded = await session.execute(
        select(Favorite)
        .options(*favorite_load_options())
        .where(Favorite.id == favorite.id)
        .execution_options(populate_existing=True)
    )
    return project_favorite(reloaded.scalar_one())


async def remove_favorite(session: AsyncSession, user: User, property_id: str) -> None:
    favorite = await _find(session, user.id, property_id)
    if not favorite:
        raise NotFoundError("Favorite not found")
    await session.delete(favorite)
    await commit_session(session)


async def check_favorite(session: AsyncSession, user: User, property_id: str) -> Dict:
    favorite = await _find(session, user.id, property_id)
    return {"is_favorited": favorite is not None, "favorite_id": favorite.id if favorite else None}


async def list_featured_properties(session: AsyncSession) -> list:
    """
    Public "featured" list: active properties favorited by the first admin
    account.
    """
    admin = await session.execute(
        select(User.id).where(User.role == UserRole.ADMIN).order_by(User.created_at.asc(), User.id.asc()).limit(1)
    )
    admin_id = admin.scalar_one_or_none()
    if admin_id is None:
        logger.warning("No admin account found for featured properties")
        return []

    predicate = Predicate().where(
        Condition("user_id", Op.EQ, admin_id),
        Condition("property_status", Op.EQ, PropertyStatus.ACTIVE),
    )
    favorites = await fetch_all(
        session, FAVORITES, predicate, options=favorite_load_options(), limit=FEATURED_LIMIT
    )
    return [project_property(f.property) for f in favorites]
