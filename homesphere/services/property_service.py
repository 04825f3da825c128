"""
Property Service - public listings, search and agent-owned property management
"""
import logging
from typing import Dict, Mapping, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.database.connection import commit_session
from homesphere.models.enums import PropertyStatus
from homesphere.models.favorite import Favorite
from homesphere.models.property import Property
from homesphere.models.user import User
from homesphere.query.collections import PROPERTIES, property_load_options
from homesphere.query.executor import fetch_page
from homesphere.query.filters import build_property_filters
from homesphere.query.pagination import PageResult, parse_page_request
from homesphere.query.predicate import Condition, Op, Predicate
from homesphere.query.projection import project_property
from homesphere.utils.dependencies import AgentUser, is_admin
from homesphere.utils.errors import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Statuses that count against an agent's listing limit
OPEN_STATUSES = (PropertyStatus.PENDING, PropertyStatus.ACTIVE)


def _sort_param(params: Mapping[str, Optional[str]]) -> Optional[str]:
    return params.get("sort") or params.get("sortBy")


async def list_properties(
    session: AsyncSession,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    """
    Public listing and search over properties.

    Only admins may filter by status; everyone else sees ACTIVE listings.
    """
    predicate = build_property_filters(params, allow_status=is_admin(viewer))
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=10)
    result = await fetch_page(
        session,
        PROPERTIES,
        predicate,
        page_request,
        sort=_sort_param(params),
        options=property_load_options(),
    )
    result.items = [project_property(p) for p in result.items]
    return result


async def get_property_row(session: AsyncSession, property_id: str) -> Optional[Property]:
    result = await session.execute(
        select(Property)
        .options(*property_load_options())
        .where(Property.id == property_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def viewer_agent_id(viewer: Optional[User]) -> Optional[str]:
    """Read before running other queries; reloading the user resets its agent relationship"""
    if viewer is None or viewer.agent is None:
        return None
    return viewer.agent.id


async def get_property(session: AsyncSession, property_id: str, viewer: Optional[User] = None) -> Dict:
    privileged = is_admin(viewer)
    own_agent_id = viewer_agent_id(viewer)
    prop = await get_property_row(session, property_id)
    # Unpublished listings are indistinguishable from missing ones
    visible = prop is not None and (
        prop.status == PropertyStatus.ACTIVE or privileged or prop.agent_id == own_agent_id
    )
    if not visible:
        raise NotFoundError("Property not found")
    return project_property(prop)


async def create_property(session: AsyncSession, agent_user: AgentUser, data: Dict) -> Dict:
    agent = agent_user.require_profile()

    open_listings = await session.execute(
        select(func.count())
        .select_from(Property)
        .where(Property.agent_id == agent.id, Property.status.in_(OPEN_STATUSES))
    )
    if open_listings.scalar_one() >= agent.listing_limits:
        raise AuthorizationError(f"Listing limit of {agent.listing_limits} reached for your plan")

    prop = Property(
        agent_id=agent.id,
        title=data["title"].strip(),
        description=data["description"].strip(),
        price=data["price"],
        currency=(data.get("currency") or "NGN").upper(),
        address=data["address"].strip(),
        city=data["city"].strip(),
        state=data["state"].strip(),
        zip_code=data.get("zip_code"),
        bedrooms=data["bedrooms"],
        bathrooms=data["bathrooms"],
        square_footage=data.get("square_footage"),
        property_type=data["property_type"],
        status=PropertyStatus.PENDING,
        images=data.get("images") or [],
        features=data.get("features") or [],
    )
    session.add(prop)
    await commit_session(session)
    logger.info(f"Agent {agent.id} created property {prop.id}")

    return project_property(await get_property_row(session, prop.id))


async def _owned_property(session: AsyncSession, agent_user: AgentUser, property_id: str) -> Property:
    agent = agent_user.require_profile()
    prop = await get_property_row(session, property_id)
    if not prop:
        raise NotFoundError("Property not found")
    if prop.agent_id != agent.id:
        raise AuthorizationError("Not authorized to modify this property")
    return prop


async def update_property(session: AsyncSession, agent_user: AgentUser, property_id: str, data: Dict) -> Dict:
    prop = await _owned_property(session, agent_user, property_id)

    new_status = data.pop("status", None)
    if new_status is not None:
        if prop.status != PropertyStatus.ACTIVE:
            raise ValidationError("Only active listings can be marked as sold or rented")
        prop.status = PropertyStatus(new_status)

    if "currency" in data and data["currency"]:
        data["currency"] = data["currency"].upper()

    for key, value in data.items():
        # Required columns cannot be cleared through a partial update
        if value is None and key not in ("zip_code", "square_footage"):
            continue
        setattr(prop, key, value)

    await commit_session(session)
    return project_property(await get_property_row(session, prop.id))


async def delete_property(session: AsyncSession, agent_user: AgentUser, property_id: str) -> None:
    prop = await _owned_property(session, agent_user, property_id)
    await session.execute(delete(Favorite).where(Favorite.property_id == prop.id))
    await session.delete(prop)
    await commit_session(session)
    logger.info(f"Deleted property {property_id}")


def agent_property_predicate(agent_id: str) -> Predicate:
    return Predicate().where(Condition("agent_id", Op.EQ, agent_id))
