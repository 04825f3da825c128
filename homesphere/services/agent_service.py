"""
Agent Service - public directory, agent self-service and per-agent listings
"""
import logging
from typing import Dict, Mapping, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.database.connection import commit_session
from homesphere.models.agent import Agent
from homesphere.models.contact import Contact
from homesphere.models.enums import ContactStatus, InquiryType, PropertyStatus, VerificationStatus
from homesphere.models.user import User
from homesphere.query.collections import (
    AGENTS,
    PAYMENTS,
    PROPERTIES,
    REVIEWS,
    SUBSCRIPTIONS,
    agent_load_options,
    property_load_options,
    review_load_options,
)
from homesphere.query.executor import fetch_page
from homesphere.query.filters import (
    build_agent_filters,
    build_agent_property_filters,
    build_payment_filters,
    build_review_filters,
    clean,
)
from homesphere.query.pagination import PageResult, parse_page_request
from homesphere.query.predicate import AnyOf, Condition, Op
from homesphere.query.projection import (
    DEFAULT_AGENT_RATING,
    approved,
    average_rating,
    project_agent_card,
    project_agent_profile,
    project_contact,
    project_payment,
    project_property,
    project_review,
    project_subscription,
    property_totals,
    to_iso,
    to_number,
)
from homesphere.services.contact_service import get_contact_row
from homesphere.services.property_service import agent_property_predicate, viewer_agent_id
from homesphere.utils.dependencies import AgentUser, is_admin
from homesphere.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

USER_FIELDS = ("first_name", "last_name")


async def get_agent_row(session: AsyncSession, agent_id: str) -> Optional[Agent]:
    result = await session.execute(
        select(Agent)
        .options(*agent_load_options())
        .where(Agent.id == agent_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_agents(session: AsyncSession, params: Mapping[str, Optional[str]]) -> PageResult:
    """Public directory: approved agents only"""
    predicate = build_agent_filters(params).where(
        Condition("verification_status", Op.EQ, VerificationStatus.APPROVED)
    )
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=20)
    result = await fetch_page(
        session, AGENTS, predicate, page_request, sort=params.get("sort"), options=agent_load_options()
    )
    result.items = [project_agent_card(a) for a in result.items]
    return result


async def get_own_profile(session: AsyncSession, agent_user: AgentUser) -> Dict:
    agent = agent_user.require_profile()
    return project_agent_profile(await get_agent_row(session, agent.id))


async def update_own_profile(session: AsyncSession, agent_user: AgentUser, data: Dict) -> Dict:
    agent = await get_agent_row(session, agent_user.require_profile().id)

    for key in USER_FIELDS:
        value = data.pop(key, None)
        if value:
            setattr(agent.user, key, value.strip())

    if "phone" in data and data["phone"]:
        agent.user.phone = data["phone"]

    for key, value in data.items():
        if key == "specialties" and value is not None:
            value = [s.strip() for s in value if s and s.strip()]
        setattr(agent, key, value)

    await commit_session(session)
    logger.info(f"Agent {agent.id} updated profile fields: {sorted(data)}")
    return project_agent_profile(await get_agent_row(session, agent.id))


async def get_own_analytics(session: AsyncSession, agent_user: AgentUser) -> Dict:
    agent = await get_agent_row(session, agent_user.require_profile().id)
    properties = sorted(agent.properties, key=lambda p: to_iso(p.created_at) or "", reverse=True)

    analytics = property_totals(properties)
    analytics.update({
        "active_listings": sum(1 for p in properties if p.status == PropertyStatus.ACTIVE),
        "properties_sold": sum(1 for p in properties if p.status == PropertyStatus.SOLD),
        "pending_properties": sum(1 for p in properties if p.status == PropertyStatus.PENDING),
        "total_reviews": len(approved(agent.reviews)),
        "rating": average_rating(agent.reviews, DEFAULT_AGENT_RATING),
        "properties": [
            {
                "id": p.id,
                "title": p.title,
                "price": to_number(p.price),
                "status": p.status.value,
                "created_at": to_iso(p.created_at),
            }
            for p in properties
        ],
    })
    return analytics


async def get_agent_stats(session: AsyncSession, agent_id: str) -> Dict:
    agent = await get_agent_row(session, agent_id)
    if not agent:
        raise NotFoundError("Agent not found")
    return property_totals(agent.properties)


async def list_agent_properties(
    session: AsyncSession,
    agent_id: str,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    """The owner and admins see every status; everyone else sees ACTIVE listings"""
    is_owner = viewer_agent_id(viewer) == agent_id
    if not await get_agent_row(session, agent_id):
        raise NotFoundError("Agent not found")

    predicate = agent_property_predicate(agent_id).merge(
        build_agent_property_filters(params, show_all=is_owner or is_admin(viewer))
    )
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=10)
    result = await fetch_page(
        session,
        PROPERTIES,
        predicate,
        page_request,
        sort=params.get("sort"),
        options=property_load_options(),
    )
    result.items = [project_property(p) for p in result.items]
    return result


async def list_agent_reviews(
    session: AsyncSession,
    agent_id: str,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    """Reviews of the agent itself and of the agent's properties"""
    agent = await get_agent_row(session, agent_id)
    if not agent:
        raise NotFoundError("Agent not found")

    predicate = build_review_filters(params, allow_status=is_admin(viewer)).where(
        AnyOf((
            Condition("agent_id", Op.EQ, agent_id),
            Condition("property_agent_id", Op.EQ, agent_id),
        ))
    )
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=10)
    result = await fetch_page(
        session,
        REVIEWS,
        predicate,
        page_request,
        sort=params.get("sort") or params.get("sortBy"),
        options=review_load_options(),
    )
    result.items = [project_review(r) for r in result.items]
    return result


async def contact_agent(session: AsyncSession, agent_id: str, sender: User, data: Dict) -> Tuple[Dict, Agent]:
    """Record an inquiry addressed to an agent; notifying the agent is up to the caller"""
    agent = await get_agent_row(session, agent_id)
    if not agent or agent.verification_status != VerificationStatus.APPROVED:
        raise NotFoundError("Agent not found")

    property_id = clean(data.get("property_id"))
    if property_id and not any(p.id == property_id for p in agent.properties):
        raise NotFoundError("Property not found for this agent")

    contact = Contact(
        name=sender.full_name,
        email=sender.email,
        phone=data.get("phone") or sender.phone,
        subject=data.get("subject") or "Property inquiry",
        message=data["message"],
        inquiry_type=InquiryType.SALES.value,
        status=ContactStatus.NEW,
        user_id=sender.id,
        agent_id=agent.id,
        property_id=property_id,
    )
    session.add(contact)
    await commit_session(session)
    logger.info(f"User {sender.id} contacted agent {agent.id}")
    return project_contact(await get_contact_row(session, contact.id)), agent


async def list_own_payments(session: AsyncSession, agent_user: AgentUser, params: Mapping[str, Optional[str]]) -> PageResult:
    agent = agent_user.require_profile()
    predicate = build_payment_filters(params).where(Condition("agent_id", Op.EQ, agent.id))
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=20)
    result = await fetch_page(session, PAYMENTS, predicate, page_request, sort=params.get("sort"))
    result.items = [project_payment(p) for p in result.items]
    return result


async def list_own_subscriptions(session: AsyncSession, agent_user: AgentUser, params: Mapping[str, Optional[str]]) -> PageResult:
    agent = agent_user.require_profile()
    predicate = build_payment_filters(params).where(Condition("agent_id", Op.EQ, agent.id))
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=20)
    result = await fetch_page(session, SUBSCRIPTIONS, predicate, page_request, sort=params.get("sort"))
    result.items = [project_subscription(s) for s in result.items]
    return result
