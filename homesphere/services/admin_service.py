"""
Admin Service - moderation of agents and property listings
"""
import logging
from typing import Dict, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.database.connection import commit_session
from homesphere.models.enums import PropertyStatus, VerificationStatus
from homesphere.query.collections import AGENTS, PROPERTIES, agent_load_options, property_load_options
from homesphere.query.executor import fetch_page
from homesphere.query.filters import build_admin_agent_filters, build_admin_property_filters
from homesphere.query.pagination import PageResult, parse_page_request
from homesphere.query.projection import project_admin_agent, project_property
from homesphere.services.agent_service import get_agent_row
from homesphere.services.property_service import get_property_row
from homesphere.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Listings an admin decision applies to; closed listings stay as they are
MODERATABLE_PROPERTY_STATUSES = {PropertyStatus.PENDING, PropertyStatus.ACTIVE, PropertyStatus.REJECTED}


async def list_agents(session: AsyncSession, params: Mapping[str, Optional[str]]) -> PageResult:
    predicate = build_admin_agent_filters(params)
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=50)
    result = await fetch_page(
        session, AGENTS, predicate, page_request, sort=params.get("sort"), options=agent_load_options()
    )
    result.items = [project_admin_agent(a) for a in result.items]
    return result


async def set_agent_status(session: AsyncSession, agent_id: str, status: VerificationStatus) -> Dict:
    """
    Approve, reject or suspend an agent. Setting the current status again
    is a no-op; ``is_verified`` tracks whether the agent is APPROVED.
    """
    agent = await get_agent_row(session, agent_id)
    if not agent:
        raise NotFoundError("Agent not found")

    verified = status == VerificationStatus.APPROVED
    if agent.verification_status != status or agent.is_verified != verified:
        agent.verification_status = status
        agent.is_verified = verified
        await commit_session(session)
        logger.info(f"Agent {agent_id} set to {status.value}")

    return project_admin_agent(await get_agent_row(session, agent_id))


async def list_properties(session: AsyncSession, params: Mapping[str, Optional[str]]) -> PageResult:
    predicate = build_admin_property_filters(params)
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=50)
    result = await fetch_page(
        session,
        PROPERTIES,
        predicate,
        page_request,
        sort=params.get("sort") or params.get("sortBy"),
        options=property_load_options(),
    )
    result.items = [project_property(p) for p in result.items]
    return result


async def set_property_status(session: AsyncSession, property_id: str, status: PropertyStatus) -> Dict:
    prop = await get_property_row(session, property_id)
    if not prop:
        raise NotFoundError("Property not found")

    if prop.status != status:
        if prop.status not in MODERATABLE_PROPERTY_STATUSES:
            raise ValidationError(f"A {prop.status.value} property can no longer be moderated")
        prop.status = status
        await commit_session(session)
        logger.info(f"Property {property_id} set to {status.value}")

    return project_property(await get_property_row(session, property_id))
