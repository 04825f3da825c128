"""
Agent Controller - public agent directory and agent self-service
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.user import User
from homesphere.schemas.agent import (
    AgentAnalyticsResponse,
    AgentContactRequest,
    AgentListResponse,
    AgentProfileEnvelope,
    AgentProfileUpdateRequest,
    AgentStatsResponse,
)
from homesphere.schemas.billing import PaymentListResponse, SubscriptionListResponse
from homesphere.schemas.contact import ContactEnvelope
from homesphere.schemas.property import PropertyListResponse
from homesphere.schemas.review import ReviewListResponse
from homesphere.services import agent_service, email_service
from homesphere.utils.background import run_best_effort
from homesphere.utils.dependencies import AgentUser, get_current_user, get_optional_user, require_agent

router = APIRouter(prefix="/agents", tags=["Agents"])


@router.get("", response_model=AgentListResponse)
async def list_agents(request: Request, session: AsyncSession = Depends(get_db)):
    """Approved agents; filters: search, location, specialty"""
    result = await agent_service.list_agents(session, request.query_params)
    return AgentListResponse(**result.to_dict("agents"))


@router.get("/profile", response_model=AgentProfileEnvelope)
async def get_profile(
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    return AgentProfileEnvelope(agent=await agent_service.get_own_profile(session, agent_user))


@router.put("/profile", response_model=AgentProfileEnvelope)
async def update_profile(
    request: AgentProfileUpdateRequest,
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    agent = await agent_service.update_own_profile(session, agent_user, request.dict(exclude_unset=True))
    return AgentProfileEnvelope(agent=agent)


@router.get("/analytics", response_model=AgentAnalyticsResponse)
async def get_analytics(
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    return AgentAnalyticsResponse(analytics=await agent_service.get_own_analytics(session, agent_user))


@router.get("/payments", response_model=PaymentListResponse)
async def list_payments(
    request: Request,
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    result = await agent_service.list_own_payments(session, agent_user, request.query_params)
    return PaymentListResponse(**result.to_dict("payments"))


@router.get("/subscriptions", response_model=SubscriptionListResponse)
async def list_subscriptions(
    request: Request,
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    result = await agent_service.list_own_subscriptions(session, agent_user, request.query_params)
    return SubscriptionListResponse(**result.to_dict("subscriptions"))


@router.get("/{agent_id}/properties", response_model=PropertyListResponse)
async def list_agent_properties(
    agent_id: str,
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    result = await agent_service.list_agent_properties(session, agent_id, request.query_params, viewer)
    return PropertyListResponse(**result.to_dict("properties"))


@router.get("/{agent_id}/stats", response_model=AgentStatsResponse)
async def get_agent_stats(agent_id: str, session: AsyncSession = Depends(get_db)):
    return AgentStatsResponse(stats=await agent_service.get_agent_stats(session, agent_id))


@router.get("/{agent_id}/reviews", response_model=ReviewListResponse)
async def list_agent_reviews(
    agent_id: str,
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    result = await agent_service.list_agent_reviews(session, agent_id, request.query_params, viewer)
    return ReviewListResponse(**result.to_dict("reviews"))


@router.post("/{agent_id}/contact", response_model=ContactEnvelope, status_code=status.HTTP_201_CREATED)
async def contact_agent(
    agent_id: str,
    request: AgentContactRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """Stores the inquiry, then notifies the agent by email on a best-effort basis"""
    contact, agent = await agent_service.contact_agent(session, agent_id, user, request.dict())
    background_tasks.add_task(
        run_best_effort,
        email_service.send_agent_contact_email,
        agent.user.email,
        agent.user.full_name,
        contact["name"],
        contact["email"],
        contact["subject"],
        contact["message"],
    )
    return ContactEnvelope(message="Contact request sent successfully", contact=contact)
