"""
Admin Controller - moderation queues, platform stats and analytics
"""
from fastapi import APIRouter, Depends, Query, Request
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.enums import PropertyStatus, ReviewStatus, VerificationStatus
from homesphere.schemas.admin import (
    AdminAgentEnvelope,
    AdminAgentListResponse,
    AnalyticsResponse,
    DashboardStatsResponse,
)
from homesphere.schemas.property import PropertyEnvelope, PropertyListResponse
from homesphere.schemas.review import ReviewEnvelope, ReviewListResponse
from homesphere.services import admin_dashboard_service, admin_service, review_service
from homesphere.utils.dependencies import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/reviews/pending", response_model=ReviewListResponse)
async def list_pending_reviews(request: Request, session: AsyncSession = Depends(get_db)):
    result = await review_service.list_pending_reviews(session, request.query_params)
    return ReviewListResponse(**result.to_dict("reviews"))


@router.post("/reviews/{review_id}/approve", response_model=ReviewEnvelope)
async def approve_review(review_id: str, session: AsyncSession = Depends(get_db)):
    review = await review_service.set_review_status(session, review_id, ReviewStatus.APPROVED)
    return ReviewEnvelope(message="Review approved", review=review)


@router.post("/reviews/{review_id}/reject", response_model=ReviewEnvelope)
async def reject_review(review_id: str, session: AsyncSession = Depends(get_db)):
    review = await review_service.set_review_status(session, review_id, ReviewStatus.REJECTED)
    return ReviewEnvelope(message="Review rejected", review=review)


@router.get("/agents", response_model=AdminAgentListResponse)
async def list_agents(request: Request, session: AsyncSession = Depends(get_db)):
    """Filters: status, search, period"""
    result = await admin_service.list_agents(session, request.query_params)
    return AdminAgentListResponse(**result.to_dict("agents"))


@router.post("/agents/{agent_id}/approve", response_model=AdminAgentEnvelope)
async def approve_agent(agent_id: str, session: AsyncSession = Depends(get_db)):
    agent = await admin_service.set_agent_status(session, agent_id, VerificationStatus.APPROVED)
    return AdminAgentEnvelope(message="Agent approved", agent=agent)


@router.post("/agents/{agent_id}/reject", response_model=AdminAgentEnvelope)
async def reject_agent(agent_id: str, session: AsyncSession = Depends(get_db)):
    agent = await admin_service.set_agent_status(session, agent_id, VerificationStatus.REJECTED)
    return AdminAgentEnvelope(message="Agent rejected", agent=agent)


@router.post("/agents/{agent_id}/suspend", response_model=AdminAgentEnvelope)
async def suspend_agent(agent_id: str, session: AsyncSession = Depends(get_db)):
    agent = await admin_service.set_agent_status(session, agent_id, VerificationStatus.SUSPENDED)
    return AdminAgentEnvelope(message="Agent suspended", agent=agent)


@router.get("/properties", response_model=PropertyListResponse)
async def list_properties(request: Request, session: AsyncSession = Depends(get_db)):
    """Every status; filters: status, search (title, city, agent name or email), period"""
    result = await admin_service.list_properties(session, request.query_params)
    return PropertyListResponse(**result.to_dict("properties"))


@router.post("/properties/{property_id}/approve", response_model=PropertyEnvelope)
async def approve_property(property_id: str, session: AsyncSession = Depends(get_db)):
    prop = await admin_service.set_property_status(session, property_id, PropertyStatus.ACTIVE)
    return PropertyEnvelope(property=prop)


@router.post("/properties/{property_id}/reject", response_model=PropertyEnvelope)
async def reject_property(property_id: str, session: AsyncSession = Depends(get_db)):
    prop = await admin_service.set_property_status(session, property_id, PropertyStatus.REJECTED)
    return PropertyEnvelope(property=prop)


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(session: AsyncSession = Depends(get_db)):
    return DashboardStatsResponse(stats=await admin_dashboard_service.get_dashboard_stats(session))


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    period: Optional[str] = Query(None, description="7d, 30d, 90d or 1y"),
    session: AsyncSession = Depends(get_db),
):
    return AnalyticsResponse(analytics=await admin_dashboard_service.get_analytics(session, period))
