"""
Review Controller - public review listings, review submission and reactions
"""
from fastapi import APIRouter, Depends, Request, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.user import User
from homesphere.schemas.review import (
    ReviewCreateRequest,
    ReviewEnvelope,
    ReviewListResponse,
    ReviewStatsResponse,
)
from homesphere.services import review_service
from homesphere.utils.dependencies import get_current_user, get_optional_user

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    """
    Approved reviews; filters: rating (minimum), period;
    sort: newest, oldest, highest, lowest
    """
    result = await review_service.list_reviews(session, request.query_params, viewer)
    return ReviewListResponse(**result.to_dict("reviews"))


@router.get("/stats", response_model=ReviewStatsResponse)
async def get_review_stats(request: Request, session: AsyncSession = Depends(get_db)):
    return ReviewStatsResponse(**await review_service.get_review_stats(session, request.query_params))


@router.get("/property/{property_id}", response_model=ReviewListResponse)
async def list_property_reviews(
    property_id: str,
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    result = await review_service.list_property_reviews(session, property_id, request.query_params, viewer)
    return ReviewListResponse(**result.to_dict("reviews"))


@router.get("/agent/{agent_id}", response_model=ReviewListResponse)
async def list_agent_reviews(
    agent_id: str,
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    result = await review_service.list_agent_target_reviews(session, agent_id, request.query_params, viewer)
    return ReviewListResponse(**result.to_dict("reviews"))


@router.get("/user/{user_id}", response_model=ReviewListResponse)
async def list_user_reviews(
    user_id: str,
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    result = await review_service.list_user_reviews(session, user_id, request.query_params, viewer)
    return ReviewListResponse(**result.to_dict("reviews"))


@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def create_review(
    request: ReviewCreateRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """Exactly one of propertyId / agentId; the review waits for moderation"""
    review = await review_service.create_review(session, user, request.dict())
    return ReviewEnvelope(message="Review submitted for moderation", review=review)


@router.post("/{review_id}/like", response_model=ReviewEnvelope)
async def like_review(
    review_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    review = await review_service.react_to_review(session, review_id, "like")
    return ReviewEnvelope(review=review)


@router.post("/{review_id}/dislike", response_model=ReviewEnvelope)
async def dislike_review(
    review_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    review = await review_service.react_to_review(session, review_id, "dislike")
    return ReviewEnvelope(review=review)
