"""
Review Service - listings, stats, creation, reactions and moderation
"""
import logging
from typing import Dict, Mapping, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.database.connection import commit_session
from homesphere.models.agent import Agent
from homesphere.models.enums import PropertyStatus, ReviewStatus, VerificationStatus
from homesphere.models.property import Property
from homesphere.models.review import AgentTarget, PropertyTarget, Review, review_target_from_ids
from homesphere.models.user import User
from homesphere.query.collections import REVIEWS, review_load_options
from homesphere.query.executor import fetch_page
from homesphere.query.filters import build_review_filters
from homesphere.query.pagination import PageResult, parse_page_request
from homesphere.query.predicate import Condition, Op, Predicate, compile_to_clause
from homesphere.query.projection import project_review
from homesphere.services.property_service import viewer_agent_id
from homesphere.utils.dependencies import is_admin
from homesphere.utils.errors import ConflictError, NotFoundError, ValidationError, field_error

logger = logging.getLogger(__name__)


def _sort_param(params: Mapping[str, Optional[str]]) -> Optional[str]:
    return params.get("sort") or params.get("sortBy")


async def _list(
    session: AsyncSession,
    predicate: Predicate,
    params: Mapping[str, Optional[str]],
    default_limit: int,
) -> PageResult:
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=default_limit)
    result = await fetch_page(
        session,
        REVIEWS,
        predicate,
        page_request,
        sort=_sort_param(params),
        options=review_load_options(),
    )
    result.items = [project_review(r) for r in result.items]
    return result


async def list_reviews(
    session: AsyncSession,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    predicate = build_review_filters(params, allow_status=is_admin(viewer))
    return await _list(session, predicate, params, default_limit=20)


async def list_property_reviews(
    session: AsyncSession,
    property_id: str,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    exists = await session.execute(select(Property.id).where(Property.id == property_id))
    if exists.scalar_one_or_none() is None:
        raise NotFoundError("Property not found")

    predicate = build_review_filters(params, allow_status=is_admin(viewer)).where(
        Condition("property_id", Op.EQ, property_id)
    )
    return await _list(session, predicate, params, default_limit=10)


async def list_agent_target_reviews(
    session: AsyncSession,
    agent_id: str,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    """Reviews written about the agent directly (not about its properties)"""
    exists = await session.execute(select(Agent.id).where(Agent.id == agent_id))
    if exists.scalar_one_or_none() is None:
        raise NotFoundError("Agent not found")

    predicate = build_review_filters(params, allow_status=is_admin(viewer)).where(
        Condition("agent_id", Op.EQ, agent_id)
    )
    return await _list(session, predicate, params, default_limit=10)


async def list_user_reviews(
    session: AsyncSession,
    user_id: str,
    params: Mapping[str, Optional[str]],
    viewer: Optional[User] = None,
) -> PageResult:
    """Authors and admins see every status of the author's reviews"""
    own = viewer is not None and viewer.id == user_id
    predicate = build_review_filters(params, allow_status=own or is_admin(viewer)).where(
        Condition("user_id", Op.EQ, user_id)
    )
    return await _list(session, predicate, params, default_limit=10)


async def get_review_stats(session: AsyncSession, params: Mapping[str, Optional[str]]) -> Dict:
    """Aggregate rating stats over approved reviews"""
    criteria = compile_to_clause(build_review_filters(params), REVIEWS.field_map)

    summary = await session.execute(
        select(
            func.avg(Review.rating),
            func.count(Review.id),
            func.min(Review.rating),
            func.max(Review.rating),
        ).where(criteria)
    )
    avg_rating, total, min_rating, max_rating = summary.one()

    distribution = await session.execute(
        select(Review.rating, func.count(Review.id))
        .where(criteria)
        .group_by(Review.rating)
        .order_by(Review.rating.desc())
    )

    return {
        "average_rating": round(float(avg_rating), 2) if avg_rating is not None else None,
        "total_reviews": total,
        "min_rating": min_rating,
        "max_rating": max_rating,
        "rating_distribution": {str(rating): count for rating, count in distribution.all()},
    }


async def _check_target(session: AsyncSession, target) -> None:
    if isinstance(target, PropertyTarget):
        result = await session.execute(select(Property.status).where(Property.id == target.id))
        status = result.scalar_one_or_none()
        if status is None or status != PropertyStatus.ACTIVE:
            raise NotFoundError("Property not found")
    else:
        result = await session.execute(select(Agent.verification_status).where(Agent.id == target.id))
        status = result.scalar_one_or_none()
        if status is None or status != VerificationStatus.APPROVED:
            raise NotFoundError("Agent not found")


async def get_review_row(session: AsyncSession, review_id: str) -> Optional[Review]:
    result = await session.execute(
        select(Review)
        .options(*review_load_options())
        .where(Review.id == review_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_review(session: AsyncSession, author: User, data: Dict) -> Dict:
    """
    Reviews start PENDING and only appear publicly once approved.

    A review targets exactly one property or agent, and a user reviews a
    given target at most once. Agents cannot review their own profile.
    """
    own_agent_id = viewer_agent_id(author)
    try:
        target = review_target_from_ids(data.get("property_id"), data.get("agent_id"))
    except ValueError as e:
        raise ValidationError(str(e), errors=[field_error("target", str(e))])

    await _check_target(session, target)

    if isinstance(target, PropertyTarget):
        target_clause = Review.property_id == target.id
    else:
        target_clause = Review.agent_id == target.id
    existing = await session.execute(
        select(Review.id).where(Review.user_id == author.id, target_clause)
    )
    if existing.scalar_one_or_none():
        raise ConflictError(f"You have already reviewed this {target.kind}")

    if isinstance(target, AgentTarget):
        if own_agent_id == target.id:
            raise ValidationError("Agents cannot review themselves")

    review = Review(
        user_id=author.id,
        rating=data["rating"],
        comment=data["comment"].strip(),
        status=ReviewStatus.PENDING,
    )
    review.target = target
    session.add(review)
    await commit_session(session)
    logger.info(f"User {author.id} reviewed {target.kind} {target.id}")

    return project_review(await get_review_row(session, review.id))


async def react_to_review(session: AsyncSession, review_id: str, reaction: str) -> Dict:
    """Increment likes or dislikes atomically in the database"""
    column = Review.likes if reaction == "like" else Review.dislikes
    result = await session.execute(
        update(Review)
        .where(Review.id == review_id, Review.status == ReviewStatus.APPROVED)
        .values({column: column + 1})
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Review not found")
    await commit_session(session)
    return project_review(await get_review_row(session, review_id))


async def list_pending_reviews(session: AsyncSession, params: Mapping[str, Optional[str]]) -> PageResult:
    predicate = Predicate().where(Condition("status", Op.EQ, ReviewStatus.PENDING))
    return await _list(session, predicate, params, default_limit=20)


async def set_review_status(session: AsyncSession, review_id: str, status: ReviewStatus) -> Dict:
    review = await get_review_row(session, review_id)
    if not review:
        raise NotFoundError("Review not found")
    if review.status != status:
        review.status = status
        await commit_session(session)
        logger.info(f"Review {review_id} set to {status.value}")
    return project_review(await get_review_row(session, review_id))