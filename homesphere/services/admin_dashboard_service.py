"""
Admin Dashboard Service - platform-wide counters and period analytics
"""
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.models.agent import Agent
from homesphere.models.base import utcnow
from homesphere.models.contact import Contact
from homesphere.models.enums import ContactStatus, PropertyStatus, ReviewStatus, VerificationStatus
from homesphere.models.property import Property
from homesphere.models.review import Review
from homesphere.models.user import User
from homesphere.query.filters import PERIODS, clean
from homesphere.query.projection import to_number

DEFAULT_ANALYTICS_PERIOD = "30d"
TOP_AGENTS_LIMIT = 5


async def get_dashboard_stats(session: AsyncSession) -> Dict:
    """Counters for the admin landing page, one aggregate query per table"""
    agent_stats = (await session.execute(
        select(
            func.count(Agent.id).label("total"),
            func.sum(case((Agent.verification_status == VerificationStatus.PENDING, 1), else_=0)).label("pending"),
        )
    )).first()

    property_stats = (await session.execute(
        select(
            func.count(Property.id).label("total"),
            func.sum(case((Property.status == PropertyStatus.ACTIVE, 1), else_=0)).label("active"),
            func.sum(case((Property.status == PropertyStatus.PENDING, 1), else_=0)).label("pending"),
            func.sum(case((Property.status == PropertyStatus.SOLD, Property.price), else_=0)).label("revenue"),
        )
    )).first()

    pending_reviews = (await session.execute(
        select(func.count(Review.id)).where(Review.status == ReviewStatus.PENDING)
    )).scalar() or 0

    total_users = (await session.execute(select(func.count(User.id)))).scalar() or 0

    new_contacts = (await session.execute(
        select(func.count(Contact.id)).where(Contact.status == ContactStatus.NEW)
    )).scalar() or 0

    return {
        "total_agents": agent_stats.total or 0,
        "pending_agents": agent_stats.pending or 0,
        "total_properties": property_stats.total or 0,
        "active_listings": property_stats.active or 0,
        "pending_properties": property_stats.pending or 0,
        "pending_reviews": pending_reviews,
        "total_users": total_users,
        "new_contacts": new_contacts,
        "total_revenue": to_number(Decimal(str(property_stats.revenue or 0))),
    }


async def get_analytics(session: AsyncSession, period: Optional[str]) -> Dict:
    """
    Breakdown of listings, sign-ups and sales created within ``period``
    (7d, 30d, 90d or 1y; anything else means 30d).
    """
    key = (clean(period) or DEFAULT_ANALYTICS_PERIOD).lower()
    if key not in PERIODS:
        key = DEFAULT_ANALYTICS_PERIOD
    start_date = utcnow() - PERIODS[key]

    property_rows = await session.execute(
        select(Property.status, func.count(Property.id))
        .where(Property.created_at >= start_date)
        .group_by(Property.status)
    )
    user_rows = await session.execute(
        select(User.role, func.count(User.id))
        .where(User.created_at >= start_date)
        .group_by(User.role)
    )
    revenue = (await session.execute(
        select(func.sum(Property.price))
        .where(Property.status == PropertyStatus.SOLD, Property.created_at >= start_date)
    )).scalar()

    sales = func.count(Property.id).label("sales")
    top_rows = await session.execute(
        select(Agent.id, User.first_name, User.last_name, sales, func.sum(Property.price).label("revenue"))
        .join(User, Agent.user_id == User.id)
        .join(Property, Property.agent_id == Agent.id)
        .where(Property.status == PropertyStatus.SOLD, Property.created_at >= start_date)
        .group_by(Agent.id, User.first_name, User.last_name)
        .order_by(sales.desc(), Agent.id.asc())
        .limit(TOP_AGENTS_LIMIT)
    )

    return {
        "period": key,
        "start_date": start_date.isoformat(),
        "property_stats": {status.value.lower(): count for status, count in property_rows.all()},
        "user_stats": {role.value.lower(): count for role, count in user_rows.all()},
        "total_revenue": to_number(Decimal(str(revenue or 0))),
        "top_agents": [
            {
                "id": row.id,
                "name": f"{row.first_name} {row.last_name}",
                "sales": row.sales,
                "revenue": to_number(Decimal(str(row.revenue or 0))),
            }
            for row in top_rows.all()
        ],
    }
