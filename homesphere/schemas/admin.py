from typing import Dict, List, Optional
from homesphere.schemas.common import CamelModel, PageMeta


class AdminAgentResponse(CamelModel):
    agent_id: str
    user_id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    business_name: Optional[str] = None
    registration_number: str
    is_verified: bool
    verification_status: str
    subscription_plan: str
    current_month_listings: int
    listing_limits: int
    profile_picture: str
    total_sales: int
    rating: float
    joined_date: Optional[str] = None
    last_active: Optional[str] = None


class AdminAgentListResponse(PageMeta):
    agents: List[AdminAgentResponse]


class AdminAgentEnvelope(CamelModel):
    message: str
    agent: AdminAgentResponse


class DashboardStats(CamelModel):
    total_agents: int
    pending_agents: int
    total_properties: int
    active_listings: int
    pending_properties: int
    pending_reviews: int
    total_users: int
    new_contacts: int
    total_revenue: float


class DashboardStatsResponse(CamelModel):
    stats: DashboardStats


class TopAgent(CamelModel):
    id: str
    name: str
    sales: int
    revenue: float


class Analytics(CamelModel):
    period: str
    start_date: str
    property_stats: Dict[str, int]
    user_stats: Dict[str, int]
    total_revenue: float
    top_agents: List[TopAgent]


class AnalyticsResponse(CamelModel):
    analytics: Analytics
