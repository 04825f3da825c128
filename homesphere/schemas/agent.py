from pydantic import Field
from typing import List, Optional
from homesphere.schemas.common import CamelModel, PageMeta


class AgentCardResponse(CamelModel):
    id: str
    name: str
    email: str
    image: Optional[str] = None
    title: str
    location: str
    bio: str
    specialties: List[str]
    rating: float
    reviews: int
    properties_sold: int
    active_listings: int
    years_experience: int
    registration_number: str
    is_verified: bool
    verification_status: str
    phone: Optional[str] = None
    profile_image: Optional[str] = None


class AgentListResponse(PageMeta):
    agents: List[AgentCardResponse]


class AgentProfileResponse(AgentCardResponse):
    user_id: str
    first_name: str
    last_name: str
    business_name: Optional[str] = None
    subscription_plan: str
    commission_rate: Optional[float] = None
    listing_limits: int
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    created_at: Optional[str] = None


class AgentProfileEnvelope(CamelModel):
    agent: AgentProfileResponse


class AgentProfileUpdateRequest(CamelModel):
    first_name: Optional[str] = Field(None, min_length=2)
    last_name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    bio: Optional[str] = Field(None, max_length=2000)
    business_name: Optional[str] = Field(None, min_length=2)
    specialties: Optional[List[str]] = None
    profile_image: Optional[str] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = Field(None, min_length=6, max_length=20)


class AgentPropertySummary(CamelModel):
    id: str
    title: str
    price: float
    status: str
    created_at: Optional[str] = None


class AgentAnalytics(CamelModel):
    total_properties: int
    total_value: float
    average_price: float
    active_listings: int
    properties_sold: int
    pending_properties: int
    total_reviews: int
    rating: float
    properties: List[AgentPropertySummary] = []


class AgentAnalyticsResponse(CamelModel):
    analytics: AgentAnalytics


class AgentStats(CamelModel):
    total_properties: int
    total_value: float
    average_price: float


class AgentStatsResponse(CamelModel):
    stats: AgentStats


class AgentContactRequest(CamelModel):
    # Sender name and email come from the signed-in account
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    subject: str = Field("Property inquiry", min_length=3, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    property_id: Optional[str] = None
