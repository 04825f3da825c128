from pydantic import Field
from typing import Dict, List, Optional
from homesphere.schemas.common import CamelModel, PageMeta


class ReviewCreateRequest(CamelModel):
    # Exactly one of property_id / agent_id; checked by the service
    property_id: Optional[str] = None
    agent_id: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=10, max_length=1000)


class ReviewAuthor(CamelModel):
    id: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None


class ReviewPropertySummary(CamelModel):
    id: str
    title: str
    city: Optional[str] = None
    state: Optional[str] = None


class ReviewAgentSummary(CamelModel):
    id: str
    name: Optional[str] = None


class ReviewResponse(CamelModel):
    id: str
    rating: int
    comment: str
    status: str
    likes: int
    dislikes: int
    target_type: str
    property_id: Optional[str] = None
    agent_id: Optional[str] = None
    user_id: str
    user: Optional[ReviewAuthor] = None
    property: Optional[ReviewPropertySummary] = None
    agent: Optional[ReviewAgentSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ReviewListResponse(PageMeta):
    reviews: List[ReviewResponse]


class ReviewEnvelope(CamelModel):
    message: Optional[str] = None
    review: ReviewResponse


class ReviewStatsResponse(CamelModel):
    average_rating: Optional[float] = None
    total_reviews: int
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None
    rating_distribution: Dict[str, int]
