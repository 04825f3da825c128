from pydantic import Field
from typing import List, Literal, Optional
from homesphere.models.enums import PropertyType
from homesphere.schemas.common import CamelModel, PageMeta


class PropertyAgentSummary(CamelModel):
    id: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    business_name: Optional[str] = None
    is_verified: bool = False


class PropertyResponse(CamelModel):
    id: str
    title: str
    description: str
    price: float
    currency: str
    address: str
    city: str
    state: str
    zip_code: Optional[str] = None
    bedrooms: int
    bathrooms: float
    square_footage: Optional[int] = None
    property_type: str
    status: str
    images: List[str] = []
    features: List[str] = []
    agent_id: str
    agent: Optional[PropertyAgentSummary] = None
    review_count: int = 0
    average_rating: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PropertyListResponse(PageMeta):
    properties: List[PropertyResponse]


class PropertyEnvelope(CamelModel):
    property: PropertyResponse


class PropertyCreateRequest(CamelModel):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    price: float = Field(..., ge=0)
    currency: str = Field("NGN", min_length=3, max_length=3)
    address: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=2)
    zip_code: Optional[str] = Field(None, min_length=3)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    square_footage: Optional[int] = Field(None, ge=0)
    property_type: PropertyType
    images: List[str] = []
    features: List[str] = []


class PropertyUpdateRequest(CamelModel):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    address: Optional[str] = Field(None, min_length=5)
    city: Optional[str] = Field(None, min_length=2)
    state: Optional[str] = Field(None, min_length=2)
    zip_code: Optional[str] = Field(None, min_length=3)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_footage: Optional[int] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None
    # Owners may only close a listing; approval is an admin action
    status: Optional[Literal["SOLD", "RENTED"]] = None
