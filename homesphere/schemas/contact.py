from pydantic import EmailStr, Field
from typing import List, Optional
from homesphere.models.enums import ContactStatus, InquiryType
from homesphere.schemas.common import CamelModel, PageMeta


class ContactSubmitRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, min_length=10, max_length=20)
    subject: str = Field(..., min_length=5, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    inquiry_type: InquiryType
    user_id: Optional[str] = None
    agent_id: Optional[str] = None
    property_id: Optional[str] = None


class ContactStatusUpdateRequest(CamelModel):
    status: ContactStatus


class ContactResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    inquiry_type: str
    status: str
    user_id: Optional[str] = None
    agent_id: Optional[str] = None
    property_id: Optional[str] = None
    agent_name: Optional[str] = None
    property_title: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ContactEnvelope(CamelModel):
    message: str
    contact: ContactResponse


class ContactListResponse(PageMeta):
    contacts: List[ContactResponse]


class ContactInfoItem(CamelModel):
    icon: str
    title: str
    details: List[str]
    color: str
