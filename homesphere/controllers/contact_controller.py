"""
Contact Controller - public contact form and admin handling of submissions
"""
from fastapi import APIRouter, Depends, Request, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.user import User
from homesphere.schemas.contact import (
    ContactEnvelope,
    ContactInfoItem,
    ContactListResponse,
    ContactStatusUpdateRequest,
    ContactSubmitRequest,
)
from homesphere.services import contact_service
from homesphere.utils.dependencies import get_optional_user, require_admin

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.get("/info", response_model=List[ContactInfoItem])
async def get_contact_info():
    return contact_service.CONTACT_INFO


@router.post("/submit", response_model=ContactEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    request: ContactSubmitRequest,
    submitter: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    contact = await contact_service.submit_contact(session, request.dict(), submitter)
    return ContactEnvelope(message="Thank you for contacting us. We will get back to you soon.", contact=contact)


@router.get("/submissions", response_model=ContactListResponse)
async def list_submissions(
    request: Request,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
):
    """Filters: status, inquiryType, search, period"""
    result = await contact_service.list_contacts(session, request.query_params)
    return ContactListResponse(**result.to_dict("contacts"))


@router.patch("/submissions/{contact_id}", response_model=ContactEnvelope)
async def update_submission_status(
    contact_id: str,
    request: ContactStatusUpdateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
):
    contact = await contact_service.update_contact_status(session, contact_id, request.status)
    return ContactEnvelope(message="Contact status updated", contact=contact)
