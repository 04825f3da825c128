"""
Contact Service - public contact form and the admin inquiry workflow
"""
import logging
from typing import Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.database.connection import commit_session
from homesphere.models.agent import Agent
from homesphere.models.contact import Contact
from homesphere.models.enums import ContactStatus
from homesphere.models.property import Property
from homesphere.models.user import User
from homesphere.query.collections import CONTACTS, contact_load_options
from homesphere.query.executor import fetch_page
from homesphere.query.filters import build_contact_filters, clean
from homesphere.query.pagination import PageResult, parse_page_request
from homesphere.query.projection import project_contact
from homesphere.utils.errors import NotFoundError, ValidationError, field_error

logger = logging.getLogger(__name__)

# Allowed moves in the inquiry workflow; ARCHIVED is terminal
STATUS_TRANSITIONS = {
    ContactStatus.NEW: {ContactStatus.CONTACTED, ContactStatus.ARCHIVED},
    ContactStatus.CONTACTED: {ContactStatus.QUALIFIED, ContactStatus.ARCHIVED},
    ContactStatus.QUALIFIED: {ContactStatus.CONVERTED, ContactStatus.ARCHIVED},
    ContactStatus.CONVERTED: {ContactStatus.ARCHIVED},
    ContactStatus.ARCHIVED: set(),
}

CONTACT_INFO: List[Dict] = [
    {
        "icon": "MapPin",
        "title": "Visit Our Office",
        "details": ["123 Victoria Island Road", "Lagos Island, Lagos State", "Nigeria"],
        "color": "blue",
    },
    {
        "icon": "Phone",
        "title": "Call Us",
        "details": ["+234 803 123 4567", "+234 806 789 0123", "Mon - Fri: 8AM - 6PM"],
        "color": "green",
    },
    {
        "icon": "Mail",
        "title": "Email Us",
        "details": ["info@homesphere.com", "support@homesphere.com", "careers@homesphere.com"],
        "color": "purple",
    },
    {
        "icon": "Clock",
        "title": "Business Hours",
        "details": ["Monday - Friday: 8AM - 6PM", "Saturday: 9AM - 4PM", "Sunday: Closed"],
        "color": "orange",
    },
]


async def _exists(session: AsyncSession, model, entity_id: str) -> bool:
    result = await session.execute(select(model.id).where(model.id == entity_id))
    return result.scalar_one_or_none() is not None


async def get_contact_row(session: AsyncSession, contact_id: str) -> Optional[Contact]:
    result = await session.execute(
        select(Contact)
        .options(*contact_load_options())
        .where(Contact.id == contact_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def submit_contact(session: AsyncSession, data: Dict, submitter: Optional[User] = None) -> Dict:
    """Store a contact-form message; optional links must point at existing rows"""
    links = {
        "agentId": (Agent, clean(data.get("agent_id"))),
        "propertyId": (Property, clean(data.get("property_id"))),
    }
    errors = []
    for field, (model, entity_id) in links.items():
        if entity_id and not await _exists(session, model, entity_id):
            errors.append(field_error(field, f"Unknown {field}"))
    if errors:
        raise ValidationError(errors=errors)

    contact = Contact(
        name=data["name"].strip(),
        email=data["email"].strip().lower(),
        phone=data.get("phone"),
        subject=data["subject"].strip(),
        message=data["message"].strip(),
        inquiry_type=data["inquiry_type"].value,
        status=ContactStatus.NEW,
        # The signed-in account wins over a client-supplied user id
        user_id=submitter.id if submitter else None,
        agent_id=links["agentId"][1],
        property_id=links["propertyId"][1],
    )
    session.add(contact)
    await commit_session(session)
    logger.info(f"Contact submission {contact.id} ({contact.inquiry_type})")
    return project_contact(await get_contact_row(session, contact.id))


async def list_contacts(session: AsyncSession, params: Mapping[str, Optional[str]]) -> PageResult:
    predicate = build_contact_filters(params)
    page_request = parse_page_request(params.get("page"), params.get("limit"), default_limit=20)
    result = await fetch_page(
        session, CONTACTS, predicate, page_request, sort=params.get("sort"), options=contact_load_options()
    )
    result.items = [project_contact(c) for c in result.items]
    return result


async def update_contact_status(session: AsyncSession, contact_id: str, status: ContactStatus) -> Dict:
    contact = await get_contact_row(session, contact_id)
    if not contact:
        raise NotFoundError("Contact submission not found")

    if contact.status != status:
        if status not in STATUS_TRANSITIONS[contact.status]:
            raise ValidationError(
                f"Cannot move a {contact.status.value} inquiry to {status.value}",
                errors=[field_error("status", "Invalid status transition")],
            )
        contact.status = status
        await commit_session(session)
        logger.info(f"Contact {contact_id} moved to {status.value}")

    return project_contact(await get_contact_row(session, contact_id))
