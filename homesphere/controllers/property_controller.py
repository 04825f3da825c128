"""
Property Controller - public listings plus agent-owned create/update/delete
"""
from fastapi import APIRouter, Depends, Request, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.user import User
from homesphere.schemas.common import MessageResponse
from homesphere.schemas.property import (
    PropertyCreateRequest,
    PropertyEnvelope,
    PropertyListResponse,
    PropertyUpdateRequest,
)
from homesphere.services import property_service
from homesphere.utils.dependencies import AgentUser, get_optional_user, require_agent

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    """
    Filters: search|q, priceMin, priceMax, bedrooms, bathrooms, propertyType,
    city, state, period; sort: newest, oldest, price-asc, price-desc
    """
    result = await property_service.list_properties(session, request.query_params, viewer)
    return PropertyListResponse(**result.to_dict("properties"))


@router.get("/search", response_model=PropertyListResponse)
async def search_properties(
    request: Request,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    result = await property_service.list_properties(session, request.query_params, viewer)
    return PropertyListResponse(**result.to_dict("properties"))


@router.get("/{property_id}", response_model=PropertyEnvelope)
async def get_property(
    property_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
):
    prop = await property_service.get_property(session, property_id, viewer)
    return PropertyEnvelope(property=prop)


@router.post("", response_model=PropertyEnvelope, status_code=status.HTTP_201_CREATED)
async def create_property(
    request: PropertyCreateRequest,
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    """New listings start PENDING until an admin approves them"""
    prop = await property_service.create_property(session, agent_user, request.dict())
    return PropertyEnvelope(property=prop)


@router.put("/{property_id}", response_model=PropertyEnvelope)
async def update_property(
    property_id: str,
    request: PropertyUpdateRequest,
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    prop = await property_service.update_property(
        session, agent_user, property_id, request.dict(exclude_unset=True)
    )
    return PropertyEnvelope(property=prop)


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: str,
    agent_user: AgentUser = Depends(require_agent),
    session: AsyncSession = Depends(get_db),
):
    await property_service.delete_property(session, agent_user, property_id)
    return MessageResponse(message="Property deleted successfully")
