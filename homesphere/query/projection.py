"""
Result projection - ORM rows to response dicts

Projectors only read attributes and collections that the executor already
eager-loaded; aggregates are computed in Python from those collections.
Every key a response promises is present: fields with no stored source get
the documented defaults below.
"""
import enum
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from homesphere.models.enums import PropertyStatus, ReviewStatus

DEFAULT_AGENT_RATING = 4.5
DEFAULT_YEARS_EXPERIENCE = 5
DEFAULT_AGENT_TITLE = "Real Estate Agent"
DEFAULT_AGENT_BIO = "Experienced real estate professional"
DEFAULT_SPECIALTIES = ["Real Estate"]
DEFAULT_AGENT_LOCATION = "Available"
DEFAULT_LISTING_LIMIT = 25
DEFAULT_PROFILE_PICTURE = "/api/placeholder/64/64"


def to_number(value: Any) -> Optional[float]:
    """Decimals become int when integral, float otherwise"""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def to_value(value: Any) -> Any:
    return value.value if isinstance(value, enum.Enum) else value


def as_list(value: Optional[Iterable]) -> List:
    return list(value) if value else []


def approved(reviews: Iterable) -> List:
    return [r for r in reviews if r.status == ReviewStatus.APPROVED]


def average_rating(reviews: Iterable, default: Optional[float] = None) -> Optional[float]:
    ratings = [r.rating for r in approved(reviews)]
    if not ratings:
        return default
    return round(sum(ratings) / len(ratings), 1)


def project_user(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone": user.phone,
        "avatar": user.avatar,
        "role": to_value(user.role),
        "is_active": user.is_active,
        "email_verified": user.email_verified,
        "created_at": to_iso(user.created_at),
    }


def project_agent_summary(agent) -> Optional[Dict[str, Any]]:
    """Compact agent block nested in property and review responses"""
    if agent is None:
        return None
    user = agent.user
    return {
        "id": agent.id,
        "name": user.full_name if user else None,
        "first_name": user.first_name if user else None,
        "last_name": user.last_name if user else None,
        "email": user.email if user else None,
        "phone": agent.phone or (user.phone if user else None),
        "profile_image": agent.profile_image or (user.avatar if user else None),
        "business_name": agent.business_name,
        "is_verified": agent.is_verified,
    }


def project_property(prop, include_agent: bool = True) -> Dict[str, Any]:
    data = {
        "id": prop.id,
        "title": prop.title,
        "description": prop.description,
        "price": to_number(prop.price),
        "currency": prop.currency,
        "address": prop.address,
        "city": prop.city,
        "state": prop.state,
        "zip_code": prop.zip_code,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "square_footage": prop.square_footage,
        "property_type": to_value(prop.property_type),
        "status": to_value(prop.status),
        "images": as_list(prop.images),
        "features": as_list(prop.features),
        "agent_id": prop.agent_id,
        "created_at": to_iso(prop.created_at),
        "updated_at": to_iso(prop.updated_at),
    }
    if include_agent:
        reviews = prop.reviews or []
        data["agent"] = project_agent_summary(prop.agent)
        data["review_count"] = len(approved(reviews))
        data["average_rating"] = average_rating(reviews)
    return data


def _agent_location(agent) -> str:
    listings = sorted(
        (p for p in agent.properties if p.status == PropertyStatus.ACTIVE),
        key=lambda p: to_iso(p.created_at) or "",
        reverse=True,
    )
    if not listings:
        return DEFAULT_AGENT_LOCATION
    return f"{listings[0].city}, {listings[0].state}"


def project_agent_card(agent) -> Dict[str, Any]:
    """Public directory entry"""
    user = agent.user
    properties = agent.properties or []
    reviews = agent.reviews or []
    return {
        "id": agent.id,
        "name": user.full_name,
        "email": user.email,
        "image": user.avatar,
        "title": DEFAULT_AGENT_TITLE,
        "location": _agent_location(agent),
        "bio": agent.bio or DEFAULT_AGENT_BIO,
        "specialties": as_list(agent.specialties) or list(DEFAULT_SPECIALTIES),
        "rating": average_rating(reviews, DEFAULT_AGENT_RATING),
        "reviews": len(approved(reviews)),
        "properties_sold": sum(1 for p in properties if p.status == PropertyStatus.SOLD),
        "active_listings": sum(1 for p in properties if p.status == PropertyStatus.ACTIVE),
        "years_experience": DEFAULT_YEARS_EXPERIENCE,
        "registration_number": agent.registration_number,
        "is_verified": agent.is_verified,
        "verification_status": to_value(agent.verification_status),
        "phone": agent.phone,
        "profile_image": agent.profile_image,
    }


def project_admin_agent(agent) -> Dict[str, Any]:
    """Moderation list entry"""
    user = agent.user
    properties = agent.properties or []
    return {
        "agent_id": agent.id,
        "user_id": agent.user_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "phone": agent.phone,
        "business_name": agent.business_name,
        "registration_number": agent.registration_number,
        "is_verified": agent.is_verified,
        "verification_status": to_value(agent.verification_status),
        "subscription_plan": to_value(agent.subscription_plan),
        "current_month_listings": sum(1 for p in properties if p.status == PropertyStatus.ACTIVE),
        "listing_limits": agent.listing_limits or DEFAULT_LISTING_LIMIT,
        "profile_picture": user.avatar or DEFAULT_PROFILE_PICTURE,
        "total_sales": sum(1 for p in properties if p.status == PropertyStatus.SOLD),
        "rating": average_rating(agent.reviews or [], DEFAULT_AGENT_RATING),
        "joined_date": to_iso(user.created_at),
        "last_active": to_iso(agent.updated_at),
    }


def project_agent_profile(agent) -> Dict[str, Any]:
    """The signed-in agent's own profile, including payout details"""
    data = project_agent_card(agent)
    data.update({
        "user_id": agent.user_id,
        "first_name": agent.user.first_name,
        "last_name": agent.user.last_name,
        "business_name": agent.business_name,
        "subscription_plan": to_value(agent.subscription_plan),
        "commission_rate": agent.commission_rate,
        "listing_limits": agent.listing_limits or DEFAULT_LISTING_LIMIT,
        "bank_name": agent.bank_name,
        "account_number": agent.account_number,
        "created_at": to_iso(agent.created_at),
    })
    return data


def project_review(review) -> Dict[str, Any]:
    target = review.target
    user = review.user
    data = {
        "id": review.id,
        "rating": review.rating,
        "comment": review.comment,
        "status": to_value(review.status),
        "likes": review.likes or 0,
        "dislikes": review.dislikes or 0,
        "target_type": target.kind,
        "property_id": review.property_id,
        "agent_id": review.agent_id,
        "user_id": review.user_id,
        "user": {
            "id": user.id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "avatar": user.avatar,
        } if user else None,
        "created_at": to_iso(review.created_at),
        "updated_at": to_iso(review.updated_at),
    }
    if review.property is not None:
        data["property"] = {
            "id": review.property.id,
            "title": review.property.title,
            "city": review.property.city,
            "state": review.property.state,
        }
    else:
        data["property"] = None
    if review.agent is not None:
        data["agent"] = {
            "id": review.agent.id,
            "name": review.agent.user.full_name if review.agent.user else None,
        }
    else:
        data["agent"] = None
    return data


def project_favorite(favorite) -> Dict[str, Any]:
    return {
        "id": favorite.id,
        "property_id": favorite.property_id,
        "created_at": to_iso(favorite.created_at),
        "property": project_property(favorite.property) if favorite.property else None,
    }


def project_contact(contact) -> Dict[str, Any]:
    return {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "subject": contact.subject,
        "message": contact.message,
        "inquiry_type": contact.inquiry_type,
        "status": to_value(contact.status),
        "user_id": contact.user_id,
        "agent_id": contact.agent_id,
        "property_id": contact.property_id,
        "agent_name": contact.agent.user.full_name if contact.agent and contact.agent.user else None,
        "property_title": contact.property.title if contact.property else None,
        "created_at": to_iso(contact.created_at),
        "updated_at": to_iso(contact.updated_at),
    }


def project_payment(payment) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "agent_id": payment.agent_id,
        "subscription_id": payment.subscription_id,
        "amount": to_number(payment.amount),
        "currency": payment.currency,
        "status": to_value(payment.status),
        "method": to_value(payment.method),
        "transaction_id": payment.transaction_id,
        "description": payment.description,
        "created_at": to_iso(payment.created_at),
    }


def project_subscription(subscription) -> Dict[str, Any]:
    return {
        "id": subscription.id,
        "agent_id": subscription.agent_id,
        "plan": to_value(subscription.plan),
        "status": to_value(subscription.status),
        "start_date": to_iso(subscription.start_date),
        "end_date": to_iso(subscription.end_date),
        "auto_renew": subscription.auto_renew,
        "price": to_number(subscription.price),
        "currency": subscription.currency,
        "features": as_list(subscription.features),
        "created_at": to_iso(subscription.created_at),
    }


def property_totals(properties: Iterable) -> Dict[str, Any]:
    """Count, summed and average price over an already-loaded property list"""
    prices = [Decimal(p.price) for p in properties if p.price is not None]
    total_value = sum(prices, Decimal(0))
    return {
        "total_properties": len(prices),
        "total_value": to_number(total_value),
        "average_price": to_number((total_value / len(prices)).quantize(Decimal("0.01"))) if prices else 0,
    }
