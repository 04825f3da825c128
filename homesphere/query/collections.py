"""
Per-entity field maps, sort keys and eager-loading options.

Filter builders speak in logical field names; this is the only place those
names are tied to ORM columns.
"""
from sqlalchemy.orm import selectinload

from homesphere.models import Agent, Contact, Favorite, Payment, Property, Review, Subscription, User
from homesphere.query.executor import Collection
from homesphere.query.predicate import FieldPath


def _time_sorts(model):
    return {
        "newest": (model.created_at.desc(),),
        "oldest": (model.created_at.asc(),),
    }


PROPERTIES = Collection(
    model=Property,
    field_map={
        "id": Property.id,
        "agent_id": Property.agent_id,
        "title": Property.title,
        "description": Property.description,
        "address": Property.address,
        "city": Property.city,
        "state": Property.state,
        "price": Property.price,
        "bedrooms": Property.bedrooms,
        "bathrooms": Property.bathrooms,
        "property_type": Property.property_type,
        "status": Property.status,
        "created_at": Property.created_at,
        "agent_first_name": FieldPath(User.first_name, via=(Property.agent, Agent.user)),
        "agent_last_name": FieldPath(User.last_name, via=(Property.agent, Agent.user)),
        "agent_email": FieldPath(User.email, via=(Property.agent, Agent.user)),
    },
    sorts={
        **_time_sorts(Property),
        "price-asc": (Property.price.asc(),),
        "price-desc": (Property.price.desc(),),
    },
)

AGENTS = Collection(
    model=Agent,
    field_map={
        "id": Agent.id,
        "registration_number": Agent.registration_number,
        "verification_status": Agent.verification_status,
        "specialties": Agent.specialties,
        "created_at": Agent.created_at,
        "first_name": FieldPath(User.first_name, via=(Agent.user,)),
        "last_name": FieldPath(User.last_name, via=(Agent.user,)),
        "email": FieldPath(User.email, via=(Agent.user,)),
        "property_city": FieldPath(Property.city, via=(Agent.properties,)),
        "property_state": FieldPath(Property.state, via=(Agent.properties,)),
    },
    sorts=_time_sorts(Agent),
)

REVIEWS = Collection(
    model=Review,
    field_map={
        "id": Review.id,
        "user_id": Review.user_id,
        "property_id": Review.property_id,
        "property_agent_id": FieldPath(Property.agent_id, via=(Review.property,)),
        "agent_id": Review.agent_id,
        "status": Review.status,
        "rating": Review.rating,
        "created_at": Review.created_at,
    },
    sorts={
        **_time_sorts(Review),
        "highest": (Review.rating.desc(), Review.created_at.desc()),
        "highest-rating": (Review.rating.desc(), Review.created_at.desc()),
        "lowest": (Review.rating.asc(), Review.created_at.desc()),
        "lowest-rating": (Review.rating.asc(), Review.created_at.desc()),
    },
)

FAVORITES = Collection(
    model=Favorite,
    field_map={
        "user_id": Favorite.user_id,
        "property_id": Favorite.property_id,
        "created_at": Favorite.created_at,
        "property_status": FieldPath(Property.status, via=(Favorite.property,)),
    },
    sorts=_time_sorts(Favorite),
)

CONTACTS = Collection(
    model=Contact,
    field_map={
        "status": Contact.status,
        "inquiry_type": Contact.inquiry_type,
        "name": Contact.name,
        "email": Contact.email,
        "subject": Contact.subject,
        "agent_id": Contact.agent_id,
        "created_at": Contact.created_at,
    },
    sorts=_time_sorts(Contact),
)

PAYMENTS = Collection(
    model=Payment,
    field_map={
        "agent_id": Payment.agent_id,
        "status": Payment.status,
        "created_at": Payment.created_at,
    },
    sorts=_time_sorts(Payment),
)

SUBSCRIPTIONS = Collection(
    model=Subscription,
    field_map={
        "agent_id": Subscription.agent_id,
        "status": Subscription.status,
        "created_at": Subscription.created_at,
    },
    sorts=_time_sorts(Subscription),
)


# Eager-loading options; async sessions cannot lazy load during projection

def property_load_options():
    return (
        selectinload(Property.agent).selectinload(Agent.user),
        selectinload(Property.reviews),
    )


def agent_load_options():
    return (
        selectinload(Agent.user),
        selectinload(Agent.properties),
        selectinload(Agent.reviews),
    )


def review_load_options():
    return (
        selectinload(Review.user),
        selectinload(Review.property),
        selectinload(Review.agent).selectinload(Agent.user),
    )


def favorite_load_options():
    return (
        selectinload(Favorite.property).selectinload(Property.agent).selectinload(Agent.user),
        selectinload(Favorite.property).selectinload(Property.reviews),
    )


def contact_load_options():
    return (
        selectinload(Contact.agent).selectinload(Agent.user),
        selectinload(Contact.property),
    )
