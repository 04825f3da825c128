# Database models
from homesphere.models.user import User
from homesphere.models.agent import Agent
from homesphere.models.property import Property
from homesphere.models.review import Review
from homesphere.models.favorite import Favorite
from homesphere.models.contact import Contact
from homesphere.models.billing import Subscription, Payment

__all__ = [
    "User",
    "Agent",
    "Property",
    "Review",
    "Favorite",
    "Contact",
    "Subscription",
    "Payment",
]
