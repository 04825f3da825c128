from sqlalchemy import Column, String, Boolean, DateTime, Float, Integer, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homesphere.database.connection import Base
from homesphere.models.base import new_id, utcnow
from homesphere.models.enums import SubscriptionPlan, VerificationStatus, enum_column_type


class Agent(Base):
    __tablename__ = "agents"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    registration_number = Column(String, unique=True, nullable=False, index=True)
    verification_status = Column(
        enum_column_type(VerificationStatus),
        nullable=False,
        default=VerificationStatus.PENDING,
        index=True,  # Indexed for moderation queues
    )
    is_verified = Column(Boolean, nullable=False, default=False)
    subscription_plan = Column(enum_column_type(SubscriptionPlan), nullable=False, default=SubscriptionPlan.BASIC)
    commission_rate = Column(Float, nullable=True)
    specialties = Column(JSON, nullable=False, default=list)
    listing_limits = Column(Integer, nullable=False, default=25)
    bio = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    business_name = Column(String, nullable=True)
    profile_image = Column(String, nullable=True)
    bank_name = Column(String, nullable=True)
    account_number = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    user = relationship("User", back_populates="agent")
    properties = relationship("Property", back_populates="agent", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="agent", cascade="all, delete-orphan")
    subscriptions = relationship("Subscription", back_populates="agent")
    payments = relationship("Payment", back_populates="agent")
