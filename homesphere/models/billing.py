from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homesphere.database.connection import Base
from homesphere.models.base import new_id, utcnow
from homesphere.models.enums import PaymentMethod, PaymentStatus, SubscriptionPlan, enum_column_type


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String, primary_key=True, default=new_id)
    agent_id = Column(String, ForeignKey("agents.id", ondelete="RESTRICT"), nullable=False, index=True)
    plan = Column(enum_column_type(SubscriptionPlan), nullable=False)
    status = Column(enum_column_type(PaymentStatus), nullable=False, default=PaymentStatus.PENDING, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False, index=True)
    auto_renew = Column(Boolean, nullable=False, default=True)
    price = Column(Float, nullable=False)
    currency = Column(String, nullable=False, default="NGN")
    features = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    agent = relationship("Agent", back_populates="subscriptions")
    payments = relationship("Payment", back_populates="subscription")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, default=new_id)
    agent_id = Column(String, ForeignKey("agents.id", ondelete="RESTRICT"), nullable=False, index=True)
    subscription_id = Column(String, ForeignKey("subscriptions.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Float, nullable=False)
    currency = Column(String, nullable=False, default="NGN")
    status = Column(enum_column_type(PaymentStatus), nullable=False, default=PaymentStatus.PENDING, index=True)
    method = Column(enum_column_type(PaymentMethod), nullable=False)
    transaction_id = Column(String, nullable=True)
    description = Column(String, nullable=True)
    metadata_json = Column("metadata", JSON, nullable=True)  # "metadata" is reserved on declarative classes
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    agent = relationship("Agent", back_populates="payments")
    subscription = relationship("Subscription", back_populates="payments")
