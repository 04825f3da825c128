from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homesphere.database.connection import Base
from homesphere.models.base import new_id, utcnow
from homesphere.models.enums import ReviewStatus, enum_column_type


@dataclass(frozen=True)
class PropertyTarget:
    id: str
    kind = "property"


@dataclass(frozen=True)
class AgentTarget:
    id: str
    kind = "agent"


ReviewTarget = Union[PropertyTarget, AgentTarget]


def review_target_from_ids(property_id: Optional[str], agent_id: Optional[str]) -> ReviewTarget:
    """
    Build the review target from the two optional ids a client may send.
    Exactly one must be present.
    """
    property_id = (property_id or "").strip() or None
    agent_id = (agent_id or "").strip() or None

    if property_id and agent_id:
        raise ValueError("A review must target either a property or an agent, not both")
    if property_id:
        return PropertyTarget(property_id)
    if agent_id:
        return AgentTarget(agent_id)
    raise ValueError("Either propertyId or agentId is required")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = Column(String, ForeignKey("properties.id", ondelete="CASCADE"), nullable=True, index=True)
    agent_id = Column(String, ForeignKey("agents.id", ondelete="CASCADE"), nullable=True, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(String, nullable=False)
    status = Column(enum_column_type(ReviewStatus), nullable=False, default=ReviewStatus.PENDING, index=True)
    likes = Column(Integer, nullable=False, default=0)
    dislikes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    # Defined before the "property" relationship, which shadows the builtin in this class body
    @property
    def target(self) -> ReviewTarget:
        if self.property_id:
            return PropertyTarget(self.property_id)
        return AgentTarget(self.agent_id)

    @target.setter
    def target(self, value: ReviewTarget) -> None:
        self.property_id = value.id if isinstance(value, PropertyTarget) else None
        self.agent_id = value.id if isinstance(value, AgentTarget) else None

    user = relationship("User", back_populates="reviews")
    property = relationship("Property", back_populates="reviews")
    agent = relationship("Agent", back_populates="reviews")

    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        Index('idx_review_status_created', 'status', 'created_at'),
    )
