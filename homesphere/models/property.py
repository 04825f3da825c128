from sqlalchemy import Column, String, Integer, Float, Numeric, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homesphere.database.connection import Base
from homesphere.models.base import new_id, utcnow
from homesphere.models.enums import PropertyStatus, PropertyType, enum_column_type


class Property(Base):
    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=new_id)
    agent_id = Column(String, ForeignKey("agents.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    price = Column(Numeric(14, 2), nullable=False)
    currency = Column(String, nullable=False, default="NGN")
    address = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)  # Indexed for filtering
    state = Column(String, nullable=False)
    zip_code = Column(String, nullable=True)
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Float, nullable=False, default=0)
    square_footage = Column(Integer, nullable=True)
    property_type = Column(enum_column_type(PropertyType), nullable=False, index=True)
    status = Column(enum_column_type(PropertyStatus), nullable=False, default=PropertyStatus.PENDING, index=True)
    images = Column(JSON, nullable=False, default=list)  # Ordered list of URLs
    features = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    agent = relationship("Agent", back_populates="properties")
    reviews = relationship("Review", back_populates="property", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="property", cascade="all, delete-orphan", passive_deletes=True)

    # Composite indexes for common query patterns
    __table_args__ = (
        Index('idx_property_status_created', 'status', 'created_at'),
        Index('idx_property_agent_status', 'agent_id', 'status'),
        Index('idx_property_status_price', 'status', 'price'),
    )
