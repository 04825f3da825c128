from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homesphere.database.connection import Base
from homesphere.models.base import new_id, utcnow
from homesphere.models.enums import ContactStatus, enum_column_type


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    subject = Column(String, nullable=False)
    message = Column(String, nullable=False)
    inquiry_type = Column(String, nullable=False)
    status = Column(enum_column_type(ContactStatus), nullable=False, default=ContactStatus.NEW, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    agent_id = Column(String, ForeignKey("agents.id", ondelete="SET NULL"), nullable=True)
    property_id = Column(String, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    user = relationship("User")
    agent = relationship("Agent")
    property = relationship("Property")

    __table_args__ = (
        Index('idx_contact_status_created', 'status', 'created_at'),
    )
