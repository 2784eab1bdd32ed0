"""
Contact form submissions (support tickets)
"""
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from breakfast4u.database import Base
from breakfast4u.utils.db_compat import enum_type
from breakfast4u.utils.helpers import utcnow


class ContactCategory(str, Enum):
    GENERAL_INQUIRY = "General Inquiry"
    PARTNERSHIP = "Partnership Opportunities"
    TECHNICAL_SUPPORT = "Technical Support"
    FEEDBACK = "Feedback & Suggestions"
    BILLING = "Billing & Orders"
    OTHER = "Other"


class ContactStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class ContactPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String(10), nullable=True)
    category = Column(enum_type(ContactCategory), nullable=False, index=True)
    subject = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)

    status = Column(enum_type(ContactStatus), nullable=False, default=ContactStatus.NEW, index=True)
    priority = Column(enum_type(ContactPriority), nullable=False, default=ContactPriority.MEDIUM)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Response
    response = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)
    responded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    responded_by = relationship("User", foreign_keys=[responded_by_id])
