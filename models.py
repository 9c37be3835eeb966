# models.py
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint
from sqlalchemy import Column, DateTime, Text
from sqlalchemy.types import TypeDecorator

from utils import to_utc, utcnow


class UTCDateTime(TypeDecorator):
    """Stores UTC and always hands back timezone-aware values (SQLite drops the offset)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return to_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def utc_column(**kwargs) -> Column:
    return Column(UTCDateTime(), nullable=False, **kwargs)


class Role(str, Enum):
    ADMIN = "admin"
    AGENT = "agent"
    CONSULTANT = "consultant"


class LeadStatus(str, Enum):
    NEW = "new"
    ASSIGNED = "assigned"
    CONTACTED = "contacted"
    INTERESTED = "interested"
    QUALIFIED = "qualified"
    APPOINTMENT_SCHEDULED = "appointment_scheduled"
    CONSULTATION_COMPLETED = "consultation_completed"
    CONVERTED = "converted"
    REJECTED = "rejected"


class LeadPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class TimelineTag(str, Enum):
    GENERAL = "general"
    CALL_LOG = "call_log"
    APPOINTMENT_UPDATE = "appointment_update"
    STATUS_CHANGE = "status_change"
    ASSIGNMENT_CHANGE = "assignment_change"
    LEAD_UPDATE = "lead_update"


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("email", name="uq_profiles_email"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    email: str = Field(index=True, unique=True, nullable=False)
    password_hash: str = Field(nullable=False)
    role: Role = Field(default=Role.AGENT, description="Role: admin | agent | consultant")
    is_active: bool = Field(default=True)
    avatar_url: Optional[str] = Field(default=None, nullable=True)
    created_at: datetime = Field(default_factory=utcnow, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=utc_column())


class Lead(SQLModel, table=True):
    __tablename__ = "leads"

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    email: str = Field(index=True, nullable=False)
    phone: Optional[str] = Field(default=None, nullable=True)
    country_of_interest: Optional[str] = Field(default=None, nullable=True)
    visa_type: Optional[str] = Field(default=None, nullable=True)
    message: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    status: LeadStatus = Field(default=LeadStatus.NEW, index=True)
    priority: LeadPriority = Field(default=LeadPriority.MEDIUM)
    assigned_agent_id: Optional[int] = Field(
        default=None,
        foreign_key="profiles.id",
        nullable=True,
        index=True,
    )
    source: str = Field(default="website")
    created_at: datetime = Field(default_factory=utcnow, sa_column=utc_column(index=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=utc_column())


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"

    id: Optional[int] = Field(default=None, primary_key=True)
    lead_id: int = Field(foreign_key="leads.id", index=True, nullable=False)
    consultant_id: Optional[int] = Field(default=None, foreign_key="profiles.id", index=True)
    created_by: Optional[int] = Field(default=None, foreign_key="profiles.id")
    scheduled_at: datetime = Field(sa_column=utc_column(index=True))
    duration_minutes: int = Field(default=60)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=utc_column())


class TimelineEntry(SQLModel, table=True):
    """One immutable remark or event on a lead's timeline."""

    __tablename__ = "lead_timeline"

    id: Optional[int] = Field(default=None, primary_key=True)
    lead_id: int = Field(foreign_key="leads.id", index=True, nullable=False)
    # absent for system-generated entries
    user_id: Optional[int] = Field(default=None, foreign_key="profiles.id", nullable=True)
    text: str = Field(sa_column=Column(Text, nullable=False))
    tag: TimelineTag = Field(default=TimelineTag.GENERAL)
    created_at: datetime = Field(default_factory=utcnow, sa_column=utc_column(index=True))
