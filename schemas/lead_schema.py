from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel
from pydantic import EmailStr, field_validator

from models import LeadPriority, LeadStatus, TimelineTag


def _strip(v):
    if isinstance(v, str):
        v = v.strip()
    return v


def _blank_to_none(v):
    if v is None:
        return None
    if isinstance(v, str) and v.strip() == "":
        return None
    return v.strip() if isinstance(v, str) else v


class InquiryCreateSchema(SQLModel):
    """Public landing-page inquiry."""

    full_name: str
    email: EmailStr
    phone: Optional[str] = None
    country_of_interest: Optional[str] = None
    visa_type: Optional[str] = None
    message: Optional[str] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_strings(cls, v):
        return _strip(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("phone", "country_of_interest", "visa_type", "message", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return _blank_to_none(v)


class LeadCreateSchema(InquiryCreateSchema):
    priority: LeadPriority = LeadPriority.MEDIUM
    assigned_agent_id: Optional[int] = None
    source: str = "admin_dashboard"

    @field_validator("assigned_agent_id", mode="before")
    @classmethod
    def empty_agent_to_none(cls, v):
        if v in ("", 0):
            return None
        return v


# Update schema: all editable fields optional
class LeadUpdateSchema(SQLModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    country_of_interest: Optional[str] = None
    visa_type: Optional[str] = None
    message: Optional[str] = None
    priority: Optional[LeadPriority] = None
    status: Optional[LeadStatus] = None
    assigned_agent_id: Optional[int] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_strings(cls, v):
        return _strip(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("phone", "country_of_interest", "visa_type", "message", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return _blank_to_none(v)


class LeadAssignSchema(SQLModel):
    agent_id: int


class LeadReadSchema(SQLModel):
    id: int
    full_name: str
    email: str
    phone: Optional[str]
    country_of_interest: Optional[str]
    visa_type: Optional[str]
    message: Optional[str]
    status: LeadStatus
    priority: LeadPriority
    source: str
    assigned_agent_id: Optional[int] = None
    assigned_agent_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LeadOptionSchema(SQLModel):
    id: int
    full_name: str
    email: str
    assigned_agent_id: Optional[int] = None


class RemarkCreateSchema(SQLModel):
    text: str
    tag: TimelineTag = TimelineTag.GENERAL


class TimelineEntryReadSchema(SQLModel):
    id: int
    lead_id: int
    user_id: Optional[int]
    author_name: Optional[str] = None
    text: str
    tag: TimelineTag
    created_at: datetime
