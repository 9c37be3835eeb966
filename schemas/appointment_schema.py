from datetime import date, datetime, time
from typing import Optional
from sqlmodel import SQLModel, Field
from pydantic import field_validator

from models import AppointmentStatus


class AppointmentCreateSchema(SQLModel):
    lead_id: int
    consultant_id: int
    scheduled_date: date
    scheduled_time: time  # HH:MM, combined with scheduled_date
    duration_minutes: int = Field(default=60, gt=0)
    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    @classmethod
    def empty_notes_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


class AppointmentStatusSchema(SQLModel):
    status: AppointmentStatus
    # required when a rescheduled appointment goes back to scheduled
    scheduled_at: Optional[datetime] = None


class AppointmentReadSchema(SQLModel):
    id: int
    lead_id: int
    lead_name: Optional[str] = None
    lead_email: Optional[str] = None
    consultant_id: Optional[int]
    consultant_name: Optional[str] = None
    created_by: Optional[int]
    created_by_name: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: int
    notes: Optional[str]
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime
