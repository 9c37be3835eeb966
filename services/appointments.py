"""
Appointment scheduling.

Naive by intent: a consultant may hold overlapping appointments; nothing here
checks for conflicts.
"""
from datetime import date, datetime, time
from typing import List, Optional

from loguru import logger
from sqlmodel import Session, select

from errors import AccessDeniedError, NotFoundError, ValidationError
from lifecycle import ensure_appointment_transition
from models import Appointment, AppointmentStatus, Lead, Profile, Role, TimelineTag
from policy import load_visible_appointment, require_role, visible_appointment_filter
from services.leads import apply_assignment
from services.profiles import resolve_consultant
from services.timeline import record_entry
from utils import combine_schedule, to_utc, utcnow

# only the appointment's consultant (or an admin) closes it out
CLOSING_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED})


def _format_when(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC")


def _ensure_future(scheduled_at: datetime) -> None:
    if scheduled_at <= utcnow():
        raise ValidationError("Appointments must be scheduled in the future")


def list_appointments(
    db: Session,
    actor: Profile,
    status: Optional[AppointmentStatus] = None,
) -> List[Appointment]:
    stmt = visible_appointment_filter(actor)(select(Appointment))
    if status:
        stmt = stmt.where(Appointment.status == status)
    stmt = stmt.order_by(Appointment.scheduled_at.asc(), Appointment.id.asc())
    return list(db.exec(stmt).all())


def get_appointment(db: Session, appointment_id: int, actor: Profile) -> Appointment:
    return load_visible_appointment(db, appointment_id, actor)


def create_appointment(
    db: Session,
    lead_id: int,
    consultant_id: int,
    scheduled_date: date,
    scheduled_time: time,
    actor: Profile,
    duration_minutes: int = 60,
    notes: Optional[str] = None,
) -> Appointment:
    require_role(actor, Role.ADMIN, Role.AGENT, action="schedule appointments")
    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationError("Duration must be a positive number of minutes")

    scheduled_at = combine_schedule(scheduled_date, scheduled_time)
    _ensure_future(scheduled_at)

    lead = db.get(Lead, lead_id)
    if not lead:
        raise NotFoundError("Lead not found")
    consultant = resolve_consultant(db, consultant_id)

    # Agents book for their own leads, or claim unassigned ones by booking
    claim = False
    if actor.role == Role.AGENT:
        if lead.assigned_agent_id is None:
            claim = True
        elif lead.assigned_agent_id != actor.id:
            raise AccessDeniedError("This lead is assigned to another agent")

    if claim:
        apply_assignment(db, lead, actor, actor.id)

    appointment = Appointment(
        lead_id=lead.id,
        consultant_id=consultant.id,
        created_by=actor.id,
        scheduled_at=scheduled_at,
        duration_minutes=duration_minutes,
        notes=notes,
        status=AppointmentStatus.SCHEDULED,
    )
    db.add(appointment)
    record_entry(
        db,
        lead.id,
        f"Appointment scheduled for {_format_when(scheduled_at)} with {consultant.full_name}",
        TimelineTag.APPOINTMENT_UPDATE,
        actor.id,
    )
    db.commit()
    db.refresh(appointment)
    logger.info(
        "Appointment {} for lead {} with consultant {} created by profile {}",
        appointment.id, lead.id, consultant.id, actor.id,
    )
    return appointment


def update_status(
    db: Session,
    appointment_id: int,
    new_status: AppointmentStatus,
    actor: Profile,
    scheduled_at: Optional[datetime] = None,
) -> Appointment:
    appointment = load_visible_appointment(db, appointment_id, actor)
    new_status = AppointmentStatus(new_status)

    if new_status == appointment.status:
        return appointment

    if new_status in CLOSING_STATUSES:
        if actor.role != Role.ADMIN and appointment.consultant_id != actor.id:
            logger.warning("Profile {} tried to mark appointment {} {}", actor.id, appointment.id, new_status.value)
            raise AccessDeniedError(f"Only the consultant or an admin can mark an appointment {new_status.value}")
    ensure_appointment_transition(appointment.status, new_status)

    if new_status == AppointmentStatus.SCHEDULED:
        if scheduled_at is None:
            raise ValidationError("A new time is required to put the appointment back on the schedule")
        scheduled_at = to_utc(scheduled_at)
        _ensure_future(scheduled_at)
        appointment.scheduled_at = scheduled_at
        text = f"Appointment rescheduled to {_format_when(scheduled_at)}"
    else:
        text = f"Appointment on {_format_when(appointment.scheduled_at)} marked {new_status.value}"

    appointment.status = new_status
    appointment.updated_at = utcnow()
    db.add(appointment)
    record_entry(db, appointment.lead_id, text, TimelineTag.APPOINTMENT_UPDATE, actor.id)
    db.commit()
    db.refresh(appointment)
    logger.info("Appointment {} is now {} (profile {})", appointment.id, new_status.value, actor.id)
    return appointment


# -------------------------------
# To return lead, consultant and creator names
# -------------------------------
def add_names(db: Session, appointment: Appointment) -> dict:
    lead = db.get(Lead, appointment.lead_id)
    consultant = db.get(Profile, appointment.consultant_id) if appointment.consultant_id else None
    creator = db.get(Profile, appointment.created_by) if appointment.created_by else None
    data = appointment.model_dump()
    data["lead_name"] = lead.full_name if lead else None
    data["lead_email"] = lead.email if lead else None
    data["consultant_name"] = consultant.full_name if consultant else None
    data["created_by_name"] = creator.full_name if creator else None
    return data
