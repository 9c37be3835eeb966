"""
Role-based visibility and authority, shared by every registry query.

The filters follow the ``filter_stmt`` shape: a function taking a select
statement over the entity and returning it narrowed to what the actor may see.
"""
from typing import Callable

from loguru import logger
from sqlmodel import select

from errors import AccessDeniedError, NotFoundError
from models import Appointment, Lead, Profile, Role


def visible_lead_filter(actor: Profile) -> Callable:
    def filter_stmt(stmt):
        if actor.role == Role.ADMIN:
            return stmt
        if actor.role == Role.AGENT:
            return stmt.where(Lead.assigned_agent_id == actor.id)
        # consultants see the leads they hold appointments with
        booked = select(Appointment.lead_id).where(Appointment.consultant_id == actor.id)
        return stmt.where(Lead.id.in_(booked))
    return filter_stmt


def visible_appointment_filter(actor: Profile) -> Callable:
    def filter_stmt(stmt):
        if actor.role == Role.ADMIN:
            return stmt
        if actor.role == Role.CONSULTANT:
            return stmt.where(Appointment.consultant_id == actor.id)
        own_leads = select(Lead.id).where(Lead.assigned_agent_id == actor.id)
        return stmt.where(Appointment.lead_id.in_(own_leads))
    return filter_stmt


def require_role(actor: Profile, *roles: Role, action: str) -> None:
    """Raise AccessDeniedError unless the actor holds one of ``roles``."""
    if actor.role not in roles:
        logger.warning("Denied '{}' for profile {} with role {}", action, actor.id, Role(actor.role).value)
        raise AccessDeniedError(f"Your role is not allowed to {action}")


def can_assign_to(profile: Profile) -> bool:
    return profile.role in (Role.AGENT, Role.ADMIN)


def load_visible_lead(db, lead_id: int, actor: Profile) -> Lead:
    """Fetch a lead through the actor's visibility filter or raise NotFoundError."""
    stmt = visible_lead_filter(actor)(select(Lead)).where(Lead.id == lead_id)
    lead = db.exec(stmt).one_or_none()
    if not lead:
        raise NotFoundError("Lead not found or access denied")
    return lead


def load_visible_appointment(db, appointment_id: int, actor: Profile) -> Appointment:
    stmt = visible_appointment_filter(actor)(select(Appointment)).where(Appointment.id == appointment_id)
    appointment = db.exec(stmt).one_or_none()
    if not appointment:
        raise NotFoundError("Appointment not found or access denied")
    return appointment
