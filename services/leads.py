from typing import List, Optional

from loguru import logger
from sqlmodel import Session, or_, select

from errors import NotFoundError, ValidationError
from lifecycle import ensure_lead_transition
from models import Appointment, Lead, LeadPriority, LeadStatus, Profile, Role, TimelineEntry, TimelineTag
from policy import load_visible_lead, require_role, visible_lead_filter
from schemas.lead_schema import InquiryCreateSchema, LeadCreateSchema, LeadUpdateSchema
from services.profiles import resolve_assignee
from services.timeline import record_entry
from utils import clean_optional, normalize_email, utcnow


_UNSET = object()


# -------------------------------
# Reads
# -------------------------------
def list_leads(
    db: Session,
    actor: Profile,
    status: Optional[LeadStatus] = None,
    priority: Optional[LeadPriority] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[Lead]:
    stmt = visible_lead_filter(actor)(select(Lead))
    if status:
        stmt = stmt.where(Lead.status == status)
    if priority:
        stmt = stmt.where(Lead.priority == priority)
    stmt = stmt.order_by(Lead.created_at.desc(), Lead.id.desc()).offset(offset).limit(limit)
    return list(db.exec(stmt).all())


def get_lead(db: Session, lead_id: int, actor: Profile) -> Lead:
    return load_visible_lead(db, lead_id, actor)


def list_schedulable_leads(db: Session, actor: Profile) -> List[Lead]:
    """Leads the actor may book an appointment for."""
    if actor.role == Role.ADMIN:
        stmt = select(Lead)
    elif actor.role == Role.AGENT:
        stmt = select(Lead).where(
            or_(Lead.assigned_agent_id == actor.id, Lead.assigned_agent_id == None)  # noqa: E711
        )
    else:
        return []
    return list(db.exec(stmt.order_by(Lead.full_name)).all())


# -------------------------------
# Mutations
# -------------------------------
def _required_fields(full_name: Optional[str], email: Optional[str]) -> tuple:
    full_name = (full_name or "").strip()
    email = normalize_email(email)
    if not full_name:
        raise ValidationError("Full name is required")
    if not email:
        raise ValidationError("Email is required")
    return full_name, email


def apply_assignment(
    db: Session,
    lead: Lead,
    agent: Profile,
    actor_id: Optional[int],
    move_status: bool = True,
) -> None:
    """Bind ``lead`` to ``agent`` and log it. The caller commits."""
    lead.assigned_agent_id = agent.id
    if move_status and lead.status == LeadStatus.NEW:
        lead.status = LeadStatus.ASSIGNED
    lead.updated_at = utcnow()
    db.add(lead)
    record_entry(db, lead.id, f"Lead assigned to {agent.full_name}", TimelineTag.ASSIGNMENT_CHANGE, actor_id)


def create_lead(db: Session, payload: LeadCreateSchema, actor: Profile) -> Lead:
    require_role(actor, Role.ADMIN, Role.AGENT, action="create leads")
    full_name, email = _required_fields(payload.full_name, payload.email)

    # Admins may hand the lead to anyone eligible; an agent's lead is their own
    agent = None
    if actor.role == Role.ADMIN and payload.assigned_agent_id:
        agent = resolve_assignee(db, payload.assigned_agent_id)
    elif actor.role == Role.AGENT:
        agent = actor

    lead = Lead(
        full_name=full_name,
        email=email,
        phone=clean_optional(payload.phone),
        country_of_interest=clean_optional(payload.country_of_interest),
        visa_type=clean_optional(payload.visa_type),
        message=clean_optional(payload.message),
        priority=payload.priority or LeadPriority.MEDIUM,
        status=LeadStatus.ASSIGNED if agent else LeadStatus.NEW,
        assigned_agent_id=agent.id if agent else None,
        source=payload.source or "admin_dashboard",
    )
    db.add(lead)
    db.flush()
    record_entry(db, lead.id, "Lead created", TimelineTag.STATUS_CHANGE, actor.id)
    if agent:
        record_entry(db, lead.id, f"Lead assigned to {agent.full_name}", TimelineTag.ASSIGNMENT_CHANGE, actor.id)
    db.commit()
    db.refresh(lead)
    logger.info("Lead {} created by profile {}", lead.id, actor.id)
    return lead


def submit_inquiry(db: Session, payload: InquiryCreateSchema) -> Lead:
    """Public landing-page inquiry: unassigned, status new."""
    full_name, email = _required_fields(payload.full_name, payload.email)
    lead = Lead(
        full_name=full_name,
        email=email,
        phone=clean_optional(payload.phone),
        country_of_interest=clean_optional(payload.country_of_interest),
        visa_type=clean_optional(payload.visa_type),
        message=clean_optional(payload.message),
        status=LeadStatus.NEW,
        priority=LeadPriority.MEDIUM,
        source="website",
    )
    db.add(lead)
    db.flush()
    record_entry(db, lead.id, "Lead created from website inquiry", TimelineTag.STATUS_CHANGE)
    db.commit()
    db.refresh(lead)
    logger.info("Inquiry received, lead {}", lead.id)
    return lead


def update_lead(db: Session, lead_id: int, payload: LeadUpdateSchema, actor: Profile) -> Lead:
    lead = load_visible_lead(db, lead_id, actor)
    update_data = payload.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)
    agent_id = update_data.pop("assigned_agent_id", _UNSET)

    # 1. validate everything before touching the row
    if "full_name" in update_data and not (update_data["full_name"] or "").strip():
        raise ValidationError("Full name is required")
    if "email" in update_data:
        if not update_data["email"]:
            raise ValidationError("Email is required")
        update_data["email"] = normalize_email(update_data["email"])
    if "priority" in update_data and update_data["priority"] is None:
        update_data.pop("priority")
    for key in ("phone", "country_of_interest", "visa_type", "message"):
        if key in update_data:
            update_data[key] = clean_optional(update_data[key])

    if new_status is not None and new_status == lead.status:
        new_status = None
    if new_status is not None:
        ensure_lead_transition(lead.status, new_status)

    agent = None
    unassign = False
    if agent_id is not _UNSET and agent_id != lead.assigned_agent_id:
        if agent_id is None:
            require_role(actor, Role.ADMIN, action="unassign leads")
            unassign = True
        else:
            require_role(actor, Role.ADMIN, Role.AGENT, action="assign leads")
            agent = resolve_assignee(db, agent_id)

    # 2. apply
    changed = {k: v for k, v in update_data.items() if getattr(lead, k) != v}
    for key, value in changed.items():
        setattr(lead, key, value)
    if changed:
        record_entry(db, lead.id, "Lead details updated", TimelineTag.LEAD_UPDATE, actor.id)

    if agent:
        apply_assignment(db, lead, agent, actor.id, move_status=new_status is None)
    elif unassign:
        lead.assigned_agent_id = None
        record_entry(db, lead.id, "Lead unassigned", TimelineTag.ASSIGNMENT_CHANGE, actor.id)

    if new_status is not None:
        old_status = LeadStatus(lead.status)
        lead.status = new_status
        record_entry(
            db,
            lead.id,
            f"Status changed from {old_status.value} to {LeadStatus(new_status).value}",
            TimelineTag.STATUS_CHANGE,
            actor.id,
        )

    if not (changed or agent or unassign or new_status is not None):
        return lead

    lead.updated_at = utcnow()
    db.add(lead)
    db.commit()
    db.refresh(lead)
    logger.info("Lead {} updated by profile {}", lead.id, actor.id)
    return lead


def assign_lead(db: Session, lead_id: int, agent_id: int, actor: Profile) -> Lead:
    require_role(actor, Role.ADMIN, Role.AGENT, action="assign leads")
    lead = load_visible_lead(db, lead_id, actor)
    agent = resolve_assignee(db, agent_id)
    if lead.assigned_agent_id == agent.id:
        return lead

    apply_assignment(db, lead, agent, actor.id)
    db.commit()
    db.refresh(lead)
    logger.info("Lead {} assigned to profile {} by {}", lead.id, agent.id, actor.id)
    return lead


def delete_lead(db: Session, lead_id: int, actor: Profile) -> None:
    """
    Hard delete, admin only.

    The lead's appointments and timeline entries go with it in the same
    transaction.
    """
    require_role(actor, Role.ADMIN, action="delete leads")
    lead = db.get(Lead, lead_id)
    if not lead:
        raise NotFoundError("Lead not found")

    for appointment in db.exec(select(Appointment).where(Appointment.lead_id == lead.id)).all():
        db.delete(appointment)
    for entry in db.exec(select(TimelineEntry).where(TimelineEntry.lead_id == lead.id)).all():
        db.delete(entry)
    db.flush()
    db.delete(lead)
    db.commit()
    logger.info("Lead {} deleted by profile {}", lead_id, actor.id)


# -------------------------------
# To return the assigned agent's name
# -------------------------------
def add_agent_name(db: Session, lead: Lead) -> dict:
    agent = db.get(Profile, lead.assigned_agent_id) if lead.assigned_agent_id else None
    data = lead.model_dump()
    data["assigned_agent_name"] = agent.full_name if agent else None
    return data
