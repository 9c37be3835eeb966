from typing import List, Optional

from loguru import logger
from sqlmodel import Session, select

from errors import AccessDeniedError, NotFoundError, ValidationError
from models import Appointment, Lead, Profile, Role
from policy import can_assign_to, require_role
from schemas.user_schema import ProfileUpdateSchema, SignupSchema
from security.hashing import hash_password, verify_password
from utils import utcnow


def get_profile(db: Session, profile_id: int) -> Profile:
    profile = db.get(Profile, profile_id)
    if not profile:
        raise NotFoundError(f"Profile {profile_id} not found")
    return profile


def get_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.exec(select(Profile).where(Profile.email == email.strip().lower())).first()


def resolve_assignee(db: Session, agent_id: int) -> Profile:
    """The profile a lead may be assigned to: an agent or an admin."""
    agent = get_profile(db, agent_id)
    if not can_assign_to(agent):
        raise ValidationError(f"{agent.full_name} is not an agent or admin and cannot own leads")
    return agent


def resolve_consultant(db: Session, consultant_id: int) -> Profile:
    consultant = get_profile(db, consultant_id)
    if consultant.role != Role.CONSULTANT:
        raise ValidationError(f"{consultant.full_name} is not a consultant")
    return consultant


def list_profiles(db: Session, actor: Profile, role: Optional[Role] = None) -> List[Profile]:
    # Only admin can browse every profile; staff pick from one role at a time
    if role is None and actor.role != Role.ADMIN:
        raise AccessDeniedError("Filter by role to list profiles")
    stmt = select(Profile)
    if role is not None:
        # pickers only offer people who can still be picked
        stmt = stmt.where(Profile.role == role, Profile.is_active == True)  # noqa: E712
    return list(db.exec(stmt.order_by(Profile.full_name)).all())


def signup(db: Session, payload: SignupSchema, role: Role = Role.AGENT) -> Profile:
    if not payload.full_name:
        raise ValidationError("Full name is required")
    if get_by_email(db, payload.email):
        raise ValidationError("An account with this email already exists")

    profile = Profile(
        full_name=payload.full_name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=role,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Profile {} created with role {}", profile.id, Role(role).value)
    return profile


def authenticate(db: Session, email: str, password: str) -> Optional[Profile]:
    profile = get_by_email(db, email)
    if not profile or not verify_password(password, profile.password_hash):
        return None
    return profile


def update_profile(db: Session, actor: Profile, payload: ProfileUpdateSchema) -> Profile:
    update_data = payload.model_dump(exclude_unset=True)
    if "full_name" in update_data and not update_data["full_name"]:
        raise ValidationError("Full name is required")
    if update_data.get("email") and update_data["email"] != actor.email:
        if get_by_email(db, update_data["email"]):
            raise ValidationError("An account with this email already exists")
    if "email" in update_data and not update_data["email"]:
        update_data.pop("email")

    for key, value in update_data.items():
        setattr(actor, key, value)
    actor.updated_at = utcnow()
    db.add(actor)
    db.commit()
    db.refresh(actor)
    return actor


def change_password(db: Session, actor: Profile, new_password: str, confirm_password: str) -> None:
    if new_password != confirm_password:
        raise ValidationError("New passwords don't match")
    actor.password_hash = hash_password(new_password)
    actor.updated_at = utcnow()
    db.add(actor)
    db.commit()
    logger.info("Password changed for profile {}", actor.id)


def _ensure_role_keeps_references(db: Session, profile: Profile, role: Role) -> None:
    """Leads must stay owned by an agent or admin; appointments by a consultant."""
    if role not in (Role.AGENT, Role.ADMIN):
        owned = db.exec(select(Lead.id).where(Lead.assigned_agent_id == profile.id)).first()
        if owned is not None:
            raise ValidationError(
                f"{profile.full_name} still owns leads; reassign them before changing the role"
            )
    if role != Role.CONSULTANT:
        booked = db.exec(select(Appointment.id).where(Appointment.consultant_id == profile.id)).first()
        if booked is not None:
            raise ValidationError(
                f"{profile.full_name} still has appointments as consultant; they must stay a consultant"
            )


def set_role(db: Session, profile_id: int, role: Role, actor: Profile) -> Profile:
    require_role(actor, Role.ADMIN, action="change roles")
    profile = get_profile(db, profile_id)
    _ensure_role_keeps_references(db, profile, role)
    profile.role = role
    profile.updated_at = utcnow()
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Profile {} is now {} (changed by {})", profile.id, Role(role).value, actor.id)
    return profile


def bootstrap_admin(db: Session, email: Optional[str], password: Optional[str], full_name: str) -> Optional[Profile]:
    if not email or not password:
        return None
    if get_by_email(db, email):
        return None
    return signup(db, SignupSchema(email=email, password=password, full_name=full_name), role=Role.ADMIN)
