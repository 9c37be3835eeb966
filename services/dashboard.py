"""
Read-only dashboard aggregation over the lead and appointment registries.

Each count is its own query; a failed count is logged and reported as zero so
the rest of the dashboard still renders.
"""
from datetime import timedelta
from typing import Callable, List

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from config import NEW_LEAD_WINDOW_DAYS
from models import Appointment, AppointmentStatus, Lead, Profile, Role
from policy import visible_appointment_filter, visible_lead_filter
from schemas.dashboard_schema import DashboardStats, NavigationItem
from utils import utcnow


NAVIGATION = [
    NavigationItem(title="Dashboard", url="/dashboard"),
    NavigationItem(title="Leads", url="/dashboard/leads"),
    NavigationItem(title="Appointments", url="/dashboard/appointments"),
    NavigationItem(title="Settings", url="/dashboard/settings"),
]

QUICK_ACTIONS = {
    Role.ADMIN: ["Add a new lead", "Assign leads to agents", "Review all appointments"],
    Role.AGENT: ["Follow up with your leads", "Schedule a consultation"],
    Role.CONSULTANT: ["Review today's appointments", "Mark consultations completed"],
}


def _count(db: Session, name: str, build: Callable) -> int:
    try:
        return db.exec(build()).one() or 0
    except SQLAlchemyError:
        logger.exception("Dashboard count '{}' failed", name)
        db.rollback()
        return 0


def dashboard_stats(db: Session, actor: Profile) -> DashboardStats:
    leads = visible_lead_filter(actor)
    appointments = visible_appointment_filter(actor)
    since = utcnow() - timedelta(days=NEW_LEAD_WINDOW_DAYS)

    return DashboardStats(
        total_leads=_count(db, "total_leads", lambda: leads(select(func.count(Lead.id)))),
        total_appointments=_count(
            db, "total_appointments", lambda: appointments(select(func.count(Appointment.id)))
        ),
        new_leads=_count(
            db, "new_leads", lambda: leads(select(func.count(Lead.id)).where(Lead.created_at >= since))
        ),
        pending_appointments=_count(
            db,
            "pending_appointments",
            lambda: appointments(
                select(func.count(Appointment.id)).where(Appointment.status == AppointmentStatus.SCHEDULED)
            ),
        ),
    )


def navigation_for(role: Role) -> List[NavigationItem]:
    # every role gets the same menu; what each page shows is scoped by policy
    return list(NAVIGATION)


def quick_actions_for(role: Role) -> List[str]:
    return list(QUICK_ACTIONS.get(Role(role), []))
