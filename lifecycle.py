"""
Status transition tables for leads and appointments.

Every status write goes through ``ensure_lead_transition`` or
``ensure_appointment_transition``; callers decide what a same-status
request means before asking.
"""
from models import AppointmentStatus, LeadStatus
from errors import ValidationError


LEAD_TRANSITIONS: dict[LeadStatus, frozenset[LeadStatus]] = {
    LeadStatus.NEW: frozenset({
        LeadStatus.ASSIGNED,
        LeadStatus.CONTACTED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.ASSIGNED: frozenset({
        LeadStatus.CONTACTED,
        LeadStatus.INTERESTED,
        LeadStatus.APPOINTMENT_SCHEDULED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.CONTACTED: frozenset({
        LeadStatus.INTERESTED,
        LeadStatus.QUALIFIED,
        LeadStatus.APPOINTMENT_SCHEDULED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.INTERESTED: frozenset({
        LeadStatus.QUALIFIED,
        LeadStatus.APPOINTMENT_SCHEDULED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.QUALIFIED: frozenset({
        LeadStatus.APPOINTMENT_SCHEDULED,
        LeadStatus.CONVERTED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.APPOINTMENT_SCHEDULED: frozenset({
        LeadStatus.CONSULTATION_COMPLETED,
        LeadStatus.QUALIFIED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.CONSULTATION_COMPLETED: frozenset({
        LeadStatus.CONVERTED,
        LeadStatus.REJECTED,
    }),
    LeadStatus.CONVERTED: frozenset(),
    LeadStatus.REJECTED: frozenset(),
}


APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    }),
    AppointmentStatus.RESCHEDULED: frozenset({
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def can_transition_lead(current: LeadStatus, target: LeadStatus) -> bool:
    return target in LEAD_TRANSITIONS[LeadStatus(current)]


def can_transition_appointment(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in APPOINTMENT_TRANSITIONS[AppointmentStatus(current)]


def is_terminal_lead(status: LeadStatus) -> bool:
    return not LEAD_TRANSITIONS[LeadStatus(status)]


def is_terminal_appointment(status: AppointmentStatus) -> bool:
    return not APPOINTMENT_TRANSITIONS[AppointmentStatus(status)]


def ensure_lead_transition(current: LeadStatus, target: LeadStatus) -> None:
    if not can_transition_lead(current, target):
        raise ValidationError(
            f"Lead status cannot change from {LeadStatus(current).value} to {LeadStatus(target).value}"
        )


def ensure_appointment_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    if not can_transition_appointment(current, target):
        raise ValidationError(
            f"Appointment status cannot change from "
            f"{AppointmentStatus(current).value} to {AppointmentStatus(target).value}"
        )
