from __future__ import annotations

import pytest

from errors import ValidationError
from lifecycle import (
    APPOINTMENT_TRANSITIONS,
    LEAD_TRANSITIONS,
    can_transition_appointment,
    can_transition_lead,
    ensure_appointment_transition,
    ensure_lead_transition,
    is_terminal_appointment,
    is_terminal_lead,
)
from models import AppointmentStatus, LeadStatus


def test_every_status_has_a_transition_row() -> None:
    assert set(LEAD_TRANSITIONS) == set(LeadStatus)
    assert set(APPOINTMENT_TRANSITIONS) == set(AppointmentStatus)


def test_lead_happy_path_is_allowed() -> None:
    path = [
        LeadStatus.NEW,
        LeadStatus.ASSIGNED,
        LeadStatus.CONTACTED,
        LeadStatus.QUALIFIED,
        LeadStatus.CONVERTED,
    ]
    for current, target in zip(path, path[1:]):
        assert can_transition_lead(current, target)


@pytest.mark.parametrize("terminal", [LeadStatus.CONVERTED, LeadStatus.REJECTED])
def test_closed_leads_cannot_move(terminal) -> None:
    assert is_terminal_lead(terminal)
    with pytest.raises(ValidationError):
        ensure_lead_transition(terminal, LeadStatus.NEW)


def test_any_open_lead_can_be_rejected() -> None:
    for status in LeadStatus:
        if not is_terminal_lead(status):
            assert can_transition_lead(status, LeadStatus.REJECTED)


def test_scheduled_appointment_moves() -> None:
    for target in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.RESCHEDULED):
        ensure_appointment_transition(AppointmentStatus.SCHEDULED, target)


def test_rescheduled_goes_back_to_scheduled() -> None:
    assert can_transition_appointment(AppointmentStatus.RESCHEDULED, AppointmentStatus.SCHEDULED)
    assert not can_transition_appointment(AppointmentStatus.RESCHEDULED, AppointmentStatus.COMPLETED)


@pytest.mark.parametrize("terminal", [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED])
def test_completed_and_cancelled_are_terminal(terminal) -> None:
    assert is_terminal_appointment(terminal)
    with pytest.raises(ValidationError, match="cannot change"):
        ensure_appointment_transition(terminal, AppointmentStatus.SCHEDULED)


def test_plain_strings_are_accepted() -> None:
    assert can_transition_lead("new", LeadStatus.CONTACTED)
    assert can_transition_appointment("scheduled", AppointmentStatus.CANCELLED)
