from __future__ import annotations

from datetime import time, timedelta

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import database
from models import Appointment, AppointmentStatus, Lead, Profile, Role
from security.hashing import hash_password
from utils import combine_schedule, utcnow

PASSWORD = "secret123"
# hashing is slow on purpose; every fixture profile shares one hash
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


def make_profile(db: Session, full_name: str, email: str, role: Role) -> Profile:
    profile = Profile(full_name=full_name, email=email, password_hash=PASSWORD_HASH, role=role)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def make_lead(db: Session, full_name: str = "Ravi Kumar", **fields) -> Lead:
    fields.setdefault("email", f"{full_name.split()[0].lower()}@mail.io")
    lead = Lead(full_name=full_name, **fields)
    db.add(lead)
    db.commit()
    db.refresh(lead)
    return lead


def make_appointment(db: Session, lead: Lead, consultant: Profile, days_ahead: int = 2, **fields) -> Appointment:
    appointment = Appointment(
        lead_id=lead.id,
        consultant_id=consultant.id,
        scheduled_at=utcnow() + timedelta(days=days_ahead),
        status=fields.pop("status", AppointmentStatus.SCHEDULED),
        **fields,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


@pytest.fixture
def admin(db) -> Profile:
    return make_profile(db, "Asha Admin", "admin@visacrm.io", Role.ADMIN)


@pytest.fixture
def agent(db) -> Profile:
    return make_profile(db, "Arjun Agent", "arjun@visacrm.io", Role.AGENT)


@pytest.fixture
def other_agent(db) -> Profile:
    return make_profile(db, "Bela Agent", "bela@visacrm.io", Role.AGENT)


@pytest.fixture
def consultant(db) -> Profile:
    return make_profile(db, "Chen Consultant", "chen@visacrm.io", Role.CONSULTANT)


@pytest.fixture
def other_consultant(db) -> Profile:
    return make_profile(db, "Dina Consultant", "dina@visacrm.io", Role.CONSULTANT)


@pytest.fixture
def future_slot():
    """A (date, time) pair three days from now."""
    day = (utcnow() + timedelta(days=3)).date()
    slot = time(10, 30)
    return day, slot, combine_schedule(day, slot)
