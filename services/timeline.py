"""
Append-only remark/timeline log for leads.

Entries are only ever inserted; reads are newest first.
"""
from typing import Iterator, Optional

from loguru import logger
from sqlmodel import Session, select

from errors import ValidationError
from models import Profile, TimelineEntry, TimelineTag
from policy import load_visible_lead


def record_entry(
    db: Session,
    lead_id: int,
    text: str,
    tag: TimelineTag,
    actor_id: Optional[int] = None,
) -> TimelineEntry:
    """Stage an entry inside the caller's transaction. The caller commits."""
    entry = TimelineEntry(lead_id=lead_id, user_id=actor_id, text=text, tag=tag)
    db.add(entry)
    return entry


def add_remark(
    db: Session,
    lead_id: int,
    actor: Profile,
    text: str,
    tag: TimelineTag = TimelineTag.GENERAL,
) -> TimelineEntry:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Remark text is required")

    lead = load_visible_lead(db, lead_id, actor)
    entry = record_entry(db, lead.id, text, tag, actor_id=actor.id)
    db.commit()
    db.refresh(entry)
    logger.info("Remark {} added to lead {} by profile {}", entry.id, lead.id, actor.id)
    return entry


def iter_timeline(db: Session, lead_id: int) -> Iterator[TimelineEntry]:
    stmt = (
        select(TimelineEntry)
        .where(TimelineEntry.lead_id == lead_id)
        .order_by(TimelineEntry.created_at.desc(), TimelineEntry.id.desc())
    )
    yield from db.exec(stmt)


def list_for_lead(db: Session, lead_id: int, actor: Profile) -> Iterator[TimelineEntry]:
    """
    Timeline of a lead visible to ``actor``, newest first.

    The visibility check runs eagerly; the entries are fetched lazily and every
    call issues a fresh query.
    """
    lead = load_visible_lead(db, lead_id, actor)
    return iter_timeline(db, lead.id)


def author_names(db: Session, entries) -> dict:
    user_ids = {e.user_id for e in entries if e.user_id is not None}
    if not user_ids:
        return {}
    rows = db.exec(select(Profile).where(Profile.id.in_(user_ids))).all()
    return {p.id: p.full_name for p in rows}


def to_read(entry: TimelineEntry, names: dict) -> dict:
    data = entry.model_dump()
    data["author_name"] = names.get(entry.user_id)
    return data
