from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlmodel import Session

from database import get_session, store_operation
from models import LeadPriority, LeadStatus, Profile
from schemas.lead_schema import (
    LeadAssignSchema,
    LeadCreateSchema,
    LeadOptionSchema,
    LeadReadSchema,
    LeadUpdateSchema,
    RemarkCreateSchema,
    TimelineEntryReadSchema,
)
from security.oauth2 import get_current_user
from services import leads as lead_service
from services import timeline as timeline_service


router = APIRouter(
    tags=["Lead"],
    dependencies=[Depends(get_current_user)]
)


# -------------------------------
# Create lead
# -------------------------------
@router.post("/leads", response_model=LeadReadSchema, status_code=status.HTTP_201_CREATED)
def create_lead(
    payload: LeadCreateSchema,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "create lead"):
        lead = lead_service.create_lead(db, payload, current_user)
        return lead_service.add_agent_name(db, lead)


# -------------------------------
# List leads visible to the caller
# -------------------------------
@router.get("/leads", response_model=list[LeadReadSchema], status_code=status.HTTP_200_OK)
def get_leads(
    status_: Optional[LeadStatus] = Query(None, alias="status"),
    priority: Optional[LeadPriority] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "fetch leads"):
        leads = lead_service.list_leads(db, current_user, status=status_, priority=priority, limit=limit, offset=offset)
        return [lead_service.add_agent_name(db, lead) for lead in leads]


@router.get("/leads/schedulable", response_model=list[LeadOptionSchema], status_code=status.HTTP_200_OK)
def get_schedulable_leads(
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "fetch leads"):
        return lead_service.list_schedulable_leads(db, current_user)


@router.get("/leads/{lead_id}", response_model=LeadReadSchema, status_code=status.HTTP_200_OK)
def get_lead(
    lead_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "fetch lead"):
        lead = lead_service.get_lead(db, lead_id, current_user)
        return lead_service.add_agent_name(db, lead)


# -------------------------------
# Update lead
# -------------------------------
@router.patch("/leads/{lead_id}", response_model=LeadReadSchema, status_code=status.HTTP_200_OK)
def update_lead(
    lead_id: int = Path(...),
    payload: LeadUpdateSchema = ...,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "update lead"):
        lead = lead_service.update_lead(db, lead_id, payload, current_user)
        return lead_service.add_agent_name(db, lead)


@router.post("/leads/{lead_id}/assign", response_model=LeadReadSchema, status_code=status.HTTP_200_OK)
def assign_lead(
    payload: LeadAssignSchema,
    lead_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "assign lead"):
        lead = lead_service.assign_lead(db, lead_id, payload.agent_id, current_user)
        return lead_service.add_agent_name(db, lead)


@router.delete("/leads/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lead(
    lead_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "delete lead"):
        lead_service.delete_lead(db, lead_id, current_user)


# -------------------------------
# Remarks / timeline
# -------------------------------
@router.get("/leads/{lead_id}/timeline", response_model=list[TimelineEntryReadSchema], status_code=status.HTTP_200_OK)
def get_timeline(
    lead_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "fetch timeline"):
        entries = list(timeline_service.list_for_lead(db, lead_id, current_user))
        names = timeline_service.author_names(db, entries)
        return [timeline_service.to_read(entry, names) for entry in entries]


@router.post("/leads/{lead_id}/remarks", response_model=TimelineEntryReadSchema, status_code=status.HTTP_201_CREATED)
def add_remark(
    payload: RemarkCreateSchema,
    lead_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "add remark"):
        entry = timeline_service.add_remark(db, lead_id, current_user, payload.text, payload.tag)
        return timeline_service.to_read(entry, {current_user.id: current_user.full_name})
