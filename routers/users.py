from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlmodel import Session
from database import get_session, store_operation
from models import Profile, Role
from security.oauth2 import get_current_user
from schemas.user_schema import ProfileReadSchema, RoleUpdateSchema
from services import profiles as profile_service

router = APIRouter(
    tags=["User"],
    dependencies=[Depends(get_current_user)]
)


# Admins see everyone; other staff fetch agents or consultants for pickers
@router.get("/users", response_model=list[ProfileReadSchema], status_code=status.HTTP_200_OK)
def get_users(
    role: Optional[Role] = Query(None),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user)
):
    with store_operation(db, "fetch users"):
        return profile_service.list_profiles(db, current_user, role=role)


@router.patch("/users/{profile_id}/role", response_model=ProfileReadSchema, status_code=status.HTTP_200_OK)
def update_user_role(
    payload: RoleUpdateSchema,
    profile_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user)
):
    with store_operation(db, "update role"):
        return profile_service.set_role(db, profile_id, payload.role, current_user)
