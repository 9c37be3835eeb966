from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from database import get_session
from models import Profile
from schemas.dashboard_schema import DashboardReadSchema
from security.oauth2 import get_current_user
from services import dashboard as dashboard_service

router = APIRouter(
    tags=["Dashboard"],
    dependencies=[Depends(get_current_user)]
)


# Counts degrade to zero individually, so no store_operation wrapper here
@router.get("/dashboard", response_model=DashboardReadSchema, status_code=status.HTTP_200_OK)
def get_dashboard(
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    return DashboardReadSchema(
        full_name=current_user.full_name,
        role=current_user.role,
        stats=dashboard_service.dashboard_stats(db, current_user),
        navigation=dashboard_service.navigation_for(current_user.role),
        quick_actions=dashboard_service.quick_actions_for(current_user.role),
    )
