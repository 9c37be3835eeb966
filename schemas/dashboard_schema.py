from typing import List
from sqlmodel import SQLModel

from models import Role


class DashboardStats(SQLModel):
    total_leads: int = 0
    total_appointments: int = 0
    new_leads: int = 0
    pending_appointments: int = 0


class NavigationItem(SQLModel):
    title: str
    url: str


class DashboardReadSchema(SQLModel):
    full_name: str
    role: Role
    stats: DashboardStats
    navigation: List[NavigationItem]
    quick_actions: List[str]
