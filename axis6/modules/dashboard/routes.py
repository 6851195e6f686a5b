from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.dashboard.schemas import DashboardResponse
from axis6.modules.dashboard.service import DashboardService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user_data: Dict = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Profile, today's axes with streaks, and this week's totals"""
    return service.get_dashboard(user_data["id"], email=user_data.get("email"))
