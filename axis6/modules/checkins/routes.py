from fastapi import APIRouter, Depends, Query
from axis6.database.supabase_client import get_supabase
from axis6.modules.checkins.schemas import (
    CheckinToggle, CheckinBatchRequest, CheckinUpdate, CheckinResponse, ToggleResponse, BatchResponse
)
from axis6.modules.checkins.service import CheckinService
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional
from datetime import date

router = APIRouter(prefix="/checkins", tags=["checkins"])


def get_checkin_service(supabase: Client = Depends(get_supabase)) -> CheckinService:
    return CheckinService(supabase)


@router.get("", response_model=List[CheckinResponse])
async def list_checkins(
    checkin_date: Optional[date] = Query(None, alias="date"),
    category_id: Optional[int] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service)
):
    return service.list_checkins(user_data["id"], day=checkin_date, category_id=category_id)


@router.post("/toggle", response_model=ToggleResponse)
async def toggle_checkin(
    toggle_data: CheckinToggle,
    user_data: Dict = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
    supabase: Client = Depends(get_supabase)
):
    """Mark an axis completed (or not) for today or a recent day"""
    today = ProfileService(supabase).today_for(user_data["id"])
    return service.toggle(user_data["id"], toggle_data, today)


@router.post("/batch", response_model=BatchResponse)
async def batch_toggle(
    batch_data: CheckinBatchRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
    supabase: Client = Depends(get_supabase)
):
    today = ProfileService(supabase).today_for(user_data["id"])
    return service.batch_toggle(user_data["id"], batch_data.checkins, today)


@router.put("", response_model=CheckinResponse)
async def update_checkin(
    update_data: CheckinUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
    supabase: Client = Depends(get_supabase)
):
    """Update mood and notes of an existing check-in"""
    today = ProfileService(supabase).today_for(user_data["id"])
    return service.update_checkin(user_data["id"], update_data, today)


@router.delete("", status_code=204)
async def delete_checkin(
    category_id: int,
    checkin_date: Optional[date] = Query(None, alias="date"),
    user_data: Dict = Depends(get_current_user_id),
    service: CheckinService = Depends(get_checkin_service),
    supabase: Client = Depends(get_supabase)
):
    today = ProfileService(supabase).today_for(user_data["id"])
    service.delete_checkin(user_data["id"], category_id, checkin_date or today, today)
    return None
