from fastapi import APIRouter, Depends, Query
from axis6.database.supabase_client import get_supabase
from axis6.modules.time_blocks.schemas import (
    TimeBlockCreate, TimeBlockUpdate, TimeBlockResponse, TimerStart, ActivityLogResponse,
    TimeDistributionResponse
)
from axis6.modules.time_blocks.service import TimeBlockService
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional
from datetime import date

router = APIRouter(prefix="/time-blocks", tags=["time-blocks"])


def get_time_block_service(supabase: Client = Depends(get_supabase)) -> TimeBlockService:
    return TimeBlockService(supabase)


@router.get("", response_model=List[TimeBlockResponse])
async def list_time_blocks(
    block_date: Optional[date] = Query(None, alias="date"),
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service),
    supabase: Client = Depends(get_supabase)
):
    """Plan for a day (defaults to the caller's today)"""
    day = block_date or ProfileService(supabase).today_for(user_data["id"])
    return service.list_blocks(user_data["id"], day)


@router.post("", response_model=TimeBlockResponse, status_code=201)
async def create_time_block(
    block_data: TimeBlockCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service)
):
    return service.create_block(user_data["id"], block_data)


@router.get("/timers/active", response_model=Optional[ActivityLogResponse])
async def get_active_timer(
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service)
):
    return service.get_active_timer(user_data["id"])


@router.post("/timers/start", response_model=ActivityLogResponse, status_code=201)
async def start_timer(
    timer_data: TimerStart,
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service)
):
    """Start tracking time; any running timer is stopped first"""
    return service.start_timer(user_data["id"], timer_data)


@router.post("/timers/{log_id}/stop", response_model=ActivityLogResponse)
async def stop_timer(
    log_id: int,
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service)
):
    return service.stop_timer(log_id, user_data["id"])


@router.get("/distribution", response_model=TimeDistributionResponse)
async def get_time_distribution(
    block_date: Optional[date] = Query(None, alias="date"),
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service),
    supabase: Client = Depends(get_supabase)
):
    """Planned vs tracked minutes per category"""
    day = block_date or ProfileService(supabase).today_for(user_data["id"])
    return service.get_distribution(user_data["id"], day)


@router.put("/{block_id}", response_model=TimeBlockResponse)
async def update_time_block(
    block_id: int,
    block_data: TimeBlockUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service)
):
    return service.update_block(block_id, user_data["id"], block_data)


@router.delete("/{block_id}", status_code=204)
async def delete_time_block(
    block_id: int,
    user_data: Dict = Depends(get_current_user_id),
    service: TimeBlockService = Depends(get_time_block_service)
):
    service.delete_block(block_id, user_data["id"])
    return None
