from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.streaks.schemas import StreakResponse, RecalculateResponse
from axis6.modules.streaks.service import StreakService
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/streaks", tags=["streaks"])


def get_streak_service(supabase: Client = Depends(get_supabase)) -> StreakService:
    return StreakService(supabase)


@router.get("", response_model=List[StreakResponse])
async def list_streaks(
    category_id: Optional[int] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: StreakService = Depends(get_streak_service)
):
    return service.list_streaks(user_data["id"], category_id=category_id)


@router.post("/recalculate", response_model=RecalculateResponse)
async def recalculate_streaks(
    user_data: Dict = Depends(get_current_user_id),
    service: StreakService = Depends(get_streak_service),
    supabase: Client = Depends(get_supabase)
):
    """Recompute all of the caller's streaks from their check-in history"""
    today = ProfileService(supabase).today_for(user_data["id"])
    streaks = service.recalculate_all(user_data["id"], today)
    return RecalculateResponse(recalculated=len(streaks), streaks=streaks)
