from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.achievements.schemas import AchievementsSummary
from axis6.modules.achievements.service import AchievementService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=AchievementsSummary)
async def get_achievements(
    user_data: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    return AchievementService(supabase).get_achievements(user_data["id"])
