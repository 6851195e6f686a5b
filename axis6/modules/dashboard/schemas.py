from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import date as Date

from axis6.modules.categories.schemas import CategoryResponse
from axis6.modules.profiles.schemas import ProfileResponse


class DashboardCategory(CategoryResponse):
    today_completed: bool = False
    current_streak: int = 0
    longest_streak: int = 0
    last_checkin: Optional[Date] = None


class WeeklyStats(BaseModel):
    total_checkins: int
    perfect_days: int
    completion_rate: float


class DashboardResponse(BaseModel):
    date: Date
    profile: Optional[ProfileResponse] = None
    categories: List[DashboardCategory]
    today_stats: Optional[Dict[str, Any]] = None
    weekly_stats: WeeklyStats
