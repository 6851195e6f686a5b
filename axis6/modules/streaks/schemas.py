from pydantic import BaseModel
from typing import Optional, Dict, Any, List
from datetime import date, datetime


class StreakResponse(BaseModel):
    id: Optional[int] = None
    user_id: str
    category_id: int
    current_streak: int = 0
    longest_streak: int = 0
    last_checkin: Optional[date] = None
    updated_at: Optional[datetime] = None
    category: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class RecalculateResponse(BaseModel):
    recalculated: int
    streaks: List[StreakResponse]
