from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional
from datetime import date as Date, datetime

DEFAULT_MOOD = 5
MAX_BATCH_SIZE = 6


class CheckinToggle(BaseModel):
    category_id: int
    completed: bool = True
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = Field(default=None, max_length=1000)
    date: Optional[Date] = None


class CheckinBatchRequest(BaseModel):
    checkins: List[CheckinToggle] = Field(..., min_length=1, max_length=MAX_BATCH_SIZE)


class CheckinUpdate(BaseModel):
    category_id: int
    date: Optional[Date] = None
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = Field(default=None, max_length=1000)


class CheckinResponse(BaseModel):
    id: int
    user_id: str
    category_id: int
    completed_at: Date
    mood: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class ToggleResponse(BaseModel):
    action: Literal["added", "removed"]
    category_id: int
    date: Date
    checkin: Optional[CheckinResponse] = None
    streak: Optional[Dict[str, Any]] = None
    daily_stats: Optional[Dict[str, Any]] = None


class BatchResponse(BaseModel):
    results: List[ToggleResponse]
    added: int
    removed: int
