from pydantic import BaseModel, Field, model_validator
from typing import Literal, List, Optional
from datetime import date as Date, datetime, time

BlockStatus = Literal["planned", "active", "completed", "skipped"]


class TimeBlockCreate(BaseModel):
    date: Date
    category_id: int
    activity_name: Optional[str] = Field(default=None, max_length=255)
    start_time: time
    end_time: time
    status: BlockStatus = "planned"
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_time_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class TimeBlockUpdate(BaseModel):
    category_id: Optional[int] = None
    activity_name: Optional[str] = Field(default=None, max_length=255)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: Optional[BlockStatus] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_time_order(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class TimeBlockResponse(BaseModel):
    id: int
    user_id: str
    date: Date
    category_id: int
    activity_name: str
    start_time: time
    end_time: time
    duration_minutes: int
    status: str
    notes: Optional[str] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    actual_duration: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TimerStart(BaseModel):
    category_id: int
    activity_name: Optional[str] = Field(default=None, max_length=255)
    time_block_id: Optional[int] = None
    notes: Optional[str] = None


class ActivityLogResponse(BaseModel):
    id: int
    user_id: str
    category_id: int
    activity_name: str
    time_block_id: Optional[int] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryTimeDistribution(BaseModel):
    category_id: int
    category_name: str
    category_color: Optional[str] = None
    planned_minutes: int
    actual_minutes: int
    percentage: float


class TimeDistributionResponse(BaseModel):
    date: Date
    total_planned_minutes: int
    total_actual_minutes: int
    categories: List[CategoryTimeDistribution]
