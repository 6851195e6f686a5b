from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal


class AnalyticsOverview(BaseModel):
    period: str
    total_checkins: int
    days_with_data: int
    total_days: int
    average_completion_rate: float
    data_completeness: int


class AnalyticsResponse(BaseModel):
    overview: AnalyticsOverview
    daily_stats: List[Dict[str, Any]]
    category_stats: Dict[str, Dict[str, Any]]
    weekly_data: Dict[str, Dict[str, Any]]
    best_days: List[Dict[str, Any]]
    worst_days: List[Dict[str, Any]]
    mood_trend: List[Dict[str, Any]]
    streak_analysis: Dict[str, Any]


class ExportRequest(BaseModel):
    format: Literal["json", "csv"] = "json"
    include_profile: bool = Field(default=True)
