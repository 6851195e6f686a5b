from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime

AxisSlug = Literal["physical", "mental", "emotional", "social", "spiritual", "material"]
WinPrivacy = Literal["public", "followers", "private"]
ReactionType = Literal["hex_star", "support", "inspire"]
FeedType = Literal["all", "following", "my"]
LeaderboardType = Literal["daily", "morning"]

MICRO_WIN_MINUTES = (5, 10, 15, 25, 45)


class MicroWinCreate(BaseModel):
    axis: AxisSlug
    win_text: str = Field(..., max_length=140)
    minutes: Optional[int] = None
    privacy: WinPrivacy = "public"
    is_morning: bool = False

    @field_validator("win_text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("win_text cannot be empty")
        return v

    @field_validator("minutes")
    @classmethod
    def known_duration(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v not in MICRO_WIN_MINUTES:
            raise ValueError(f"minutes must be one of {', '.join(map(str, MICRO_WIN_MINUTES))}")
        return v


class MicroWinResponse(BaseModel):
    id: str
    user_id: str
    user_name: Optional[str] = None
    category_id: int
    axis_slug: str
    axis_color: Optional[str] = None
    win_text: str
    minutes: Optional[int] = None
    is_morning_ritual: bool = False
    privacy: WinPrivacy
    resonance_count: int = 0
    user_reacted: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class ResonanceStreakResponse(BaseModel):
    streak_type: str
    axis_slug: Optional[str] = None
    current_streak: int
    longest_streak: int
    last_win_date: Optional[date] = None
    total_micro_wins: int

    class Config:
        from_attributes = True


class RecordedMicroWin(BaseModel):
    win: MicroWinResponse
    message: str
    streaks: List[ResonanceStreakResponse]


class MicroWinFeed(BaseModel):
    feed: List[MicroWinResponse]
    offset: int
    limit: int
    has_more: bool


class ReactionCreate(BaseModel):
    reaction_type: ReactionType = "hex_star"
    axis_resonance: Optional[AxisSlug] = None


class MicroReactionResponse(BaseModel):
    id: str
    micro_win_id: str
    user_id: str
    reaction_type: ReactionType
    axis_resonance: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FollowResponse(BaseModel):
    following_id: str
    name: Optional[str] = None
    created_at: datetime


class LeaderboardEntry(BaseModel):
    user_id: str
    name: Optional[str] = None
    current_streak: int
    longest_streak: int
    total_wins: int
    rank: int
