from pydantic import BaseModel
from typing import Dict, List, Literal

AchievementCategory = Literal["streak", "completion", "milestone", "special"]
Rarity = Literal["common", "rare", "epic", "legendary"]


class AchievementResponse(BaseModel):
    id: str
    title: Dict[str, str]
    description: Dict[str, str]
    category: AchievementCategory
    rarity: Rarity
    requirement: int
    current: int
    progress: int  # percent, capped at 100
    unlocked: bool


class AchievementsSummary(BaseModel):
    achievements: List[AchievementResponse]
    unlocked_count: int
    total: int
    completion_rate: int
    stats: Dict[str, int]
