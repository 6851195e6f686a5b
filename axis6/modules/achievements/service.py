from supabase import Client
from axis6.config.achievements_config import ACHIEVEMENTS
from axis6.config.categories_config import AXIS_SLUGS
from axis6.core.dates import parse_date
from axis6.modules.achievements.schemas import AchievementResponse, AchievementsSummary
from axis6.modules.categories.service import CategoryService
from typing import Dict, Iterable, List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

STREAKS_TABLE = "axis6_streaks"
CHECKINS_TABLE = "axis6_checkins"


def achievement_metrics(streaks: List[dict], checkins: List[dict], axis_ids: Iterable[int]) -> Dict[str, int]:
    axis_ids = set(axis_ids)
    per_day: Dict = {}
    for checkin in checkins:
        per_day.setdefault(parse_date(checkin["completed_at"]), set()).add(checkin["category_id"])
    return {
        "max_streak": max([s.get("longest_streak") or 0 for s in streaks] + [0]),
        "total_checkins": len(checkins),
        "active_streaks": len([s for s in streaks if (s.get("current_streak") or 0) > 0]),
        "current_streak_sum": sum(s.get("current_streak") or 0 for s in streaks),
        "active_days": len(per_day),
        "perfect_days": len([ids for ids in per_day.values() if axis_ids and axis_ids <= ids]),
    }


def evaluate_achievements(metrics: Dict[str, int]) -> AchievementsSummary:
    achievements = []
    for entry in ACHIEVEMENTS:
        current = metrics.get(entry["metric"], 0)
        achievements.append(AchievementResponse(
            id=entry["id"],
            title=entry["title"],
            description=entry["description"],
            category=entry["category"],
            rarity=entry["rarity"],
            requirement=entry["requirement"],
            current=current,
            progress=min(100, current * 100 // entry["requirement"]),
            unlocked=current >= entry["requirement"]
        ))
    unlocked = len([a for a in achievements if a.unlocked])
    return AchievementsSummary(
        achievements=achievements,
        unlocked_count=unlocked,
        total=len(achievements),
        completion_rate=round(unlocked * 100 / len(achievements)) if achievements else 0,
        stats=metrics
    )


class AchievementService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_achievements(self, user_id: str) -> AchievementsSummary:
        """Achievements are derived on read from streaks and check-ins; nothing is stored"""
        try:
            streaks = self.supabase.table(STREAKS_TABLE)\
                .select("current_streak, longest_streak")\
                .eq("user_id", user_id)\
                .execute()
            checkins = self.supabase.table(CHECKINS_TABLE)\
                .select("category_id, completed_at")\
                .eq("user_id", user_id)\
                .execute()
            categories = CategoryService(self.supabase).get_category_map(user_id)
            axis_ids = [c["id"] for c in categories.values() if c.get("slug") in AXIS_SLUGS]
            metrics = achievement_metrics(streaks.data or [], checkins.data or [], axis_ids)
            return evaluate_achievements(metrics)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing achievements for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
