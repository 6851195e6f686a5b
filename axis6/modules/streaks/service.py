from supabase import Client
from axis6.core.dates import local_today, parse_date
from axis6.modules.categories.service import CategoryService
from axis6.modules.streaks.calculator import calculate_streak, is_streak_alive
from axis6.modules.streaks.schemas import StreakResponse
from typing import Dict, List, Optional
from fastapi import HTTPException
from datetime import date, datetime, timezone
import logging

logger = logging.getLogger(__name__)

STREAKS_TABLE = "axis6_streaks"
CHECKINS_TABLE = "axis6_checkins"
PROFILES_TABLE = "axis6_profiles"


class StreakService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def recalculate(self, user_id: str, category_id: int, today: date) -> Optional[dict]:
        """Recompute the streak row for (user, category) from its check-in history"""
        try:
            result = self.supabase.table(CHECKINS_TABLE)\
                .select("completed_at")\
                .eq("user_id", user_id)\
                .eq("category_id", category_id)\
                .execute()
            dates = [parse_date(row["completed_at"]) for row in (result.data or [])]
            stats = calculate_streak(dates, today)

            if stats is None:
                self.supabase.table(STREAKS_TABLE)\
                    .delete()\
                    .eq("user_id", user_id)\
                    .eq("category_id", category_id)\
                    .execute()
                return None

            upsert_result = self.supabase.table(STREAKS_TABLE).upsert({
                "user_id": user_id,
                "category_id": category_id,
                "current_streak": stats.current_streak,
                "longest_streak": stats.longest_streak,
                "last_checkin": stats.last_checkin.isoformat(),
                "updated_at": datetime.now(timezone.utc).isoformat()
            }, on_conflict="user_id,category_id").execute()
            return upsert_result.data[0] if upsert_result.data else None
        except Exception as e:
            logger.error(f"Error recalculating streak for user {user_id}, category {category_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def recalculate_all(self, user_id: str, today: date) -> List[StreakResponse]:
        """Recompute every streak of the user, including categories whose check-ins are gone"""
        try:
            checkins = self.supabase.table(CHECKINS_TABLE)\
                .select("category_id")\
                .eq("user_id", user_id)\
                .execute()
            existing = self.supabase.table(STREAKS_TABLE)\
                .select("category_id")\
                .eq("user_id", user_id)\
                .execute()
            category_ids = {r["category_id"] for r in (checkins.data or [])}
            category_ids |= {r["category_id"] for r in (existing.data or [])}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        for category_id in sorted(category_ids):
            self.recalculate(user_id, category_id, today)
        return self.list_streaks(user_id)

    def list_streaks(self, user_id: str, category_id: Optional[int] = None) -> List[StreakResponse]:
        """User's streaks with their category embedded"""
        try:
            query = self.supabase.table(STREAKS_TABLE).select("*").eq("user_id", user_id)
            if category_id is not None:
                query = query.eq("category_id", category_id)
            result = query.execute()
            categories = CategoryService(self.supabase).get_category_map(user_id)
            streaks = []
            for row in result.data or []:
                streaks.append(StreakResponse(**row, category=categories.get(row["category_id"])))
            return sorted(streaks, key=lambda s: (s.category or {}).get("position", 0))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing streaks: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def reset_stale_streaks(self, now: Optional[datetime] = None) -> int:
        """Zero current_streak where the last check-in is older than yesterday in the owner's timezone"""
        result = self.supabase.table(STREAKS_TABLE)\
            .select("id, user_id, last_checkin, current_streak")\
            .gt("current_streak", 0)\
            .execute()
        rows = result.data or []
        if not rows:
            return 0

        user_ids = list({r["user_id"] for r in rows})
        profiles = self.supabase.table(PROFILES_TABLE)\
            .select("id, timezone")\
            .in_("id", user_ids)\
            .execute()
        timezones: Dict[str, Optional[str]] = {p["id"]: p.get("timezone") for p in (profiles.data or [])}
        now = now or datetime.now(timezone.utc)

        stale_ids = []
        for row in rows:
            today = local_today(timezones.get(row["user_id"]), now)
            if not is_streak_alive(parse_date(row.get("last_checkin")), today):
                stale_ids.append(row["id"])

        if stale_ids:
            self.supabase.table(STREAKS_TABLE)\
                .update({"current_streak": 0, "updated_at": now.isoformat()})\
                .in_("id", stale_ids)\
                .execute()
        return len(stale_ids)
