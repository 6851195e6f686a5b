from supabase import Client
from axis6.config.settings import settings
from axis6.modules.analytics.aggregations import summarize_day, build_analytics
from axis6.modules.analytics.exporter import build_json_export, build_csv_export
from axis6.modules.categories.service import CategoryService
from axis6.modules.profiles.service import ProfileService
from typing import Any, Dict, Optional
from fastapi import HTTPException
from datetime import date, timedelta
import logging

logger = logging.getLogger(__name__)

DAILY_STATS_TABLE = "axis6_daily_stats"
CHECKINS_TABLE = "axis6_checkins"
STREAKS_TABLE = "axis6_streaks"


class AnalyticsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def refresh_daily_stats(self, user_id: str, day: date) -> Optional[dict]:
        """Recompute the (user, date) daily stats row; the row is removed when the day is empty"""
        try:
            result = self.supabase.table(CHECKINS_TABLE)\
                .select("category_id, mood")\
                .eq("user_id", user_id)\
                .eq("completed_at", day.isoformat())\
                .execute()
            active_count = CategoryService(self.supabase).count_active(user_id)
            summary = summarize_day(result.data or [], active_count)

            if summary is None:
                self.supabase.table(DAILY_STATS_TABLE)\
                    .delete()\
                    .eq("user_id", user_id)\
                    .eq("date", day.isoformat())\
                    .execute()
                return None

            upsert_result = self.supabase.table(DAILY_STATS_TABLE).upsert({
                "user_id": user_id,
                "date": day.isoformat(),
                **summary
            }, on_conflict="user_id,date").execute()
            return upsert_result.data[0] if upsert_result.data else None
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error refreshing daily stats for user {user_id} on {day}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_daily_stats(self, user_id: str, day: date) -> Optional[dict]:
        result = self.supabase.table(DAILY_STATS_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("date", day.isoformat())\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_analytics(
        self,
        user_id: str,
        today: date,
        period: int = 30,
        category_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """Aggregate the last `period` days (today included)"""
        if period < 1 or period > settings.analytics_max_period_days:
            raise HTTPException(
                status_code=400,
                detail=f"Period must be between 1 and {settings.analytics_max_period_days} days"
            )
        start = today - timedelta(days=period - 1)
        try:
            stats_result = self.supabase.table(DAILY_STATS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .gte("date", start.isoformat())\
                .lte("date", today.isoformat())\
                .order("date")\
                .execute()

            checkins_query = self.supabase.table(CHECKINS_TABLE)\
                .select("id, category_id, completed_at, mood, notes")\
                .eq("user_id", user_id)\
                .gte("completed_at", start.isoformat())\
                .lte("completed_at", today.isoformat())
            if category_id is not None:
                checkins_query = checkins_query.eq("category_id", category_id)
            checkins_result = checkins_query.order("completed_at").execute()

            streaks_query = self.supabase.table(STREAKS_TABLE).select("*").eq("user_id", user_id)
            if category_id is not None:
                streaks_query = streaks_query.eq("category_id", category_id)
            streaks_result = streaks_query.execute()

            categories = CategoryService(self.supabase).get_category_map(user_id)
            return build_analytics(
                stats_result.data or [],
                checkins_result.data or [],
                streaks_result.data or [],
                categories,
                period
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error building analytics for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def _all_checkins(self, user_id: str):
        result = self.supabase.table(CHECKINS_TABLE)\
            .select("id, category_id, completed_at, mood, notes, created_at")\
            .eq("user_id", user_id)\
            .order("completed_at")\
            .limit(settings.export_max_checkins)\
            .execute()
        return result.data or []

    def export_json(self, user_id: str, include_profile: bool = True) -> Dict[str, Any]:
        try:
            checkins = self._all_checkins(user_id)
            streaks = self.supabase.table(STREAKS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .execute()
            profile = None
            if include_profile:
                existing = ProfileService(self.supabase).get_profile(user_id)
                profile = existing.model_dump(mode="json") if existing else None
            logger.info(f"Exported {len(checkins)} check-ins as JSON for user {user_id}")
            return build_json_export(checkins, streaks.data or [], profile)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error exporting data for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def export_csv(self, user_id: str) -> str:
        try:
            checkins = self._all_checkins(user_id)
            categories = CategoryService(self.supabase).get_category_map(user_id)
            logger.info(f"Exported {len(checkins)} check-ins as CSV for user {user_id}")
            return build_csv_export(checkins, categories)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error exporting CSV for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
