from supabase import Client
from axis6.config.categories_config import AXIS_SLUGS
from axis6.modules.analytics.aggregations import weekly_stats
from axis6.modules.analytics.service import AnalyticsService
from axis6.modules.categories.service import CategoryService
from axis6.modules.dashboard.schemas import DashboardCategory, DashboardResponse, WeeklyStats
from axis6.modules.profiles.service import ProfileService
from typing import Optional
from fastapi import HTTPException
from datetime import timedelta
import logging

logger = logging.getLogger(__name__)

CHECKINS_TABLE = "axis6_checkins"
STREAKS_TABLE = "axis6_streaks"
WEEK_DAYS = 7


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_dashboard(self, user_id: str, email: Optional[str] = None) -> DashboardResponse:
        """Everything the home screen needs in one call"""
        profiles = ProfileService(self.supabase)
        profile = profiles.ensure_profile(user_id, email=email)
        today = profiles.today_for(user_id)
        week_start = today - timedelta(days=WEEK_DAYS - 1)

        try:
            categories = CategoryService(self.supabase).get_category_map(user_id, include_inactive=False)

            week_result = self.supabase.table(CHECKINS_TABLE)\
                .select("category_id, completed_at, mood")\
                .eq("user_id", user_id)\
                .gte("completed_at", week_start.isoformat())\
                .lte("completed_at", today.isoformat())\
                .execute()
            week_checkins = week_result.data or []
            completed_today = {
                c["category_id"] for c in week_checkins if str(c["completed_at"])[:10] == today.isoformat()
            }

            streaks_result = self.supabase.table(STREAKS_TABLE)\
                .select("category_id, current_streak, longest_streak, last_checkin")\
                .eq("user_id", user_id)\
                .execute()
            streaks = {s["category_id"]: s for s in (streaks_result.data or [])}

            dashboard_categories = []
            for category_id, category in categories.items():
                streak = streaks.get(category_id, {})
                dashboard_categories.append(DashboardCategory(
                    **category,
                    today_completed=category_id in completed_today,
                    current_streak=streak.get("current_streak", 0),
                    longest_streak=streak.get("longest_streak", 0),
                    last_checkin=streak.get("last_checkin")
                ))

            axis_ids = [c["id"] for c in categories.values() if c.get("slug") in AXIS_SLUGS]
            today_stats = AnalyticsService(self.supabase).get_daily_stats(user_id, today)

            return DashboardResponse(
                date=today,
                profile=profile,
                categories=dashboard_categories,
                today_stats=today_stats,
                weekly_stats=WeeklyStats(**weekly_stats(week_checkins, axis_ids, WEEK_DAYS))
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error building dashboard for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
