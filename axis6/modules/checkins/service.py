from supabase import Client
from axis6.config.settings import settings
from axis6.modules.analytics.service import AnalyticsService
from axis6.modules.categories.service import CategoryService
from axis6.modules.checkins.schemas import (
    CheckinToggle, CheckinUpdate, CheckinResponse, ToggleResponse, BatchResponse, DEFAULT_MOOD
)
from axis6.modules.streaks.service import StreakService
from typing import List, Optional
from fastapi import HTTPException
from datetime import date, datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

CHECKINS_TABLE = "axis6_checkins"


def validate_checkin_date(day: date, today: date, backfill_days: int) -> None:
    """Check-ins may target today or up to backfill_days in the past."""
    if day > today:
        raise HTTPException(status_code=400, detail="Cannot check in for a future date")
    if day < today - timedelta(days=backfill_days):
        raise HTTPException(
            status_code=400,
            detail=f"Check-ins older than {backfill_days} days cannot be changed"
        )


class CheckinService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.categories = CategoryService(supabase)
        self.streaks = StreakService(supabase)
        self.analytics = AnalyticsService(supabase)

    def _after_mutation(self, user_id: str, category_id: int, day: date, today: date):
        """Keep derived rows in step with the check-in table"""
        streak = self.streaks.recalculate(user_id, category_id, today)
        daily_stats = self.analytics.refresh_daily_stats(user_id, day)
        return streak, daily_stats

    def _find(self, user_id: str, category_id: int, day: date) -> Optional[dict]:
        result = self.supabase.table(CHECKINS_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("category_id", category_id)\
            .eq("completed_at", day.isoformat())\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def list_checkins(
        self,
        user_id: str,
        day: Optional[date] = None,
        category_id: Optional[int] = None
    ) -> List[CheckinResponse]:
        """Caller's check-ins, newest first, with their category embedded"""
        try:
            query = self.supabase.table(CHECKINS_TABLE).select("*").eq("user_id", user_id)
            if day is not None:
                query = query.eq("completed_at", day.isoformat())
            if category_id is not None:
                query = query.eq("category_id", category_id)
            result = query.order("completed_at", desc=True).execute()

            categories = self.categories.get_category_map(user_id)
            return [
                CheckinResponse(**row, category=categories.get(row["category_id"]))
                for row in (result.data or [])
            ]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing check-ins: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def toggle(self, user_id: str, toggle_data: CheckinToggle, today: date) -> ToggleResponse:
        """Complete or un-complete one axis for a day"""
        day = toggle_data.date or today
        validate_checkin_date(day, today, settings.checkin_backfill_days)
        category = self.categories.get_visible_category(toggle_data.category_id, user_id)

        try:
            checkin = None
            if toggle_data.completed:
                result = self.supabase.table(CHECKINS_TABLE).upsert({
                    "user_id": user_id,
                    "category_id": toggle_data.category_id,
                    "completed_at": day.isoformat(),
                    "mood": toggle_data.mood if toggle_data.mood is not None else DEFAULT_MOOD,
                    "notes": toggle_data.notes,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                }, on_conflict="user_id,category_id,completed_at").execute()
                if not result.data:
                    raise HTTPException(status_code=500, detail="Failed to save check-in")
                checkin = CheckinResponse(**result.data[0], category=category)
            else:
                self.supabase.table(CHECKINS_TABLE)\
                    .delete()\
                    .eq("user_id", user_id)\
                    .eq("category_id", toggle_data.category_id)\
                    .eq("completed_at", day.isoformat())\
                    .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error toggling check-in for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

        streak, daily_stats = self._after_mutation(user_id, toggle_data.category_id, day, today)
        return ToggleResponse(
            action="added" if toggle_data.completed else "removed",
            category_id=toggle_data.category_id,
            date=day,
            checkin=checkin,
            streak=streak,
            daily_stats=daily_stats
        )

    def batch_toggle(self, user_id: str, toggles: List[CheckinToggle], today: date) -> BatchResponse:
        results = [self.toggle(user_id, toggle_data, today) for toggle_data in toggles]
        added = len([r for r in results if r.action == "added"])
        logger.info(f"User {user_id} batch toggled {len(results)} check-in(s)")
        return BatchResponse(results=results, added=added, removed=len(results) - added)

    def update_checkin(self, user_id: str, update_data: CheckinUpdate, today: date) -> CheckinResponse:
        """Change mood/notes of an existing check-in"""
        day = update_data.date or today
        existing = self._find(user_id, update_data.category_id, day)
        if not existing:
            raise HTTPException(status_code=404, detail="Check-in not found")

        try:
            changes = {"updated_at": datetime.now(timezone.utc).isoformat()}
            if update_data.mood is not None:
                changes["mood"] = update_data.mood
            if update_data.notes is not None:
                changes["notes"] = update_data.notes

            result = self.supabase.table(CHECKINS_TABLE)\
                .update(changes)\
                .eq("id", existing["id"])\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Check-in not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        self._after_mutation(user_id, update_data.category_id, day, today)
        category = self.categories.get_category_map(user_id).get(update_data.category_id)
        return CheckinResponse(**result.data[0], category=category)

    def delete_checkin(self, user_id: str, category_id: int, day: date, today: date) -> bool:
        existing = self._find(user_id, category_id, day)
        if not existing:
            raise HTTPException(status_code=404, detail="Check-in not found")

        try:
            self.supabase.table(CHECKINS_TABLE)\
                .delete()\
                .eq("id", existing["id"])\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        self._after_mutation(user_id, category_id, day, today)
        return True
