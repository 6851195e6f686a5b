from supabase import Client
from axis6.config.categories_config import category_display_name
from axis6.core.dates import minutes_between, parse_date, parse_time, parse_timestamp, resolve_timezone
from axis6.modules.categories.service import CategoryService
from axis6.modules.profiles.service import ProfileService
from axis6.modules.time_blocks.schemas import (
    TimeBlockCreate, TimeBlockUpdate, TimeBlockResponse, TimerStart, ActivityLogResponse,
    CategoryTimeDistribution, TimeDistributionResponse
)
from typing import Dict, Iterable, List, Optional
from fastapi import HTTPException
from datetime import date, datetime, time, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

TIME_BLOCKS_TABLE = "axis6_time_blocks"
ACTIVITY_LOGS_TABLE = "axis6_activity_logs"


def find_overlap(
    blocks: Iterable[dict],
    start: time,
    end: time,
    exclude_id: Optional[int] = None
) -> Optional[dict]:
    """First non-skipped block whose [start, end) intersects the given range"""
    for block in blocks:
        if block.get("status") == "skipped" or block.get("id") == exclude_id:
            continue
        if start < parse_time(block["end_time"]) and parse_time(block["start_time"]) < end:
            return block
    return None


def elapsed_minutes(started_at: datetime, ended_at: datetime) -> int:
    return max(int((ended_at - started_at).total_seconds() // 60), 0)


def time_distribution(
    categories: Dict[int, dict],
    blocks: Iterable[dict],
    logs: Iterable[dict]
) -> List[CategoryTimeDistribution]:
    planned: Dict[int, int] = {}
    actual: Dict[int, int] = {}
    for block in blocks:
        planned[block["category_id"]] = planned.get(block["category_id"], 0) + (block.get("duration_minutes") or 0)
    for log in logs:
        actual[log["category_id"]] = actual.get(log["category_id"], 0) + (log.get("duration_minutes") or 0)
    total_actual = sum(actual.values())

    return [
        CategoryTimeDistribution(
            category_id=category_id,
            category_name=category_display_name(category),
            category_color=category.get("color"),
            planned_minutes=planned.get(category_id, 0),
            actual_minutes=actual.get(category_id, 0),
            percentage=round(actual.get(category_id, 0) / total_actual * 100, 2) if total_actual else 0.0
        )
        for category_id, category in categories.items()
    ]


class TimeBlockService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.categories = CategoryService(supabase)

    def _blocks_for_day(self, user_id: str, day: date) -> List[dict]:
        result = self.supabase.table(TIME_BLOCKS_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("date", day.isoformat())\
            .order("start_time")\
            .execute()
        return result.data or []

    def _get_block(self, block_id: int, user_id: str) -> dict:
        result = self.supabase.table(TIME_BLOCKS_TABLE)\
            .select("*")\
            .eq("id", block_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Time block not found")
        return result.data[0]

    def _check_overlap(self, user_id: str, day: date, start: time, end: time, exclude_id: Optional[int] = None):
        conflict = find_overlap(self._blocks_for_day(user_id, day), start, end, exclude_id)
        if conflict:
            raise HTTPException(
                status_code=409,
                detail=f"Time block overlaps '{conflict.get('activity_name')}' "
                       f"({conflict['start_time']}-{conflict['end_time']})"
            )

    def _to_response(self, block: dict, categories: Dict[int, dict], logs: List[dict]) -> TimeBlockResponse:
        category = categories.get(block["category_id"]) or {}
        actual = sum(log.get("duration_minutes") or 0 for log in logs if log.get("time_block_id") == block["id"])
        return TimeBlockResponse(
            **block,
            category_name=category_display_name(category) if category else None,
            category_color=category.get("color"),
            category_icon=category.get("icon"),
            actual_duration=actual
        )

    def list_blocks(self, user_id: str, day: date) -> List[TimeBlockResponse]:
        """Blocks of the day ordered by start time, with tracked minutes"""
        try:
            blocks = self._blocks_for_day(user_id, day)
            block_ids = [b["id"] for b in blocks]
            logs = []
            if block_ids:
                logs_result = self.supabase.table(ACTIVITY_LOGS_TABLE)\
                    .select("time_block_id, duration_minutes")\
                    .eq("user_id", user_id)\
                    .in_("time_block_id", block_ids)\
                    .execute()
                logs = logs_result.data or []
            categories = self.categories.get_category_map(user_id)
            blocks = sorted(blocks, key=lambda b: str(b["start_time"]))
            return [self._to_response(block, categories, logs) for block in blocks]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing time blocks: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_block(self, user_id: str, block_data: TimeBlockCreate) -> TimeBlockResponse:
        category = self.categories.get_visible_category(block_data.category_id, user_id)
        if block_data.status != "skipped":
            self._check_overlap(user_id, block_data.date, block_data.start_time, block_data.end_time)

        try:
            result = self.supabase.table(TIME_BLOCKS_TABLE).insert({
                "user_id": user_id,
                "date": block_data.date.isoformat(),
                "category_id": block_data.category_id,
                "activity_name": block_data.activity_name or category_display_name(category),
                "start_time": block_data.start_time.isoformat(),
                "end_time": block_data.end_time.isoformat(),
                "duration_minutes": minutes_between(block_data.start_time, block_data.end_time),
                "status": block_data.status,
                "notes": block_data.notes
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create time block")

            logger.info(f"User {user_id} planned time block {result.data[0]['id']} on {block_data.date}")
            return self._to_response(result.data[0], {category["id"]: category}, [])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating time block: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_block(self, block_id: int, user_id: str, block_data: TimeBlockUpdate) -> TimeBlockResponse:
        existing = self._get_block(block_id, user_id)
        start = block_data.start_time or parse_time(existing["start_time"])
        end = block_data.end_time or parse_time(existing["end_time"])
        if start >= end:
            raise HTTPException(status_code=400, detail="start_time must be before end_time")
        status = block_data.status or existing.get("status")
        if status != "skipped":
            self._check_overlap(user_id, parse_date(existing["date"]), start, end, exclude_id=block_id)
        if block_data.category_id is not None:
            self.categories.get_visible_category(block_data.category_id, user_id)

        try:
            update_data = {
                "start_time": start.isoformat(),
                "end_time": end.isoformat(),
                "duration_minutes": minutes_between(start, end),
                "status": status,
                "updated_at": datetime.now(timezone.utc).isoformat()
            }
            if block_data.category_id is not None:
                update_data["category_id"] = block_data.category_id
            if block_data.activity_name is not None:
                update_data["activity_name"] = block_data.activity_name
            if block_data.notes is not None:
                update_data["notes"] = block_data.notes

            result = self.supabase.table(TIME_BLOCKS_TABLE)\
                .update(update_data)\
                .eq("id", block_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Time block not found")
            return self._to_response(result.data[0], self.categories.get_category_map(user_id), [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_block(self, block_id: int, user_id: str) -> bool:
        self._get_block(block_id, user_id)
        try:
            result = self.supabase.table(TIME_BLOCKS_TABLE)\
                .delete()\
                .eq("id", block_id)\
                .eq("user_id", user_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _set_block_status(self, block_id: Optional[int], user_id: str, status: str):
        if block_id is None:
            return
        self.supabase.table(TIME_BLOCKS_TABLE)\
            .update({"status": status, "updated_at": datetime.now(timezone.utc).isoformat()})\
            .eq("id", block_id)\
            .eq("user_id", user_id)\
            .execute()

    def get_active_timer(self, user_id: str) -> Optional[ActivityLogResponse]:
        try:
            result = self.supabase.table(ACTIVITY_LOGS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .is_("ended_at", "null")\
                .order("started_at", desc=True)\
                .limit(1)\
                .execute()
            return ActivityLogResponse(**result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"Error getting active timer: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def start_timer(self, user_id: str, timer_data: TimerStart, now: Optional[datetime] = None) -> ActivityLogResponse:
        """Start tracking an activity; a running timer is stopped first"""
        category = self.categories.get_visible_category(timer_data.category_id, user_id)
        activity_name = timer_data.activity_name
        if timer_data.time_block_id is not None:
            block = self._get_block(timer_data.time_block_id, user_id)
            activity_name = activity_name or block.get("activity_name")

        now = now or datetime.now(timezone.utc)
        running = self.get_active_timer(user_id)
        if running:
            self.stop_timer(running.id, user_id, now=now)

        try:
            result = self.supabase.table(ACTIVITY_LOGS_TABLE).insert({
                "user_id": user_id,
                "category_id": timer_data.category_id,
                "activity_name": activity_name or category_display_name(category),
                "time_block_id": timer_data.time_block_id,
                "started_at": now.isoformat(),
                "notes": timer_data.notes
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to start timer")
            self._set_block_status(timer_data.time_block_id, user_id, "active")
            logger.info(f"User {user_id} started timer {result.data[0]['id']}")
            return ActivityLogResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error starting timer: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def stop_timer(self, log_id: int, user_id: str, now: Optional[datetime] = None) -> ActivityLogResponse:
        try:
            result = self.supabase.table(ACTIVITY_LOGS_TABLE)\
                .select("*")\
                .eq("id", log_id)\
                .eq("user_id", user_id)\
                .is_("ended_at", "null")\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="No running timer found")
            log = result.data[0]

            now = now or datetime.now(timezone.utc)
            duration = elapsed_minutes(parse_timestamp(log["started_at"]), now)
            updated = self.supabase.table(ACTIVITY_LOGS_TABLE)\
                .update({"ended_at": now.isoformat(), "duration_minutes": duration})\
                .eq("id", log_id)\
                .eq("user_id", user_id)\
                .execute()
            self._set_block_status(log.get("time_block_id"), user_id, "completed")
            logger.info(f"User {user_id} stopped timer {log_id} after {duration} minute(s)")
            return ActivityLogResponse(**updated.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error stopping timer {log_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_distribution(self, user_id: str, day: date) -> TimeDistributionResponse:
        """Planned vs tracked minutes per category for one local day"""
        try:
            blocks = [b for b in self._blocks_for_day(user_id, day) if b.get("status") != "skipped"]

            tz = resolve_timezone(ProfileService(self.supabase).get_timezone(user_id))
            window_start = datetime.combine(day, time.min, tzinfo=tz)
            window_end = window_start + timedelta(days=1)
            logs_result = self.supabase.table(ACTIVITY_LOGS_TABLE)\
                .select("category_id, started_at, duration_minutes")\
                .eq("user_id", user_id)\
                .gte("started_at", window_start.astimezone(timezone.utc).isoformat())\
                .lt("started_at", window_end.astimezone(timezone.utc).isoformat())\
                .execute()
            logs = logs_result.data or []

            categories = self.categories.get_category_map(user_id, include_inactive=False)
            distribution = time_distribution(categories, blocks, logs)
            return TimeDistributionResponse(
                date=day,
                total_planned_minutes=sum(d.planned_minutes for d in distribution),
                total_actual_minutes=sum(d.actual_minutes for d in distribution),
                categories=distribution
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing time distribution: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
