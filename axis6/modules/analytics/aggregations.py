"""
Pure aggregation helpers behind the analytics and dashboard endpoints.
Inputs are plain rows as returned by Supabase.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from axis6.config.categories_config import AXIS_COUNT, category_display_name
from axis6.core.dates import parse_date

BEST_WORST_DAYS = 5


def summarize_day(checkins: Iterable[dict], active_category_count: int) -> Optional[Dict[str, Any]]:
    """Daily stats row values for one user's check-ins of a single day; None when nothing was completed."""
    checkins = list(checkins)
    completed = {c["category_id"] for c in checkins}
    if not completed:
        return None
    moods = [c["mood"] for c in checkins if c.get("mood") is not None]
    rate = min(len(completed) / max(active_category_count, 1), 1.0)
    return {
        "categories_completed": len(completed),
        "total_mood": sum(moods) if moods else None,
        "completion_rate": round(rate, 2),
    }


def _average(total: float, count: int) -> float:
    return round(total / count, 2) if count else 0.0


def category_stats(checkins: Iterable[dict], categories: Dict[int, dict]) -> Dict[str, Dict[str, Any]]:
    """Per-category count and average mood, keyed by the category's English name."""
    stats: Dict[str, Dict[str, Any]] = {}
    for checkin in checkins:
        category = categories.get(checkin["category_id"])
        key = category_display_name(category)
        entry = stats.setdefault(key, {
            "category_id": checkin["category_id"],
            "count": 0,
            "mood_count": 0,
            "total_mood": 0,
            "average_mood": 0.0,
            "color": (category or {}).get("color", "#6366f1"),
        })
        entry["count"] += 1
        if checkin.get("mood") is not None:
            entry["mood_count"] += 1
            entry["total_mood"] += checkin["mood"]
        entry["average_mood"] = _average(entry["total_mood"], entry["mood_count"])
    for entry in stats.values():
        entry.pop("mood_count")
    return stats


def weekly_buckets(checkins: Iterable[dict]) -> Dict[str, Dict[str, Any]]:
    """Check-ins grouped by ISO week ("2025-W09")."""
    weeks: Dict[str, Dict[str, Any]] = {}
    for checkin in checkins:
        day = parse_date(checkin["completed_at"])
        iso_year, iso_week, _ = day.isocalendar()
        key = f"{iso_year}-W{iso_week:02d}"
        entry = weeks.setdefault(key, {"count": 0, "mood_count": 0, "total_mood": 0, "average_mood": 0.0})
        entry["count"] += 1
        if checkin.get("mood") is not None:
            entry["mood_count"] += 1
            entry["total_mood"] += checkin["mood"]
        entry["average_mood"] = _average(entry["total_mood"], entry["mood_count"])
    for entry in weeks.values():
        entry.pop("mood_count")
    return dict(sorted(weeks.items()))


def best_and_worst_days(daily_stats: List[dict], limit: int = BEST_WORST_DAYS):
    by_rate_desc = sorted(daily_stats, key=lambda d: (-float(d.get("completion_rate") or 0), str(d["date"])))
    by_rate_asc = sorted(daily_stats, key=lambda d: (float(d.get("completion_rate") or 0), str(d["date"])))
    return by_rate_desc[:limit], by_rate_asc[:limit]


def mood_trend(daily_stats: Iterable[dict]) -> List[Dict[str, Any]]:
    return [
        {
            "date": str(day["date"]),
            "average_mood": round((day.get("total_mood") or 0) / max(day.get("categories_completed") or 0, 1), 2),
        }
        for day in daily_stats
    ]


def streak_analysis(streaks: Iterable[dict], categories: Dict[int, dict]) -> Dict[str, Any]:
    streaks = list(streaks)
    current = []
    for streak in streaks:
        category = categories.get(streak["category_id"])
        current.append({
            "category": category_display_name(category),
            "current": streak.get("current_streak", 0),
            "longest": streak.get("longest_streak", 0),
            "color": (category or {}).get("color"),
        })
    return {
        "current_streaks": current,
        "total_current_streak": sum(s.get("current_streak", 0) for s in streaks),
        "longest_streak_ever": max([s.get("longest_streak", 0) for s in streaks] + [0]),
        "active_streaks": len([s for s in streaks if s.get("current_streak", 0) > 0]),
    }


def build_analytics(
    daily_stats: List[dict],
    checkins: List[dict],
    streaks: List[dict],
    categories: Dict[int, dict],
    period_days: int,
) -> Dict[str, Any]:
    days_with_data = len(daily_stats)
    rates = [float(d.get("completion_rate") or 0) for d in daily_stats]
    best_days, worst_days = best_and_worst_days(daily_stats)
    return {
        "overview": {
            "period": f"{period_days} days",
            "total_checkins": len(checkins),
            "days_with_data": days_with_data,
            "total_days": period_days,
            "average_completion_rate": round(sum(rates) / len(rates), 2) if rates else 0.0,
            "data_completeness": round(days_with_data / period_days * 100) if period_days else 0,
        },
        "daily_stats": daily_stats,
        "category_stats": category_stats(checkins, categories),
        "weekly_data": weekly_buckets(checkins),
        "best_days": best_days,
        "worst_days": worst_days,
        "mood_trend": mood_trend(daily_stats),
        "streak_analysis": streak_analysis(streaks, categories),
    }


def weekly_stats(checkins: Iterable[dict], axis_category_ids: Iterable[int], days: int = 7) -> Dict[str, Any]:
    """Totals over a window: check-ins, perfect days (every default axis done) and completion % of axes * days."""
    checkins = list(checkins)
    axis_ids = set(axis_category_ids)
    per_day: Dict[date, set] = {}
    for checkin in checkins:
        per_day.setdefault(parse_date(checkin["completed_at"]), set()).add(checkin["category_id"])
    perfect_days = len([d for d, ids in per_day.items() if axis_ids and axis_ids <= ids])
    # personal categories count as check-ins but not towards the axes * days rate
    axis_checkins = len([c for c in checkins if c["category_id"] in axis_ids])
    max_possible = AXIS_COUNT * days
    rate = min(axis_checkins / max_possible * 100, 100.0) if max_possible else 0.0
    return {
        "total_checkins": len(checkins),
        "perfect_days": perfect_days,
        "completion_rate": round(rate, 2),
    }
