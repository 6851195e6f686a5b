"""
Resonance streaks: consecutive days with at least one micro win.

Unlike check-in streaks these are advanced incrementally each time a win is
recorded, one row per (user, streak type, axis).
"""

from datetime import date, time, timedelta
from typing import List, Optional

from axis6.core.dates import parse_date

MORNING_WINDOW_START = time(4, 45)
MORNING_WINDOW_END = time(5, 30)


def in_morning_window(moment: time) -> bool:
    return MORNING_WINDOW_START <= moment.replace(tzinfo=None) <= MORNING_WINDOW_END


def advance_streak(row: Optional[dict], today: date) -> dict:
    """New counters for a streak row after a win on `today`."""
    row = row or {}
    last = parse_date(row.get("last_win_date"))
    current = row.get("current_streak") or 0
    if last == today:
        current = max(current, 1)
    elif last == today - timedelta(days=1):
        current += 1
    else:
        current = 1
    return {
        "current_streak": current,
        "longest_streak": max(row.get("longest_streak") or 0, current),
        "last_win_date": today.isoformat(),
        "total_micro_wins": (row.get("total_micro_wins") or 0) + 1,
    }


def streak_keys(axis_slug: str, is_morning: bool) -> List[tuple]:
    """(streak_type, axis_slug) pairs a win counts towards"""
    keys = [("daily", None)]
    if is_morning:
        keys.append(("morning", None))
    keys.append(("axis", axis_slug))
    return keys


def rank_leaderboard(rows: List[dict]) -> List[dict]:
    """Order by current streak then total wins; equal current streaks share a rank."""
    ordered = sorted(rows, key=lambda r: (-(r.get("current_streak") or 0), -(r.get("total_micro_wins") or 0)))
    ranked = []
    rank = 0
    previous = None
    for position, row in enumerate(ordered, start=1):
        if row.get("current_streak") != previous:
            rank = position
            previous = row.get("current_streak")
        ranked.append({**row, "rank": rank})
    return ranked
