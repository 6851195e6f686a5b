"""
Streak calculation over the check-in dates of one (user, category) pair.

A streak is a run of consecutive calendar days with a check-in. The current
streak only counts while its last day is today or yesterday, so a user who
has not checked in yet today keeps their streak until the day is over.
"""

from datetime import date, timedelta
from typing import Iterable, Optional
from pydantic import BaseModel


class StreakStats(BaseModel):
    current_streak: int
    longest_streak: int
    last_checkin: date


def calculate_streak(dates: Iterable[date], today: date) -> Optional[StreakStats]:
    """Return streak stats for the given check-in dates, or None when there are none."""
    ordered = sorted(set(dates))
    if not ordered:
        return None

    longest = 0
    run = 0
    previous = None
    for day in ordered:
        if previous is not None and day == previous + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day

    last = ordered[-1]
    current = run if is_streak_alive(last, today) else 0
    return StreakStats(current_streak=current, longest_streak=longest, last_checkin=last)


def is_streak_alive(last_checkin: Optional[date], today: date) -> bool:
    return last_checkin is not None and last_checkin >= today - timedelta(days=1)
