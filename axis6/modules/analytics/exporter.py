"""
Check-in history exports (JSON summary and CSV).
"""

import io
from typing import Any, Dict, List, Optional

import pandas as pd

from axis6.config.categories_config import category_display_name
from axis6.core.dates import parse_date

CSV_COLUMNS = ["Date", "Category", "Mood", "Notes"]
CSV_FILENAME = "axis6-data.csv"


def export_summary(checkins: List[dict], streaks: List[dict]) -> Dict[str, Any]:
    dates = sorted(d for d in (parse_date(c.get("completed_at")) for c in checkins) if d)
    return {
        "total_checkins": len(checkins),
        "earliest_date": dates[0].isoformat() if dates else None,
        "latest_date": dates[-1].isoformat() if dates else None,
        "longest_streak": max([s.get("longest_streak", 0) for s in streaks] + [0]),
    }


def build_json_export(
    checkins: List[dict],
    streaks: List[dict],
    profile: Optional[dict] = None
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "checkins": checkins,
        "streaks": streaks,
        "summary": export_summary(checkins, streaks),
    }
    if profile is not None:
        data["profile"] = profile
    return data


def build_csv_export(checkins: List[dict], categories: Dict[int, dict]) -> str:
    """One row per check-in, oldest first."""
    rows = [
        {
            "Date": str(parse_date(c["completed_at"])),
            "Category": category_display_name(categories.get(c["category_id"])),
            "Mood": c["mood"] if c.get("mood") is not None else "",
            "Notes": c.get("notes") or "",
        }
        for c in sorted(checkins, key=lambda c: (str(c["completed_at"]), c["category_id"]))
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS, dtype=object)
    buffer = io.StringIO()
    df.to_csv(buffer, index=False, lineterminator="\n")
    return buffer.getvalue()
