"""
Chat activity aggregates for the analytics endpoints and their CSV export.
"""

import io
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import pandas as pd

from axis6.core.dates import parse_timestamp

TOP_ROOMS = 5
TOP_REACTIONS = 5
CSV_FILENAME = "chat-analytics.csv"

OVERVIEW_METRICS = [
    ("total_rooms", "Total Rooms"),
    ("total_messages", "Total Messages"),
    ("messages_sent", "Messages Sent"),
    ("messages_today", "Messages Today"),
    ("active_participants", "Active Participants"),
    ("avg_messages_per_participant", "Avg Messages Per Participant"),
    ("reactions_given", "Reactions Given"),
    ("reactions_received", "Reactions Received"),
]


def _local_day(value, tz: ZoneInfo) -> Optional[date]:
    moment = parse_timestamp(value)
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def overview(
    user_id: str,
    rooms: List[dict],
    messages: List[dict],
    reactions: List[dict],
    today: date,
    tz: ZoneInfo
) -> Dict[str, Any]:
    """Activity across the caller's active rooms. `reactions` are those on `messages`."""
    senders = {m["sender_id"] for m in messages}
    own_ids = {m["id"] for m in messages if m["sender_id"] == user_id}
    per_room = Counter(m["room_id"] for m in messages)
    names = {r["id"]: r.get("name") for r in rooms}
    return {
        "total_rooms": len(rooms),
        "total_messages": len(messages),
        "messages_sent": len(own_ids),
        "messages_today": len([m for m in messages if _local_day(m.get("created_at"), tz) == today]),
        "active_participants": len(senders),
        "avg_messages_per_participant": round(len(messages) / len(senders), 2) if senders else 0.0,
        "reactions_given": len([r for r in reactions if r["user_id"] == user_id]),
        "reactions_received": len([r for r in reactions if r["message_id"] in own_ids and r["user_id"] != user_id]),
        "most_active_rooms": [
            {"room_id": room_id, "name": names.get(room_id), "message_count": count}
            for room_id, count in per_room.most_common(TOP_ROOMS)
        ],
    }


def room_activity(
    room: dict,
    participants: List[dict],
    messages: List[dict],
    reactions: List[dict],
    names: Dict[str, str]
) -> Dict[str, Any]:
    per_sender = Counter(m["sender_id"] for m in messages)
    stamps = sorted(parse_timestamp(m["created_at"]) for m in messages if m.get("created_at"))
    return {
        "room_id": room["id"],
        "name": room.get("name"),
        "total_messages": len(messages),
        "participant_count": len(participants),
        "messages_by_participant": [
            {"user_id": p["user_id"], "name": names.get(p["user_id"]), "message_count": per_sender.get(p["user_id"], 0)}
            for p in sorted(participants, key=lambda p: (-per_sender.get(p["user_id"], 0), str(p.get("joined_at") or "")))
        ],
        "top_reactions": [
            {"emoji": emoji, "count": count}
            for emoji, count in Counter(r["emoji"] for r in reactions).most_common(TOP_REACTIONS)
        ],
        "first_message_at": stamps[0] if stamps else None,
        "last_message_at": stamps[-1] if stamps else None,
    }


def overview_csv(data: Dict[str, Any]) -> str:
    """Two-column Metric,Value sheet of the scalar overview figures."""
    df = pd.DataFrame(
        [{"Metric": label, "Value": data.get(key, 0)} for key, label in OVERVIEW_METRICS],
        columns=["Metric", "Value"],
        dtype=object
    )
    buffer = io.StringIO()
    df.to_csv(buffer, index=False, lineterminator="\n")
    return buffer.getvalue()
