from supabase import Client
from axis6.config.categories_config import AXIS_SLUGS
from axis6.core.dates import local_now
from axis6.modules.micro_wins.resonance import advance_streak, in_morning_window, rank_leaderboard, streak_keys
from axis6.modules.micro_wins.schemas import (
    MicroWinCreate, MicroWinResponse, MicroWinFeed, RecordedMicroWin, ReactionCreate,
    MicroReactionResponse, ResonanceStreakResponse, FollowResponse, LeaderboardEntry
)
from axis6.modules.profiles.service import ProfileService
from typing import Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

WINS_TABLE = "axis6_micro_wins"
REACTIONS_TABLE = "axis6_micro_reactions"
RESONANCE_TABLE = "axis6_resonance_streaks"
SOCIAL_GRAPH_TABLE = "axis6_social_graph"
RITUALS_TABLE = "axis6_daily_rituals"
CATEGORIES_TABLE = "axis6_categories"
PROFILES_TABLE = "axis6_profiles"

FOLLOWER_VISIBLE = ["public", "followers"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MicroWinService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _axes(self) -> Dict[str, dict]:
        """Default axis rows keyed by slug"""
        result = self.supabase.table(CATEGORIES_TABLE)\
            .select("id, slug, color")\
            .in_("slug", AXIS_SLUGS)\
            .is_("created_by", "null")\
            .execute()
        return {c["slug"]: c for c in (result.data or [])}

    def _following_ids(self, user_id: str) -> List[str]:
        result = self.supabase.table(SOCIAL_GRAPH_TABLE)\
            .select("following_id")\
            .eq("follower_id", user_id)\
            .execute()
        return [r["following_id"] for r in (result.data or [])]

    def _profile_names(self, user_ids: List[str]) -> Dict[str, str]:
        if not user_ids:
            return {}
        result = self.supabase.table(PROFILES_TABLE)\
            .select("id, name")\
            .in_("id", list(set(user_ids)))\
            .execute()
        return {p["id"]: p.get("name") for p in (result.data or [])}

    def _responses(self, wins: List[dict], user_id: str) -> List[MicroWinResponse]:
        if not wins:
            return []
        names = self._profile_names([w["user_id"] for w in wins])
        colors = {slug: axis.get("color") for slug, axis in self._axes().items()}
        mine = self.supabase.table(REACTIONS_TABLE)\
            .select("micro_win_id")\
            .in_("micro_win_id", [w["id"] for w in wins])\
            .eq("user_id", user_id)\
            .execute()
        reacted = {r["micro_win_id"] for r in (mine.data or [])}
        return [
            MicroWinResponse(
                **w,
                user_name=names.get(w["user_id"]),
                axis_color=colors.get(w["axis_slug"]),
                user_reacted=w["id"] in reacted
            )
            for w in wins
        ]

    def _get_visible_win(self, win_id: str, user_id: str) -> dict:
        """Non-deleted win the caller may see; 404 otherwise"""
        result = self.supabase.table(WINS_TABLE)\
            .select("*")\
            .eq("id", win_id)\
            .is_("deleted_at", "null")\
            .limit(1)\
            .execute()
        win = result.data[0] if result.data else None
        if win and win["user_id"] != user_id:
            if win["privacy"] == "private":
                win = None
            elif win["privacy"] == "followers" and win["user_id"] not in self._following_ids(user_id):
                win = None
        if not win:
            raise HTTPException(status_code=404, detail="Micro win not found")
        return win

    # Wins

    def _advance_streaks(self, user_id: str, axis_slug: str, is_morning: bool, today) -> List[dict]:
        # Select then write: a unique key containing a NULL axis_slug never conflicts in Postgres
        rows = []
        for streak_type, slug in streak_keys(axis_slug, is_morning):
            query = self.supabase.table(RESONANCE_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("streak_type", streak_type)
            query = query.eq("axis_slug", slug) if slug else query.is_("axis_slug", "null")
            existing = query.limit(1).execute()
            current = existing.data[0] if existing.data else None
            counters = advance_streak(current, today)
            if current:
                result = self.supabase.table(RESONANCE_TABLE)\
                    .update({**counters, "updated_at": _now()})\
                    .eq("id", current["id"])\
                    .execute()
            else:
                result = self.supabase.table(RESONANCE_TABLE).insert({
                    "user_id": user_id,
                    "streak_type": streak_type,
                    "axis_slug": slug,
                    **counters
                }).execute()
            rows.extend(result.data or [])
        return rows

    def record_win(self, user_id: str, win_data: MicroWinCreate) -> RecordedMicroWin:
        """Record a micro win; inside 04:45-05:30 local time it also counts as the morning ritual"""
        axis = self._axes().get(win_data.axis)
        if not axis:
            raise HTTPException(status_code=400, detail="Invalid axis")

        now = local_now(ProfileService(self.supabase).get_timezone(user_id))
        today = now.date()
        is_morning = win_data.is_morning and in_morning_window(now.time())

        try:
            result = self.supabase.table(WINS_TABLE).insert({
                "user_id": user_id,
                "category_id": axis["id"],
                "axis_slug": win_data.axis,
                "win_text": win_data.win_text,
                "minutes": win_data.minutes,
                "privacy": win_data.privacy,
                "is_morning_ritual": is_morning,
                "resonance_count": 0
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to record micro win")
            win = result.data[0]

            if is_morning:
                self.supabase.table(RITUALS_TABLE).upsert({
                    "user_id": user_id,
                    "ritual_date": today.isoformat(),
                    "completed_at": now.isoformat(),
                    "axis_focus": win_data.axis,
                    "micro_win_text": win_data.win_text
                }, on_conflict="user_id,ritual_date").execute()

            streaks = self._advance_streaks(user_id, win_data.axis, is_morning, today)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error recording micro win for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

        if is_morning:
            message = "Morning micro win recorded!"
        elif win_data.is_morning:
            message = "Micro win recorded! The morning ritual window is 04:45-05:30."
        else:
            message = "Micro win recorded!"
        logger.info(f"User {user_id} recorded a {win_data.axis} micro win")
        return RecordedMicroWin(
            win=self._responses([win], user_id)[0],
            message=message,
            streaks=[ResonanceStreakResponse(**s) for s in streaks]
        )

    def get_feed(
        self,
        user_id: str,
        feed_type: str = "all",
        axis: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> MicroWinFeed:
        """Newest wins the caller may see: public ones, their own, and followers-only wins of people they follow"""
        try:
            following = self._following_ids(user_id)
            query = self.supabase.table(WINS_TABLE)\
                .select("*")\
                .is_("deleted_at", "null")
            if feed_type == "my":
                query = query.eq("user_id", user_id)
            elif feed_type == "following":
                if not following:
                    return MicroWinFeed(feed=[], offset=offset, limit=limit, has_more=False)
                query = query.in_("user_id", following).in_("privacy", FOLLOWER_VISIBLE)
            else:
                visible = f"privacy.eq.public,user_id.eq.{user_id}"
                if following:
                    visible += f",and(privacy.eq.followers,user_id.in.({','.join(following)}))"
                query = query.or_(visible)
            if axis:
                query = query.eq("axis_slug", axis)

            # one extra row tells whether another page exists
            result = query.order("created_at", desc=True).range(offset, offset + limit).execute()
            rows = result.data or []
            return MicroWinFeed(
                feed=self._responses(rows[:limit], user_id),
                offset=offset,
                limit=limit,
                has_more=len(rows) > limit
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading micro win feed: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_win(self, win_id: str, user_id: str) -> bool:
        win = self._get_visible_win(win_id, user_id)
        if win["user_id"] != user_id:
            raise HTTPException(status_code=403, detail="You can only delete your own micro wins")
        try:
            self.supabase.table(WINS_TABLE)\
                .update({"deleted_at": _now()})\
                .eq("id", win_id)\
                .execute()
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Reactions

    def _refresh_resonance_count(self, win_id: str):
        reactions = self.supabase.table(REACTIONS_TABLE)\
            .select("id")\
            .eq("micro_win_id", win_id)\
            .execute()
        self.supabase.table(WINS_TABLE)\
            .update({"resonance_count": len(reactions.data or [])})\
            .eq("id", win_id)\
            .execute()

    def add_reaction(self, win_id: str, reaction: ReactionCreate, user_id: str) -> MicroReactionResponse:
        """One reaction per (win, user, type); repeating it returns the existing one"""
        self._get_visible_win(win_id, user_id)
        try:
            existing = self.supabase.table(REACTIONS_TABLE)\
                .select("*")\
                .eq("micro_win_id", win_id)\
                .eq("user_id", user_id)\
                .eq("reaction_type", reaction.reaction_type)\
                .limit(1)\
                .execute()
            if existing.data:
                return MicroReactionResponse(**existing.data[0])

            result = self.supabase.table(REACTIONS_TABLE).insert({
                "micro_win_id": win_id,
                "user_id": user_id,
                "reaction_type": reaction.reaction_type,
                "axis_resonance": reaction.axis_resonance
            }).execute()
            self._refresh_resonance_count(win_id)
            return MicroReactionResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error reacting to micro win {win_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def remove_reaction(self, win_id: str, reaction_type: str, user_id: str) -> bool:
        self._get_visible_win(win_id, user_id)
        try:
            result = self.supabase.table(REACTIONS_TABLE)\
                .delete()\
                .eq("micro_win_id", win_id)\
                .eq("user_id", user_id)\
                .eq("reaction_type", reaction_type)\
                .execute()
            if result.data:
                self._refresh_resonance_count(win_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Reaction not found")
        return True

    # Social graph

    def list_following(self, user_id: str) -> List[FollowResponse]:
        result = self.supabase.table(SOCIAL_GRAPH_TABLE)\
            .select("*")\
            .eq("follower_id", user_id)\
            .order("created_at", desc=True)\
            .execute()
        rows = result.data or []
        names = self._profile_names([r["following_id"] for r in rows])
        return [
            FollowResponse(following_id=r["following_id"], name=names.get(r["following_id"]), created_at=r["created_at"])
            for r in rows
        ]

    def follow(self, user_id: str, target_user_id: str) -> FollowResponse:
        if target_user_id == user_id:
            raise HTTPException(status_code=400, detail="You cannot follow yourself")
        names = self._profile_names([target_user_id])
        if target_user_id not in names:
            raise HTTPException(status_code=404, detail="User not found")
        try:
            result = self.supabase.table(SOCIAL_GRAPH_TABLE).upsert({
                "follower_id": user_id,
                "following_id": target_user_id
            }, on_conflict="follower_id,following_id").execute()
            row = result.data[0]
            return FollowResponse(following_id=target_user_id, name=names[target_user_id], created_at=row["created_at"])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def unfollow(self, user_id: str, target_user_id: str) -> bool:
        try:
            result = self.supabase.table(SOCIAL_GRAPH_TABLE)\
                .delete()\
                .eq("follower_id", user_id)\
                .eq("following_id", target_user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="You are not following this user")
        return True

    # Resonance

    def list_streaks(self, user_id: str) -> List[ResonanceStreakResponse]:
        result = self.supabase.table(RESONANCE_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .execute()
        order = {"daily": 0, "morning": 1, "axis": 2}
        rows = sorted(
            result.data or [],
            key=lambda r: (order.get(r["streak_type"], 3), AXIS_SLUGS.index(r["axis_slug"]) if r.get("axis_slug") in AXIS_SLUGS else -1)
        )
        return [ResonanceStreakResponse(**r) for r in rows]

    def leaderboard(self, streak_type: str = "daily", limit: int = 20) -> List[LeaderboardEntry]:
        try:
            result = self.supabase.table(RESONANCE_TABLE)\
                .select("*")\
                .eq("streak_type", streak_type)\
                .is_("axis_slug", "null")\
                .order("current_streak", desc=True)\
                .order("total_micro_wins", desc=True)\
                .limit(limit)\
                .execute()
            ranked = rank_leaderboard(result.data or [])
            names = self._profile_names([r["user_id"] for r in ranked])
            return [
                LeaderboardEntry(
                    user_id=r["user_id"],
                    name=names.get(r["user_id"]),
                    current_streak=r["current_streak"],
                    longest_streak=r["longest_streak"],
                    total_wins=r["total_micro_wins"],
                    rank=r["rank"]
                )
                for r in ranked
            ]
        except Exception as e:
            logger.error(f"Error building {streak_type} leaderboard: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
