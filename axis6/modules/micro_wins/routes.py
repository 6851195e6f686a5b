from fastapi import APIRouter, Depends, Query
from axis6.database.supabase_client import get_supabase
from axis6.modules.micro_wins.schemas import (
    MicroWinCreate, MicroWinFeed, RecordedMicroWin, ReactionCreate, MicroReactionResponse,
    ResonanceStreakResponse, FollowResponse, LeaderboardEntry, AxisSlug, FeedType, LeaderboardType, ReactionType
)
from axis6.modules.micro_wins.service import MicroWinService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/micro-wins", tags=["micro-wins"])


def get_micro_win_service(supabase: Client = Depends(get_supabase)) -> MicroWinService:
    return MicroWinService(supabase)


@router.post("", response_model=RecordedMicroWin, status_code=201)
async def record_micro_win(
    win_data: MicroWinCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    """Record a tiny action on one axis and advance the resonance streaks"""
    return service.record_win(user_data["id"], win_data)


@router.get("", response_model=MicroWinFeed)
async def get_feed(
    feed_type: FeedType = "all",
    axis: Optional[AxisSlug] = None,
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    return service.get_feed(user_data["id"], feed_type=feed_type, axis=axis, limit=limit, offset=offset)


@router.get("/streaks", response_model=List[ResonanceStreakResponse])
async def list_resonance_streaks(
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    return service.list_streaks(user_data["id"])


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    streak_type: LeaderboardType = "daily",
    limit: int = Query(20, ge=1, le=100),
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    return service.leaderboard(streak_type=streak_type, limit=limit)


@router.get("/following", response_model=List[FollowResponse])
async def list_following(
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    return service.list_following(user_data["id"])


@router.post("/following/{target_user_id}", response_model=FollowResponse, status_code=201)
async def follow_user(
    target_user_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    return service.follow(user_data["id"], target_user_id)


@router.delete("/following/{target_user_id}", status_code=204)
async def unfollow_user(
    target_user_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    service.unfollow(user_data["id"], target_user_id)
    return None


@router.delete("/{win_id}", status_code=204)
async def delete_micro_win(
    win_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    service.delete_win(win_id, user_data["id"])
    return None


@router.post("/{win_id}/reactions", response_model=MicroReactionResponse, status_code=201)
async def add_reaction(
    win_id: str,
    reaction: ReactionCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    """Hex-star, support or inspire; repeating a reaction is a no-op"""
    return service.add_reaction(win_id, reaction, user_data["id"])


@router.delete("/{win_id}/reactions/{reaction_type}", status_code=204)
async def remove_reaction(
    win_id: str,
    reaction_type: ReactionType,
    user_data: Dict = Depends(get_current_user_id),
    service: MicroWinService = Depends(get_micro_win_service)
):
    service.remove_reaction(win_id, reaction_type, user_data["id"])
    return None
