from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from axis6.config.settings import settings
from axis6.core.rate_limit import limiter
from axis6.database.supabase_client import get_supabase
from axis6.modules.chat.schemas import (
    RoomCreate, RoomUpdate, RoomResponse, ParticipantUpdate, ParticipantResponse,
    MessageCreate, MessageUpdate, MessageResponse, MessagePage, ReactionCreate, ReactionResponse,
    SearchResult, RoomType, ChatAnalyticsOverview, RoomAnalytics
)
from axis6.modules.chat.analytics import CSV_FILENAME
from axis6.modules.chat.service import ChatService, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Literal, Optional

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_service(supabase: Client = Depends(get_supabase)) -> ChatService:
    return ChatService(supabase)


# Rooms

@router.get("/rooms", response_model=List[RoomResponse])
async def list_rooms(
    type: Optional[RoomType] = None,
    category_id: Optional[int] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Rooms the caller participates in"""
    return service.list_rooms(user_data["id"], room_type=type, category_id=category_id)


@router.post("/rooms", response_model=RoomResponse, status_code=201)
async def create_room(
    room_data: RoomCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.create_room(room_data, user_data["id"])


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.get_room(room_id, user_data)


@router.put("/rooms/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: str,
    room_data: RoomUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Update room details (room admins only)"""
    return service.update_room(room_id, room_data, user_data)


@router.delete("/rooms/{room_id}", status_code=204)
async def delete_room(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    service.delete_room(room_id, user_data)
    return None


@router.post("/rooms/{room_id}/join", response_model=ParticipantResponse)
async def join_room(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Join a category or support room"""
    return service.join_room(room_id, user_data["id"])


@router.post("/rooms/{room_id}/read", response_model=ParticipantResponse)
async def mark_room_read(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.mark_read(room_id, user_data)


# Participants

@router.get("/rooms/{room_id}/participants", response_model=List[ParticipantResponse])
async def list_participants(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.list_participants(room_id, user_data)


@router.put("/rooms/{room_id}/participants/{user_id}", response_model=ParticipantResponse)
async def update_participant(
    room_id: str,
    user_id: str,
    update_data: ParticipantUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Change a participant's role, mute state or notification settings"""
    return service.update_participant(room_id, user_id, update_data, user_data)


@router.delete("/rooms/{room_id}/participants/{user_id}", status_code=204)
async def remove_participant(
    room_id: str,
    user_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    service.remove_participant(room_id, user_id, user_data)
    return None


# Messages

@router.get("/rooms/{room_id}/messages", response_model=MessagePage)
async def list_messages(
    room_id: str,
    cursor: Optional[str] = None,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    type: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Message history, paginated backwards with a created_at cursor"""
    return service.list_messages(room_id, user_data, cursor=cursor, limit=limit, message_type=type)


@router.post("/rooms/{room_id}/messages", response_model=MessageResponse, status_code=201)
@limiter.limit(lambda: settings.chat_message_rate_limit)
async def send_message(
    request: Request,
    room_id: str,
    message_data: MessageCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.send_message(room_id, message_data, user_data)


@router.put("/rooms/{room_id}/messages/{message_id}", response_model=MessageResponse)
async def edit_message(
    room_id: str,
    message_id: str,
    message_data: MessageUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.edit_message(room_id, message_id, message_data, user_data)


@router.delete("/rooms/{room_id}/messages/{message_id}", status_code=204)
async def delete_message(
    room_id: str,
    message_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    service.delete_message(room_id, message_id, user_data)
    return None


# Reactions

@router.post("/rooms/{room_id}/messages/{message_id}/reactions", response_model=ReactionResponse, status_code=201)
async def add_reaction(
    room_id: str,
    message_id: str,
    reaction_data: ReactionCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.add_reaction(room_id, message_id, reaction_data.emoji, user_data)


@router.delete("/rooms/{room_id}/messages/{message_id}/reactions/{emoji}", status_code=204)
async def remove_reaction(
    room_id: str,
    message_id: str,
    emoji: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    service.remove_reaction(room_id, message_id, emoji, user_data)
    return None


# Search

@router.get("/search", response_model=List[SearchResult])
async def search_messages(
    q: str = Query(..., min_length=2),
    room_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Search messages in the caller's rooms"""
    return service.search_messages(q, user_data, room_id=room_id)


# Analytics

@router.get("/analytics", response_model=ChatAnalyticsOverview)
async def get_chat_analytics(
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.get_analytics_overview(user_data)


@router.get("/analytics/export")
async def export_chat_analytics(
    format: Literal["json", "csv"] = Query("json"),
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Download the caller's chat overview as JSON or a Metric,Value CSV"""
    if format == "csv":
        return Response(
            content=service.export_analytics_csv(user_data),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
        )
    return service.get_analytics_overview(user_data)


@router.get("/rooms/{room_id}/analytics", response_model=RoomAnalytics)
async def get_room_analytics(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.get_room_analytics(room_id, user_data)
