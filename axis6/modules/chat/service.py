from supabase import Client
from axis6.core.dependencies import (
    ROOM_MANAGER_ROLES, check_room_participant, get_room_participation
)
from axis6.core.dates import resolve_timezone
from axis6.modules.chat import analytics
from axis6.modules.chat.schemas import (
    RoomCreate, RoomUpdate, RoomResponse, ParticipantUpdate, ParticipantResponse,
    MessageCreate, MessageUpdate, MessageResponse, MessagePage, ReactionResponse, SearchResult,
    ChatAnalyticsOverview, RoomAnalytics
)
from axis6.modules.chat.validation import DELETED_MESSAGE_CONTENT
from axis6.modules.profiles.service import ProfileService
from typing import Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

ROOMS_TABLE = "axis6_chat_rooms"
PARTICIPANTS_TABLE = "axis6_chat_participants"
MESSAGES_TABLE = "axis6_chat_messages"
REACTIONS_TABLE = "axis6_chat_reactions"
PROFILES_TABLE = "axis6_profiles"

JOINABLE_ROOM_TYPES = ["category", "support"]
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
SEARCH_LIMIT = 50
MIN_SEARCH_LENGTH = 2


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ChatService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Rooms

    def _get_active_room(self, room_id: str) -> dict:
        result = self.supabase.table(ROOMS_TABLE)\
            .select("*")\
            .eq("id", room_id)\
            .eq("is_active", True)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Room not found or access denied")
        return result.data[0]

    def _room_access(self, room_id: str, user_data: dict) -> tuple:
        """Caller's participant row and the room; deactivated rooms answer 404 like foreign ones"""
        participation = check_room_participant(room_id, user_data, self.supabase)
        return participation, self._get_active_room(room_id)

    def _participants(self, room_ids: List[str]) -> List[dict]:
        if not room_ids:
            return []
        result = self.supabase.table(PARTICIPANTS_TABLE)\
            .select("*")\
            .in_("room_id", room_ids)\
            .execute()
        return result.data or []

    def _profile_names(self, user_ids: List[str]) -> Dict[str, str]:
        if not user_ids:
            return {}
        result = self.supabase.table(PROFILES_TABLE)\
            .select("id, name")\
            .in_("id", list(set(user_ids)))\
            .execute()
        return {p["id"]: p.get("name") for p in (result.data or [])}

    def _room_response(self, room: dict, participants: List[dict], user_id: str) -> RoomResponse:
        members = [p for p in participants if p["room_id"] == room["id"]]
        mine = next((p for p in members if p["user_id"] == user_id), None)
        return RoomResponse(
            **room,
            participant_count=len(members),
            my_role=mine["role"] if mine else None
        )

    def list_rooms(
        self,
        user_id: str,
        room_type: Optional[str] = None,
        category_id: Optional[int] = None
    ) -> List[RoomResponse]:
        """Active rooms the user participates in, most recently updated first"""
        try:
            memberships = self.supabase.table(PARTICIPANTS_TABLE)\
                .select("room_id")\
                .eq("user_id", user_id)\
                .execute()
            room_ids = [m["room_id"] for m in (memberships.data or [])]
            if not room_ids:
                return []

            query = self.supabase.table(ROOMS_TABLE)\
                .select("*")\
                .in_("id", room_ids)\
                .eq("is_active", True)
            if room_type:
                query = query.eq("type", room_type)
            if category_id is not None:
                query = query.eq("category_id", category_id)
            result = query.order("updated_at", desc=True).execute()

            rooms = result.data or []
            participants = self._participants([r["id"] for r in rooms])
            return [self._room_response(room, participants, user_id) for room in rooms]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing chat rooms: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_room(self, room_data: RoomCreate, user_id: str) -> RoomResponse:
        """Create a room; the creator becomes its admin and invitees join as members"""
        invitees = [pid for pid in dict.fromkeys(room_data.participant_ids) if pid != user_id]
        if room_data.type == "direct" and len(invitees) != 1:
            raise HTTPException(status_code=400, detail="Direct rooms need exactly one other participant")
        max_participants = 2 if room_data.type == "direct" else room_data.max_participants
        if max_participants is not None and len(invitees) + 1 > max_participants:
            raise HTTPException(status_code=400, detail="Too many participants for this room")

        known = self._profile_names(invitees)
        missing = [pid for pid in invitees if pid not in known]
        if missing:
            raise HTTPException(status_code=400, detail=f"Unknown participant(s): {', '.join(missing)}")

        try:
            result = self.supabase.table(ROOMS_TABLE).insert({
                "name": room_data.name.strip(),
                "description": room_data.description,
                "type": room_data.type,
                "category_id": room_data.category_id,
                "created_by": user_id,
                "is_active": True,
                "max_participants": max_participants,
                "metadata": {}
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create room")
            room = result.data[0]

            rows = [{"room_id": room["id"], "user_id": user_id, "role": "admin"}]
            rows += [{"room_id": room["id"], "user_id": pid, "role": "member"} for pid in invitees]
            participants = self.supabase.table(PARTICIPANTS_TABLE).insert(rows).execute()

            logger.info(f"User {user_id} created {room_data.type} room {room['id']}")
            return self._room_response(room, participants.data or [], user_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating chat room: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_room(self, room_id: str, user_data: dict) -> RoomResponse:
        _, room = self._room_access(room_id, user_data)
        return self._room_response(room, self._participants([room_id]), user_data["id"])

    def update_room(self, room_id: str, room_data: RoomUpdate, user_data: dict) -> RoomResponse:
        participation, _ = self._room_access(room_id, user_data)
        if participation.get("role") != "admin":
            raise HTTPException(status_code=403, detail="Only room admins can update the room")

        try:
            update_data = {"updated_at": _now()}
            if room_data.name is not None:
                update_data["name"] = room_data.name.strip()
            if room_data.description is not None:
                update_data["description"] = room_data.description
            if room_data.max_participants is not None:
                if len(self._participants([room_id])) > room_data.max_participants:
                    raise HTTPException(status_code=400, detail="Room already has more participants than the new limit")
                update_data["max_participants"] = room_data.max_participants
            if room_data.metadata is not None:
                update_data["metadata"] = room_data.metadata

            result = self.supabase.table(ROOMS_TABLE)\
                .update(update_data)\
                .eq("id", room_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Room not found or access denied")
            return self._room_response(result.data[0], self._participants([room_id]), user_data["id"])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_room(self, room_id: str, user_data: dict) -> bool:
        """Soft delete: the room is deactivated, history is kept"""
        room = self._get_active_room(room_id)
        if room.get("created_by") != user_data["id"]:
            participation = get_room_participation(room_id, user_data["id"], self.supabase)
            if not participation:
                raise HTTPException(status_code=404, detail="Room not found or access denied")
            if participation.get("role") != "admin":
                raise HTTPException(status_code=403, detail="Only the room creator or an admin can delete the room")

        try:
            self.supabase.table(ROOMS_TABLE)\
                .update({"is_active": False, "updated_at": _now()})\
                .eq("id", room_id)\
                .execute()
            logger.info(f"User {user_data['id']} deleted room {room_id}")
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def join_room(self, room_id: str, user_id: str) -> ParticipantResponse:
        """Join a public room; joining twice returns the existing membership"""
        room = self._get_active_room(room_id)
        if room.get("type") not in JOINABLE_ROOM_TYPES:
            raise HTTPException(status_code=403, detail="This room is invite only")

        existing = get_room_participation(room_id, user_id, self.supabase)
        if existing:
            return ParticipantResponse(**existing)

        max_participants = room.get("max_participants")
        if max_participants is not None and len(self._participants([room_id])) >= max_participants:
            raise HTTPException(status_code=400, detail="Room is full")

        try:
            result = self.supabase.table(PARTICIPANTS_TABLE).insert({
                "room_id": room_id,
                "user_id": user_id,
                "role": "member"
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to join room")
            logger.info(f"User {user_id} joined room {room_id}")
            return ParticipantResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def mark_read(self, room_id: str, user_data: dict) -> ParticipantResponse:
        participation, _ = self._room_access(room_id, user_data)
        try:
            result = self.supabase.table(PARTICIPANTS_TABLE)\
                .update({"last_seen": _now()})\
                .eq("id", participation["id"])\
                .execute()
            return ParticipantResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Participants

    def list_participants(self, room_id: str, user_data: dict) -> List[ParticipantResponse]:
        self._room_access(room_id, user_data)
        participants = self._participants([room_id])
        names = self._profile_names([p["user_id"] for p in participants])
        participants = sorted(participants, key=lambda p: str(p.get("joined_at") or ""))
        return [ParticipantResponse(**p, name=names.get(p["user_id"])) for p in participants]

    def _admin_count(self, room_id: str) -> int:
        return len([p for p in self._participants([room_id]) if p.get("role") == "admin"])

    def update_participant(
        self,
        room_id: str,
        target_user_id: str,
        update_data: ParticipantUpdate,
        user_data: dict
    ) -> ParticipantResponse:
        caller, _ = self._room_access(room_id, user_data)
        target = get_room_participation(room_id, target_user_id, self.supabase)
        if not target:
            raise HTTPException(status_code=404, detail="Participant not found")

        is_manager = caller.get("role") in ROOM_MANAGER_ROLES
        is_self = target_user_id == user_data["id"]
        changes = {}

        if update_data.role is not None and update_data.role != target.get("role"):
            if not is_manager:
                raise HTTPException(status_code=403, detail="Only admins and moderators can change roles")
            if is_self:
                raise HTTPException(status_code=400, detail="You cannot change your own role")
            if target.get("role") == "admin" and self._admin_count(room_id) <= 1:
                raise HTTPException(status_code=400, detail="A room needs at least one admin")
            changes["role"] = update_data.role

        if update_data.is_muted is not None or update_data.notification_settings is not None:
            if not (is_self or is_manager):
                raise HTTPException(status_code=403, detail="Insufficient permissions")
            if update_data.is_muted is not None:
                changes["is_muted"] = update_data.is_muted
            if update_data.notification_settings is not None:
                changes["notification_settings"] = update_data.notification_settings

        if not changes:
            return ParticipantResponse(**target)

        try:
            result = self.supabase.table(PARTICIPANTS_TABLE)\
                .update(changes)\
                .eq("id", target["id"])\
                .execute()
            return ParticipantResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_participant(self, room_id: str, target_user_id: str, user_data: dict) -> bool:
        """Leave a room, or remove someone else as admin/moderator"""
        caller, _ = self._room_access(room_id, user_data)
        is_self = target_user_id == user_data["id"]
        if not is_self and caller.get("role") not in ROOM_MANAGER_ROLES:
            raise HTTPException(status_code=403, detail="Insufficient permissions")

        target = caller if is_self else get_room_participation(room_id, target_user_id, self.supabase)
        if not target:
            raise HTTPException(status_code=404, detail="Participant not found")
        if target.get("role") == "admin" and self._admin_count(room_id) <= 1:
            raise HTTPException(status_code=400, detail="The last admin cannot leave the room")

        try:
            self.supabase.table(PARTICIPANTS_TABLE)\
                .delete()\
                .eq("id", target["id"])\
                .execute()
            logger.info(f"User {target_user_id} removed from room {room_id} by {user_data['id']}")
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Messages

    def _attach_reactions(self, messages: List[dict]) -> Dict[str, List[dict]]:
        ids = [m["id"] for m in messages]
        if not ids:
            return {}
        result = self.supabase.table(REACTIONS_TABLE)\
            .select("*")\
            .in_("message_id", ids)\
            .execute()
        reactions: Dict[str, List[dict]] = {}
        for reaction in result.data or []:
            reactions.setdefault(reaction["message_id"], []).append(reaction)
        return reactions

    def _message_responses(self, messages: List[dict]) -> List[MessageResponse]:
        names = self._profile_names([m["sender_id"] for m in messages])
        reactions = self._attach_reactions(messages)
        return [
            MessageResponse(
                **m,
                sender_name=names.get(m["sender_id"]),
                reactions=reactions.get(m["id"], [])
            )
            for m in messages
        ]

    def _get_message(self, room_id: str, message_id: str) -> dict:
        result = self.supabase.table(MESSAGES_TABLE)\
            .select("*")\
            .eq("id", message_id)\
            .eq("room_id", room_id)\
            .is_("deleted_at", "null")\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return result.data[0]

    def list_messages(
        self,
        room_id: str,
        user_data: dict,
        cursor: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        message_type: Optional[str] = None
    ) -> MessagePage:
        """One page of history ending before cursor, returned oldest first"""
        self._room_access(room_id, user_data)
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        try:
            query = self.supabase.table(MESSAGES_TABLE)\
                .select("*")\
                .eq("room_id", room_id)\
                .is_("deleted_at", "null")
            if message_type:
                query = query.eq("message_type", message_type)
            if cursor:
                query = query.lt("created_at", cursor)
            result = query.order("created_at", desc=True).limit(limit + 1).execute()

            rows = result.data or []
            has_more = len(rows) > limit
            page = rows[:limit]
            next_cursor = page[-1]["created_at"] if has_more and page else None
            page.reverse()
            return MessagePage(
                messages=self._message_responses(page),
                next_cursor=str(next_cursor) if next_cursor else None,
                has_more=has_more
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing messages for room {room_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def send_message(self, room_id: str, message_data: MessageCreate, user_data: dict) -> MessageResponse:
        participation, _ = self._room_access(room_id, user_data)
        if participation.get("is_muted"):
            raise HTTPException(status_code=403, detail="You are muted in this room")
        if message_data.reply_to_id:
            try:
                self._get_message(room_id, message_data.reply_to_id)
            except HTTPException:
                raise HTTPException(status_code=400, detail="Replied-to message is not in this room")

        try:
            result = self.supabase.table(MESSAGES_TABLE).insert({
                "room_id": room_id,
                "sender_id": user_data["id"],
                "content": message_data.content,
                "message_type": message_data.message_type,
                "reply_to_id": message_data.reply_to_id,
                "metadata": message_data.metadata or {}
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")

            self.supabase.table(ROOMS_TABLE)\
                .update({"updated_at": _now()})\
                .eq("id", room_id)\
                .execute()
            return self._message_responses(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error sending message to room {room_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def edit_message(
        self,
        room_id: str,
        message_id: str,
        message_data: MessageUpdate,
        user_data: dict
    ) -> MessageResponse:
        self._room_access(room_id, user_data)
        message = self._get_message(room_id, message_id)
        if message["sender_id"] != user_data["id"]:
            raise HTTPException(status_code=403, detail="You can only edit your own messages")

        try:
            result = self.supabase.table(MESSAGES_TABLE)\
                .update({"content": message_data.content, "edited_at": _now()})\
                .eq("id", message_id)\
                .execute()
            return self._message_responses(result.data)[0]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_message(self, room_id: str, message_id: str, user_data: dict) -> bool:
        """Soft delete by the sender, the room creator or a room admin"""
        participation, room = self._room_access(room_id, user_data)
        message = self._get_message(room_id, message_id)
        allowed = (
            message["sender_id"] == user_data["id"]
            or room.get("created_by") == user_data["id"]
            or participation.get("role") == "admin"
        )
        if not allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")

        try:
            self.supabase.table(MESSAGES_TABLE)\
                .update({"deleted_at": _now(), "content": DELETED_MESSAGE_CONTENT})\
                .eq("id", message_id)\
                .execute()
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Reactions

    def add_reaction(self, room_id: str, message_id: str, emoji: str, user_data: dict) -> ReactionResponse:
        self._room_access(room_id, user_data)
        self._get_message(room_id, message_id)
        try:
            existing = self.supabase.table(REACTIONS_TABLE)\
                .select("*")\
                .eq("message_id", message_id)\
                .eq("user_id", user_data["id"])\
                .eq("emoji", emoji)\
                .limit(1)\
                .execute()
            if existing.data:
                return ReactionResponse(**existing.data[0])

            result = self.supabase.table(REACTIONS_TABLE).insert({
                "message_id": message_id,
                "user_id": user_data["id"],
                "emoji": emoji
            }).execute()
            return ReactionResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_reaction(self, room_id: str, message_id: str, emoji: str, user_data: dict) -> bool:
        self._room_access(room_id, user_data)
        self._get_message(room_id, message_id)
        try:
            result = self.supabase.table(REACTIONS_TABLE)\
                .delete()\
                .eq("message_id", message_id)\
                .eq("user_id", user_data["id"])\
                .eq("emoji", emoji)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Reaction not found")
        return True

    # Search

    def search_messages(self, query_text: str, user_data: dict, room_id: Optional[str] = None) -> List[SearchResult]:
        """Case-insensitive substring search over the caller's active rooms"""
        term = (query_text or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise HTTPException(
                status_code=422,
                detail=f"Search query must have at least {MIN_SEARCH_LENGTH} non-blank characters"
            )
        if room_id:
            self._room_access(room_id, user_data)
            room_ids = [room_id]
        else:
            memberships = self.supabase.table(PARTICIPANTS_TABLE)\
                .select("room_id")\
                .eq("user_id", user_data["id"])\
                .execute()
            room_ids = [m["room_id"] for m in (memberships.data or [])]
            if room_ids:
                active = self.supabase.table(ROOMS_TABLE)\
                    .select("id")\
                    .in_("id", room_ids)\
                    .eq("is_active", True)\
                    .execute()
                room_ids = [r["id"] for r in (active.data or [])]
        if not room_ids:
            return []

        try:
            escaped = term.replace("%", r"\%").replace("_", r"\_")
            result = self.supabase.table(MESSAGES_TABLE)\
                .select("*")\
                .in_("room_id", room_ids)\
                .is_("deleted_at", "null")\
                .ilike("content", f"%{escaped}%")\
                .order("created_at", desc=True)\
                .limit(SEARCH_LIMIT)\
                .execute()
            messages = result.data or []

            rooms = self.supabase.table(ROOMS_TABLE)\
                .select("id, name")\
                .in_("id", room_ids)\
                .execute()
            room_names = {r["id"]: r.get("name") for r in (rooms.data or [])}
            return [
                SearchResult(**m.model_dump(), room_name=room_names.get(m.room_id))
                for m in self._message_responses(messages)
            ]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error searching messages: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    # Analytics

    def _active_room_rows(self, user_id: str) -> List[dict]:
        memberships = self.supabase.table(PARTICIPANTS_TABLE)\
            .select("room_id")\
            .eq("user_id", user_id)\
            .execute()
        room_ids = [m["room_id"] for m in (memberships.data or [])]
        if not room_ids:
            return []
        result = self.supabase.table(ROOMS_TABLE)\
            .select("id, name")\
            .in_("id", room_ids)\
            .eq("is_active", True)\
            .execute()
        return result.data or []

    def _live_messages(self, room_ids: List[str]) -> List[dict]:
        if not room_ids:
            return []
        result = self.supabase.table(MESSAGES_TABLE)\
            .select("id, room_id, sender_id, created_at")\
            .in_("room_id", room_ids)\
            .is_("deleted_at", "null")\
            .execute()
        return result.data or []

    def _reactions_on(self, message_ids: List[str]) -> List[dict]:
        if not message_ids:
            return []
        result = self.supabase.table(REACTIONS_TABLE)\
            .select("message_id, user_id, emoji")\
            .in_("message_id", message_ids)\
            .execute()
        return result.data or []

    def get_analytics_overview(self, user_data: dict) -> ChatAnalyticsOverview:
        """Message and reaction counts across the caller's active rooms"""
        user_id = user_data["id"]
        try:
            profiles = ProfileService(self.supabase)
            timezone_name = profiles.get_timezone(user_id)
            rooms = self._active_room_rows(user_id)
            messages = self._live_messages([r["id"] for r in rooms])
            reactions = self._reactions_on([m["id"] for m in messages])
            data = analytics.overview(
                user_id,
                rooms,
                messages,
                reactions,
                today=profiles.today_for(user_id),
                tz=resolve_timezone(timezone_name)
            )
            return ChatAnalyticsOverview(**data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing chat analytics for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_room_analytics(self, room_id: str, user_data: dict) -> RoomAnalytics:
        _, room = self._room_access(room_id, user_data)
        try:
            participants = self._participants([room_id])
            messages = self._live_messages([room_id])
            reactions = self._reactions_on([m["id"] for m in messages])
            names = self._profile_names([p["user_id"] for p in participants])
            return RoomAnalytics(**analytics.room_activity(room, participants, messages, reactions, names))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing analytics for room {room_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def export_analytics_csv(self, user_data: dict) -> str:
        return analytics.overview_csv(self.get_analytics_overview(user_data).model_dump())
