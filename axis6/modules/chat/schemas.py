from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Dict, Any, List, Literal
from datetime import datetime

from axis6.modules.chat.validation import validate_message_content

RoomType = Literal["direct", "category", "group", "support"]
ParticipantRole = Literal["admin", "moderator", "member"]
# "system" messages are written by the server only
UserMessageType = Literal["text", "image", "file", "achievement"]


class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    type: RoomType = "group"
    category_id: Optional[int] = None
    max_participants: Optional[int] = Field(default=None, ge=2)
    participant_ids: List[str] = []

    @model_validator(mode="after")
    def check_direct_room(self):
        if self.type == "direct" and len(set(self.participant_ids)) != 1:
            raise ValueError("Direct rooms need exactly one other participant")
        return self


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    max_participants: Optional[int] = Field(default=None, ge=2)
    metadata: Optional[Dict[str, Any]] = None


class RoomResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    type: str
    category_id: Optional[int] = None
    created_by: Optional[str] = None
    is_active: bool = True
    max_participants: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    participant_count: int = 0
    my_role: Optional[str] = None

    class Config:
        from_attributes = True


class ParticipantUpdate(BaseModel):
    role: Optional[ParticipantRole] = None
    is_muted: Optional[bool] = None
    notification_settings: Optional[Dict[str, Any]] = None


class ParticipantResponse(BaseModel):
    id: str
    room_id: str
    user_id: str
    role: str
    joined_at: Optional[datetime] = None
    last_seen: Optional[datetime] = None
    is_muted: bool = False
    notification_settings: Optional[Dict[str, Any]] = None
    name: Optional[str] = None

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    content: str
    message_type: UserMessageType = "text"
    reply_to_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return validate_message_content(value)


class MessageUpdate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return validate_message_content(value)


class ReactionCreate(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=32)


class ReactionResponse(BaseModel):
    id: str
    message_id: str
    user_id: str
    emoji: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    id: str
    room_id: str
    sender_id: str
    content: str
    message_type: str = "text"
    reply_to_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    edited_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    sender_name: Optional[str] = None
    reactions: List[ReactionResponse] = []

    class Config:
        from_attributes = True


class MessagePage(BaseModel):
    messages: List[MessageResponse]
    next_cursor: Optional[str] = None
    has_more: bool = False


class SearchResult(MessageResponse):
    room_name: Optional[str] = None


class RoomActivity(BaseModel):
    room_id: str
    name: Optional[str] = None
    message_count: int


class ChatAnalyticsOverview(BaseModel):
    total_rooms: int
    total_messages: int
    messages_sent: int
    messages_today: int
    active_participants: int
    avg_messages_per_participant: float
    reactions_given: int
    reactions_received: int
    most_active_rooms: List[RoomActivity] = []


class ParticipantActivity(BaseModel):
    user_id: str
    name: Optional[str] = None
    message_count: int


class ReactionCount(BaseModel):
    emoji: str
    count: int


class RoomAnalytics(BaseModel):
    room_id: str
    name: Optional[str] = None
    total_messages: int
    participant_count: int
    messages_by_participant: List[ParticipantActivity]
    top_reactions: List[ReactionCount]
    first_message_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None
