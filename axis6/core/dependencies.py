"""
Core dependencies for route protection and chat room access checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from axis6.database.supabase_client import get_supabase, get_auth_client
from axis6.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()

ROOM_MANAGER_ROLES = ["admin", "moderator"]


def get_auth_service(
    auth_client: Client = Depends(get_auth_client),
    supabase: Client = Depends(get_supabase)
) -> AuthService:
    return AuthService(auth_client, supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_room_participation(room_id: str, user_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    """Return the caller's participant row for a room, or None."""
    try:
        result = supabase.table("axis6_chat_participants")\
            .select("*")\
            .eq("room_id", room_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None
    except Exception as e:
        logger.error(f"Error getting participation for room {room_id}: {e}")
        return None


def check_room_participant(room_id: str, user_data: dict, supabase: Client) -> Dict[str, Any]:
    """Require the user to participate in the room. Non-participants get 404 so rooms are not enumerable."""
    participation = get_room_participation(room_id, user_data["id"], supabase)
    if not participation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room not found or access denied"
        )
    return participation


def check_room_role(
    room_id: str,
    user_data: dict,
    supabase: Client,
    roles: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Require the user to hold one of roles in the room (admin/moderator by default)."""
    roles = roles or ROOM_MANAGER_ROLES
    participation = get_room_participation(room_id, user_data["id"], supabase)
    if not participation or participation.get("role") not in roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions"
        )
    return participation
