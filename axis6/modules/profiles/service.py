from supabase import Client
from axis6.config.settings import settings
from axis6.core.dates import local_today, is_valid_timezone
from axis6.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from typing import Optional
from fastapi import HTTPException
from datetime import date, datetime, timezone
import logging

logger = logging.getLogger(__name__)

PROFILES_TABLE = "axis6_profiles"


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> Optional[ProfileResponse]:
        """Get profile by user ID, or None when it does not exist yet"""
        try:
            result = self.supabase.table(PROFILES_TABLE)\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
            if not result.data:
                return None
            return ProfileResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error getting profile {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def ensure_profile(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        timezone_name: Optional[str] = None
    ) -> ProfileResponse:
        """Return the profile, creating it when missing. Name defaults to the email local part."""
        existing = self.get_profile(user_id)
        if existing:
            return existing
        try:
            default_name = (email or "").split("@")[0] or "AXIS6 user"
            tz = timezone_name if is_valid_timezone(timezone_name) else settings.default_timezone
            result = self.supabase.table(PROFILES_TABLE).upsert({
                "id": user_id,
                "name": name or default_name,
                "timezone": tz,
                "onboarded": False
            }, on_conflict="id").execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create profile")
            logger.info(f"Created profile for user {user_id}")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating profile {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update name and/or timezone"""
        try:
            update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
            if profile_data.name is not None:
                update_data["name"] = profile_data.name.strip()
            if profile_data.timezone is not None:
                update_data["timezone"] = profile_data.timezone

            result = self.supabase.table(PROFILES_TABLE)\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def complete_onboarding(self, user_id: str) -> ProfileResponse:
        try:
            result = self.supabase.table(PROFILES_TABLE)\
                .update({"onboarded": True, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_timezone(self, user_id: str) -> str:
        profile = self.get_profile(user_id)
        if profile and profile.timezone:
            return profile.timezone
        return settings.default_timezone

    def today_for(self, user_id: str) -> date:
        """Calendar date of 'now' in the user's timezone"""
        return local_today(self.get_timezone(user_id))
