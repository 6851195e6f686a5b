from supabase import Client
from axis6.config.categories_config import category_display_name
from axis6.modules.categories.service import CategoryService
from axis6.modules.preferences.schemas import (
    UserPreferences, UserPreferencesUpdate, NotificationPreference, PrivacySettings,
    PrivacySettingsUpdate, AxisCustomization, AxisCustomizationSettings, AxisCustomizationUpdate,
    NOTIFICATION_TYPES
)
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

USER_PREFERENCES_TABLE = "axis6_user_preferences"
NOTIFICATION_PREFERENCES_TABLE = "axis6_notification_preferences"
PRIVACY_SETTINGS_TABLE = "axis6_privacy_settings"
WELLNESS_PREFERENCES_TABLE = "axis6_wellness_preferences"

DEFAULT_QUICK_ACTION_AXES = 3
DISPLAY_FIELDS = ["hexagon_size", "show_community_pulse", "show_resonance", "default_view"]


def _present(row: Optional[dict]) -> dict:
    """Drop null columns so model defaults apply"""
    return {k: v for k, v in (row or {}).items() if v is not None}


class PreferencesService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_row(self, table: str, user_id: str) -> Optional[dict]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _upsert_row(self, table: str, user_id: str, changes: dict) -> dict:
        result = self.supabase.table(table).upsert({
            "user_id": user_id,
            **changes,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }, on_conflict="user_id").execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save settings")
        return result.data[0]

    def get_preferences(self, user_id: str) -> UserPreferences:
        """Display preferences, defaults when never saved"""
        try:
            return UserPreferences(**_present(self._get_row(USER_PREFERENCES_TABLE, user_id)))
        except Exception as e:
            logger.error(f"Error getting preferences for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_preferences(self, user_id: str, update_data: UserPreferencesUpdate) -> UserPreferences:
        try:
            current = self.get_preferences(user_id).model_dump()
            current.update(update_data.model_dump(exclude_none=True))
            row = self._upsert_row(USER_PREFERENCES_TABLE, user_id, current)
            return UserPreferences(**_present(row))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating preferences for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_notification_preferences(self, user_id: str) -> List[NotificationPreference]:
        """One entry per notification type; unsaved types come back with defaults"""
        try:
            result = self.supabase.table(NOTIFICATION_PREFERENCES_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .execute()
            saved = {row["notification_type"]: row for row in (result.data or [])}
            return [
                NotificationPreference(**{**_present(saved.get(notification_type)), "notification_type": notification_type})
                for notification_type in NOTIFICATION_TYPES
            ]
        except Exception as e:
            logger.error(f"Error getting notification preferences for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_notification_preferences(
        self,
        user_id: str,
        preferences: List[NotificationPreference]
    ) -> List[NotificationPreference]:
        try:
            now = datetime.now(timezone.utc).isoformat()
            rows = [
                {**preference.model_dump(), "user_id": user_id, "updated_at": now}
                for preference in preferences
            ]
            self.supabase.table(NOTIFICATION_PREFERENCES_TABLE)\
                .upsert(rows, on_conflict="user_id,notification_type")\
                .execute()
            logger.info(f"User {user_id} updated {len(rows)} notification preference(s)")
        except Exception as e:
            logger.error(f"Error updating notification preferences for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
        return self.get_notification_preferences(user_id)

    def get_privacy_settings(self, user_id: str) -> PrivacySettings:
        try:
            return PrivacySettings(**_present(self._get_row(PRIVACY_SETTINGS_TABLE, user_id)))
        except Exception as e:
            logger.error(f"Error getting privacy settings for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_privacy_settings(self, user_id: str, update_data: PrivacySettingsUpdate) -> PrivacySettings:
        try:
            current = self.get_privacy_settings(user_id).model_dump()
            current.update(update_data.model_dump(exclude_none=True))
            row = self._upsert_row(PRIVACY_SETTINGS_TABLE, user_id, current)
            return PrivacySettings(**_present(row))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating privacy settings for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_axis_customization(self, user_id: str) -> AxisCustomizationSettings:
        """Per-axis goal, priority and quick action flag for every active category the user sees.

        Unsaved axes get a daily goal of 1, priority in display order, and the
        first three categories are quick actions.
        """
        try:
            row = self._get_row(WELLNESS_PREFERENCES_TABLE, user_id)
            saved = (row or {}).get("custom_settings") or {}
            saved_axes = {a["category_id"]: a for a in saved.get("axes") or []}
            language = self.get_preferences(user_id).language

            axes = []
            categories = CategoryService(self.supabase).list_categories(user_id)
            for index, category in enumerate(categories):
                values = {
                    "daily_goal": 1,
                    "show_in_quick_actions": index < DEFAULT_QUICK_ACTION_AXES,
                    "priority": index + 1,
                }
                stored = saved_axes.get(category.id, {})
                values.update({k: stored[k] for k in values if stored.get(k) is not None})
                axes.append(AxisCustomization(
                    category_id=category.id,
                    slug=category.slug,
                    name=category_display_name(category.model_dump(), language),
                    color=category.color,
                    icon=category.icon,
                    **values
                ))
            axes.sort(key=lambda a: (a.priority, a.category_id))

            display = {k: saved[k] for k in DISPLAY_FIELDS if saved.get(k) is not None}
            return AxisCustomizationSettings(**display, axes=axes)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error getting axis customization for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_axis_customization(self, user_id: str, update_data: AxisCustomizationUpdate) -> AxisCustomizationSettings:
        """Save axis settings; quick actions in the display preferences follow the axes flagged here"""
        current = self.get_axis_customization(user_id)
        document = {field: getattr(current, field) for field in DISPLAY_FIELDS}
        document.update(update_data.model_dump(exclude_none=True, exclude={"axes"}))

        axes = {
            a.category_id: {
                "category_id": a.category_id,
                "daily_goal": a.daily_goal,
                "show_in_quick_actions": a.show_in_quick_actions,
                "priority": a.priority,
            }
            for a in current.axes
        }
        if update_data.axes is not None:
            unknown = [str(a.category_id) for a in update_data.axes if a.category_id not in axes]
            if unknown:
                raise HTTPException(status_code=400, detail=f"Unknown category id(s): {', '.join(unknown)}")
            for axis in update_data.axes:
                axes[axis.category_id] = axis.model_dump()
        document["axes"] = list(axes.values())

        try:
            self._upsert_row(WELLNESS_PREFERENCES_TABLE, user_id, {"custom_settings": document})
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving axis customization for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

        updated = self.get_axis_customization(user_id)
        if update_data.axes is not None:
            quick_actions = [
                {"action": "checkin", "category": a.slug, "enabled": True, "priority": a.priority}
                for a in updated.axes if a.show_in_quick_actions
            ]
            self.update_preferences(user_id, UserPreferencesUpdate(quick_actions=quick_actions))
        return updated
