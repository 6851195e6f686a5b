from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.preferences.schemas import (
    UserPreferences, UserPreferencesUpdate, NotificationPreference, NotificationPreferencesUpdate,
    PrivacySettings, PrivacySettingsUpdate, AxisCustomizationSettings, AxisCustomizationUpdate
)
from axis6.modules.preferences.service import PreferencesService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/preferences", tags=["preferences"])


def get_preferences_service(supabase: Client = Depends(get_supabase)) -> PreferencesService:
    return PreferencesService(supabase)


@router.get("", response_model=UserPreferences)
async def get_preferences(
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    return service.get_preferences(user_data["id"])


@router.put("", response_model=UserPreferences)
async def update_preferences(
    update_data: UserPreferencesUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    """Update display preferences; omitted fields keep their value"""
    return service.update_preferences(user_data["id"], update_data)


@router.get("/notifications", response_model=List[NotificationPreference])
async def get_notification_preferences(
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    return service.get_notification_preferences(user_data["id"])


@router.put("/notifications", response_model=List[NotificationPreference])
async def update_notification_preferences(
    update_data: NotificationPreferencesUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    return service.update_notification_preferences(user_data["id"], update_data.preferences)


@router.get("/privacy", response_model=PrivacySettings)
async def get_privacy_settings(
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    return service.get_privacy_settings(user_data["id"])


@router.put("/privacy", response_model=PrivacySettings)
async def update_privacy_settings(
    update_data: PrivacySettingsUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    """Update privacy flags; data retention is at least 30 days"""
    return service.update_privacy_settings(user_data["id"], update_data)


@router.get("/axis-customization", response_model=AxisCustomizationSettings)
async def get_axis_customization(
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    return service.get_axis_customization(user_data["id"])


@router.put("/axis-customization", response_model=AxisCustomizationSettings)
async def update_axis_customization(
    update_data: AxisCustomizationUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_preferences_service)
):
    """Daily goals, priorities and quick action axes; omitted fields keep their value"""
    return service.update_axis_customization(user_data["id"], update_data)
