from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile (created on first access)"""
    return service.ensure_profile(user_data["id"], email=user_data.get("email"))


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    service.ensure_profile(user_data["id"], email=user_data.get("email"))
    return service.update_profile(user_data["id"], profile_data)


@router.post("/me/onboarding", response_model=ProfileResponse)
async def complete_onboarding(
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Mark the caller as onboarded"""
    service.ensure_profile(user_data["id"], email=user_data.get("email"))
    return service.complete_onboarding(user_data["id"])
