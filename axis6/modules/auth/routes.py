from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from axis6.modules.auth.service import AuthService
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_auth_service, get_current_token, get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """Create an account and its profile (not onboarded yet)"""
    return auth.register(body)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return auth.login(body)


@router.post("/logout")
async def logout(
    token: str = Depends(get_current_token),
    auth: AuthService = Depends(get_auth_service)
):
    signed_out = auth.logout(token)
    return {"message": "Logged out successfully", "signed_out": signed_out}


@router.get("/me")
async def me(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
):
    """Token owner plus their AXIS6 profile"""
    profile = ProfileService(supabase).ensure_profile(current_user["id"], email=current_user.get("email"))
    return {**current_user, "profile": profile.model_dump()}
