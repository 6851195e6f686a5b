import hashlib
import time
from supabase import Client
from axis6.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from axis6.modules.profiles.service import ProfileService
from fastapi import HTTPException
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

# Token -> user lookups, so a dashboard load (many requests, one token) hits Supabase Auth once
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

DUPLICATE_USER_MARKERS = ("already registered", "already exists")
BAD_CREDENTIAL_MARKERS = ("invalid", "credentials", "email not confirmed")


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _cached_user(token: str) -> Optional[Dict[str, Any]]:
    entry = _AUTH_USER_CACHE.get(_token_key(token))
    if not entry:
        return None
    user_data, expires_at = entry
    if time.monotonic() >= expires_at:
        _AUTH_USER_CACHE.pop(_token_key(token), None)
        return None
    return user_data


def _remember_user(token: str, user_data: Dict[str, Any]):
    if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
        return
    _AUTH_USER_CACHE[_token_key(token)] = (user_data, time.monotonic() + _AUTH_CACHE_TTL_SEC)


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, auth_client: Client, supabase: Client):
        self.auth_client = auth_client
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Sign up with Supabase Auth and create the AXIS6 profile in the same call"""
        metadata = {k: v for k, v in {"name": register_data.name, "timezone": register_data.timezone}.items() if v}
        try:
            auth_response = self.auth_client.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {"data": metadata}
            })
        except Exception as e:
            message = str(e).lower()
            if any(marker in message for marker in DUPLICATE_USER_MARKERS):
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed for {register_data.email}: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")

        user = auth_response.user
        if not user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        email = user.email or register_data.email
        profile = ProfileService(self.supabase).ensure_profile(
            user.id,
            email=email,
            name=register_data.name,
            timezone_name=register_data.timezone
        )
        logger.info(f"Registered user {user.id}")
        return RegisterResponse(
            user_id=user.id,
            email=email,
            onboarded=profile.onboarded,
            message="User registered successfully"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Password sign-in; the profile is created here for accounts made outside the API"""
        try:
            auth_response = self.auth_client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            message = str(e).lower()
            if any(marker in message for marker in BAD_CREDENTIAL_MARKERS):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {str(e)}")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        email = auth_response.user.email or login_data.email
        profile = ProfileService(self.supabase).ensure_profile(auth_response.user.id, email=email)
        return TokenResponse(
            access_token=auth_response.session.access_token,
            user_id=auth_response.user.id,
            email=email,
            onboarded=profile.onboarded
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the Supabase user (cached for a minute)"""
        cached = _cached_user(token)
        if cached:
            return cached

        try:
            user_response = self.auth_client.auth.get_user(jwt=token)
        except Exception as e:
            logger.debug(f"Token rejected by Supabase Auth: {str(e)}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = user_response.user
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "created_at": user.created_at
        }
        _remember_user(token, user_data)
        return user_data

    def logout(self, token: str) -> bool:
        _AUTH_USER_CACHE.pop(_token_key(token), None)
        try:
            # JWTs stay valid elsewhere until they expire
            self.auth_client.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
