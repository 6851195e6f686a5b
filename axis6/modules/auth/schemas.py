from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class LoginRequest(Credentials):
    pass


class RegisterRequest(Credentials):
    password: str = Field(min_length=8, max_length=128)
    name: Optional[str] = Field(default=None, max_length=100)
    # IANA zone used to decide which calendar day a check-in belongs to
    timezone: Optional[str] = None


class AuthenticatedUser(BaseModel):
    user_id: str
    email: str
    # False until the user finishes onboarding; clients route to it on login
    onboarded: bool = False


class TokenResponse(AuthenticatedUser):
    access_token: str
    token_type: str = "bearer"


class RegisterResponse(AuthenticatedUser):
    message: str
