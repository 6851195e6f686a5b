from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from axis6.core.dates import is_valid_timezone


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value


class ProfileResponse(BaseModel):
    id: str
    name: str
    timezone: Optional[str] = None
    onboarded: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
