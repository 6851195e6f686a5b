from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Union, Any
from datetime import datetime
import re

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

LocalizedText = Union[str, Dict[str, str]]


def _localize(value: Optional[LocalizedText]) -> Optional[Dict[str, str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return {"en": value.strip()}
    return {k: v.strip() for k, v in value.items()}


def _check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and not HEX_COLOR.match(value):
        raise ValueError("color must be a hex value like #65D39A")
    return value


class CategoryCreate(BaseModel):
    name: LocalizedText
    description: Optional[LocalizedText] = None
    color: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: LocalizedText) -> Dict[str, str]:
        localized = _localize(value)
        if not localized or not any(localized.values()):
            raise ValueError("Category name is required")
        if "en" not in localized:
            raise ValueError("Category name needs an English ('en') entry")
        return localized

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[LocalizedText]) -> Optional[Dict[str, str]]:
        return _localize(value)

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: Optional[str]) -> Optional[str]:
        return _check_color(value)


class CategoryUpdate(BaseModel):
    name: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    color: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None

    @field_validator("name", "description")
    @classmethod
    def validate_text(cls, value: Optional[LocalizedText]) -> Optional[Dict[str, str]]:
        return _localize(value)

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: Optional[str]) -> Optional[str]:
        return _check_color(value)


class CategoryResponse(BaseModel):
    id: int
    slug: str
    name: Dict[str, str]
    description: Optional[Dict[str, str]] = None
    color: str
    icon: str
    position: int
    is_active: bool = True
    is_default: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryWithStatusResponse(CategoryResponse):
    completed: bool = False
    today_checkin: Optional[Dict[str, Any]] = None
