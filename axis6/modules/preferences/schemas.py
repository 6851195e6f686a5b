from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any, List, Literal, get_args

ThemePreference = Literal["temperament_based", "dark", "light", "auto"]
Language = Literal["en", "es"]
DashboardLayout = Literal["hexagon", "grid", "list"]
DisplayDensity = Literal["compact", "comfortable", "spacious"]
LandingPage = Literal["/dashboard", "/my-day", "/analytics", "/profile"]
NotificationType = Literal[
    "daily_reminder", "streak_milestone", "achievement", "ai_insight",
    "goal_progress", "category_focus", "comeback_encouragement", "social_update"
]
DeliveryChannel = Literal["push", "email", "in_app", "sms"]
Frequency = Literal["high", "optimal", "low", "off"]
PriorityFilter = Literal["all", "high", "medium", "critical"]
ProfileVisibility = Literal["public", "friends", "private"]
ExportFrequency = Literal["never", "weekly", "monthly", "quarterly"]

NOTIFICATION_TYPES = list(get_args(NotificationType))

HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class UserPreferences(BaseModel):
    theme_preference: ThemePreference = "temperament_based"
    language: Language = "en"
    dashboard_layout: DashboardLayout = "hexagon"
    default_landing_page: LandingPage = "/dashboard"
    display_density: DisplayDensity = "comfortable"
    accessibility_options: Dict[str, Any] = {}
    quick_actions: List[Dict[str, Any]] = []

    class Config:
        from_attributes = True


class UserPreferencesUpdate(BaseModel):
    theme_preference: Optional[ThemePreference] = None
    language: Optional[Language] = None
    dashboard_layout: Optional[DashboardLayout] = None
    default_landing_page: Optional[LandingPage] = None
    display_density: Optional[DisplayDensity] = None
    accessibility_options: Optional[Dict[str, Any]] = None
    quick_actions: Optional[List[Dict[str, Any]]] = None


class QuietHours(BaseModel):
    enabled: bool = True
    start: str = Field(default="22:00", pattern=HHMM)
    end: str = Field(default="07:00", pattern=HHMM)


class NotificationPreference(BaseModel):
    notification_type: NotificationType
    delivery_channels: List[DeliveryChannel] = ["in_app"]
    enabled: bool = True
    frequency: Frequency = "optimal"
    priority_filter: PriorityFilter = "medium"
    quiet_hours: QuietHours = QuietHours()
    optimal_timing: bool = True
    category_focus: Optional[List[int]] = None
    temperament_based: bool = True

    class Config:
        from_attributes = True


class NotificationPreferencesUpdate(BaseModel):
    preferences: List[NotificationPreference] = Field(..., min_length=1)

    @field_validator("preferences")
    @classmethod
    def one_entry_per_type(cls, v):
        types = [p.notification_type for p in v]
        repeated = sorted({t for t in types if types.count(t) > 1})
        if repeated:
            raise ValueError(f"Repeated notification_type: {', '.join(repeated)}")
        return v


class PrivacySettings(BaseModel):
    profile_visibility: ProfileVisibility = "private"
    stats_sharing: bool = False
    achievement_sharing: bool = True
    ai_analytics_enabled: bool = True
    behavioral_tracking_enabled: bool = True
    ai_coaching_enabled: bool = True
    personalized_content: bool = True
    data_retention_days: int = Field(default=365, ge=30)
    export_frequency: ExportFrequency = "monthly"
    third_party_sharing: bool = False
    usage_analytics: bool = True
    research_participation: bool = False

    class Config:
        from_attributes = True


class PrivacySettingsUpdate(BaseModel):
    profile_visibility: Optional[ProfileVisibility] = None
    stats_sharing: Optional[bool] = None
    achievement_sharing: Optional[bool] = None
    ai_analytics_enabled: Optional[bool] = None
    behavioral_tracking_enabled: Optional[bool] = None
    ai_coaching_enabled: Optional[bool] = None
    personalized_content: Optional[bool] = None
    data_retention_days: Optional[int] = Field(default=None, ge=30)
    export_frequency: Optional[ExportFrequency] = None
    third_party_sharing: Optional[bool] = None
    usage_analytics: Optional[bool] = None
    research_participation: Optional[bool] = None


HexagonSize = Literal["small", "medium", "large"]
DefaultView = Literal["hexagon", "list", "grid"]


class AxisCustomization(BaseModel):
    category_id: int
    slug: str
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    daily_goal: int = 1
    show_in_quick_actions: bool = False
    priority: int


class AxisCustomizationSettings(BaseModel):
    hexagon_size: HexagonSize = "medium"
    show_community_pulse: bool = True
    show_resonance: bool = True
    default_view: DefaultView = "hexagon"
    axes: List[AxisCustomization] = []


class AxisSettingInput(BaseModel):
    category_id: int
    daily_goal: int = Field(default=1, ge=1, le=10)
    show_in_quick_actions: bool = False
    priority: int = Field(..., ge=1)


class AxisCustomizationUpdate(BaseModel):
    hexagon_size: Optional[HexagonSize] = None
    show_community_pulse: Optional[bool] = None
    show_resonance: Optional[bool] = None
    default_view: Optional[DefaultView] = None
    axes: Optional[List[AxisSettingInput]] = None

    @field_validator("axes")
    @classmethod
    def one_entry_per_category(cls, v):
        if v is not None:
            ids = [a.category_id for a in v]
            if len(ids) != len(set(ids)):
                raise ValueError("Each category can appear only once")
        return v
