"""
Default wellness axes configuration
Defines the six core categories every user checks in against, plus the
public chat rooms attached to them. Used by the seed script and by the
dashboard "perfect day" computation.
"""

# The six axes, in display order
DEFAULT_CATEGORIES = [
    {
        "slug": "physical",
        "name": {"en": "Physical", "es": "Física"},
        "description": {"en": "Exercise, health, and nutrition", "es": "Ejercicio, salud y nutrición"},
        "color": "#65D39A",
        "icon": "activity",
        "position": 1,
    },
    {
        "slug": "mental",
        "name": {"en": "Mental", "es": "Mental"},
        "description": {"en": "Learning, focus, and productivity", "es": "Aprendizaje, enfoque y productividad"},
        "color": "#9B8AE6",
        "icon": "brain",
        "position": 2,
    },
    {
        "slug": "emotional",
        "name": {"en": "Emotional", "es": "Emocional"},
        "description": {"en": "Mood and stress management", "es": "Estado de ánimo y manejo del estrés"},
        "color": "#FF8B7D",
        "icon": "heart",
        "position": 3,
    },
    {
        "slug": "social",
        "name": {"en": "Social", "es": "Social"},
        "description": {"en": "Relationships and connections", "es": "Relaciones y conexiones"},
        "color": "#6AA6FF",
        "icon": "users",
        "position": 4,
    },
    {
        "slug": "spiritual",
        "name": {"en": "Spiritual", "es": "Espiritual"},
        "description": {"en": "Meditation, purpose, and mindfulness", "es": "Meditación, propósito y mindfulness"},
        "color": "#4ECDC4",
        "icon": "sparkles",
        "position": 5,
    },
    {
        "slug": "material",
        "name": {"en": "Material", "es": "Material"},
        "description": {"en": "Finance, career, and resources", "es": "Finanzas, carrera y recursos"},
        "color": "#FFD166",
        "icon": "briefcase",
        "position": 6,
    },
]

AXIS_SLUGS = [c["slug"] for c in DEFAULT_CATEGORIES]
AXIS_COUNT = len(DEFAULT_CATEGORIES)

# Personal categories
CUSTOM_CATEGORY_COLOR = "#6366f1"
CUSTOM_CATEGORY_ICON = "circle"
CUSTOM_CATEGORY_POSITION = 999

# Public rooms created alongside the categories
DEFAULT_CHAT_ROOMS = [
    {"name": "Physical Wellness", "description": "Share your fitness journey and healthy habits", "type": "category", "category_slug": "physical"},
    {"name": "Mental Growth", "description": "Discuss learning, productivity, and mental challenges", "type": "category", "category_slug": "mental"},
    {"name": "Emotional Support", "description": "A safe space for emotional well-being discussions", "type": "category", "category_slug": "emotional"},
    {"name": "Social Connections", "description": "Build relationships and share social experiences", "type": "category", "category_slug": "social"},
    {"name": "Spiritual Journey", "description": "Explore mindfulness, meditation, and purpose", "type": "category", "category_slug": "spiritual"},
    {"name": "Material Goals", "description": "Career, finances, and material aspirations", "type": "category", "category_slug": "material"},
    {"name": "General Support", "description": "General questions and platform support", "type": "support", "category_slug": None},
]


def category_display_name(category: dict, language: str = "en") -> str:
    """Localized name of a category row, falling back to English and then the slug."""
    if not category:
        return "Unknown"
    name = category.get("name")
    if isinstance(name, dict):
        return name.get(language) or name.get("en") or category.get("slug") or "Unknown"
    if isinstance(name, str) and name:
        return name
    return category.get("slug") or "Unknown"
