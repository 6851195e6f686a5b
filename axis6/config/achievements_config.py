"""
Achievement catalogue. Each entry unlocks when its metric reaches `requirement`.

Metrics:
- max_streak: longest check-in streak in any category
- total_checkins: all check-ins ever
- active_streaks: categories with a current streak above zero
- current_streak_sum: sum of current streaks across categories
- active_days: distinct days with at least one check-in
- perfect_days: days where all six axes were checked in
"""

ACHIEVEMENTS = [
    # Streaks
    {
        "id": "first-streak", "category": "streak", "metric": "max_streak", "requirement": 1, "rarity": "common",
        "title": {"en": "First Streak", "es": "Primera Racha"},
        "description": {"en": "Complete your first 1-day streak", "es": "Completa tu primera racha de 1 día"},
    },
    {
        "id": "week-warrior", "category": "streak", "metric": "max_streak", "requirement": 7, "rarity": "rare",
        "title": {"en": "Week Warrior", "es": "Guerrero Semanal"},
        "description": {"en": "Keep a 7-day streak", "es": "Mantén una racha de 7 días"},
    },
    {
        "id": "monthly-master", "category": "streak", "metric": "max_streak", "requirement": 30, "rarity": "epic",
        "title": {"en": "Monthly Master", "es": "Maestro Mensual"},
        "description": {"en": "Keep a 30-day streak", "es": "Mantén una racha de 30 días"},
    },
    {
        "id": "centurion", "category": "streak", "metric": "max_streak", "requirement": 100, "rarity": "legendary",
        "title": {"en": "Centurion", "es": "Centurión"},
        "description": {"en": "Keep a 100-day streak", "es": "Mantén una racha de 100 días"},
    },
    # Completion
    {
        "id": "first-checkin", "category": "completion", "metric": "total_checkins", "requirement": 1, "rarity": "common",
        "title": {"en": "First Step", "es": "Primer Paso"},
        "description": {"en": "Complete your first check-in", "es": "Completa tu primer check-in"},
    },
    {
        "id": "dedicated", "category": "completion", "metric": "total_checkins", "requirement": 50, "rarity": "rare",
        "title": {"en": "Dedicated", "es": "Dedicado"},
        "description": {"en": "Complete 50 check-ins", "es": "Completa 50 check-ins"},
    },
    {
        "id": "committed", "category": "completion", "metric": "total_checkins", "requirement": 200, "rarity": "epic",
        "title": {"en": "Committed", "es": "Comprometido"},
        "description": {"en": "Complete 200 check-ins", "es": "Completa 200 check-ins"},
    },
    {
        "id": "axis-master", "category": "completion", "metric": "total_checkins", "requirement": 500, "rarity": "legendary",
        "title": {"en": "AXIS Master", "es": "Maestro del AXIS"},
        "description": {"en": "Complete 500 check-ins", "es": "Completa 500 check-ins"},
    },
    # Milestones
    {
        "id": "balanced-life", "category": "milestone", "metric": "active_streaks", "requirement": 6, "rarity": "epic",
        "title": {"en": "Balanced Life", "es": "Vida Equilibrada"},
        "description": {"en": "Keep active streaks in six categories", "es": "Mantén rachas activas en todas las categorías"},
    },
    {
        "id": "consistency-king", "category": "milestone", "metric": "current_streak_sum", "requirement": 50, "rarity": "rare",
        "title": {"en": "Consistency King", "es": "Rey de la Consistencia"},
        "description": {"en": "Reach 50+ combined streak days", "es": "Mantén rachas combinadas de 50+ días"},
    },
    {
        "id": "active-month", "category": "milestone", "metric": "active_days", "requirement": 30, "rarity": "rare",
        "title": {"en": "Active Month", "es": "Mes Activo"},
        "description": {"en": "Be active on 30 different days", "es": "Mantente activo por 30 días diferentes"},
    },
    # Special
    {
        "id": "perfectionist", "category": "special", "metric": "perfect_days", "requirement": 1, "rarity": "epic",
        "title": {"en": "Perfectionist", "es": "Perfeccionista"},
        "description": {"en": "Complete all six axes in a single day", "es": "Completa todas las categorías en un solo día"},
    },
]
