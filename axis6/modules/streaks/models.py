# Supabase tables: axis6_streaks
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_streaks:
- id: serial (primary key)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- category_id: int (foreign key to axis6_categories.id)
- current_streak: int (default: 0)
- longest_streak: int (default: 0)
- last_checkin: date (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())
- unique constraint on (user_id, category_id)

Rows are derived data: they are recomputed from axis6_checkins after every
check-in mutation and deleted when a category has no check-ins left.
"""
