# Supabase tables: axis6_checkins
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_checkins:
- id: serial (primary key)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- category_id: int (foreign key to axis6_categories.id, on delete cascade)
- completed_at: date (not null) - calendar day in the user's timezone
- mood: int (nullable, check 1..5)
- notes: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())
- unique (user_id, category_id, completed_at)

completed_at is a DATE, not a timestamp: the unique constraint is what keeps
one check-in per axis per day, and toggles upsert on it.
"""
