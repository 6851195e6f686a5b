# Supabase tables: axis6_daily_stats
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_daily_stats:
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- date: date
- completion_rate: decimal(3,2) - categories_completed / active categories, capped at 1.00
- categories_completed: int (default: 0)
- total_mood: int (nullable) - sum of moods of that day's check-ins
- created_at: timestamptz (default: now())
- primary key (user_id, date)

Rows are derived data, refreshed after every check-in mutation of that day
and removed when the day has no check-ins left.
"""
