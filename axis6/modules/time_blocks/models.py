# Supabase tables: axis6_time_blocks, axis6_activity_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_time_blocks:
- id: serial (primary key)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- date: date (not null)
- category_id: int (foreign key to axis6_categories.id, on delete cascade)
- activity_name: varchar(255) (not null)
- start_time: time (not null)
- end_time: time (not null, check end_time > start_time)
- duration_minutes: int - whole minutes between start and end, written by the API
- status: varchar(20) (default: 'planned') - planned | active | completed | skipped
- notes: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())
- exclude constraint: non-skipped blocks of one user on one date never overlap

axis6_activity_logs:
- id: serial (primary key)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- category_id: int (foreign key to axis6_categories.id, on delete cascade)
- activity_name: varchar(255) (not null)
- time_block_id: int (nullable, foreign key to axis6_time_blocks.id, on delete set null)
- started_at: timestamptz (not null)
- ended_at: timestamptz (nullable) - null while the timer is running
- duration_minutes: int (nullable) - whole minutes, set when the timer stops
- notes: text (nullable)
- created_at: timestamptz (default: now())
"""
