# Supabase tables: axis6_profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- name: text (not null)
- timezone: text (default: 'America/Santo_Domingo') - IANA zone, defines the user's day boundary
- onboarded: boolean (default: false)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), trigger-maintained)

RLS: a user can select/insert/update only the row whose id = auth.uid().
"""
