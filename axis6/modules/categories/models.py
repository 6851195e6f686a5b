# Supabase tables: axis6_categories
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_categories:
- id: serial (primary key)
- slug: text (unique, not null)
- name: jsonb (not null) - multilingual {"en": "Physical", "es": "Física"}
- description: jsonb (nullable) - same shape as name
- color: text (not null) - hex color
- icon: text (not null)
- position: int (not null) - display order; personal categories use 999
- is_active: boolean (default: true)
- is_default: boolean (default: false) - true for the six seeded axes
- created_by: uuid (nullable, references auth.users.id) - null for default axes
- created_at: timestamptz (default: now())
- updated_at: timestamptz (nullable)

RLS: everyone may read default categories and their own personal ones;
only the creator may update/delete a personal category.
"""
