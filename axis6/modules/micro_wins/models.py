# Supabase tables: axis6_micro_wins, axis6_micro_reactions, axis6_resonance_streaks,
# axis6_social_graph, axis6_daily_rituals
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_micro_wins:
- id: uuid (primary key)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- category_id: int (foreign key to axis6_categories.id)
- axis_slug: text (one of the six axes)
- win_text: text (not null, <= 140 chars)
- minutes: int (nullable, one of 5, 10, 15, 25, 45)
- is_morning_ritual: boolean (default: false)
- privacy: text ('public' | 'followers' | 'private', default 'public')
- resonance_count: int (default: 0) - number of reactions
- created_at: timestamptz (default: now())
- deleted_at: timestamptz (nullable, soft delete)

axis6_micro_reactions:
- id: uuid (primary key)
- micro_win_id: uuid (foreign key to axis6_micro_wins.id, on delete cascade)
- user_id: uuid
- reaction_type: text ('hex_star' | 'support' | 'inspire')
- axis_resonance: text (nullable axis slug)
- unique (micro_win_id, user_id, reaction_type)

axis6_resonance_streaks:
- id: uuid (primary key)
- user_id: uuid
- streak_type: text ('daily' | 'morning' | 'axis')
- axis_slug: text (set only for 'axis' streaks)
- current_streak, longest_streak, total_micro_wins: int
- last_win_date: date
- unique (user_id, streak_type, axis_slug)

axis6_social_graph:
- follower_id, following_id: uuid, unique pair, follower_id <> following_id

axis6_daily_rituals:
- user_id: uuid, ritual_date: date, unique (user_id, ritual_date)
- completed_at: timestamptz, axis_focus: text, micro_win_text: text
"""
