# Supabase tables: axis6_user_preferences, axis6_notification_preferences, axis6_privacy_settings,
# axis6_wellness_preferences
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_user_preferences:
- id: uuid (primary key)
- user_id: uuid (unique, foreign key to auth.users.id, on delete cascade)
- theme_preference: text (default: 'temperament_based') - temperament_based | dark | light | auto
- language: text (default: 'en') - en | es
- dashboard_layout: text (default: 'hexagon') - hexagon | grid | list
- default_landing_page: text (default: '/dashboard') - /dashboard | /my-day | /analytics | /profile
- display_density: text (default: 'comfortable') - compact | comfortable | spacious
- accessibility_options: jsonb (default: {})
- quick_actions: jsonb (default: [])
- created_at, updated_at: timestamptz

axis6_notification_preferences:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, on delete cascade)
- notification_type: text - daily_reminder | streak_milestone | category_focus | ai_insight |
  goal_progress | comeback_encouragement | achievement | social_update
- delivery_channels: text[] (default: {in_app}) - subset of push, email, in_app, sms
- enabled: boolean (default: true)
- frequency: text (default: 'optimal') - high | optimal | low | off
- priority_filter: text (default: 'medium') - all | high | medium | critical
- quiet_hours: jsonb (default: {"enabled": true, "start": "22:00", "end": "07:00"})
- optimal_timing: boolean (default: true)
- category_focus: int[] (nullable)
- temperament_based: boolean (default: true)
- created_at, updated_at: timestamptz
- unique (user_id, notification_type)

axis6_privacy_settings:
- id: uuid (primary key)
- user_id: uuid (unique, foreign key to auth.users.id, on delete cascade)
- profile_visibility: text (default: 'private') - public | friends | private
- stats_sharing: boolean (default: false)
- achievement_sharing: boolean (default: true)
- ai_analytics_enabled, behavioral_tracking_enabled, ai_coaching_enabled,
  personalized_content: boolean (default: true)
- data_retention_days: int (default: 365, check >= 30)
- export_frequency: text (default: 'monthly') - never | weekly | monthly | quarterly
- third_party_sharing: boolean (default: false)
- usage_analytics: boolean (default: true)
- research_participation: boolean (default: false)
- created_at, updated_at: timestamptz

axis6_wellness_preferences:
- id: uuid (primary key)
- user_id: uuid (unique, foreign key to auth.users.id, on delete cascade)
- custom_settings: jsonb - hexagon_size, show_community_pulse, show_resonance,
  default_view and axes: [{category_id, daily_goal, show_in_quick_actions, priority}]
- created_at, updated_at: timestamptz
"""
