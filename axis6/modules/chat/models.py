# Supabase tables: axis6_chat_rooms, axis6_chat_participants, axis6_chat_messages, axis6_chat_reactions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

axis6_chat_rooms:
- id: uuid (primary key, default gen_random_uuid())
- name: text (not null)
- description: text (nullable)
- type: text (not null) - direct | category | group | support
- category_id: int (nullable, foreign key to axis6_categories.id, on delete set null)
- created_by: uuid (nullable) - null for seeded public rooms
- is_active: boolean (default: true) - false once the room is deleted
- max_participants: int (nullable) - null means unlimited
- metadata: jsonb (default: {})
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now()) - bumped on every new message

axis6_chat_participants:
- id: uuid (primary key)
- room_id: uuid (foreign key to axis6_chat_rooms.id, on delete cascade)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- role: text (default: 'member') - admin | moderator | member
- joined_at: timestamptz (default: now())
- last_seen: timestamptz (default: now())
- is_muted: boolean (default: false)
- notification_settings: jsonb (default: {"mentions": true, "all": true})
- unique (room_id, user_id)

axis6_chat_messages:
- id: uuid (primary key)
- room_id: uuid (foreign key to axis6_chat_rooms.id, on delete cascade)
- sender_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- content: text (not null)
- message_type: text (default: 'text') - text | image | file | system | achievement
- reply_to_id: uuid (nullable, foreign key to axis6_chat_messages.id, on delete set null)
- metadata: jsonb (default: {})
- edited_at: timestamptz (nullable)
- deleted_at: timestamptz (nullable) - soft delete marker
- created_at: timestamptz (default: now())

axis6_chat_reactions:
- id: uuid (primary key)
- message_id: uuid (foreign key to axis6_chat_messages.id, on delete cascade)
- user_id: uuid (foreign key to axis6_profiles.id, on delete cascade)
- emoji: text (not null)
- created_at: timestamptz (default: now())
- unique (message_id, user_id, emoji)

RLS on these tables must not query axis6_chat_participants from a policy on
axis6_chat_participants itself; policies call the security definer function
axis6_is_chat_participant(room_id) instead.
"""
