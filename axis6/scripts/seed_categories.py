"""
Seed Categories and Chat Rooms Script
This script populates the six default wellness axes and their public chat
rooms using the config. Safe to re-run: existing rows are updated in place.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from axis6.config.categories_config import DEFAULT_CATEGORIES, DEFAULT_CHAT_ROOMS
from axis6.database.supabase_client import get_supabase
from supabase import Client
from typing import Dict
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "axis6_categories"
ROOMS_TABLE = "axis6_chat_rooms"


def seed_categories(supabase: Client) -> Dict[str, int]:
    """Seed default categories from config; returns slug -> id"""
    logger.info("Seeding categories...")

    created_count = 0
    updated_count = 0
    ids: Dict[str, int] = {}

    for category in DEFAULT_CATEGORIES:
        values = {
            "name": category["name"],
            "description": category["description"],
            "color": category["color"],
            "icon": category["icon"],
            "position": category["position"],
            "is_active": True,
            "is_default": True
        }
        try:
            existing = supabase.table(CATEGORIES_TABLE)\
                .select("id")\
                .eq("slug", category["slug"])\
                .execute()

            if existing.data:
                supabase.table(CATEGORIES_TABLE)\
                    .update(values)\
                    .eq("slug", category["slug"])\
                    .execute()
                ids[category["slug"]] = existing.data[0]["id"]
                updated_count += 1
                logger.debug(f"Updated category: {category['slug']}")
            else:
                result = supabase.table(CATEGORIES_TABLE).insert({
                    "slug": category["slug"],
                    **values
                }).execute()
                ids[category["slug"]] = result.data[0]["id"]
                created_count += 1
                logger.debug(f"Created category: {category['slug']}")
        except Exception as e:
            logger.error(f"Error processing category {category['slug']}: {e}")

    logger.info(f"Categories seeded: {created_count} created, {updated_count} updated")
    return ids


def seed_chat_rooms(supabase: Client, category_ids: Dict[str, int]) -> int:
    """Seed public category rooms and the support room"""
    logger.info("Seeding chat rooms...")

    created_count = 0
    updated_count = 0

    for room in DEFAULT_CHAT_ROOMS:
        category_id = category_ids.get(room["category_slug"]) if room["category_slug"] else None
        try:
            existing = supabase.table(ROOMS_TABLE)\
                .select("id")\
                .eq("name", room["name"])\
                .eq("type", room["type"])\
                .execute()

            if existing.data:
                supabase.table(ROOMS_TABLE)\
                    .update({
                        "description": room["description"],
                        "category_id": category_id,
                        "is_active": True
                    })\
                    .eq("id", existing.data[0]["id"])\
                    .execute()
                updated_count += 1
                logger.debug(f"Updated room: {room['name']}")
            else:
                supabase.table(ROOMS_TABLE).insert({
                    "name": room["name"],
                    "description": room["description"],
                    "type": room["type"],
                    "category_id": category_id,
                    "is_active": True,
                    "metadata": {}
                }).execute()
                created_count += 1
                logger.debug(f"Created room: {room['name']}")
        except Exception as e:
            logger.error(f"Error processing room {room['name']}: {e}")

    logger.info(f"Chat rooms seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def main():
    """Main function to seed categories and chat rooms"""
    try:
        supabase = get_supabase()

        logger.info("Starting AXIS6 seeding...")

        # Rooms reference categories, so categories go first
        category_ids = seed_categories(supabase)
        room_count = seed_chat_rooms(supabase, category_ids)

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {len(category_ids)} categories, {room_count} rooms processed")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
