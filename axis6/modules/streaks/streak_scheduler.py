import asyncio
import logging
from axis6.config.settings import settings
from axis6.database.supabase_client import get_supabase
from axis6.modules.streaks.service import StreakService

logger = logging.getLogger(__name__)


async def reset_stale_streaks():
    """Zero out current streaks that lapsed since the last check-in."""
    try:
        supabase = get_supabase()
        reset_count = StreakService(supabase).reset_stale_streaks()
        if not reset_count:
            logger.debug("No stale streaks found")
            return
        logger.info(f"Reset {reset_count} stale streak(s)")
    except Exception as e:
        logger.error(f"Error in streak refresher: {str(e)}")


async def streak_refresh_loop():
    """Background task that periodically resets lapsed streaks"""
    while True:
        try:
            await reset_stale_streaks()
        except Exception as e:
            logger.error(f"Error in streak refresh loop: {str(e)}")

        await asyncio.sleep(settings.streak_refresh_interval_seconds)
