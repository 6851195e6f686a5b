import asyncio
import logging
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from supabase import Client

from axis6.config.settings import settings
from axis6.core.rate_limit import limiter
from axis6.database.supabase_client import get_supabase
from axis6.modules.auth import routes as auth_routes
from axis6.modules.profiles import routes as profiles_routes
from axis6.modules.categories import routes as categories_routes
from axis6.modules.categories.service import CATEGORIES_TABLE
from axis6.modules.checkins import routes as checkins_routes
from axis6.modules.streaks import routes as streaks_routes
from axis6.modules.analytics import routes as analytics_routes
from axis6.modules.dashboard import routes as dashboard_routes
from axis6.modules.time_blocks import routes as time_blocks_routes
from axis6.modules.chat import routes as chat_routes
from axis6.modules.preferences import routes as preferences_routes
from axis6.modules.micro_wins import routes as micro_wins_routes
from axis6.modules.achievements import routes as achievements_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-7s %(name)s | %(message)s",
)
logger = logging.getLogger("axis6")

API_ROUTERS = (
    auth_routes.router,
    profiles_routes.router,
    categories_routes.router,
    checkins_routes.router,
    streaks_routes.router,
    analytics_routes.router,
    dashboard_routes.router,
    time_blocks_routes.router,
    chat_routes.router,
    preferences_routes.router,
    micro_wins_routes.router,
    achievements_routes.router,
)

SECURITY_HEADERS = [
    (b"X-Content-Type-Options", b"nosniff"),
    (b"X-Frame-Options", b"DENY"),
    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
]


class SecurityHeadersMiddleware:
    """Appends SECURITY_HEADERS to every HTTP response"""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                message["headers"] = list(message.get("headers", [])) + SECURITY_HEADERS
            await send(message)

        await self.app(scope, receive, send_wrapper)


app = FastAPI(title=settings.app_name, debug=settings.debug, redirect_slashes=False)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in API_ROUTERS:
    app.include_router(router, prefix=settings.api_prefix)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed: {exc}")
    detail = "Internal server error" if settings.is_production else str(exc)
    return JSONResponse(status_code=500, content={"detail": detail})


@app.on_event("startup")
async def start_background_jobs():
    logger.info(f"{settings.app_name} starting ({settings.environment})")
    if not settings.streak_refresh_enabled:
        return
    from axis6.modules.streaks.streak_scheduler import streak_refresh_loop
    app.state.streak_refresher = asyncio.create_task(streak_refresh_loop())
    logger.info(f"Lapsed streaks reset every {settings.streak_refresh_interval_seconds}s")


@app.on_event("shutdown")
async def stop_background_jobs():
    refresher = getattr(app.state, "streak_refresher", None)
    if refresher:
        refresher.cancel()
    logger.info(f"{settings.app_name} stopped")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready(supabase: Client = Depends(get_supabase)):
    """Ready once the categories table answers"""
    try:
        supabase.table(CATEGORIES_TABLE).select("id").limit(1).execute()
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
