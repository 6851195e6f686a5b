from typing import Optional
from supabase import create_client, Client
from axis6.config.settings import settings

# One client per key for the process lifetime
_anon_client: Optional[Client] = None
_service_client: Optional[Client] = None


def _anon() -> Client:
    global _anon_client
    if _anon_client is None:
        _anon_client = create_client(settings.supabase_url, settings.supabase_key)
    return _anon_client


def _service() -> Client:
    global _service_client
    if not settings.supabase_service_role_key:
        return _anon()
    if _service_client is None:
        _service_client = create_client(settings.supabase_url, settings.supabase_service_role_key)
    return _service_client


def get_supabase() -> Client:
    """Data client. Bypasses RLS when the service role key is set, so callers filter by user id."""
    return _service()


def get_auth_client() -> Client:
    """Anon-key client for Supabase Auth sign-up, sign-in and token lookups."""
    return _anon()
