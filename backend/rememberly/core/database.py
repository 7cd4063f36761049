"""
Database connections: Supabase client setup.
"""

from supabase import create_client, Client

from rememberly.config import get_settings


def create_supabase_client() -> Client:
    """Create a fresh Supabase client (anon key, RLS applies).

    Every application session owns its own client so the signed-in user's
    JWT never leaks into another session's requests.
    """
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
