import logging
from typing import Optional
from supabase import create_client, Client
from inventory.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Lazily created, process-wide Supabase clients."""

    _client: Optional[Client] = None
    _service_client: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            if not settings.supabase_url or not settings.supabase_key:
                raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be configured")
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with the service_role key (bypasses RLS), used by the seed script. Falls back to the anon client."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        if cls._service_client is None:
            logger.warning("SUPABASE_SERVICE_ROLE_KEY is not set; falling back to the anon client")
            return cls.get_client()
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def check_connection(supabase: Client) -> bool:
    """One cheap read against the permissions table; used by the readiness probe."""
    try:
        supabase.table("permissions")\
            .select("id")\
            .limit(1)\
            .execute()
        return True
    except Exception as e:
        logger.error(f"Supabase readiness check failed: {e}")
        return False
