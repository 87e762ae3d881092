"""Supabase client construction for the Supabase-backed expense store."""
import logging

from supabase import Client, create_client

from .config import Settings
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_supabase(settings: Settings) -> Client:
    """Create a Supabase client from settings.

    Requires:
    - SUPABASE_URL: Your Supabase project URL
    - SUPABASE_SERVICE_KEY: Service role key (for backend operations)

    Raises:
        ConfigurationError: If either value is missing
    """
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables must be set. "
            "Get these from your Supabase project settings."
        )

    client = create_client(settings.supabase_url, settings.supabase_service_key)
    logger.info("Connected to Supabase at %s", settings.supabase_url)
    return client
