"""
Supabase admin client factory.

The service role client bypasses row level security, so every route that
uses it must do its own ownership checks.
"""

import logging
from typing import Optional

from supabase import Client, create_client

from .config import get_settings

logger = logging.getLogger(__name__)

_admin_client: Optional[Client] = None


def get_admin_client() -> Optional[Client]:
    """
    Return the shared service-role client, creating it on first use.

    Returns None when SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing.
    """
    global _admin_client

    if _admin_client is not None:
        return _admin_client

    settings = get_settings()
    if not settings.supabase_configured:
        return None

    logger.info(f"Creating Supabase admin client for {settings.supabase_url}")
    _admin_client = create_client(settings.supabase_url, settings.supabase_service_role_key)
    return _admin_client


def reset_admin_client() -> None:
    """Drop the cached client (used after settings change and in tests)."""
    global _admin_client
    _admin_client = None
