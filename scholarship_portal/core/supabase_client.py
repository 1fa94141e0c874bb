import logging
from typing import Optional
from supabase import create_client, Client
from scholarship_portal.core.config import Settings, settings as default_settings, mask_secret

logger = logging.getLogger(__name__)


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """Create the Supabase client used by the ``supabase`` upload storage backend.

    The service-role key is preferred; the anon key works only when the
    upload bucket's policies allow anonymous writes and reads.

    Raises:
        RuntimeError: If STORAGE_BACKEND=supabase but the URL or both keys are missing
    """
    settings = settings or default_settings
    url = settings.SUPABASE_URL
    key = settings.SUPABASE_SERVICE_ROLE or settings.SUPABASE_ANON_PUBLIC

    if not url:
        logger.error("STORAGE_BACKEND=supabase but SUPABASE_URL is not configured")
        raise RuntimeError("Supabase storage misconfigured: set SUPABASE_URL")
    if not key:
        logger.error("STORAGE_BACKEND=supabase but no Supabase key is configured")
        raise RuntimeError("Supabase storage misconfigured: set SUPABASE_SERVICE_ROLE or SUPABASE_ANON_PUBLIC")

    if not settings.SUPABASE_SERVICE_ROLE:
        logger.warning(f"Using SUPABASE_ANON_PUBLIC for bucket {settings.SUPABASE_BUCKET}; uploads depend on bucket policies")

    logger.info(
        f"Supabase storage client for {url.split('://')[-1]} "
        f"(bucket: {settings.SUPABASE_BUCKET}, key: {mask_secret(key)})"
    )
    return create_client(url, key)
