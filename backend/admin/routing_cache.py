"""
Routing requirements cache.

When the cache is cleared, the slugs of all configured content types are
stored as one pipe-delimited string. Routes generated afterwards only
know those slugs, which is what the new-content-type notice compares
against.

Stored at <cache folder>/routing_requirements.json:
    {"contenttypes": "pages|entries|showcases"}
"""

import json
import logging
from pathlib import Path
from typing import Optional

from notices.errors import RoutingCacheError
from notices.models import join_slug_requirement

from .settings import SiteSettings

logger = logging.getLogger(__name__)

CACHE_FILENAME = "routing_requirements.json"
CONTENTTYPES_KEY = "contenttypes"


def cache_file(settings: SiteSettings) -> Optional[Path]:
    folder = settings.get_path("cache")
    if not folder:
        return None
    return Path(folder) / CACHE_FILENAME


def read_content_type_requirement(settings: SiteSettings) -> Optional[str]:
    """
    Read the pipe-delimited slugs stored at the last cache clear.

    Returns None when the cache was never built or cannot be read.
    """
    path = cache_file(settings)
    if path is None or not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable routing cache {path}: {e}")
        return None

    value = data.get(CONTENTTYPES_KEY) if isinstance(data, dict) else None
    return value if isinstance(value, str) else None


def clear_cache(settings: SiteSettings) -> str:
    """
    Rebuild the routing requirements from the current content types.

    Returns:
        The stored pipe-delimited slug string

    Raises:
        RoutingCacheError: The cache folder is not configured or not writable
    """
    path = cache_file(settings)
    if path is None:
        raise RoutingCacheError("<unset>", "no 'cache' folder configured")

    requirement = join_slug_requirement(ct.slug for ct in settings.content_types)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({CONTENTTYPES_KEY: requirement}, indent=2))
    except OSError as e:
        raise RoutingCacheError(str(path), str(e))

    logger.info(f"Routing cache rebuilt at {path}: {requirement or '(no content types)'}")
    return requirement
