"""
Assembly of a notice Context from the admin collaborators.

Request values, runtime parameters, site settings and the routing cache
are all resolved here, once per request, so that the checks themselves
stay pure.
"""

from typing import Optional
from urllib.parse import urlsplit

from notices.checks import detect_image_capabilities
from notices.models import Context, ImageCapabilities, parse_slug_requirement

from .routing_cache import read_content_type_requirement
from .settings import RuntimeParameters, SiteSettings


def build_context(
    settings: SiteSettings,
    runtime: RuntimeParameters,
    route: str,
    url: str,
    base_url: str = "",
    capabilities: Optional[ImageCapabilities] = None,
) -> Context:
    """
    Build the read-only Context for one evaluation.

    Args:
        settings: Loaded site settings
        runtime: Runtime parameters (environment, debug, driver, canonical overrides)
        route: Name of the matched route
        url: Full URL of the inbound request
        base_url: Path prefix the application is mounted under ("" at web root)
        capabilities: Image capabilities (detected from this process if omitted)
    """
    parts = urlsplit(url)
    canonical_scheme, canonical_host = settings.canonical_parts(runtime)

    return Context(
        route=route,
        request_uri=url,
        scheme_and_host=f"{parts.scheme}://{parts.netloc}",
        http_host=parts.netloc,
        base_url=base_url.rstrip("/"),
        environment_name=runtime.environment_name,
        debug_enabled=runtime.debug_enabled,
        database_driver=runtime.database_driver,
        backend_url_path=settings.backend_url,
        canonical_scheme=canonical_scheme,
        canonical_host=canonical_host,
        content_types=settings.content_types,
        taxonomies=settings.taxonomies,
        known_content_type_slugs=parse_slug_requirement(read_content_type_requirement(settings)),
        local_domain_partials=settings.local_domains,
        maintenance_mode_enabled=settings.maintenance_mode,
        thumbnail_save_to_disk_enabled=settings.thumbnails_save_files,
        root_path=str(settings.root_path),
        paths=settings.paths,
        capabilities=capabilities if capabilities is not None else detect_image_capabilities(),
    )
