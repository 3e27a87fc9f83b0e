"""
Configuration Notices - Dashboard sanity checks for the admin landing page.

Runs a fixed battery of environment and configuration checks and returns
advisory notices with a severity ranking. Nothing here blocks, fixes or
persists anything.

Principles:
- Advisory: every condition is a warning, never a failure
- Isolated: one failing check never stops the others
- Explicit: all inputs arrive through a read-only Context
"""

from .models import (
    Severity,
    Notice,
    NoticeResult,
    Context,
    ContentType,
    Taxonomy,
    ImageCapabilities,
    parse_slug_requirement,
    join_slug_requirement,
)

from .checks import (
    NoticeCheck,
    ALL_CHECKS,
    DEFAULT_DOMAIN_PARTIALS,
    # Individual checks
    check_environment_liveness,
    check_new_content_types,
    check_duplicate_slugs,
    check_single_hostname,
    check_ip_address_host,
    check_top_level,
    check_writable_folders,
    check_thumbs_folder,
    check_canonical_host,
    check_image_functions,
    check_maintenance_mode,
    # Helpers
    detect_image_capabilities,
    is_writable,
)

from .engine import DASHBOARD_ROUTE, evaluate

from .report import format_notices_terminal, to_json

__all__ = [
    # Model
    "Severity",
    "Notice",
    "NoticeResult",
    "Context",
    "ContentType",
    "Taxonomy",
    "ImageCapabilities",
    "parse_slug_requirement",
    "join_slug_requirement",
    # Checks
    "NoticeCheck",
    "ALL_CHECKS",
    "DEFAULT_DOMAIN_PARTIALS",
    "check_environment_liveness",
    "check_new_content_types",
    "check_duplicate_slugs",
    "check_single_hostname",
    "check_ip_address_host",
    "check_top_level",
    "check_writable_folders",
    "check_thumbs_folder",
    "check_canonical_host",
    "check_image_functions",
    "check_maintenance_mode",
    "detect_image_capabilities",
    "is_writable",
    # Engine
    "DASHBOARD_ROUTE",
    "evaluate",
    # Report
    "format_notices_terminal",
    "to_json",
]
