"""
Configuration Notices - Individual check implementations.

Each check follows the same pattern:
1. Inspect the read-only Context (and, for folder checks, the filesystem)
2. Return a list of Notices, empty when nothing is wrong

Checks are independent: none reads another's output, and their order
in ALL_CHECKS is the order notices are reported in.
"""

import importlib
import ipaddress
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional
from urllib.parse import urlsplit

from .models import Context, ImageCapabilities, Notice, Severity

logger = logging.getLogger(__name__)


# Type alias for check functions
NoticeCheck = Callable[[Context], List[Notice]]


DEFAULT_DOMAIN_PARTIALS = (
    ".dev", "dev.", "devel.", "development.", "test.", ".test",
    "new.", ".new", ".local", "local.", ".wip",
)

# Drivers whose database lives in a file under the project
FILE_DATABASE_DRIVERS = {"pdo_sqlite", "sqlite"}

WRITABLE_FOLDERS = ("files", "config", "cache")

ROOT_PATH_MARKER = "…"


# =============================================================================
# Host helpers
# =============================================================================

def _hostname(host: str) -> str:
    """Strip port and IPv6 brackets from a Host header value."""
    try:
        # Bare IPv6 literal, no port or brackets
        return str(ipaddress.ip_address(host))
    except ValueError:
        pass
    try:
        parsed = urlsplit(f"//{host}").hostname
    except ValueError:
        return host
    return parsed or host


def is_ip_address(host: str) -> bool:
    """True if host (port allowed) is a literal IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(_hostname(host))
    except ValueError:
        return False
    return True


# =============================================================================
# Environment Liveness Check
# =============================================================================

def check_environment_liveness(context: Context) -> List[Notice]:
    """
    Warn when debug mode is active on what looks like a production host.

    Hosts that are IP addresses, or that contain one of the development
    substrings (defaults plus configured local_domains), are assumed to
    be development machines.
    """
    if context.environment_name == "prod" and not context.debug_enabled:
        return []

    host = urlsplit(context.scheme_and_host).hostname
    if not host:
        return []

    if is_ip_address(host):
        return []

    partials = list(dict.fromkeys([*context.local_domain_partials, *DEFAULT_DOMAIN_PARTIALS]))
    if any(partial and partial in host for partial in partials):
        return []

    return [Notice(
        message=(
            "It seems like this website is running on a <strong>non-development environment</strong>, "
            "while development mode is enabled (<code>APP_ENV=dev</code> and/or <code>APP_DEBUG=1</code>). "
            "Ensure debug is disabled in production environments, otherwise it will result in an "
            "extremely large <code>var/cache</code> folder and a measurable reduced performance."
        ),
        detail=(
            "If you wish to hide this message, add a key to "
            "<code>config/extensions/configuration-notices.yaml</code> with a (partial) domain name "
            "that should be seen as a development environment: <code>local_domains: [ '.foo' ]</code>."
        ),
        severity=Severity.WARNING,
    )]


# =============================================================================
# New ContentType Check
# =============================================================================

def check_new_content_types(context: Context) -> List[Notice]:
    """
    Detect content types added since the routing cache was last built.

    Only the first offender is reported.
    """
    known = context.known_content_type_slugs
    if known is None:
        return []

    for content_type in context.content_types:
        if content_type.slug in known:
            continue
        name = content_type.name or content_type.slug
        return [Notice(
            message=(
                f"A <b>new ContentType</b> ('{name}') was added. Make sure to "
                f"<a href='./clearcache'>clear the cache</a>, so it shows up correctly."
            ),
            detail=(
                "By clearing the cache, you'll ensure the routing requirements are updated, "
                "allowing the correct links to the new ContentType to be generated."
            ),
            severity=Severity.CRITICAL,
        )]

    return []


# =============================================================================
# Duplicate Slug Check
# =============================================================================

def _identifiers(items) -> List[str]:
    """All slugs, then all singular slugs, unique in first-seen order."""
    ordered = [item.slug for item in items] + [item.singular_slug for item in items]
    return [ident for ident in dict.fromkeys(ordered) if ident]


def check_duplicate_slugs(context: Context) -> List[Notice]:
    """ContentTypes and Taxonomies sharing an identifier confuse routing."""
    taxonomy_idents = set(_identifiers(context.taxonomies))
    overlap = [i for i in _identifiers(context.content_types) if i in taxonomy_idents]

    if not overlap:
        return []

    return [Notice(
        message=(
            "The ContentTypes and Taxonomies contain <strong>overlapping identifiers</strong>: "
            f"<code>{'</code>, <code>'.join(overlap)}</code>."
        ),
        detail=(
            "Edit your <code>contenttypes.yaml</code> or your <code>taxonomies.yaml</code>, to ensure "
            "that all the used <code>slug</code>s and <code>singular_slug</code>s are unique."
        ),
        severity=Severity.WARNING,
    )]


# =============================================================================
# Hostname Checks
# =============================================================================

def check_single_hostname(context: Context) -> List[Notice]:
    """Hostnames without a dot (like 'localhost') break sessions in some browsers."""
    hostname = context.http_host
    if not hostname or "." in hostname:
        return []

    return [Notice(
        message=(
            f"You are using <code>{hostname}</code> as host name. Some browsers have problems "
            "with sessions on hostnames that do not have a <code>.tld</code> in them."
        ),
        detail=(
            "If you experience difficulties logging on, either configure your webserver to use "
            "a hostname with a dot in it, or use another browser."
        ),
        severity=Severity.INFO,
    )]


def check_ip_address_host(context: Context) -> List[Notice]:
    """IP addresses as host name break sessions in some browsers."""
    hostname = context.http_host
    if not hostname or not is_ip_address(hostname):
        return []

    return [Notice(
        message=(
            f"You are using the <strong>IP address</strong> <code>{hostname}</code> as host name. "
            "This is known to cause problems with sessions on certain browsers."
        ),
        detail=(
            "If you experience difficulties logging on, either configure your webserver to use "
            "a proper hostname, or use another browser."
        ),
        severity=Severity.INFO,
    )]


def check_top_level(context: Context) -> List[Notice]:
    """The application should be mounted at the web root, not in a subfolder."""
    if not context.base_url:
        return []

    return [Notice(
        message="You are using Bolt in a subfolder, <strong>instead of the webroot</strong>.",
        detail=(
            "It is recommended to use Bolt from the 'web root', so that it is in the top level. "
            "If you wish to use Bolt for only part of a website, we recommend setting up a "
            "subdomain like <code>news.example.org</code>."
        ),
        severity=Severity.INFO,
    )]


# =============================================================================
# Writable Folder Checks
# =============================================================================

def probe_filename() -> str:
    """Unique name for a probe file, safe across concurrent requests."""
    stamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    return f"configtester_{stamp}_{uuid.uuid4().hex[:12]}.txt"


@contextmanager
def probe_file(folder: str) -> Iterator[Path]:
    """
    Write a probe file into folder and remove it on exit.

    Raises OSError if the file cannot be written or removed.
    The folder itself is never created: a missing folder counts as
    unwritable even when its parent would allow creating it.
    """
    path = Path(folder) / probe_filename()
    try:
        path.write_text("ok")
        yield path
    finally:
        path.unlink(missing_ok=True)


def is_writable(folder: Optional[str]) -> bool:
    """True if a probe file can be written to and removed from folder."""
    if not folder:
        return False
    try:
        with probe_file(folder) as path:
            return path.read_text() == "ok"
    except (OSError, ValueError) as e:
        logger.warning(f"Folder {folder} is not writable: {e}")
        return False


def display_path(context: Context, folder: str) -> str:
    """Folder path with the project root replaced by an ellipsis."""
    path = context.folder_path(folder) or ""
    if context.root_path:
        return path.replace(context.root_path, ROOT_PATH_MARKER)
    return path


def check_writable_folders(context: Context) -> List[Notice]:
    """
    Check if the common file locations are writable.

    The database folder is included when the database is file based.
    Every failing folder gets its own notice.
    """
    folders = list(WRITABLE_FOLDERS)
    if context.database_driver in FILE_DATABASE_DRIVERS:
        folders.append("database")

    notices = []
    for folder in folders:
        if is_writable(context.folder_path(folder)):
            continue
        notices.append(Notice(
            message=(
                f"Bolt needs to be able to <strong>write files to</strong> the \"{folder}\" folder, "
                "but it doesn't seem to be writable."
            ),
            detail=(
                f"Make sure the folder <code>{display_path(context, folder)}</code> exists, "
                "and is writable to the webserver."
            ),
            severity=Severity.WARNING,
        ))
    return notices


def check_thumbs_folder(context: Context) -> List[Notice]:
    """Thumbnails saved to disk need a writable thumbs/ folder."""
    if not context.thumbnail_save_to_disk_enabled:
        return []

    if is_writable(context.folder_path("thumbs")):
        return []

    return [Notice(
        message=(
            "Bolt is configured to save thumbnails to disk for performance, but the "
            "<code>thumbs/</code> folder doesn't seem to be writable."
        ),
        detail="Make sure the folder exists, and is writable to the webserver.",
        severity=Severity.WARNING,
    )]


# =============================================================================
# Canonical Check
# =============================================================================

def check_canonical_host(context: Context) -> List[Notice]:
    """The current URL should use the configured canonical scheme and host."""
    if not context.canonical_scheme or not context.canonical_host:
        return []

    current = urlsplit(context.request_uri.split("?", 1)[0])
    canonical_host = _hostname(context.canonical_host).lower()

    if (current.scheme.lower() == context.canonical_scheme.lower()
            and (current.hostname or "") == canonical_host):
        return []

    canonical = f"{context.canonical_scheme}://{context.canonical_host}"
    login = f"{canonical}{context.backend_url_path}"
    return [Notice(
        message=(
            f"The <strong>canonical hostname</strong> is set to <code>{canonical}</code> in "
            "<code>config.yaml</code>, but you are currently logged in using another hostname. "
            "This might cause issues with uploaded files, or links inserted in the content."
        ),
        detail=f"Log in on Bolt using the proper URL: <code><a href='{login}'>{login}</a></code>.",
        severity=Severity.INFO,
    )]


# =============================================================================
# Image Functions Check
# =============================================================================

def _module_available(name: str, attribute: Optional[str] = None) -> bool:
    try:
        module = importlib.import_module(name)
    except ImportError:
        return False
    return attribute is None or hasattr(module, attribute)


def detect_image_capabilities() -> ImageCapabilities:
    """
    Detect which Pillow features are usable in this process.

    - exif: PIL.ExifTags (EXIF orientation and metadata)
    - fileinfo: PIL.Image.MIME (MIME detection from image data)
    - gd: PIL.ImageOps.fit (resize and crop for thumbnails)
    """
    return ImageCapabilities(
        exif=_module_available("PIL.ExifTags", "TAGS"),
        fileinfo=_module_available("PIL.Image", "MIME"),
        gd=_module_available("PIL.ImageOps", "fit"),
    )


def check_image_functions(context: Context) -> List[Notice]:
    """One notice per missing image capability."""
    notices = []
    capabilities = context.capabilities

    if not capabilities.exif:
        notices.append(Notice(
            message=(
                "The module <code>PIL.ExifTags</code> is not available, which means that "
                "Bolt can not create thumbnail images."
            ),
            detail=(
                "Make sure <code>Pillow</code> is installed <u>and</u> importable by the webserver: "
                "<code>pip install Pillow</code>. See "
                "<a href='https://pillow.readthedocs.io/en/stable/installation.html'>here</a>."
            ),
            severity=Severity.INFO,
        ))

    if not capabilities.fileinfo:
        notices.append(Notice(
            message=(
                "The registry <code>PIL.Image.MIME</code> is not available, which means that "
                "Bolt can not create thumbnail images."
            ),
            detail=(
                "Make sure <code>Pillow</code> is installed <u>and</u> importable by the webserver: "
                "<code>pip install Pillow</code>. See "
                "<a href='https://pillow.readthedocs.io/en/stable/installation.html'>here</a>."
            ),
            severity=Severity.INFO,
        ))

    if not capabilities.gd:
        notices.append(Notice(
            message=(
                "The function <code>PIL.ImageOps.fit</code> does not exist, which means that "
                "Bolt can not create thumbnail images."
            ),
            detail=(
                "Make sure <code>Pillow</code> is installed <u>and</u> importable by the webserver: "
                "<code>pip install Pillow</code>. See "
                "<a href='https://pillow.readthedocs.io/en/stable/installation.html'>here</a>."
            ),
            severity=Severity.INFO,
        ))

    return notices


# =============================================================================
# Maintenance Mode Check
# =============================================================================

def check_maintenance_mode(context: Context) -> List[Notice]:
    """Surface maintenance mode on the dashboard."""
    if not context.maintenance_mode_enabled:
        return []

    return [Notice(
        message=(
            "Bolt's <strong>maintenance mode</strong> is enabled. This means that "
            "non-authenticated users will not be able to see the website."
        ),
        detail=(
            "To make the site available to the general public again, set "
            "<code>maintenance_mode: false</code> in your <code>config.yaml</code> file."
        ),
        severity=Severity.INFO,
    )]


# =============================================================================
# Registry
# =============================================================================

# All checks, in reporting order
ALL_CHECKS: List[NoticeCheck] = [
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
]
