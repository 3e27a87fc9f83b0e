"""
Configuration Notices - Data model shared by all checks.

A check receives a read-only Context and returns zero or more Notices.
The engine folds those notices into a single NoticeResult whose severity
is the maximum severity of its notices (0 when there are none).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Tuple


class Severity(IntEnum):
    """Risk ranking of a notice. Plain integers on the wire."""
    NONE = 0
    INFO = 1
    WARNING = 2
    CRITICAL = 3


@dataclass(frozen=True)
class Notice:
    """
    A single advisory message produced by one check.

    Attributes:
        message: Headline text, may embed HTML markup
        detail: Optional remediation text, may embed HTML markup
        severity: Risk ranking (see Severity)
    """
    message: str
    detail: Optional[str] = None
    severity: int = Severity.INFO

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        return {
            "notice": self.message,
            "info": self.detail,
            "severity": int(self.severity),
        }


@dataclass(frozen=True)
class NoticeResult:
    """
    Aggregated outcome of one evaluation.

    Attributes:
        severity: Maximum severity among notices, 0 if none
        notices: Notices in check-execution order
    """
    severity: int = Severity.NONE
    notices: Tuple[Notice, ...] = ()

    @classmethod
    def empty(cls) -> "NoticeResult":
        """The zero result: no notices, severity 0."""
        return cls()

    @classmethod
    def from_notices(cls, notices: Iterable[Notice]) -> "NoticeResult":
        """Build a result, computing the aggregate severity."""
        collected = tuple(notices)
        severity = max((n.severity for n in collected), default=Severity.NONE)
        return cls(severity=int(severity), notices=collected)

    @property
    def has_notices(self) -> bool:
        return bool(self.notices)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        return {
            "severity": int(self.severity),
            "notices": [n.to_dict() for n in self.notices],
        }


@dataclass(frozen=True)
class ContentType:
    """The identifiers of one configured content type."""
    slug: Optional[str]
    singular_slug: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class Taxonomy:
    """The identifiers of one configured taxonomy."""
    slug: Optional[str]
    singular_slug: Optional[str] = None


@dataclass(frozen=True)
class ImageCapabilities:
    """
    Availability of the image libraries thumbnails depend on.

    Attributes:
        exif: EXIF metadata can be read
        fileinfo: MIME types can be detected from image data
        gd: Images can be resized and cropped
    """
    exif: bool = True
    fileinfo: bool = True
    gd: bool = True


def _freeze_paths(paths: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(paths))


@dataclass(frozen=True)
class Context:
    """
    Read-only snapshot of everything the checks may look at.

    Built once per request by the admin layer. Request-derived values,
    runtime parameters and configuration all travel here, so that
    checks never consult ambient state (except the filesystem probes).
    """
    # Request
    route: str
    request_uri: str = ""
    scheme_and_host: str = ""
    http_host: str = ""
    base_url: str = ""

    # Runtime parameters
    environment_name: str = "prod"
    debug_enabled: bool = False
    database_driver: Optional[str] = None
    backend_url_path: str = "/bolt"

    # Canonical URL
    canonical_scheme: Optional[str] = None
    canonical_host: Optional[str] = None

    # Content model
    content_types: Tuple[ContentType, ...] = ()
    taxonomies: Tuple[Taxonomy, ...] = ()
    known_content_type_slugs: Optional[FrozenSet[str]] = None

    # Flags and settings
    local_domain_partials: Tuple[str, ...] = ()
    maintenance_mode_enabled: bool = False
    thumbnail_save_to_disk_enabled: bool = False

    # Filesystem
    root_path: str = ""
    paths: Mapping[str, str] = field(default_factory=dict)

    capabilities: ImageCapabilities = field(default_factory=ImageCapabilities)

    def __post_init__(self):
        # Frozen dataclass: bypass __setattr__ to normalise collections
        object.__setattr__(self, "content_types", tuple(self.content_types))
        object.__setattr__(self, "taxonomies", tuple(self.taxonomies))
        object.__setattr__(self, "local_domain_partials", tuple(self.local_domain_partials))
        object.__setattr__(self, "paths", _freeze_paths(self.paths))
        if self.known_content_type_slugs is not None:
            object.__setattr__(
                self, "known_content_type_slugs", frozenset(self.known_content_type_slugs)
            )

    def folder_path(self, folder: str) -> Optional[str]:
        """Filesystem path for a logical folder name, or None if not configured."""
        return self.paths.get(folder)


def parse_slug_requirement(raw: Optional[str]) -> Optional[FrozenSet[str]]:
    """
    Parse the pipe-delimited routing requirement into a set of slugs.

    Returns None when the parameter is absent, so that the
    new-content-type check can tell "never built" from "built empty".
    """
    if raw is None:
        return None
    return frozenset(raw.split("|"))


def join_slug_requirement(slugs: Iterable[Optional[str]]) -> str:
    """Inverse of parse_slug_requirement, dropping missing slugs."""
    seen: List[str] = []
    for slug in slugs:
        if slug and slug not in seen:
            seen.append(slug)
    return "|".join(seen)
