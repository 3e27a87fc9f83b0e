"""
Site settings and runtime parameters.

Two sources feed a notice Context:
- YAML files in the configuration directory (site config, content types,
  taxonomies, extension settings)
- Runtime parameters from the process environment (APP_ENV, APP_DEBUG,
  DATABASE_DRIVER, CANONICAL_SCHEME, CANONICAL_HOST)

Missing optional files mean empty sections. Files that exist but cannot
be parsed raise ConfigError.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlsplit

import yaml

from notices.errors import ConfigError
from notices.models import ContentType, Taxonomy

logger = logging.getLogger(__name__)


# Environment variables
ENV_CONFIG_DIR = "NOTICES_CONFIG_DIR"
ENV_APP_ENV = "APP_ENV"
ENV_APP_DEBUG = "APP_DEBUG"
ENV_DATABASE_DRIVER = "DATABASE_DRIVER"
ENV_CANONICAL_SCHEME = "CANONICAL_SCHEME"
ENV_CANONICAL_HOST = "CANONICAL_HOST"

EXTENSION_CONFIG = Path("extensions") / "configuration-notices.yaml"

DEFAULT_BACKEND_URL = "/bolt"

# Logical folder -> path relative to the project root
DEFAULT_PATHS = {
    "files": "public/files",
    "config": "config",
    "cache": "var/cache",
    "database": "var/data",
    "thumbs": "public/thumbs",
}

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase, dash-separated identifier."""
    return _SLUG_PATTERN.sub("-", value.lower()).strip("-")


def _parse_bool(raw: Optional[str]) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _load_yaml(path: Path, required: bool = False) -> dict:
    """Load a YAML mapping; a missing optional file yields {}."""
    if not path.exists():
        if required:
            raise ConfigError(str(path), "file not found")
        return {}

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"YAML parse error: {e}")
    except OSError as e:
        raise ConfigError(str(path), str(e))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), f"expected a mapping, got {type(data).__name__}")
    return data


# =============================================================================
# Runtime parameters
# =============================================================================

@dataclass(frozen=True)
class RuntimeParameters:
    """Process runtime mode, read from the environment."""
    environment_name: str = "prod"
    debug_enabled: bool = False
    database_driver: str = "pdo_sqlite"
    canonical_scheme: Optional[str] = None
    canonical_host: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeParameters":
        env = os.environ if environ is None else environ
        return cls(
            environment_name=env.get(ENV_APP_ENV, "prod"),
            debug_enabled=_parse_bool(env.get(ENV_APP_DEBUG)),
            database_driver=env.get(ENV_DATABASE_DRIVER, "pdo_sqlite"),
            canonical_scheme=env.get(ENV_CANONICAL_SCHEME) or None,
            canonical_host=env.get(ENV_CANONICAL_HOST) or None,
        )


# =============================================================================
# Site settings
# =============================================================================

@dataclass(frozen=True)
class SiteSettings:
    """
    Structured site configuration.

    Attributes:
        config_dir: Directory the YAML files were read from
        root_path: Project root (parent of config_dir)
        canonical: Canonical site URL, if configured
        backend_url: Admin base path
        maintenance_mode: Site closed to anonymous visitors
        thumbnails_save_files: Thumbnails cached on disk
        paths: Logical folder -> absolute path
        content_types: Configured content types, in file order
        taxonomies: Configured taxonomies, in file order
        local_domains: Extra "development" host substrings
    """
    config_dir: Path
    root_path: Path
    canonical: Optional[str] = None
    backend_url: str = DEFAULT_BACKEND_URL
    maintenance_mode: bool = False
    thumbnails_save_files: bool = False
    paths: Dict[str, str] = field(default_factory=dict)
    content_types: Tuple[ContentType, ...] = ()
    taxonomies: Tuple[Taxonomy, ...] = ()
    local_domains: Tuple[str, ...] = ()

    def get_path(self, folder: str) -> Optional[str]:
        return self.paths.get(folder)

    def canonical_parts(self, runtime: Optional[RuntimeParameters] = None) -> Tuple[Optional[str], Optional[str]]:
        """
        Canonical (scheme, host).

        CANONICAL_SCHEME / CANONICAL_HOST from the environment win over
        the 'canonical' key in config.yaml.
        """
        scheme, host = None, None
        if self.canonical:
            parts = urlsplit(self.canonical if "//" in self.canonical else f"//{self.canonical}")
            scheme = parts.scheme or "https"
            host = parts.netloc or None
        if runtime is not None:
            scheme = runtime.canonical_scheme or scheme
            host = runtime.canonical_host or host
        return scheme, host


def _identifier(value) -> Optional[str]:
    """Coerce a YAML scalar (possibly a number) to an identifier string."""
    if value is None or value == "":
        return None
    return str(value)


def _parse_content_types(data: dict, source: Path) -> Tuple[ContentType, ...]:
    content_types: List[ContentType] = []
    for key, entry in data.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            raise ConfigError(str(source), f"content type '{key}' must be a mapping")
        slug = _identifier(entry.get("slug")) or str(key)
        singular_name = entry.get("singular_name")
        singular_slug = _identifier(entry.get("singular_slug")) or (slugify(str(singular_name)) if singular_name else None)
        content_types.append(ContentType(
            slug=slug,
            singular_slug=singular_slug,
            name=str(entry.get("name") or key),
        ))
    return tuple(content_types)


def _parse_taxonomies(data: dict, source: Path) -> Tuple[Taxonomy, ...]:
    taxonomies: List[Taxonomy] = []
    for key, entry in data.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            raise ConfigError(str(source), f"taxonomy '{key}' must be a mapping")
        singular_name = entry.get("singular_name")
        taxonomies.append(Taxonomy(
            slug=_identifier(entry.get("slug")) or str(key),
            singular_slug=_identifier(entry.get("singular_slug")) or (slugify(str(singular_name)) if singular_name else None),
        ))
    return tuple(taxonomies)


def _resolve_paths(root: Path, configured: dict, source: Path) -> Dict[str, str]:
    if not isinstance(configured, dict):
        raise ConfigError(str(source), "'paths' must be a mapping")
    paths = {}
    for folder, relative in {**DEFAULT_PATHS, **configured}.items():
        path = Path(str(relative))
        paths[folder] = str(path if path.is_absolute() else root / path)
    return paths


def load_settings(config_dir: Optional[Path] = None) -> SiteSettings:
    """
    Load site settings from a configuration directory.

    Args:
        config_dir: Directory holding config.yaml and friends.
            Defaults to $NOTICES_CONFIG_DIR, then ./config.

    Raises:
        ConfigError: A file exists but is not a valid YAML mapping
    """
    if config_dir is None:
        config_dir = Path(os.environ.get(ENV_CONFIG_DIR, "config"))
    config_dir = Path(config_dir).resolve()
    root = config_dir.parent

    config_file = config_dir / "config.yaml"
    general = _load_yaml(config_file)
    thumbnails = general.get("thumbnails") or {}
    if not isinstance(thumbnails, dict):
        raise ConfigError(str(config_file), "'thumbnails' must be a mapping")

    contenttypes_file = config_dir / "contenttypes.yaml"
    taxonomies_file = config_dir / "taxonomies.yaml"
    extension_file = config_dir / EXTENSION_CONFIG

    extension = _load_yaml(extension_file)
    local_domains = extension.get("local_domains") or []
    if not isinstance(local_domains, list):
        raise ConfigError(str(extension_file), "'local_domains' must be a list")

    settings = SiteSettings(
        config_dir=config_dir,
        root_path=root,
        canonical=general.get("canonical") or None,
        backend_url=general.get("backend_url") or DEFAULT_BACKEND_URL,
        maintenance_mode=bool(general.get("maintenance_mode", False)),
        thumbnails_save_files=bool(thumbnails.get("save_files", False)),
        paths=_resolve_paths(root, general.get("paths") or {}, config_file),
        content_types=_parse_content_types(_load_yaml(contenttypes_file), contenttypes_file),
        taxonomies=_parse_taxonomies(_load_yaml(taxonomies_file), taxonomies_file),
        local_domains=tuple(str(d) for d in local_domains),
    )

    logger.info(
        f"Loaded settings from {config_dir}: {len(settings.content_types)} content type(s), "
        f"{len(settings.taxonomies)} taxonom(y/ies)"
    )
    return settings
