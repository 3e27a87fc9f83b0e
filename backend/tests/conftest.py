"""
Pytest configuration and shared fixtures for the notice test suite.
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Add backend to Python path for test imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from notices.models import ContentType, Context, ImageCapabilities, Taxonomy


FOLDERS = {
    "files": "public/files",
    "config": "config",
    "cache": "var/cache",
    "database": "var/data",
    "thumbs": "public/thumbs",
}


@pytest.fixture
def site_root(tmp_path):
    """Project root with every logical folder present and writable."""
    root = tmp_path / "site"
    for relative in FOLDERS.values():
        (root / relative).mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def make_context(site_root):
    """
    Factory for a dashboard Context on which no check fires.

    Keyword arguments override individual fields.
    """
    base = Context(
        route="dashboard",
        request_uri="https://example.org/bolt/",
        scheme_and_host="https://example.org",
        http_host="example.org",
        base_url="",
        environment_name="prod",
        debug_enabled=False,
        database_driver="pdo_sqlite",
        backend_url_path="/bolt",
        canonical_scheme="https",
        canonical_host="example.org",
        content_types=(
            ContentType(slug="pages", singular_slug="page", name="Pages"),
            ContentType(slug="entries", singular_slug="entry", name="Entries"),
        ),
        taxonomies=(
            Taxonomy(slug="tags", singular_slug="tag"),
            Taxonomy(slug="categories", singular_slug="category"),
        ),
        known_content_type_slugs=frozenset({"pages", "entries"}),
        local_domain_partials=(),
        maintenance_mode_enabled=False,
        thumbnail_save_to_disk_enabled=True,
        root_path=str(site_root),
        paths={name: str(site_root / relative) for name, relative in FOLDERS.items()},
        capabilities=ImageCapabilities(exif=True, fileinfo=True, gd=True),
    )

    def _make(**overrides):
        return replace(base, **overrides)

    return _make


@pytest.fixture
def site_config(site_root):
    """Configuration directory with YAML files describing a clean site."""
    config_dir = site_root / "config"
    (config_dir / "extensions").mkdir(parents=True, exist_ok=True)

    (config_dir / "config.yaml").write_text(
        "canonical: https://example.org\n"
        "backend_url: /bolt\n"
        "maintenance_mode: false\n"
        "thumbnails:\n"
        "  save_files: true\n"
    )
    (config_dir / "contenttypes.yaml").write_text(
        "pages:\n"
        "  name: Pages\n"
        "  singular_name: Page\n"
        "entries:\n"
        "  name: Entries\n"
        "  singular_name: Entry\n"
    )
    (config_dir / "taxonomies.yaml").write_text(
        "tags:\n"
        "  slug: tags\n"
        "  singular_slug: tag\n"
        "categories:\n"
        "  singular_name: Category\n"
    )
    (config_dir / "extensions" / "configuration-notices.yaml").write_text(
        "local_domains: ['.acme']\n"
    )
    return config_dir


@pytest.fixture
def clean_environ(monkeypatch):
    """Remove runtime parameters that would leak in from the shell."""
    for key in ("APP_ENV", "APP_DEBUG", "DATABASE_DRIVER", "CANONICAL_SCHEME",
                "CANONICAL_HOST", "NOTICES_CONFIG_DIR"):
        monkeypatch.delenv(key, raising=False)
