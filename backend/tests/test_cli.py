"""
Tests for the configuration-notices command line.

main() always exits; tests assert on SystemExit codes and captured output.
"""

import json
from unittest.mock import patch

import pytest

from admin.cli import build_parser, main
from notices.models import ImageCapabilities


@pytest.fixture(autouse=True)
def fixed_capabilities():
    """Pin image capabilities so results do not depend on the installed Pillow."""
    with patch("admin.context.detect_image_capabilities", return_value=ImageCapabilities()):
        yield


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestCheckCommand:

    def test_clean_site_exits_zero(self, site_config, clean_environ, capsys):
        assert _run(["clear-cache", "--config-dir", str(site_config)]) == 0
        capsys.readouterr()

        code = _run(["check", "--url", "https://example.org/bolt/",
                     "--config-dir", str(site_config), "--json"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"severity": 0, "notices": []}

    def test_notices_exit_one(self, site_config, clean_environ, capsys):
        code = _run(["check", "--url", "https://localhost/bolt/",
                     "--config-dir", str(site_config), "--json"])

        assert code == 1
        result = json.loads(capsys.readouterr().out)
        messages = [n["notice"] for n in result["notices"]]
        assert any("<code>localhost</code>" in m for m in messages)
        assert any("canonical hostname" in m for m in messages)
        assert result["severity"] == 1

    def test_environment_parameters_are_used(self, site_config, clean_environ, monkeypatch, capsys):
        monkeypatch.setenv("APP_ENV", "dev")
        monkeypatch.setenv("APP_DEBUG", "1")
        _run(["clear-cache", "--config-dir", str(site_config)])
        capsys.readouterr()

        code = _run(["check", "--url", "https://example.org/bolt/",
                     "--config-dir", str(site_config), "--json"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["severity"] == 2

    def test_terminal_output(self, site_config, clean_environ, capsys):
        (site_config / "config.yaml").write_text("canonical: https://example.org\nmaintenance_mode: true\n")
        _run(["clear-cache", "--config-dir", str(site_config)])
        capsys.readouterr()

        _run(["check", "--url", "https://example.org/bolt/", "--config-dir", str(site_config)])
        out = capsys.readouterr().out

        assert "CONFIGURATION NOTICES" in out
        assert "[INFO] Bolt's maintenance mode is enabled." in out
        assert "<strong>" not in out

    def test_config_error_exits_four(self, site_config, clean_environ, capsys):
        (site_config / "config.yaml").write_text("canonical: [broken\n")

        code = _run(["check", "--url", "https://example.org/bolt/", "--config-dir", str(site_config)])

        assert code == 4
        assert "ERROR" in capsys.readouterr().err


class TestClearCacheCommand:

    def test_writes_routing_cache(self, site_config, site_root, clean_environ, capsys):
        code = _run(["clear-cache", "--config-dir", str(site_config)])

        assert code == 0
        assert "pages|entries" in capsys.readouterr().out
        stored = json.loads((site_root / "var" / "cache" / "routing_requirements.json").read_text())
        assert stored == {"contenttypes": "pages|entries"}

    def test_unwritable_cache_exits_two(self, site_config, site_root, clean_environ):
        (site_config / "config.yaml").write_text("paths:\n  cache: blocker/cache\n")
        (site_root / "blocker").write_text("a file, not a folder")

        assert _run(["clear-cache", "--config-dir", str(site_config)]) == 2


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_serve_defaults(self):
        args = build_parser().parse_args(["serve"])
        assert args.host == "127.0.0.1"
        assert args.port == 8085
