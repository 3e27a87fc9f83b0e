"""
Configuration Notices - Output formatting.

Formats a NoticeResult for:
- Terminal output (CLI)
- JSON output (API/CLI --json)

Notice text carries HTML markup meant for the dashboard; the terminal
formatter strips it.
"""

import html
import json
import re
from typing import List

from .models import NoticeResult, Severity

_TAG_PATTERN = re.compile(r"<[^>]+>")
_SPACE_PATTERN = re.compile(r"\s+")

SEVERITY_LABELS = {
    Severity.NONE: "OK",
    Severity.INFO: "INFO",
    Severity.WARNING: "WARNING",
    Severity.CRITICAL: "CRITICAL",
}


def strip_markup(text: str) -> str:
    """Plain-text rendition of notice markup."""
    plain = html.unescape(_TAG_PATTERN.sub("", text))
    return _SPACE_PATTERN.sub(" ", plain).strip()


def severity_label(severity: int) -> str:
    try:
        return SEVERITY_LABELS[Severity(severity)]
    except ValueError:
        return str(severity)


def to_json(result: NoticeResult, indent: int = 2) -> str:
    """Serialize to JSON string."""
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)


def format_notices_terminal(result: NoticeResult) -> str:
    """
    Format a notice result for terminal output.

    Args:
        result: NoticeResult to format

    Returns:
        Formatted string for terminal display
    """
    lines: List[str] = []

    lines.append("")
    lines.append("=" * 60)
    lines.append(f"  CONFIGURATION NOTICES  [{severity_label(result.severity)}]")
    lines.append("=" * 60)
    lines.append("")

    if not result.notices:
        lines.append("  ✔ No configuration issues found.")
        lines.append("")
        return "\n".join(lines)

    for notice in result.notices:
        lines.append(f"  ✘ [{severity_label(notice.severity)}] {strip_markup(notice.message)}")
        if notice.detail:
            lines.append(f"      ↳ {strip_markup(notice.detail)}")

    lines.append("")
    lines.append("-" * 60)
    lines.append(f"  {len(result.notices)} notice(s), highest severity: {severity_label(result.severity)}")
    lines.append("-" * 60)
    lines.append("")

    return "\n".join(lines)
