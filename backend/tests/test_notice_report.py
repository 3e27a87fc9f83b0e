"""
Tests for notice formatting.
"""

import json

from notices.models import Notice, NoticeResult, Severity
from notices.report import format_notices_terminal, severity_label, strip_markup, to_json


def test_strip_markup():
    text = "Use <code>a</code> &amp; <a href='x'>b</a>,\n   then   <u>c</u>."
    assert strip_markup(text) == "Use a & b, then c."


def test_severity_labels():
    assert severity_label(0) == "OK"
    assert severity_label(Severity.CRITICAL) == "CRITICAL"
    assert severity_label(7) == "7"


def test_terminal_without_notices():
    out = format_notices_terminal(NoticeResult.empty())

    assert "[OK]" in out
    assert "No configuration issues found." in out


def test_terminal_with_notices():
    result = NoticeResult.from_notices([
        Notice(message="<b>first</b>", detail="do <code>x</code>", severity=Severity.WARNING),
        Notice(message="second", severity=Severity.INFO),
    ])
    out = format_notices_terminal(result)

    assert "✘ [WARNING] first" in out
    assert "↳ do x" in out
    assert "✘ [INFO] second" in out
    assert "2 notice(s), highest severity: WARNING" in out


def test_to_json_keeps_markup():
    result = NoticeResult.from_notices([Notice(message="<b>…</b>", detail=None, severity=1)])
    data = json.loads(to_json(result))

    assert data == {"severity": 1, "notices": [{"notice": "<b>…</b>", "info": None, "severity": 1}]}
