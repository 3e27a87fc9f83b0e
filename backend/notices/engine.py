"""
Configuration Notices - Evaluation of the check battery.

evaluate() is the single entrypoint: a pure fold of ALL_CHECKS over a
read-only Context, plus the filesystem probes some checks perform.
"""

import logging
from typing import List, Optional, Sequence

from .checks import ALL_CHECKS, NoticeCheck
from .models import Context, Notice, NoticeResult

logger = logging.getLogger(__name__)

# Checks only run when the admin landing page is being rendered
DASHBOARD_ROUTE = "dashboard"


def _check_name(check: NoticeCheck) -> str:
    return getattr(check, "__name__", repr(check)).replace("check_", "")


def run_check(check: NoticeCheck, context: Context) -> List[Notice]:
    """
    Run one check in isolation.

    A check that raises contributes no notices; the failure is logged
    so that later checks still run.
    """
    try:
        notices = list(check(context))
    except Exception:
        logger.exception(f"Notice check '{_check_name(check)}' failed, skipping")
        return []

    for notice in notices:
        logger.debug(f"[{_check_name(check)}] severity {int(notice.severity)}: {notice.message[:80]}")
    return notices


def evaluate(context: Context, checks: Optional[Sequence[NoticeCheck]] = None) -> NoticeResult:
    """
    Run all checks against context and aggregate their notices.

    Args:
        context: Read-only snapshot of request, runtime and configuration
        checks: Override of the check list (defaults to ALL_CHECKS)

    Returns:
        NoticeResult with notices in check order and the maximum severity.
        The zero result when context.route is not the dashboard.
    """
    if context.route != DASHBOARD_ROUTE:
        return NoticeResult.empty()

    notices: List[Notice] = []
    for check in (ALL_CHECKS if checks is None else checks):
        notices.extend(run_check(check, context))

    result = NoticeResult.from_notices(notices)
    logger.info(f"Configuration notices: {len(result.notices)} notice(s), severity {result.severity}")
    return result
