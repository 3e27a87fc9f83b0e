"""
Dashboard endpoints for the admin area.

The configuration notices are attached to every admin page response, but
the engine only produces notices for the dashboard route; other pages
always carry the zero result.

Endpoints (mounted under the configured backend_url, e.g. /bolt):
    GET  /            dashboard (route name "dashboard")
    GET  /about       about page (route name "about")
    POST /clearcache  rebuild the routing requirements cache
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict

from notices.engine import DASHBOARD_ROUTE, evaluate
from notices.errors import RoutingCacheError

from ..context import build_context
from ..routing_cache import clear_cache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


# =============================================================================
# Response Models
# =============================================================================


class NoticeItem(BaseModel):
    """A single configuration notice."""

    model_config = ConfigDict(extra="forbid")

    notice: str
    info: Optional[str] = None
    severity: int


class NoticesPayload(BaseModel):
    """Aggregated notices for one page render."""

    model_config = ConfigDict(extra="forbid")

    severity: int = 0
    notices: List[NoticeItem] = []


class PageResponse(BaseModel):
    """An admin page with its configuration notices."""

    model_config = ConfigDict(extra="forbid")

    page: str
    notices: NoticesPayload


class ClearCacheResponse(BaseModel):
    """Outcome of a cache clear."""

    model_config = ConfigDict(extra="forbid")

    contenttypes: List[str]


# =============================================================================
# Helpers
# =============================================================================


def page_notices(request: Request, route_name: str) -> NoticesPayload:
    """Evaluate the configuration notices for the current request."""
    state = request.app.state
    context = build_context(
        settings=state.settings,
        runtime=state.runtime,
        route=route_name,
        url=str(request.url),
        base_url=request.scope.get("root_path", ""),
        capabilities=state.capabilities,
    )
    return NoticesPayload(**evaluate(context).to_dict())


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/", name=DASHBOARD_ROUTE, response_model=PageResponse)
def dashboard(request: Request):
    """
    Admin landing page.

    Returns:
        PageResponse with the full notice battery evaluated.
    """
    return PageResponse(page=DASHBOARD_ROUTE, notices=page_notices(request, DASHBOARD_ROUTE))


@router.get("/about", name="about", response_model=PageResponse)
def about(request: Request):
    """About page; notices are never raised here."""
    return PageResponse(page="about", notices=page_notices(request, "about"))


@router.post("/clearcache", name="clearcache", response_model=ClearCacheResponse)
def clearcache(request: Request):
    """
    Rebuild the routing requirements cache.

    Raises:
        500: If the cache folder is missing or not writable
    """
    try:
        requirement = clear_cache(request.app.state.settings)
    except RoutingCacheError as e:
        logger.error(f"Cache clear failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return ClearCacheResponse(contenttypes=[slug for slug in requirement.split("|") if slug])
