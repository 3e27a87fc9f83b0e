"""
Admin backend service — dashboard with configuration notices
"""

from typing import Optional

from fastapi import FastAPI

from notices.checks import detect_image_capabilities
from notices.models import ImageCapabilities

from .routes import dashboard
from .settings import RuntimeParameters, SiteSettings, load_settings


def create_app(
    settings: Optional[SiteSettings] = None,
    runtime: Optional[RuntimeParameters] = None,
    capabilities: Optional[ImageCapabilities] = None,
) -> FastAPI:
    """
    Build the admin application.

    Settings are loaded from $NOTICES_CONFIG_DIR (or ./config) and runtime
    parameters from the environment unless given explicitly.
    """
    app = FastAPI(title="Configuration Notices", version="0.1.0")

    app.state.settings = settings if settings is not None else load_settings()
    app.state.runtime = runtime if runtime is not None else RuntimeParameters.from_environ()
    app.state.capabilities = capabilities if capabilities is not None else detect_image_capabilities()

    app.include_router(dashboard.router, prefix=app.state.settings.backend_url.rstrip("/"))

    @app.get("/")
    async def root():
        return {"service": "configuration-notices", "status": "running"}

    return app


app = create_app()
