import logging
from fastapi import FastAPI, Request

from bgp_status import __version__
from webui.settings import BGP_STATUS_WEBUI_LOG_LEVEL

# Setup logging
logger = logging.getLogger("bgp-status.webui")
log_level = getattr(logging, BGP_STATUS_WEBUI_LOG_LEVEL, logging.INFO)
logger.setLevel(log_level)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    handler.setLevel(log_level)
    logger.addHandler(handler)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="BGP Node Status",
        description="BGP peer status of the local Calico node",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    from webui.api import status

    app.include_router(status.router, tags=["status"])

    logger.debug("Status endpoint registered at /status/")
    return app


# Create app instance for import compatibility
app = create_app()
