"""
FastAPI document service for the TMR recruiting app.

Serves the privileged document and profile operations behind bearer-token
auth. The same app runs under any ASGI server or as a Vercel Python function
(see api/index.py).
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings, validate_config_on_startup
from .errors import register_exception_handlers
from .models import HealthResponse
from .routes import documents_router, profiles_router

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Validate configuration at startup
validate_config_on_startup()

app = FastAPI(title="TMR Document Service", version=__version__)

# Browsers call these endpoints cross-origin from the SPA
if settings.cors_origins_list:
    allow_any = settings.cors_origins_list == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=not allow_any,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

register_exception_handlers(app)

# Include modular route handlers
app.include_router(documents_router)
app.include_router(profiles_router)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for uptime probes.

    Reports whether Supabase credentials are configured; makes no network calls.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        supabase_configured=get_settings().supabase_configured,
        version=__version__,
    )
