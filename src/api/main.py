"""
FastAPI Application — Driver Onboarding.

Architecture:
  - Core (entities, rules, use cases) sem dependência de framework
  - Persistence: SQLAlchemy (SQLite dev / PostgreSQL prod), JSON file or memory
  - Notifications: log (dev) or SMTP
  - Errors: OnboardingError → {"code", "message"} with one status per kind
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.dependencies import build_services
from src.api.routes.documents import router as documents_router
from src.api.routes.drivers import router as drivers_router
from src.api.schemas.responses import ErrorResponse
from src.config.settings import get_settings
from src.core.errors import (
    AuthError,
    CapacityError,
    ConflictError,
    FormatError,
    InfraError,
    InvalidTransitionError,
    NotFoundError,
    OnboardingError,
    ValidationError,
)

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Driver Onboarding",
    description="Cadastro, envio de documentos e aprovação de motoristas.",
    version=VERSION,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ordem importa: subclasses antes das bases
STATUS_BY_ERROR: list[tuple[type[OnboardingError], int]] = [
    (ValidationError, 400),
    (FormatError, 400),
    (CapacityError, 400),
    (AuthError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidTransitionError, 409),
    (InfraError, 500),
]


def status_for(error: OnboardingError) -> int:
    for kind, status in STATUS_BY_ERROR:
        if isinstance(error, kind):
            return status
    return 500


@app.exception_handler(OnboardingError)
async def onboarding_error_handler(request: Request, exc: OnboardingError):
    status = status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}", exc_info=exc)
    else:
        logger.info(f"{request.method} {request.url.path} -> {status} {exc.code}")
    return JSONResponse(status_code=status, content=exc.to_payload())


# ── Startup ──
@app.on_event("startup")
async def startup():
    """Build adapters up front so a bad database URL fails at boot."""
    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)
    logger.info(f"Driver Onboarding started (env={settings.env}, storage={settings.storage_backend})")


# corpo de erro documentado no OpenAPI
ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in sorted({status for _, status in STATUS_BY_ERROR})
}

app.include_router(drivers_router, prefix="/api", tags=["Drivers"], responses=ERROR_RESPONSES)
app.include_router(documents_router, prefix="/api/documents", tags=["Documents"], responses=ERROR_RESPONSES)


# ── Health ──
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "version": VERSION,
        "storage": settings.storage_backend,
        "notifier": settings.notifier_backend,
    }
