import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neurowork.application import WorkforceService, configure_workforce_service
from neurowork.core.validation import (
    AuthorizationError,
    InvalidOperation,
    NeuroWorkError,
    NotFoundError,
    ValidationError,
)
from neurowork.infrastructure import (
    GeminiAnalysisClient,
    JsonFilePersistence,
    SnapshotStore,
    configure_analysis_client,
)
from neurowork.infrastructure.gemini import DEFAULT_MODEL
from neurowork.routes import analysis, employees, products, session, tasks

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[NeuroWorkError], int] = {
    ValidationError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
    InvalidOperation: 409,
}


def _status_for(exc: NeuroWorkError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 400


def create_app() -> FastAPI:
    app = FastAPI(title="NeuroWork Workforce API", version="0.1.0")

    api_key = os.getenv("GEMINI_API_KEY")
    if api_key:
        client = GeminiAnalysisClient(
            api_key,
            model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            api_base=os.getenv("GEMINI_API_BASE") or "https://generativelanguage.googleapis.com",
        )
        configure_analysis_client(client)
    else:
        logger.info("GEMINI_API_KEY not set; AI analysis will return fallback reports")

    state_path = os.getenv("NEUROWORK_STATE_PATH")
    if state_path:
        configure_workforce_service(WorkforceService(SnapshotStore(JsonFilePersistence(state_path))))

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NeuroWorkError)
    async def handle_domain_error(request: Request, exc: NeuroWorkError) -> JSONResponse:
        return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})

    app.include_router(session.router, prefix="/api")
    app.include_router(employees.router, prefix="/api")
    app.include_router(tasks.router, prefix="/api")
    app.include_router(products.router, prefix="/api")
    app.include_router(analysis.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "NeuroWork Workforce API",
                "docs": "/docs",
                "health": "/api/snapshot",
            }
        )

    return app


app = create_app()
