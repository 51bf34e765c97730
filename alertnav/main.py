"""
AlertNAV - FastAPI Backend
Live map of the latest reported location per device
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.routing import Mount

from alertnav.config import DEFAULT_SESSION_SECRET, Settings, get_settings
from alertnav.database import Database
from alertnav.exceptions import (
    ApplicationException,
    AuthenticationException,
    DatabaseException,
    NotFoundException,
    ValidationException,
)
from alertnav.page_renderer import UI_DIR
from alertnav.routers import auth, data, pages
from alertnav.session_gate import session_gate
from alertnav.utils.metrics import (
    get_metrics, get_content_type,
    http_requests_in_progress, record_request
)

logger = logging.getLogger(__name__)

# HTTP status for each application exception
EXCEPTION_STATUS_CODES = {
    ValidationException: 400,
    AuthenticationException: 401,
    NotFoundException: 404,
    DatabaseException: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown"""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"CORS Origins: {settings.cors_origins_list}")
    logger.info(
        f"Locations scoped to owner: {settings.scope_locations_to_owner}, "
        f"map poll interval: {settings.map_poll_interval_seconds}s"
    )

    if settings.create_tables_on_startup:
        await app.state.db.create_all()
        logger.info("Database tables created")

    yield

    await app.state.db.dispose()
    logger.info("Shutting down...")


async def application_exception_handler(request: Request, exc: ApplicationException):
    """Map application exceptions to their HTTP status with an {"error": ...} body"""
    status_code = 500
    for exc_type, code in EXCEPTION_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            status_code = code
            break
    return JSONResponse(status_code=status_code, content={"error": exc.message})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400"""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())}
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions; the cause is logged, never returned"""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


def route_template(request: Request) -> str:
    """
    Full route template of the matched route, e.g. /api/data/{reading_id}.

    Routes included with a prefix may only carry the path relative to their
    router, so the prefix is taken from the leading segments of the request path.
    """
    route = request.scope.get("route")
    route_path = getattr(route, "path", None)
    if route_path is None:
        return "unmatched"
    if isinstance(route, Mount):
        return route_path

    route_segments = [s for s in route_path.split("/") if s]
    request_segments = [s for s in request.url.path.split("/") if s]
    prefix_length = len(request_segments) - len(route_segments)
    if prefix_length <= 0:
        return route_path or "/"

    prefix = "/" + "/".join(request_segments[:prefix_length])
    if not route_segments:
        return prefix
    return prefix + "/" + "/".join(route_segments)


async def metrics_middleware(request: Request, call_next):
    """Count and time every request, labelled by route template"""
    http_requests_in_progress.inc()
    start_time = time.time()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        record_request(request.method, route_template(request), status_code, time.time() - start_time)
        http_requests_in_progress.dec()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own connection pool"""
    settings = settings or get_settings()
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        if not settings.debug:
            raise RuntimeError("SESSION_SECRET is not set; refusing to start with the placeholder secret")
        logger.warning("Using the placeholder SESSION_SECRET, session cookies can be forged")

    app = FastAPI(
        title=settings.app_name,
        description="Latest reported location per device, with cookie sessions",
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.db = Database(settings)

    # Last added runs outermost: CORS, then metrics, then the session gate
    app.middleware("http")(session_gate)
    app.middleware("http")(metrics_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(data.router, prefix="/api/data", tags=["Location Data"])
    app.include_router(pages.router, tags=["Pages"])
    app.mount("/static", StaticFiles(directory=os.path.join(UI_DIR, "static")), name="static")

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        db_health = await app.state.db.health_check()
        healthy = db_health["healthy"]
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "version": settings.app_version,
                "database": db_health,
            }
        )

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint"""
        return Response(
            content=get_metrics(),
            media_type=get_content_type()
        )

    return app


def run():
    """Console entry point: configure logging and serve with uvicorn"""
    import uvicorn

    from alertnav.logging_config import setup_logging

    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        "alertnav.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_config=None
    )


if __name__ == "__main__":
    run()
