"""
FastAPI app assembly: logging, middleware, router wiring and static client.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from volunteer_tracker import __version__
from volunteer_tracker.utils.config import get_config

config = get_config()

# Configure logging
LOG_LEVEL = getattr(logging, config.log_level, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", config.log_level)

from volunteer_tracker.api.admin import router as admin_router
from volunteer_tracker.api.events import router as events_router
from volunteer_tracker.api.sync import router as sync_router
from volunteer_tracker.api.volunteers import router as volunteers_router
from volunteer_tracker.db.database import engine, init_schema
from volunteer_tracker.services.auto_sync import reset_auto_sync_scheduler_for_tests
from volunteer_tracker.utils.feature_flags import get_feature_flags

for problem in config.validate():
    logger.warning("config_problem: %s", problem)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # PostgreSQL schemas are managed by Alembic migrations.
    if engine.dialect.name == "sqlite":
        init_schema()
    yield
    reset_auto_sync_scheduler_for_tests()


app = FastAPI(
    title="Volunteer Tracker Service",
    description="API for tracking volunteers, their event hours, and Google Sheets synchronization.",
    version=__version__,
    lifespan=lifespan,
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials="*" not in config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(volunteers_router)
app.include_router(events_router)
app.include_router(admin_router)
app.include_router(sync_router)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "volunteer-tracker"}


@app.get("/api/features")
def list_feature_flags():
    return dict(get_feature_flags())


@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def api_not_found(path: str):
    return JSONResponse(status_code=404, content={"detail": "API endpoint not found"})


def add_client_routes(target: FastAPI, static_dir: Path) -> None:
    """Serve a built client bundle, answering unknown paths with index.html."""
    static_root = static_dir.resolve()
    logger.info("static_client_enabled dir=%s", static_root)

    @target.get("/{full_path:path}", include_in_schema=False)
    def serve_client(full_path: str):
        candidate = (static_root / full_path).resolve()
        if full_path and candidate.is_file() and static_root in candidate.parents:
            return FileResponse(candidate)
        # Client-side routes fall back to the SPA entry point
        return FileResponse(static_root / "index.html")


if config.static_enabled():
    add_client_routes(app, config.static_dir)
