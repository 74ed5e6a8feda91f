import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from groupchat.core.config import settings
from groupchat.core.database import init_db
from groupchat.core.scheduler import start_scheduler, stop_scheduler
from groupchat.services.presence import PresenceTracker
from groupchat.services.theme_catalog import ThemeCatalog
from groupchat.api.routes import auth, chat, messages, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: Create tables, start the presence prune job
    Shutdown: Stop background scheduler
    """
    init_db()
    if settings.ENABLE_SCHEDULER:
        start_scheduler(app.state.presence)
    yield
    stop_scheduler()


app = FastAPI(
    title="Group Chat API",
    description="Shared chat room with presence and themes",
    version="1.0.0",
    lifespan=lifespan
)

# Shared state handed to storage through dependencies
app.state.presence = PresenceTracker(timeout_seconds=settings.PRESENCE_TIMEOUT_SECONDS)
app.state.themes = ThemeCatalog(default_theme_id=settings.DEFAULT_THEME_ID)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a client error (400) with per-field detail"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": "Validation error", "errors": exc.errors()}),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures and hide their details from the client"""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# All routes are prefixed with /api
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(messages.router, prefix="/api")
app.include_router(chat.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {"message": "Group Chat API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {"status": "healthy"}
