from fastapi import Depends, Request
from sqlalchemy.orm import Session
from groupchat.core.database import get_db
from groupchat.services.presence import PresenceTracker
from groupchat.services.theme_catalog import ThemeCatalog
from groupchat.storage.chat_storage import ChatStorage


def get_presence(request: Request) -> PresenceTracker:
    """Process-wide presence tracker stored on the application state."""
    return request.app.state.presence


def get_theme_catalog(request: Request) -> ThemeCatalog:
    """Process-wide theme catalog stored on the application state."""
    return request.app.state.themes


def get_storage(
    db: Session = Depends(get_db),
    presence: PresenceTracker = Depends(get_presence),
    themes: ThemeCatalog = Depends(get_theme_catalog),
) -> ChatStorage:
    """
    Storage bound to this request's database session.

    Route handlers depend on this instead of touching the session directly,
    so ownership checks and presence rules live in one place.
    """
    return ChatStorage(db, presence, themes)
