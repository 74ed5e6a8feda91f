from fastapi import APIRouter, Depends, HTTPException
from groupchat.api.dependencies import get_storage
from groupchat.schemas import ChatTheme, ThemeCatalogResponse, ThemeSelection
from groupchat.services.theme_catalog import ThemeNotFoundError
from groupchat.storage.chat_storage import ChatStorage

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/theme", response_model=ChatTheme)
def get_theme(storage: ChatStorage = Depends(get_storage)):
    """The theme currently applied to every client"""
    return storage.get_active_theme()


@router.post("/theme", response_model=ChatTheme)
def set_theme(selection: ThemeSelection, storage: ChatStorage = Depends(get_storage)):
    """Switch the shared theme for everyone"""
    try:
        return storage.set_active_theme(selection.theme_id)
    except ThemeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/themes", response_model=ThemeCatalogResponse)
def list_themes(storage: ChatStorage = Depends(get_storage)):
    """All selectable themes"""
    themes = storage.list_themes()
    active = next(theme.id for theme in themes if theme.is_active)
    return ThemeCatalogResponse(active_theme_id=active, themes=themes)
