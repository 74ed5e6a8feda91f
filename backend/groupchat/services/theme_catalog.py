import threading
from datetime import datetime, timezone
from typing import Dict, List

from groupchat.schemas import ChatTheme


class ThemeNotFoundError(LookupError):
    def __init__(self, theme_id: int):
        super().__init__(f"Theme with ID {theme_id} not found")
        self.theme_id = theme_id


# id, name, primary, secondary, background, own bubble, other bubble, text
_SEED_THEMES = [
    (1, "Classic Blue", "#3b82f6", "#1e40af", "#f8fafc", "#3b82f6", "#e2e8f0", "#1e293b"),
    (2, "Sunset Orange", "#f59e0b", "#d97706", "#fef3c7", "#f59e0b", "#fed7aa", "#92400e"),
    (3, "Forest Green", "#10b981", "#059669", "#ecfdf5", "#10b981", "#d1fae5", "#064e3b"),
    (4, "Purple Dreams", "#8b5cf6", "#7c3aed", "#f3f4f6", "#8b5cf6", "#e5e7eb", "#374151"),
    (5, "Rose Gold", "#f43f5e", "#e11d48", "#fdf2f8", "#f43f5e", "#fce7f3", "#881337"),
    (6, "Dark Mode", "#6366f1", "#4f46e5", "#111827", "#6366f1", "#374151", "#f9fafb"),
]


def seed_themes() -> Dict[int, ChatTheme]:
    created_at = datetime.now(timezone.utc)
    themes = {}
    for theme_id, name, primary, secondary, background, own, other, text in _SEED_THEMES:
        themes[theme_id] = ChatTheme(
            id=theme_id,
            name=name,
            primary_color=primary,
            secondary_color=secondary,
            background_color=background,
            message_background_self=own,
            message_background_other=other,
            text_color=text,
            created_at=created_at,
        )
    return themes


class ThemeCatalog:
    """
    The seeded palettes plus the one active for every client.

    One instance lives on the application state and is handed to storage per
    request. Switching replaces the active id under a lock, so a read that
    follows a completed switch always sees the new theme.
    """

    def __init__(self, default_theme_id: int = 1) -> None:
        self._themes = seed_themes()
        if default_theme_id not in self._themes:
            raise ThemeNotFoundError(default_theme_id)
        self._active_id = default_theme_id
        self._lock = threading.Lock()

    def _with_flag(self, theme: ChatTheme, active_id: int) -> ChatTheme:
        return theme.model_copy(update={"is_active": theme.id == active_id})

    @property
    def active_theme_id(self) -> int:
        with self._lock:
            return self._active_id

    def get_active(self) -> ChatTheme:
        with self._lock:
            active_id = self._active_id
        return self._with_flag(self._themes[active_id], active_id)

    def set_active(self, theme_id: int) -> ChatTheme:
        theme = self._themes.get(theme_id)
        if theme is None:
            raise ThemeNotFoundError(theme_id)
        with self._lock:
            self._active_id = theme_id
        return self._with_flag(theme, theme_id)

    def list_themes(self) -> List[ChatTheme]:
        active_id = self.active_theme_id
        return [self._with_flag(theme, active_id) for theme in self._themes.values()]
