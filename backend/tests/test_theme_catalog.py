import pytest

from groupchat.services.theme_catalog import ThemeCatalog, ThemeNotFoundError


def test_six_seeded_themes_with_first_active(themes):
    catalog = themes.list_themes()

    assert [theme.id for theme in catalog] == [1, 2, 3, 4, 5, 6]
    assert [theme.name for theme in catalog if theme.is_active] == ["Classic Blue"]
    assert themes.get_active().id == 1


def test_set_active_replaces_active_theme(themes):
    theme = themes.set_active(6)

    assert theme.name == "Dark Mode"
    assert theme.is_active
    assert themes.get_active().id == 6
    active = [theme.id for theme in themes.list_themes() if theme.is_active]
    assert active == [6]


@pytest.mark.parametrize("theme_id", [0, 7, -1, 999])
def test_unknown_theme_leaves_active_unchanged(themes, theme_id):
    themes.set_active(3)

    with pytest.raises(ThemeNotFoundError) as excinfo:
        themes.set_active(theme_id)

    assert str(theme_id) in str(excinfo.value)
    assert themes.get_active().id == 3


def test_configured_default_theme():
    assert ThemeCatalog(default_theme_id=4).get_active().name == "Purple Dreams"


def test_invalid_default_theme_rejected():
    with pytest.raises(ThemeNotFoundError):
        ThemeCatalog(default_theme_id=42)


def test_theme_colors_match_seed(themes):
    sunset = themes.set_active(2)

    assert sunset.primary_color == "#f59e0b"
    assert sunset.secondary_color == "#d97706"
    assert sunset.background_color == "#fef3c7"
    assert sunset.message_background_self == "#f59e0b"
    assert sunset.message_background_other == "#fed7aa"
    assert sunset.text_color == "#92400e"
