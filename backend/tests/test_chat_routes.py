import pytest


def test_default_theme(client):
    response = client.get("/api/chat/theme")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == 1
    assert body["name"] == "Classic Blue"
    assert body["isActive"] is True
    assert body["primaryColor"] == "#3b82f6"


def test_switch_theme(client):
    response = client.post("/api/chat/theme", json={"themeId": 6})

    assert response.status_code == 200
    assert response.json()["name"] == "Dark Mode"
    assert client.get("/api/chat/theme").json()["id"] == 6


def test_unknown_theme_is_404_and_keeps_active(client):
    client.post("/api/chat/theme", json={"themeId": 2})

    response = client.post("/api/chat/theme", json={"themeId": 7})

    assert response.status_code == 404
    assert response.json()["detail"] == "Theme with ID 7 not found"
    assert client.get("/api/chat/theme").json()["id"] == 2


@pytest.mark.parametrize("body", [{}, {"themeId": "2"}, {"themeId": 0}, {"themeId": None}])
def test_bad_theme_id_is_400(client, body):
    response = client.post("/api/chat/theme", json=body)
    assert response.status_code == 400


def test_list_themes(client):
    client.post("/api/chat/theme", json={"themeId": 4})

    body = client.get("/api/chat/themes").json()

    assert body["activeThemeId"] == 4
    assert len(body["themes"]) == 6
    assert [t["id"] for t in body["themes"] if t["isActive"]] == [4]


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
