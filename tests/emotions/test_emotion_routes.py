"""Emotion journal: entries, ownership and statistics."""
from datetime import timedelta

import pytest

from extensions import db
from modules.emotions.models import UserEmotion
from utils import utcnow


@pytest.fixture()
def emotions(client, make_user, auth_headers):
    """Maps emotion name -> id, read through the API."""
    headers = auth_headers(make_user())
    categories = client.get("/api/emotions/categories", headers=headers).get_json()["data"]
    return {e["name"]: e["id"] for c in categories for e in c["emotions"]}


def test_journal_requires_login(client) -> None:
    for method, url in (("get", "/api/emotions/categories"), ("get", "/api/emotions/user"),
                        ("post", "/api/emotions"), ("delete", "/api/emotions/1")):
        response = getattr(client, method)(url)
        assert response.status_code == 401, url


def test_categories_contain_their_emotions(client, make_user, auth_headers) -> None:
    categories = client.get("/api/emotions/categories", headers=auth_headers(make_user())).get_json()["data"]

    joy = next(c for c in categories if c["name"] == "Joie")
    assert len(categories) == 6
    assert "Gratitude" in [e["name"] for e in joy["emotions"]]


def test_add_list_delete(client, make_user, auth_headers, emotions) -> None:
    headers = auth_headers(make_user())

    response = client.post("/api/emotions", json={"emotionId": emotions["Fierté"], "intensity": 5, "note": "Examen réussi"},
                           headers=headers)
    assert response.status_code == 201
    entry_id = response.get_json()["data"]["id"]

    entries = client.get("/api/emotions/user", headers=headers).get_json()["data"]
    assert [(e["id"], e["emotion_name"], e["category_name"], e["intensity"]) for e in entries] == [
        (entry_id, "Fierté", "Joie", 5),
    ]

    response = client.delete(f"/api/emotions/{entry_id}", headers=headers)
    assert response.get_json() == {"success": True, "message": "Émotion supprimée avec succès"}
    assert client.get("/api/emotions/user", headers=headers).get_json()["data"] == []


@pytest.mark.parametrize("intensity", [0, 6])
def test_intensity_is_bounded(client, make_user, auth_headers, emotions, intensity) -> None:
    response = client.post("/api/emotions", json={"emotionId": emotions["Rage"], "intensity": intensity},
                           headers=auth_headers(make_user()))

    assert response.status_code == 400
    assert response.get_json()["errors"][0]["field"] == "intensity"


def test_unknown_emotion(client, make_user, auth_headers) -> None:
    response = client.post("/api/emotions", json={"emotionId": 9999, "intensity": 3},
                           headers=auth_headers(make_user()))
    assert response.status_code == 404


def test_entries_are_private(client, make_user, auth_headers, emotions) -> None:
    owner, intruder = auth_headers(make_user()), auth_headers(make_user())
    entry_id = client.post("/api/emotions", json={"emotionId": emotions["Anxiété"], "intensity": 2},
                           headers=owner).get_json()["data"]["id"]

    response = client.put(f"/api/emotions/{entry_id}", json={"intensity": 1}, headers=intruder)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Émotion non trouvée ou accès non autorisé"
    assert client.delete(f"/api/emotions/{entry_id}", headers=intruder).status_code == 404
    assert client.get("/api/emotions/user", headers=intruder).get_json()["data"] == []

    response = client.put(f"/api/emotions/{entry_id}", json={"intensity": 4, "note": "mieux"}, headers=owner)
    assert response.status_code == 200
    assert client.get("/api/emotions/user", headers=owner).get_json()["data"][0]["intensity"] == 4


def _backdate(app, entry_id, days):
    with app.app_context():
        db.session.get(UserEmotion, entry_id).created_at = utcnow() - timedelta(days=days)
        db.session.commit()


def test_date_range_filter(client, app, make_user, auth_headers, emotions) -> None:
    headers = auth_headers(make_user())
    old = client.post("/api/emotions", json={"emotionId": emotions["Chagrin"], "intensity": 3},
                      headers=headers).get_json()["data"]["id"]
    client.post("/api/emotions", json={"emotionId": emotions["Gratitude"], "intensity": 4}, headers=headers)
    _backdate(app, old, days=10)

    start = (utcnow() - timedelta(days=2)).isoformat()
    end = (utcnow() + timedelta(days=1)).isoformat()
    entries = client.get("/api/emotions/user", query_string={"startDate": start, "endDate": end},
                         headers=headers).get_json()["data"]
    assert [e["emotion_name"] for e in entries] == ["Gratitude"]

    # a single bound is ignored
    entries = client.get("/api/emotions/user", query_string={"startDate": start}, headers=headers).get_json()["data"]
    assert len(entries) == 2


def test_stats_windows(client, app, make_user, auth_headers, emotions) -> None:
    headers = auth_headers(make_user())
    for name, days in (("Fierté", 0), ("Fierté", 1), ("Rage", 20), ("Chagrin", 200)):
        entry_id = client.post("/api/emotions", json={"emotionId": emotions[name], "intensity": 3},
                               headers=headers).get_json()["data"]["id"]
        _backdate(app, entry_id, days)

    week = client.get("/api/emotions/stats?period=week", headers=headers).get_json()["data"]
    assert week["categoryStats"] == [{"name": "Joie", "count": 2}]
    assert week["topEmotions"] == [{"name": "Fierté", "category": "Joie", "count": 2}]
    assert sum(row["count"] for row in week["timeData"]) == 2

    month = client.get("/api/emotions/stats?period=month", headers=headers).get_json()["data"]
    assert {row["name"]: row["count"] for row in month["categoryStats"]} == {"Joie": 2, "Colère": 1}

    year = client.get("/api/emotions/stats?period=year", headers=headers).get_json()["data"]
    assert sum(row["count"] for row in year["categoryStats"]) == 4

    # unknown periods fall back to the week
    assert client.get("/api/emotions/stats?period=decade", headers=headers).get_json()["data"] == week
