"""Tests for the tag procedures."""
from fastapi.testclient import TestClient


def _create_tag(client: TestClient, headers: dict, name: str, color: str = "#A1B2C3"):
    return client.post("/api/tags", json={"name": name, "color": color}, headers=headers)


def test_create_and_list_tags_by_name(client: TestClient, alice: dict):
    for name in ("work", "errands", "health"):
        assert _create_tag(client, alice, name).status_code == 201

    response = client.get("/api/tags", headers=alice)
    assert response.status_code == 200
    tags = response.json()
    assert [t["name"] for t in tags] == ["errands", "health", "work"]
    assert all(t["color"] == "#A1B2C3" for t in tags)
    assert {"id", "createdAt", "updatedAt"} <= set(tags[0])


def test_tags_are_shared_between_users(client: TestClient, alice: dict, bob: dict):
    _create_tag(client, alice, "shared")
    assert [t["name"] for t in client.get("/api/tags", headers=bob).json()] == ["shared"]


def test_create_tag_validates_color_and_name(client: TestClient, alice: dict):
    for color in ("red", "#12345", "#1234567", "123456", "#GGGGGG"):
        response = _create_tag(client, alice, "bad", color)
        assert response.status_code == 422, color
        assert response.json()["code"] == "VALIDATION"

    response = _create_tag(client, alice, "  ")
    assert response.status_code == 422
    assert "Tag name is required" in response.json()["detail"]

    assert client.get("/api/tags", headers=alice).json() == []


def test_update_tag(client: TestClient, alice: dict):
    tag = _create_tag(client, alice, "old").json()
    response = client.put(f"/api/tags/{tag['id']}", json={"name": "new", "color": "#000000"}, headers=alice)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == tag["id"]
    assert (data["name"], data["color"]) == ("new", "#000000")

    response = client.put("/api/tags/missing", json={"name": "x", "color": "#000000"}, headers=alice)
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_delete_tag_removes_it_from_tasks(client: TestClient, alice: dict, bob: dict):
    doomed = _create_tag(client, alice, "doomed").json()
    kept = _create_tag(client, alice, "kept").json()
    mine = client.post(
        "/api/tasks", json={"title": "mine", "tagIds": [doomed["id"], kept["id"]]}, headers=alice
    ).json()
    theirs = client.post("/api/tasks", json={"title": "theirs", "tagIds": [doomed["id"]]}, headers=bob).json()

    response = client.delete(f"/api/tags/{doomed['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert [t["name"] for t in client.get(f"/api/tasks/{mine['id']}", headers=alice).json()["tags"]] == ["kept"]
    assert client.get(f"/api/tasks/{theirs['id']}", headers=bob).json()["tags"] == []
    assert [t["name"] for t in client.get("/api/tags", headers=alice).json()] == ["kept"]

    assert client.delete(f"/api/tags/{doomed['id']}", headers=alice).status_code == 404


def test_tag_procedures_require_authentication(client: TestClient):
    assert client.get("/api/tags").status_code == 401
    response = client.post("/api/tags", json={"name": "x", "color": "#000000"})
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"
