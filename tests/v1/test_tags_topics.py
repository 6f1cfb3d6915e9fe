# tests/v1/test_tags_topics.py
"""Tests for tag and topic endpoints."""

from fastapi import status


def test_tags_are_listed_by_name(client, admin_token) -> None:
    client.post("/api/admin/tags", json={"name": "Recovery", "color": "green"}, headers=admin_token)
    client.post("/api/admin/tags", json={"name": "beforeafter"}, headers=admin_token)

    tags = client.get("/api/tags").json()

    assert [tag["name"] for tag in tags] == ["beforeafter", "recovery"]


def test_tag_admin_requires_admin(client, auth_token) -> None:
    response = client.post("/api/admin/tags", json={"name": "x"}, headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_duplicate_tag_rejected(client, admin_token) -> None:
    client.post("/api/admin/tags", json={"name": "guide"}, headers=admin_token)
    response = client.post("/api/admin/tags", json={"name": "GUIDE"}, headers=admin_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_and_delete_tag(client, admin_token) -> None:
    created = client.post(
        "/api/admin/tags", json={"name": "castremoval"}, headers=admin_token
    ).json()
    client.post(
        "/api/posts",
        json={"title": "Cast day", "content": "x", "tags": ["castremoval"]},
        headers=admin_token,
    )

    updated = client.patch(
        f"/api/admin/tags/{created['id']}", json={"color": "orange"}, headers=admin_token
    )
    assert updated.json()["color"] == "orange"

    deleted = client.delete(f"/api/admin/tags/{created['id']}", headers=admin_token)
    assert deleted.json() == {"message": "Tag deleted successfully"}
    assert client.get("/api/tags").json() == []
    feed = client.get("/api/posts").json()
    assert feed[0]["tags"] == []
    missing = client.get("/api/tags/castremoval/posts")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_tag_posts_endpoint(client, admin_token) -> None:
    client.post(
        "/api/posts",
        json={"title": "Guide", "content": "x", "tags": ["guide"]},
        headers=admin_token,
    )

    posts = client.get("/api/tags/Guide/posts").json()

    assert [post["title"] for post in posts] == ["Guide"]


def test_topic_lifecycle(client, admin_token) -> None:
    created = client.post(
        "/api/admin/topics",
        json={"name": "Recovery Tips", "icon": "bandage", "sort_order": 2},
        headers=admin_token,
    )
    assert created.status_code == status.HTTP_201_CREATED
    topic = created.json()
    assert topic["slug"] == "recovery-tips"

    client.post(
        "/api/posts",
        json={"title": "Ice packs", "content": "x", "topic_id": topic["id"]},
        headers=admin_token,
    )
    assert client.get("/api/topics/slug/recovery-tips").json()["name"] == "Recovery Tips"
    posts = client.get("/api/topics/recovery-tips/posts").json()
    assert [post["title"] for post in posts] == ["Ice packs"]
    filtered = client.get("/api/posts", params={"topic": "recovery-tips"}).json()
    assert len(filtered) == 1

    renamed = client.put(
        f"/api/admin/topics/{topic['id']}", json={"name": "Healing"}, headers=admin_token
    )
    assert renamed.json()["name"] == "Healing"

    deleted = client.delete(f"/api/admin/topics/{topic['id']}", headers=admin_token)
    assert deleted.status_code == status.HTTP_200_OK
    assert client.get("/api/topics").json() == []
    assert client.get("/api/posts").json()[0]["topic_id"] is None


def test_topics_sorted_and_slugs_unique(client, admin_token) -> None:
    client.post("/api/admin/topics", json={"name": "B", "sort_order": 2}, headers=admin_token)
    client.post("/api/admin/topics", json={"name": "A", "sort_order": 1}, headers=admin_token)
    clash = client.post(
        "/api/admin/topics", json={"name": "Other", "slug": "a"}, headers=admin_token
    )

    assert clash.status_code == status.HTTP_400_BAD_REQUEST
    assert [topic["name"] for topic in client.get("/api/topics").json()] == ["A", "B"]


def test_unknown_topic(client) -> None:
    assert client.get("/api/topics/slug/nope").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/topics/nope/posts").status_code == status.HTTP_404_NOT_FOUND


def test_topic_update_can_clear_description(client, admin_token) -> None:
    topic = client.post(
        "/api/admin/topics",
        json={"name": "Costs", "description": "Prices and insurance"},
        headers=admin_token,
    ).json()

    cleared = client.put(
        f"/api/admin/topics/{topic['id']}",
        json={"description": None, "name": None},
        headers=admin_token,
    )

    assert cleared.status_code == status.HTTP_200_OK
    assert cleared.json()["description"] is None
    assert cleared.json()["name"] == "Costs"
