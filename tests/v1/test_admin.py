# tests/v1/test_admin.py
"""Tests for moderation and user administration endpoints."""

import pytest
from fastapi import status

from rhinoblog.models import ContributorType, PostStatus, UserRole


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/admin/moderation/pending"),
        ("get", "/api/admin/moderation/flagged"),
        ("get", "/api/admin/moderation/stats"),
        ("get", "/api/admin/users"),
        ("get", "/api/admin/schedule"),
        ("get", "/api/admin/generation-status"),
        ("post", "/api/admin/test-generation"),
    ],
)
def test_admin_routes_reject_regular_users(client, auth_token, method, path) -> None:
    response = getattr(client, method)(path, headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Admin access required"


def test_admin_routes_require_authentication(client) -> None:
    response = client.get("/api/admin/moderation/pending")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_moderate_post_rejects_unknown_action(client, test_post, admin_token) -> None:
    response = client.post(
        f"/api/admin/moderation/posts/{test_post.id}",
        json={"action": "obliterate"},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Must be one of" in response.json()["detail"]


def test_moderate_post_by_regular_user(client, test_post, other_auth_token) -> None:
    response = client.post(
        f"/api/admin/moderation/posts/{test_post.id}",
        json={"action": "reject"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_reject_hides_post(client, test_post, admin_token) -> None:
    response = client.post(
        f"/api/admin/moderation/posts/{test_post.id}",
        json={"action": "reject", "reason": "Off topic"},
        headers=admin_token,
    )

    assert response.json()["status"] == "rejected"
    assert response.json()["moderation_reason"] == "Off topic"
    assert client.get("/api/posts").json() == []


def test_pin_moves_post_to_top(client, make_post, test_user, admin_token) -> None:
    older = make_post(test_user, title="Older")
    make_post(test_user, title="Newer")

    client.post(
        f"/api/admin/moderation/posts/{older.id}", json={"action": "pin"}, headers=admin_token
    )

    feed = client.get("/api/posts").json()
    assert feed[0]["title"] == "Older"
    assert feed[0]["is_pinned"] is True


def test_pending_flagged_and_stats(client, make_post, test_user, admin_token) -> None:
    make_post(test_user, title="Waiting", status=PostStatus.PENDING)
    make_post(test_user, title="Suspicious", status=PostStatus.FLAGGED, reports=2)

    pending = client.get("/api/admin/moderation/pending", headers=admin_token).json()
    flagged = client.get("/api/admin/moderation/flagged", headers=admin_token).json()
    stats = client.get("/api/admin/moderation/stats", headers=admin_token).json()

    assert [post["title"] for post in pending] == ["Waiting"]
    assert [post["title"] for post in flagged["posts"]] == ["Suspicious"]
    assert flagged["comments"] == []
    assert stats["pending_posts"] == 1
    assert stats["flagged_posts"] == 1
    assert stats["total_reports"] == 2


def test_admin_creates_and_lists_users(client, admin_token) -> None:
    created = client.post(
        "/api/admin/users",
        json={
            "username": "drsmith",
            "password": "surgeon-pass",
            "role": "contributor",
            "contributor_type": "surgeon",
        },
        headers=admin_token,
    )

    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["verified"] is True
    users = client.get("/api/admin/users", headers=admin_token).json()
    assert "drsmith" in {user["username"] for user in users}


def test_only_superadmin_creates_superadmin(client, admin_token, superadmin_token) -> None:
    payload = {"username": "root2", "password": "long-enough", "role": "superadmin"}

    denied = client.post("/api/admin/users", json=payload, headers=admin_token)
    allowed = client.post(
        "/api/admin/users", json=payload, headers=superadmin_token
    )

    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert allowed.status_code == status.HTTP_201_CREATED


def test_role_change_and_verification(client, make_user, test_user, admin_token) -> None:
    promoted = client.patch(
        f"/api/admin/users/{test_user.id}/role",
        json={"role": "contributor", "contributor_type": "blogger"},
        headers=admin_token,
    )
    assert promoted.status_code == status.HTTP_200_OK
    assert promoted.json()["contributor_type"] == "blogger"

    missing_type = client.patch(
        f"/api/admin/users/{test_user.id}/role", json={"role": "contributor"}, headers=admin_token
    )
    assert missing_type.status_code == status.HTTP_400_BAD_REQUEST

    applicant = make_user(role=UserRole.CONTRIBUTOR, contributor_type=ContributorType.PATIENT)
    verified = client.post(f"/api/admin/users/{applicant.id}/verify", headers=admin_token)
    assert verified.json()["verified"] is True


def test_delete_user(client, test_user, test_post, admin_token, admin_user) -> None:
    user_id = test_user.id
    response = client.delete(f"/api/admin/users/{user_id}", headers=admin_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/users/{user_id}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/posts").json() == []

    self_delete = client.delete(f"/api/admin/users/{admin_user.id}", headers=admin_token)
    assert self_delete.status_code == status.HTTP_400_BAD_REQUEST
