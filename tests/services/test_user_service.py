"""Tests for account, role and deletion helpers."""

import pytest

from rhinoblog.core.security import decode_access_token, verify_password
from rhinoblog.models import Comment, ContributorType, Post, User, UserRole, Vote, VoteType
from rhinoblog.services import user_service
from rhinoblog.services.comments import create_comment
from rhinoblog.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from rhinoblog.services.voting import cast_vote


def test_register_hashes_password(db_session) -> None:
    user = user_service.register_user(db_session, "carol", "s3cret-pass")

    assert user.role == UserRole.USER
    assert user.password_hash != "s3cret-pass"
    assert verify_password("s3cret-pass", user.password_hash)


def test_register_rejects_duplicate_username(db_session, test_user) -> None:
    with pytest.raises(ValidationError, match="Username already exists"):
        user_service.register_user(db_session, test_user.username, "another-pass")


def test_authenticate_user(db_session, test_user) -> None:
    assert user_service.authenticate_user(db_session, "alice", "password123").id == test_user.id
    assert user_service.authenticate_user(db_session, "alice", "wrong") is None
    assert user_service.authenticate_user(db_session, "nobody", "password123") is None


def test_token_claims(make_user) -> None:
    contributor = make_user(
        role=UserRole.CONTRIBUTOR, contributor_type=ContributorType.BLOGGER, verified=True
    )

    payload = decode_access_token(user_service.issue_token(contributor))

    assert payload["sub"] == str(contributor.id)
    assert payload["role"] == "contributor"
    assert payload["isAdmin"] is False
    assert payload["contributorType"] == "blogger"


def test_change_password(db_session, test_user) -> None:
    with pytest.raises(PermissionDeniedError):
        user_service.change_password(db_session, test_user, "wrong", "new-password")

    user_service.change_password(db_session, test_user, "password123", "new-password")

    assert user_service.authenticate_user(db_session, "alice", "new-password") is not None


def test_apply_as_contributor_requires_trust(db_session, make_post, test_user) -> None:
    with pytest.raises(PermissionDeniedError):
        user_service.apply_as_contributor(db_session, test_user, ContributorType.PATIENT)

    for _ in range(5):
        make_post(test_user, upvotes=8)
    user = user_service.apply_as_contributor(db_session, test_user, ContributorType.PATIENT)

    assert user.role == UserRole.CONTRIBUTOR
    assert user.contributor_type == ContributorType.PATIENT
    assert user.verified is False


def test_change_role_keeps_contributor_type_consistent(db_session, admin_user, test_user) -> None:
    with pytest.raises(ValidationError):
        user_service.change_role(db_session, admin_user, test_user.id, UserRole.CONTRIBUTOR)

    promoted = user_service.change_role(
        db_session, admin_user, test_user.id, UserRole.CONTRIBUTOR, ContributorType.SURGEON
    )
    assert promoted.contributor_type == ContributorType.SURGEON
    assert promoted.verified is True

    demoted = user_service.change_role(db_session, admin_user, test_user.id, UserRole.USER)
    assert demoted.contributor_type is None
    assert demoted.verified is False


def test_only_superadmin_manages_superadmins(
    db_session, admin_user, superadmin_user, test_user
) -> None:
    with pytest.raises(PermissionDeniedError):
        user_service.change_role(db_session, admin_user, test_user.id, UserRole.SUPERADMIN)
    with pytest.raises(PermissionDeniedError):
        user_service.change_role(db_session, admin_user, superadmin_user.id, UserRole.USER)

    promoted = user_service.change_role(
        db_session, superadmin_user, test_user.id, UserRole.SUPERADMIN
    )
    assert promoted.is_superadmin


def test_cannot_change_own_role(db_session, superadmin_user) -> None:
    with pytest.raises(ValidationError):
        user_service.change_role(db_session, superadmin_user, superadmin_user.id, UserRole.ADMIN)


def test_verify_contributor(db_session, make_user, test_user) -> None:
    applicant = make_user(role=UserRole.CONTRIBUTOR, contributor_type=ContributorType.INFLUENCER)

    assert user_service.verify_contributor(db_session, applicant.id).verified is True
    with pytest.raises(ValidationError):
        user_service.verify_contributor(db_session, test_user.id)
    with pytest.raises(NotFoundError):
        user_service.verify_contributor(db_session, 9999)


def test_delete_user_cleans_up_counters(
    db_session, make_post, admin_user, test_user, other_user
) -> None:
    their_post = make_post(other_user)
    own_post = make_post(test_user)
    cast_vote(db_session, test_user.id, VoteType.UPVOTE, post_id=their_post.id)
    root = create_comment(db_session, post_id=their_post.id, author=other_user, content="Root")
    create_comment(
        db_session, post_id=their_post.id, author=test_user, content="Reply", parent_id=root.id
    )
    create_comment(db_session, post_id=their_post.id, author=test_user, content="Top level")
    create_comment(db_session, post_id=own_post.id, author=other_user, content="On own post")
    user_id = test_user.id
    own_post_id = own_post.id

    user_service.delete_user(db_session, admin_user, user_id)

    assert db_session.get(User, user_id) is None
    post = db_session.get(Post, their_post.id)
    db_session.refresh(post)
    assert post.upvotes == 0
    assert post.comment_count == 1
    assert db_session.query(Comment).filter(Comment.user_id == user_id).count() == 0
    assert db_session.query(Vote).filter(Vote.user_id == user_id).count() == 0
    assert db_session.get(Post, own_post_id) is None


def test_delete_user_guards(db_session, admin_user, superadmin_user) -> None:
    with pytest.raises(ValidationError):
        user_service.delete_user(db_session, admin_user, admin_user.id)
    with pytest.raises(PermissionDeniedError):
        user_service.delete_user(db_session, admin_user, superadmin_user.id)
    with pytest.raises(NotFoundError):
        user_service.delete_user(db_session, admin_user, 9999)
