"""Tests for comment creation, deletion and tree assembly."""

import pytest

from rhinoblog.models import Comment, CommentStatus, Post, PostStatus
from rhinoblog.services.comments import (
    build_comment_tree,
    create_comment,
    delete_comment,
    get_visible_comment,
    list_comments,
)
from rhinoblog.services.errors import NotFoundError, PermissionDeniedError, ValidationError


def _comment_rows(db_session, post_id: int) -> int:
    return db_session.query(Comment).filter(Comment.post_id == post_id).count()


def test_create_comment_increments_counter(db_session, test_post, other_user) -> None:
    create_comment(db_session, post_id=test_post.id, author=other_user, content="Great story")
    create_comment(db_session, post_id=test_post.id, author=other_user, content="Following")

    db_session.refresh(test_post)
    assert test_post.comment_count == 2 == _comment_rows(db_session, test_post.id)


def test_reply_must_share_the_post(db_session, make_post, test_user, other_user) -> None:
    first = make_post(test_user)
    second = make_post(test_user, title="Another")
    parent = create_comment(db_session, post_id=first.id, author=other_user, content="Top")

    with pytest.raises(ValidationError):
        create_comment(
            db_session,
            post_id=second.id,
            author=other_user,
            content="Misplaced reply",
            parent_id=parent.id,
        )
    db_session.refresh(second)
    assert second.comment_count == 0


def test_cannot_comment_on_hidden_post(db_session, make_post, test_user, other_user) -> None:
    pending = make_post(test_user, status=PostStatus.PENDING)

    with pytest.raises(NotFoundError):
        create_comment(db_session, post_id=pending.id, author=other_user, content="Hi")

    # The owner can still discuss their own pending post.
    create_comment(db_session, post_id=pending.id, author=test_user, content="Note")


def test_deleting_a_comment_removes_its_replies(db_session, test_post, test_user, other_user) -> None:
    root = create_comment(db_session, post_id=test_post.id, author=other_user, content="Root")
    reply = create_comment(
        db_session, post_id=test_post.id, author=test_user, content="Reply", parent_id=root.id
    )
    create_comment(
        db_session, post_id=test_post.id, author=other_user, content="Deep", parent_id=reply.id
    )
    create_comment(db_session, post_id=test_post.id, author=test_user, content="Sibling")

    removed = delete_comment(db_session, root.id, other_user)

    assert removed == 3
    post = db_session.get(Post, test_post.id)
    db_session.refresh(post)
    assert post.comment_count == 1 == _comment_rows(db_session, test_post.id)


def test_only_owner_or_admin_deletes(db_session, test_post, test_user, other_user, admin_user) -> None:
    comment = create_comment(db_session, post_id=test_post.id, author=other_user, content="Mine")

    with pytest.raises(PermissionDeniedError):
        delete_comment(db_session, comment.id, test_user)

    assert delete_comment(db_session, comment.id, admin_user) == 1


def test_delete_missing_comment(db_session, test_user) -> None:
    with pytest.raises(NotFoundError):
        delete_comment(db_session, 424242, test_user)


def test_build_comment_tree_nests_replies(db_session, test_post, test_user) -> None:
    root = create_comment(db_session, post_id=test_post.id, author=test_user, content="Root")
    child = create_comment(
        db_session, post_id=test_post.id, author=test_user, content="Child", parent_id=root.id
    )
    create_comment(
        db_session, post_id=test_post.id, author=test_user, content="Grandchild", parent_id=child.id
    )

    tree = build_comment_tree(list_comments(db_session, test_post.id))

    assert [node.comment.content for node in tree] == ["Root"]
    assert [node.comment.content for node in tree[0].replies] == ["Child"]
    assert [node.comment.content for node in tree[0].replies[0].replies] == ["Grandchild"]


def test_hidden_comments_are_left_out(db_session, test_post, test_user) -> None:
    kept = create_comment(db_session, post_id=test_post.id, author=test_user, content="Kept")
    hidden = create_comment(db_session, post_id=test_post.id, author=test_user, content="Hidden")
    create_comment(
        db_session, post_id=test_post.id, author=test_user, content="Orphan", parent_id=hidden.id
    )
    hidden.status = CommentStatus.REJECTED
    db_session.commit()

    visible = list_comments(db_session, test_post.id)
    tree = build_comment_tree(visible)

    assert [node.comment.id for node in tree] == [kept.id]
    assert len(list_comments(db_session, test_post.id, include_hidden=True)) == 3


def test_visible_comment_lookup(db_session, test_post, test_user, other_user, admin_user) -> None:
    comment = create_comment(db_session, post_id=test_post.id, author=test_user, content="Hm")

    assert get_visible_comment(db_session, comment.id, None) is comment

    comment.status = CommentStatus.FLAGGED
    db_session.commit()

    assert get_visible_comment(db_session, comment.id, test_user) is comment
    assert get_visible_comment(db_session, comment.id, admin_user) is comment
    with pytest.raises(NotFoundError):
        get_visible_comment(db_session, comment.id, other_user)
    with pytest.raises(NotFoundError):
        get_visible_comment(db_session, comment.id, None)
    with pytest.raises(NotFoundError):
        get_visible_comment(db_session, 999, admin_user)
