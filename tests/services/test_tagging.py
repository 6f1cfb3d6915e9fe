"""Tests for tag lookup and post/tag association."""

import random

import pytest

from rhinoblog.models import TAG_COLORS, PostStatus, PostTag, Tag
from rhinoblog.services import post_service
from rhinoblog.services.errors import NotFoundError, ValidationError
from rhinoblog.services.tagging import (
    attach_tags,
    create_tag,
    delete_tag,
    ensure_tag,
    get_tag_by_name,
    list_posts_for_tag,
    normalize_tag_name,
    update_tag,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("Recovery", "recovery"), ("#Day1", "day1"), ("  beforeAfter ", "beforeafter")],
)
def test_normalize_tag_name(raw: str, expected: str) -> None:
    assert normalize_tag_name(raw) == expected


def test_ensure_tag_is_case_insensitive(db_session) -> None:
    first = ensure_tag(db_session, "Recovery")
    second = ensure_tag(db_session, "RECOVERY")

    assert first.id == second.id
    assert first.name == "recovery"
    assert first.color in TAG_COLORS
    assert db_session.query(Tag).count() == 1


def test_ensure_tag_uses_palette_color(db_session) -> None:
    tag = ensure_tag(db_session, "swelling", rng=random.Random(3))
    assert tag.color in TAG_COLORS


def test_ensure_tag_rejects_blank_names(db_session) -> None:
    with pytest.raises(ValidationError):
        ensure_tag(db_session, " # ")


def test_attach_tags_links_each_tag_once(db_session, test_post) -> None:
    attach_tags(db_session, test_post.id, ["Recovery", "recovery", "#recovery", "day1", ""])
    attach_tags(db_session, test_post.id, ["day1"])
    db_session.commit()

    links = db_session.query(PostTag).filter(PostTag.post_id == test_post.id).count()
    assert links == 2


def test_create_post_attaches_normalized_tags(db_session, admin_user) -> None:
    post = post_service.create_post(
        db_session,
        author=admin_user,
        title="Guide",
        content="Body",
        tags=["Guide", "#CastRemoval"],
    )

    assert sorted(tag.name for tag in post.tags) == ["castremoval", "guide"]


def test_create_tag_rejects_duplicates_and_bad_colors(db_session) -> None:
    create_tag(db_session, "revision", "red")

    with pytest.raises(ValidationError):
        create_tag(db_session, "Revision")
    with pytest.raises(ValidationError):
        create_tag(db_session, "tipplasty", "chartreuse")


def test_update_tag(db_session) -> None:
    tag = create_tag(db_session, "guide", "blue")
    other = create_tag(db_session, "recovery", "green")

    updated = update_tag(db_session, tag.id, name="Guides", color="purple")
    assert (updated.name, updated.color) == ("guides", "purple")

    with pytest.raises(ValidationError):
        update_tag(db_session, other.id, name="GUIDES")
    with pytest.raises(NotFoundError):
        update_tag(db_session, 999, name="x")


def test_delete_tag_removes_associations(db_session, make_post, test_user) -> None:
    first = make_post(test_user)
    second = make_post(test_user, title="Second")
    attach_tags(db_session, first.id, ["recovery", "day1"])
    attach_tags(db_session, second.id, ["recovery"])
    db_session.commit()
    tag = get_tag_by_name(db_session, "recovery")

    removed = delete_tag(db_session, tag.id)

    assert removed == 2
    assert get_tag_by_name(db_session, "recovery") is None
    assert db_session.query(PostTag).filter(PostTag.tag_id == tag.id).count() == 0
    assert db_session.query(PostTag).count() == 1


def test_list_posts_for_tag_only_returns_published(db_session, make_post, test_user) -> None:
    published = make_post(test_user)
    pending = make_post(test_user, status=PostStatus.PENDING)
    for post in (published, pending):
        attach_tags(db_session, post.id, ["recovery"])
    db_session.commit()

    posts = list_posts_for_tag(db_session, "Recovery")

    assert [post.id for post in posts] == [published.id]
    with pytest.raises(NotFoundError):
        list_posts_for_tag(db_session, "unknown")
