"""Tests for trust scoring and the publishing gate."""

import pytest

from rhinoblog.models import ContributorType, PostStatus, UserRole
from rhinoblog.services import post_service
from rhinoblog.services.comments import create_comment
from rhinoblog.services.trust import (
    BASE_SCORE,
    MAX_SCORE,
    TrustActivity,
    can_apply_as_contributor,
    can_publish_directly,
    collect_activity,
    compute_trust_score,
    initial_post_status,
    meets_trust_threshold,
    trust_score_from_activity,
)


def test_new_user_has_base_score() -> None:
    assert trust_score_from_activity(TrustActivity()) == BASE_SCORE


def test_score_components_are_capped() -> None:
    activity = TrustActivity(post_count=1000, comment_count=1000, upvotes_received=10**6)
    assert trust_score_from_activity(activity) == MAX_SCORE


@pytest.mark.parametrize(
    "activity, expected",
    [
        (TrustActivity(post_count=1), 20),
        (TrustActivity(post_count=5), 40),
        (TrustActivity(post_count=6), 40),
        (TrustActivity(comment_count=3), 21),
        (TrustActivity(comment_count=10), 35),
        (TrustActivity(upvotes_received=2), 15),
        (TrustActivity(upvotes_received=40), 28),
        (TrustActivity(post_count=5, upvotes_received=40), 53),
    ],
)
def test_score_formula(activity: TrustActivity, expected: int) -> None:
    assert trust_score_from_activity(activity) == expected


def test_score_is_monotonic_in_each_counter() -> None:
    previous = trust_score_from_activity(TrustActivity())
    for n in range(1, 150):
        for activity in (
            TrustActivity(post_count=n),
            TrustActivity(comment_count=n),
            TrustActivity(upvotes_received=n),
        ):
            assert trust_score_from_activity(activity) >= BASE_SCORE
        current = trust_score_from_activity(
            TrustActivity(post_count=n, comment_count=n, upvotes_received=n)
        )
        assert previous <= current <= MAX_SCORE
        previous = current


def test_negative_counters_do_not_lower_the_score() -> None:
    activity = TrustActivity(post_count=-3, comment_count=-1, upvotes_received=-9)
    assert trust_score_from_activity(activity) == BASE_SCORE


def test_collect_activity_counts_posts_comments_and_upvotes(
    db_session, make_post, test_user, other_user
) -> None:
    post = make_post(test_user, upvotes=4)
    make_post(test_user, upvotes=2)
    comment = create_comment(db_session, post_id=post.id, author=test_user, content="Thanks!")
    comment.upvotes = 3
    db_session.commit()
    make_post(other_user, upvotes=50)

    activity = collect_activity(db_session, test_user.id)

    assert activity == TrustActivity(post_count=2, comment_count=1, upvotes_received=9)


def test_fresh_user_posts_are_held_for_review(db_session, test_user) -> None:
    """A new account scores 15 and cannot publish directly."""
    assert compute_trust_score(db_session, test_user) == 15
    assert not can_publish_directly(db_session, test_user)

    post = post_service.create_post(
        db_session, author=test_user, title="First post", content="Hello"
    )

    assert post.status == PostStatus.PENDING


def test_trusted_user_publishes_directly(db_session, make_post, test_user) -> None:
    """Five posts with forty upvotes in total reach a score of 53."""
    for _ in range(5):
        make_post(test_user, upvotes=8)

    assert compute_trust_score(db_session, test_user) == 53
    assert can_publish_directly(db_session, test_user)

    post = post_service.create_post(
        db_session, author=test_user, title="Sixth post", content="Update"
    )

    assert post.status == PostStatus.PUBLISHED


def test_gate_matches_threshold(db_session, make_post, test_user) -> None:
    for upvotes in (0, 30, 60):
        make_post(test_user, upvotes=upvotes)
        score = compute_trust_score(db_session, test_user)
        assert can_publish_directly(db_session, test_user) == (score >= 50)
        assert can_apply_as_contributor(db_session, test_user) == (score >= 50)


def test_gate_uses_precomputed_score(db_session, test_user) -> None:
    assert can_publish_directly(db_session, test_user, score=50)
    assert can_apply_as_contributor(db_session, test_user, score=50)
    assert not can_publish_directly(db_session, test_user, score=49)
    assert not meets_trust_threshold(49)


def test_admins_bypass_the_gate(db_session, admin_user) -> None:
    assert initial_post_status(db_session, admin_user) == PostStatus.PUBLISHED


def test_contributors_publish_only_once_verified(db_session, make_user) -> None:
    unverified = make_user(
        role=UserRole.CONTRIBUTOR, contributor_type=ContributorType.SURGEON, verified=False
    )
    verified = make_user(
        role=UserRole.CONTRIBUTOR, contributor_type=ContributorType.PATIENT, verified=True
    )

    assert initial_post_status(db_session, unverified) == PostStatus.PENDING
    assert initial_post_status(db_session, verified) == PostStatus.PUBLISHED
