from prnotify.connectors.github_gh import GithubComment, GithubReview
from prnotify.noise_filter import NoiseFilter


def _comment(comment_id: int, author: str, body: str | None) -> GithubComment:
    return GithubComment.model_validate(
        {"id": comment_id, "body": body, "user": {"login": author}, "html_url": f"https://github.com/a/b/pull/1#c{comment_id}"}
    )


def _review(review_id: int, author: str, state: str, body: str | None = "") -> GithubReview:
    return GithubReview.model_validate(
        {
            "id": review_id,
            "body": body,
            "state": state,
            "user": {"login": author},
            "html_url": f"https://github.com/a/b/pull/1#r{review_id}",
        }
    )


def test_own_comments_are_noise() -> None:
    noise = NoiseFilter("me")

    kept = noise.filter_comments([_comment(1, "me", "my own note"), _comment(2, "you", "hello")])

    assert [c.id for c in kept] == [2]


def test_exclude_patterns_match_anywhere_in_body() -> None:
    noise = NoiseFilter("me", [r"^/retest", r"codecov report"])

    kept = noise.filter_comments(
        [
            _comment(1, "ci-bot", "## Summary\n\ncodecov report: 93%"),
            _comment(2, "alice", "/retest please"),
            _comment(3, "alice", "please /retest"),
            _comment(4, "bob", "real feedback"),
        ]
    )

    assert [c.id for c in kept] == [3, 4]


def test_pattern_matching_is_case_sensitive_unless_pattern_says_otherwise() -> None:
    assert NoiseFilter("me", ["LGTM"]).is_noise("x", "lgtm") is False
    assert NoiseFilter("me", ["(?i)LGTM"]).is_noise("x", "lgtm") is True


def test_pending_and_dismissed_reviews_are_dropped() -> None:
    noise = NoiseFilter("me")

    kept = noise.filter_reviews(
        [
            _review(1, "alice", "PENDING", "draft"),
            _review(2, "alice", "DISMISSED", "old"),
            _review(3, "alice", "APPROVED", "LGTM"),
            _review(4, "bob", "COMMENTED", None),
        ]
    )

    assert [r.id for r in kept] == [3, 4]


def test_review_filtering_applies_author_and_patterns() -> None:
    noise = NoiseFilter("me", [r"\[skip notify\]"])

    kept = noise.filter_reviews(
        [
            _review(1, "me", "APPROVED"),
            _review(2, "alice", "COMMENTED", "nit [skip notify]"),
            _review(3, "alice", "COMMENTED", None),
        ]
    )

    assert [r.id for r in kept] == [3]


def test_empty_body_can_match_empty_pattern() -> None:
    noise = NoiseFilter("me", [r"^$"])

    assert noise.keep_review(_review(1, "alice", "APPROVED", None)) is False
    assert noise.keep_review(_review(2, "alice", "APPROVED", "ok")) is True
