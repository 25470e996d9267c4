import pytest

from shorts_workflow.application.selection import is_usable, select_posts
from shorts_workflow.domain.errors import NoUsableContent

from conftest import make_post


def test_selects_top_n_in_ranking_order(posts):
    selected = select_posts(posts, 2)
    assert [p["id"] for p in selected] == ["abc1", "abc2"]


def test_never_returns_more_than_story_count(posts):
    for count in range(1, 6):
        assert len(select_posts(posts, count)) == min(count, len(posts))


def test_unusable_candidates_are_skipped():
    candidates = [
        make_post("e1", "  ", "   "),
        make_post("r1", "Was removed", "text", removed=True),
        make_post("d1", "[deleted]", "[deleted]"),
        make_post("ok1", "A real story", ""),
        make_post("ok2", "", "Body only post with no title"),
    ]
    selected = select_posts(candidates, 5)
    assert [p["id"] for p in selected] == ["ok1", "ok2"]
    assert all(is_usable(p) for p in selected)


def test_duplicates_are_skipped():
    candidates = [
        make_post("a", "My boss fired me by text!", "body"),
        make_post("a", "Different title same id", "body"),
        make_post("b", "my boss fired me by text", "repost"),
        make_post("c", "Something else", "body"),
    ]
    selected = select_posts(candidates, 3)
    assert [p["id"] for p in selected] == ["a", "c"]


def test_partial_selection_is_accepted():
    candidates = [make_post("only", "Only usable post", "body"), make_post("x", "", "")]
    assert len(select_posts(candidates, 3)) == 1


def test_zero_usable_candidates_raises():
    with pytest.raises(NoUsableContent):
        select_posts([make_post("x", "", ""), make_post("y", "[removed]", "[removed]")], 2)


def test_empty_candidate_list_raises():
    with pytest.raises(NoUsableContent):
        select_posts([], 1)
