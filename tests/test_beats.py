import pytest

from shorts_workflow.application.beats import (
    MAX_BEATS,
    MIN_BEATS,
    allocate_slots,
    beat_count,
    beat_requests,
    check_beat_invariants,
    narration_text,
    split_narration,
)
from shorts_workflow.domain.errors import UnexpectedPipelineFault

from conftest import make_post


@pytest.mark.parametrize("duration,expected", [(30, 3), (34, 3), (35, 4), (40, 4), (45, 5), (50, 5), (55, 6), (60, 6)])
def test_beat_count_rule(duration, expected):
    assert beat_count(duration) == expected


def test_beat_count_is_clamped():
    assert beat_count(5) == MIN_BEATS
    assert beat_count(200) == MAX_BEATS


@pytest.mark.parametrize("duration", range(30, 61))
def test_slots_are_contiguous_and_sum_to_duration(duration):
    for count in range(MIN_BEATS, MAX_BEATS + 1):
        slots = allocate_slots(duration, count)
        assert len(slots) == count
        assert slots[0]["timestamp"] == 0
        for prev, cur in zip(slots, slots[1:]):
            assert cur["timestamp"] == prev["timestamp"] + prev["duration"]
        assert all(slot["duration"] > 0 for slot in slots)
        assert sum(slot["duration"] for slot in slots) == duration


def test_remainder_goes_to_first_beats():
    assert [s["duration"] for s in allocate_slots(31, 3)] == [11, 10, 10]
    assert [s["duration"] for s in allocate_slots(47, 5)] == [10, 10, 9, 9, 9]


def test_default_count_uses_rule():
    assert [s["duration"] for s in allocate_slots(45)] == [9, 9, 9, 9, 9]


def test_allocation_is_deterministic():
    assert allocate_slots(53) == allocate_slots(53)


def test_impossible_split_is_a_fault():
    with pytest.raises(UnexpectedPipelineFault):
        allocate_slots(2, 3)


@pytest.mark.parametrize("beats", [
    [],
    [{"timestamp": 1, "duration": 10}],
    [{"timestamp": 0, "duration": 10}, {"timestamp": 11, "duration": 9}],
    [{"timestamp": 0, "duration": 10}, {"timestamp": 10, "duration": 0}],
    [{"timestamp": 0, "duration": 10}, {"timestamp": 10, "duration": 10}],
])
def test_invariant_check_rejects_bad_beats(beats):
    with pytest.raises(UnexpectedPipelineFault):
        check_beat_invariants(beats, 30)


def test_narration_joins_title_and_body():
    post = make_post("p", "Title without stop", "Body text.")
    assert narration_text(post) == "Title without stop. Body text."
    assert narration_text(make_post("q", "Done!", "More")) == "Done! More"
    assert narration_text(make_post("r", "", "Only body")) == "Only body"


def test_split_narration_covers_text_in_order():
    slots = allocate_slots(30, 3)
    text = " ".join(f"w{i}" for i in range(30))
    slices = split_narration(text, slots, 30)
    assert len(slices) == 3
    assert " ".join(slices).split() == text.split()
    assert all(slices)


def test_split_narration_caps_long_text():
    slots = allocate_slots(30, 3)
    text = " ".join(f"w{i}" for i in range(500))
    slices = split_narration(text, slots, 30)
    assert sum(len(s.split()) for s in slices) == 75


def test_beat_requests_carry_slot_and_settings(settings, posts):
    slots = allocate_slots(settings["duration"])
    contexts = beat_requests(posts[0], settings, slots)
    assert [c["beat_index"] for c in contexts] == list(range(len(slots)))
    assert [c["timestamp"] for c in contexts] == [s["timestamp"] for s in slots]
    assert all(c["voice_profile"] == "narrator" and c["include_broll"] for c in contexts)
    assert all(c["beat_count"] == len(slots) for c in contexts)
    assert contexts[0]["narration"].startswith("My neighbor rented out my parking spot.")


def test_removed_body_is_not_narrated(settings):
    post = make_post("r1", "My landlord kept my deposit", "[removed]")
    assert narration_text(post) == "My landlord kept my deposit"
    contexts = beat_requests(post, settings, allocate_slots(settings["duration"]))
    assert all("[removed]" not in c["narration"] and c["body_text"] == "" for c in contexts)


def test_split_narration_keeps_short_text_in_whole_phrases():
    slots = allocate_slots(40)
    slices = split_narration("My landlord kept my deposit", slots, 40)
    assert slices == ["My landlord kept my deposit", "", "", ""]

    slices = split_narration(" ".join(f"w{i}" for i in range(9)), slots, 40)
    assert [len(s.split()) for s in slices] == [4, 5, 0, 0]
