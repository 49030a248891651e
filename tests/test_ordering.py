"""
Tests for storyboard.core.ordering: shot codes and order recomputation.

  1. shot_code derivation and zero padding
  2. compute_shot_order: position, codes, filtering, input immutability
  3. compute_frame_order
  4. renumber_shots / renumber_frames
"""

import pytest

from storyboard.core.ordering import (
    compute_frame_order,
    compute_shot_order,
    renumber_frames,
    renumber_shots,
    shot_code,
)
from storyboard.models.entities import Frame, Shot


def _shots(*ids: str) -> list[Shot]:
    return [Shot(id=shot_id, order_index=i, shot_code=shot_code(i)) for i, shot_id in enumerate(ids)]


def _frames(shot_id: str, *ids: str) -> list[Frame]:
    return [Frame(id=frame_id, shot_id=shot_id, order_index=i) for i, frame_id in enumerate(ids)]


# ===========================================================================
# 1. shot_code
# ===========================================================================

class TestShotCode:

    @pytest.mark.parametrize("order_index,expected", [
        (0, "000"),
        (1, "010"),
        (2, "020"),
        (9, "090"),
        (12, "120"),
        (99, "990"),
        (100, "1000"),
    ])
    def test_code_is_ten_times_index_padded_to_three(self, order_index, expected):
        assert shot_code(order_index) == expected


# ===========================================================================
# 2. compute_shot_order
# ===========================================================================

class TestComputeShotOrder:

    def test_reorder_c_a_b(self):
        """Three shots reordered to [C, A, B] get 000/010/020."""
        shots = _shots("A", "B", "C")
        result = compute_shot_order(["C", "A", "B"], shots)

        assert [s.id for s in result] == ["C", "A", "B"]
        assert [s.order_index for s in result] == [0, 1, 2]
        assert [s.shot_code for s in result] == ["000", "010", "020"]

    def test_unknown_ids_skipped(self):
        result = compute_shot_order(["B", "ghost", "A"], _shots("A", "B"))
        assert [s.id for s in result] == ["B", "A"]
        assert [s.order_index for s in result] == [0, 1]

    def test_duplicate_ids_placed_once(self):
        result = compute_shot_order(["A", "B", "A"], _shots("A", "B"))
        assert [s.id for s in result] == ["A", "B"]

    def test_unlisted_shots_dropped(self):
        result = compute_shot_order(["C"], _shots("A", "B", "C"))
        assert [s.id for s in result] == ["C"]
        assert result[0].shot_code == "000"

    def test_inputs_not_mutated(self):
        shots = _shots("A", "B")
        result = compute_shot_order(["B", "A"], shots)

        assert shots[0].order_index == 0 and shots[0].shot_code == "000"
        assert result[1] is not shots[0]

    def test_empty_list(self):
        assert compute_shot_order([], _shots("A")) == []

    def test_other_fields_preserved(self):
        shot = Shot(id="A", script_text="INT. KITCHEN", duration=2500, tags=["wide"])
        result = compute_shot_order(["A"], [shot])
        assert result[0].script_text == "INT. KITCHEN"
        assert result[0].duration == 2500
        assert result[0].tags == ["wide"]


# ===========================================================================
# 3. compute_frame_order
# ===========================================================================

class TestComputeFrameOrder:

    def test_reorder(self):
        frames = _frames("s1", "f1", "f2", "f3")
        result = compute_frame_order(["f3", "f1", "f2"], frames)
        assert [f.id for f in result] == ["f3", "f1", "f2"]
        assert [f.order_index for f in result] == [0, 1, 2]

    def test_stale_and_duplicate_ids(self):
        result = compute_frame_order(["f2", "nope", "f2", "f1"], _frames("s1", "f1", "f2"))
        assert [f.id for f in result] == ["f2", "f1"]

    def test_shot_id_unchanged(self):
        result = compute_frame_order(["f1"], _frames("s1", "f1"))
        assert result[0].shot_id == "s1"


# ===========================================================================
# 4. renumber_shots / renumber_frames
# ===========================================================================

class TestRenumber:

    def test_renumber_shots_closes_gaps(self):
        shots = [
            Shot(id="A", order_index=0),
            Shot(id="B", order_index=4),
            Shot(id="C", order_index=9),
        ]
        result = renumber_shots(shots)
        assert [s.order_index for s in result] == [0, 1, 2]
        assert [s.shot_code for s in result] == ["000", "010", "020"]

    def test_renumber_shots_sorts_by_order_index(self):
        shots = [Shot(id="A", order_index=5), Shot(id="B", order_index=1)]
        assert [s.id for s in renumber_shots(shots)] == ["B", "A"]

    def test_renumber_shots_ties_keep_list_order(self):
        shots = [Shot(id="A", order_index=1), Shot(id="B", order_index=1), Shot(id="C", order_index=0)]
        assert [s.id for s in renumber_shots(shots)] == ["C", "A", "B"]

    def test_renumber_frames_per_shot(self):
        frames = [
            Frame(id="a1", shot_id="a", order_index=3),
            Frame(id="b1", shot_id="b", order_index=7),
            Frame(id="a0", shot_id="a", order_index=1),
        ]
        result = renumber_frames(frames)
        by_id = {f.id: f for f in result}

        assert by_id["a0"].order_index == 0
        assert by_id["a1"].order_index == 1
        assert by_id["b1"].order_index == 0
