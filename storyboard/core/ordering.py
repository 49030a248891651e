"""Ordering & shot-code engine.

Pure functions: they take entity collections and return new ones,
never touching a store. Inputs are not mutated; every returned entity
is a copy.

Shot codes are the human-facing labels of the global shot order::

    order_index 0 → "000"
    order_index 1 → "010"
    order_index 2 → "020"
    ...
    order_index 100 → "1000"
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from storyboard.models.entities import Frame, Shot


def shot_code(order_index: int) -> str:
    """Return the display code for a shot position (``order_index * 10``, 3 digits minimum)."""
    return f"{order_index * 10:03d}"


def compute_shot_order(ids_in_desired_sequence: Iterable[str], all_shots: Sequence[Shot]) -> list[Shot]:
    """Order shots by the given ids and recompute ``order_index`` / ``shot_code``.

    Ids that match no shot, and repeats of an id already placed, are
    skipped. Shots whose id is not listed are dropped from the result;
    callers wanting to keep them must list every id.
    """
    by_id = {shot.id: shot for shot in all_shots}
    ordered: list[Shot] = []
    seen: set[str] = set()
    for shot_id in ids_in_desired_sequence:
        shot = by_id.get(shot_id)
        if shot is None or shot_id in seen:
            continue
        seen.add(shot_id)
        index = len(ordered)
        ordered.append(shot.model_copy(deep=True, update={
            "order_index": index,
            "shot_code": shot_code(index),
        }))
    return ordered


def compute_frame_order(ids_in_desired_sequence: Iterable[str], frames_for_shot: Sequence[Frame]) -> list[Frame]:
    """Order one shot's frames by the given ids and recompute ``order_index``.

    Same filtering rules as :func:`compute_shot_order`; frames carry no
    display code.
    """
    by_id = {frame.id: frame for frame in frames_for_shot}
    ordered: list[Frame] = []
    seen: set[str] = set()
    for frame_id in ids_in_desired_sequence:
        frame = by_id.get(frame_id)
        if frame is None or frame_id in seen:
            continue
        seen.add(frame_id)
        ordered.append(frame.model_copy(deep=True, update={"order_index": len(ordered)}))
    return ordered


def renumber_shots(shots: Sequence[Shot]) -> list[Shot]:
    """Close gaps and duplicates in the current shot order.

    Shots are taken in ``order_index`` order; ties keep list order.
    """
    current = sorted(enumerate(shots), key=lambda pair: (pair[1].order_index, pair[0]))
    return compute_shot_order([shot.id for _, shot in current], shots)


def renumber_frames(frames: Sequence[Frame]) -> list[Frame]:
    """Close gaps in every shot's frame order; shots are grouped in first-seen order."""
    groups: dict[str, list[Frame]] = {}
    for frame in frames:
        groups.setdefault(frame.shot_id, []).append(frame)

    result: list[Frame] = []
    for group in groups.values():
        current = sorted(enumerate(group), key=lambda pair: (pair[1].order_index, pair[0]))
        result.extend(compute_frame_order([frame.id for _, frame in current], group))
    return result
