"""ProjectStateStore: the canonical in-memory storyboard project.

The store is the sole mutator of project state. Every mutation follows
the same sequence, inside ``_mutation()``:

    capture rollback copy → compute → normalize → commit → persist

- *compute* edits the private entity lists; if it raises, the rollback
  copy is restored and the exception propagates (nothing committed).
- *normalize* re-establishes every structural invariant: contiguous
  shot order with derived shot codes, contiguous frame order per shot,
  no orphan frames, no dangling scene/sequence references, the duration
  floor and unique tags.
- *commit* bumps the version, stamps ``project.updated_at`` and pushes a
  snapshot of the committed state into the undo history.
- *persist* schedules an async save and returns immediately.

Stale identifiers never raise: operations on unknown ids are no-ops that
return ``""`` / ``False`` / ``None`` and leave history untouched.

Architecture:
    ProjectStateStore
        └── HistoryManager (bounded undo/redo snapshots)
        └── SaveScheduler → PersistenceGateway (async load/save)
        └── ordering (pure order/shot-code functions)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar

from pydantic import ValidationError

from storyboard.config import (
    DEFAULT_PROJECT_TITLE,
    MIN_SHOT_DURATION_MS,
    settings,
)
from storyboard.core.defaults import build_default_state
from storyboard.core.history import HistoryManager, HistorySnapshot
from storyboard.core.ordering import (
    compute_frame_order,
    compute_shot_order,
    renumber_frames,
    renumber_shots,
    shot_code,
)
from storyboard.errors import StateValidationError
from storyboard.models.base import CamelModel
from storyboard.models.entities import (
    Frame,
    Project,
    Scene,
    Sequence,
    Shot,
    generate_id,
    utc_now,
)
from storyboard.models.state import ProjectSnapshot, ProjectState, ProjectVersion
from storyboard.persistence.gateway import InMemoryGateway, PersistenceGateway
from storyboard.persistence.saver import SaveErrorCallback, SaveScheduler

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=CamelModel)

# Merged shots keep each source's text as its own paragraph.
MERGE_SEPARATOR = "\n\n"

DEFAULT_SCENE_NUMBER = "0"

_PROJECT_PROTECTED = frozenset({"id", "created_at", "updated_at"})
_SEQUENCE_PROTECTED = frozenset({"id"})
_SCENE_PROTECTED = frozenset({"id"})
_SHOT_PROTECTED = frozenset({"id", "order_index", "shot_code"})
_FRAME_PROTECTED = frozenset({"id", "shot_id", "order_index"})


def _merged(model: M, updates: Mapping[str, Any], protected: frozenset[str]) -> M:
    """Shallow-merge ``updates`` (snake_case or camelCase keys) into a validated copy.

    Unknown and protected keys are ignored. Wrongly typed values raise
    ``pydantic.ValidationError``.
    """
    model_cls = type(model)
    data = model.model_dump()
    for key, value in updates.items():
        name = model_cls.field_name_for(key)
        if name is None or name in protected:
            logger.debug(f"Ignoring field '{key}' on {model_cls.__name__}")
            continue
        data[name] = value
    return model_cls.model_validate(data)


def _unique(values: Iterable[str]) -> list[str]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(values))


def _join_non_empty(values: Iterable[str]) -> str:
    return MERGE_SEPARATOR.join(v for v in values if v)


def _is_scene_number(value: str) -> bool:
    return value.strip().isdigit()


class ProjectStateStore:
    """
    Owner of one storyboard project: Project, Sequences, Scenes, Shots, Frames.

    Provides:
    1. Structure-preserving mutations (create/update/delete/reorder/split/merge)
    2. Bounded undo/redo over full snapshots
    3. Fire-and-forget persistence after every committed mutation
    4. Named versions (saved snapshots outside undo history)

    Usage:
        store = ProjectStateStore(gateway=SqlAlchemyGateway(session_factory))
        await store.init()

        scene_id = store.create_scene()
        shot_id = store.create_shot(scene_id)
        store.update_shot(shot_id, script_text="EXT. HARBOUR - DAWN", duration=2400)
        store.undo()

        await store.flush()
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        *,
        initial_state: ProjectState | None = None,
        history_limit: int | None = None,
        on_save_error: SaveErrorCallback | None = None,
    ):
        self._gateway: PersistenceGateway = gateway if gateway is not None else InMemoryGateway()
        self._saver = SaveScheduler(self._gateway, on_error=on_save_error)
        self._history = HistoryManager(history_limit or settings.history_limit)
        self._version: int = 0

        self._project: Project = Project()
        self._sequences: list[Sequence] = []
        self._scenes: list[Scene] = []
        self._shots: list[Shot] = []  # always in global shot order
        self._frames: list[Frame] = []
        self._versions: list[ProjectVersion] = []

        state = initial_state.model_copy(deep=True) if initial_state is not None else ProjectState()
        self._replace_all(state, persist=False)

        logger.debug(f"🏗️ ProjectStateStore initialized: proj={self._project.id[:8]}")

    # =========================================================================
    # Startup
    # =========================================================================

    async def init(self) -> None:
        """Load the stored project, or create and save the default one.

        A failing or unreadable store falls back to the default project
        without saving it, so the stored document is not overwritten
        before the user edits anything.
        """
        try:
            document = await self._gateway.load()
        except Exception as e:
            logger.exception(f"❌ Loading project failed, starting from default: {e}")
            self._replace_all(build_default_state(), persist=False)
            return

        if document is None:
            logger.info("No saved project, creating default")
            self._replace_all(build_default_state())
            await self.flush()
            return

        try:
            state = ProjectState.model_validate(document)
        except ValidationError as e:
            logger.error(f"❌ Stored project is invalid, starting from default: {e}")
            self._replace_all(build_default_state(), persist=False)
            return

        self._replace_all(state, persist=False)
        logger.info(
            f"📂 Project loaded: {len(self._scenes)} scenes, "
            f"{len(self._shots)} shots, {len(self._frames)} frames"
        )

    async def flush(self) -> None:
        """Wait until every scheduled save has finished."""
        await self._saver.flush()

    # =========================================================================
    # Read accessors (deep copies only)
    # =========================================================================

    @property
    def project(self) -> Project:
        return self._project.model_copy(deep=True)

    @property
    def sequences(self) -> list[Sequence]:
        ordered = sorted(self._sequences, key=lambda s: s.order_index)
        return [s.model_copy(deep=True) for s in ordered]

    @property
    def scenes(self) -> list[Scene]:
        ordered = sorted(self._scenes, key=lambda s: s.order_index)
        return [s.model_copy(deep=True) for s in ordered]

    @property
    def shots(self) -> list[Shot]:
        return [s.model_copy(deep=True) for s in self._shots]

    @property
    def frames(self) -> list[Frame]:
        shot_position = {shot.id: shot.order_index for shot in self._shots}
        ordered = sorted(self._frames, key=lambda f: (shot_position.get(f.shot_id, -1), f.order_index))
        return [f.model_copy(deep=True) for f in ordered]

    @property
    def versions(self) -> list[ProjectVersion]:
        ordered = sorted(self._versions, key=lambda v: v.timestamp)
        return [v.model_copy(deep=True) for v in ordered]

    @property
    def version(self) -> int:
        """Number of committed changes since the store was created."""
        return self._version

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def history_size(self) -> int:
        return len(self._history)

    @property
    def last_saved(self) -> datetime | None:
        return self._saver.last_saved

    @property
    def is_saving(self) -> bool:
        return self._saver.is_saving

    @property
    def last_save_error(self) -> str | None:
        return self._saver.last_error

    def get_shot(self, shot_id: str) -> Shot | None:
        shot = self._find_shot(shot_id)
        return shot.model_copy(deep=True) if shot else None

    def get_scene(self, scene_id: str) -> Scene | None:
        scene = self._find_scene(scene_id)
        return scene.model_copy(deep=True) if scene else None

    def get_sequence(self, sequence_id: str) -> Sequence | None:
        sequence = self._find_sequence(sequence_id)
        return sequence.model_copy(deep=True) if sequence else None

    def get_frame(self, frame_id: str) -> Frame | None:
        frame = self._find_frame(frame_id)
        return frame.model_copy(deep=True) if frame else None

    def shots_for_scene(self, scene_id: str | None) -> list[Shot]:
        """Shots of a scene in shot order; ``None`` returns unassigned shots."""
        return [s.model_copy(deep=True) for s in self._shots if s.scene_id == scene_id]

    def frames_for_shot(self, shot_id: str) -> list[Frame]:
        """A shot's frames in frame order."""
        frames = sorted((f for f in self._frames if f.shot_id == shot_id), key=lambda f: f.order_index)
        return [f.model_copy(deep=True) for f in frames]

    def total_duration_ms(self) -> float:
        return sum(shot.duration for shot in self._shots)

    def snapshot(self) -> ProjectSnapshot:
        """Deep copy of every entity collection."""
        return ProjectSnapshot(
            project=self._project,
            sequences=self._sequences,
            scenes=self._scenes,
            shots=self._shots,
            frames=self._frames,
        ).model_copy(deep=True)

    def to_state(self) -> ProjectState:
        """Deep copy of the full persisted document, versions included."""
        return self._build_state().model_copy(deep=True)

    # =========================================================================
    # Project
    # =========================================================================

    def update_project(self, **fields: Any) -> None:
        """Shallow-merge fields into the project (``id``/timestamps are fixed)."""
        with self._mutation("update_project"):
            self._project = _merged(self._project, fields, _PROJECT_PROTECTED)

    def create_project(self, title: str = DEFAULT_PROJECT_TITLE) -> str:
        """Start over with a new project identity and the default layout.

        Like :meth:`clear_all_content` this is a hard reset: history is
        cleared and the result is not undoable.
        """
        self._replace_all(build_default_state(title=title))
        self._version += 1
        logger.info(f"🆕 Project created: '{title}' ({self._project.id[:8]})")
        return self._project.id

    def clear_all_content(self) -> None:
        """Replace everything with a fresh default project. Not undoable."""
        self._replace_all(build_default_state())
        self._version += 1
        logger.info(f"🧹 All content cleared, new project {self._project.id[:8]}")

    def load_project_state(self, state: ProjectState | Mapping[str, Any]) -> None:
        """Atomically replace all state with an imported document.

        The document is validated first; on failure ``StateValidationError``
        is raised and nothing changes. History restarts from the import.
        """
        if isinstance(state, ProjectState):
            validated = state.model_copy(deep=True)
        else:
            try:
                validated = ProjectState.model_validate(state)
            except ValidationError as e:
                raise StateValidationError(
                    f"Invalid project document: {e.error_count()} error(s)",
                    errors=[dict(err) for err in e.errors()],
                ) from e

        self._replace_all(validated)
        self._version += 1
        logger.info(
            f"📥 Project state loaded: {len(self._scenes)} scenes, "
            f"{len(self._shots)} shots, {len(self._frames)} frames"
        )

    # =========================================================================
    # Sequences
    # =========================================================================

    def create_sequence(self, name: str = "") -> str:
        with self._mutation("create_sequence"):
            order_index = max([0, *(s.order_index for s in self._sequences)]) + 1
            sequence = Sequence(name=name, order_index=order_index)
            self._sequences.append(sequence)
        return sequence.id

    def update_sequence(self, sequence_id: str, **fields: Any) -> None:
        index = self._index_of(self._sequences, sequence_id)
        if index is None:
            logger.debug(f"update_sequence: unknown sequence {sequence_id}")
            return
        with self._mutation("update_sequence"):
            self._sequences[index] = _merged(self._sequences[index], fields, _SEQUENCE_PROTECTED)

    def delete_sequence(self, sequence_id: str) -> None:
        """Remove a sequence; its scenes stay, unassigned."""
        if self._find_sequence(sequence_id) is None:
            logger.debug(f"delete_sequence: unknown sequence {sequence_id}")
            return
        with self._mutation("delete_sequence"):
            self._sequences = [s for s in self._sequences if s.id != sequence_id]
            for scene in self._scenes:
                if scene.sequence_id == sequence_id:
                    scene.sequence_id = None

    # =========================================================================
    # Scenes
    # =========================================================================

    def create_scene(self, sequence_id: str | None = None) -> str:
        """Create the next numbered scene with one default shot in it."""
        with self._mutation("create_scene"):
            if sequence_id is not None and self._find_sequence(sequence_id) is None:
                logger.debug(f"create_scene: unknown sequence {sequence_id}, leaving scene ungrouped")
                sequence_id = None
            scene = Scene(
                sequence_id=sequence_id,
                scene_number=str(self._next_scene_number()),
                order_index=max([0, *(s.order_index for s in self._scenes)]) + 1,
            )
            self._scenes.append(scene)
            self._append_shot(scene.id)
        return scene.id

    def ensure_default_scene(self) -> str:
        """Return the id of scene ``"0"``, creating it if needed."""
        existing = self._default_scene()
        if existing is not None:
            return existing.id
        with self._mutation("ensure_default_scene"):
            scene_id = self._ensure_default_scene()
        return scene_id

    def update_scene(self, scene_id: str, **fields: Any) -> None:
        index = self._index_of(self._scenes, scene_id)
        if index is None:
            logger.debug(f"update_scene: unknown scene {scene_id}")
            return
        with self._mutation("update_scene"):
            self._scenes[index] = _merged(self._scenes[index], fields, _SCENE_PROTECTED)

    def delete_scene(self, scene_id: str) -> None:
        """Remove a scene; its shots stay, unassigned."""
        if self._find_scene(scene_id) is None:
            logger.debug(f"delete_scene: unknown scene {scene_id}")
            return
        with self._mutation("delete_scene"):
            self._scenes = [s for s in self._scenes if s.id != scene_id]
            for shot in self._shots:
                if shot.scene_id == scene_id:
                    shot.scene_id = None

    # =========================================================================
    # Shots
    # =========================================================================

    def create_shot(self, scene_id: str | None = None) -> str:
        """Append a new shot at the end of the global order.

        Without a known ``scene_id`` the shot goes to scene ``"0"``, which
        is created in the same undo step when missing.
        """
        with self._mutation("create_shot"):
            if scene_id is None or self._find_scene(scene_id) is None:
                if scene_id is not None:
                    logger.debug(f"create_shot: unknown scene {scene_id}, using default scene")
                scene_id = self._ensure_default_scene()
            shot = self._append_shot(scene_id)
        return shot.id

    def update_shot(self, shot_id: str, **fields: Any) -> None:
        """Merge fields into a shot. Durations below the floor are clamped."""
        index = self._index_of(self._shots, shot_id)
        if index is None:
            logger.debug(f"update_shot: unknown shot {shot_id}")
            return
        with self._mutation("update_shot"):
            self._shots[index] = _merged(self._shots[index], fields, _SHOT_PROTECTED)

    def bulk_update_shots(self, shot_ids: Iterable[str], **fields: Any) -> None:
        """Apply the same field merge to several shots, outside undo history."""
        targets = set(shot_ids)
        if not any(shot.id in targets for shot in self._shots):
            logger.debug("bulk_update_shots: no known shots")
            return
        with self._mutation("bulk_update_shots", record_history=False):
            self._shots = [
                _merged(shot, fields, _SHOT_PROTECTED) if shot.id in targets else shot
                for shot in self._shots
            ]

    def delete_shot(self, shot_id: str) -> None:
        """Remove a shot and its frames. The owning scene is kept even if empty."""
        if self._find_shot(shot_id) is None:
            logger.debug(f"delete_shot: unknown shot {shot_id}")
            return
        with self._mutation("delete_shot"):
            self._shots = [s for s in self._shots if s.id != shot_id]
            self._frames = [f for f in self._frames if f.shot_id != shot_id]

    def reorder_shots(self, ordered_ids: Iterable[str]) -> None:
        """Reorder shots to ``ordered_ids`` and recompute every shot code.

        Unknown and repeated ids are skipped. Shots missing from the list
        are kept, after the listed ones, in their previous relative order.
        """
        ordered = compute_shot_order(ordered_ids, self._shots)
        if not ordered:
            logger.debug("reorder_shots: no known shots in order list")
            return
        with self._mutation("reorder_shots"):
            placed = {shot.id for shot in ordered}
            omitted = [shot for shot in self._shots if shot.id not in placed]
            if omitted:
                logger.debug(f"reorder_shots: {len(omitted)} shot(s) missing from order list, kept at end")
            self._shots = ordered + omitted

    def split_shot(self, shot_id: str, offset: int) -> str:
        """Split a shot's script at ``offset``; returns the new shot's id or ``""``.

        The original keeps the text before the offset; the new shot,
        inserted right after it, gets the rest and a copy of every other
        field. Frames stay on the original.
        """
        index = self._index_of(self._shots, shot_id)
        if index is None:
            logger.debug(f"split_shot: unknown shot {shot_id}")
            return ""

        original = self._shots[index]
        text = original.script_text
        offset = max(0, min(offset, len(text)))

        with self._mutation("split_shot"):
            head = original.model_copy(deep=True, update={"script_text": text[:offset]})
            tail = original.model_copy(deep=True, update={
                "id": generate_id(),
                "script_text": text[offset:],
            })
            self._shots[index] = head
            self._shots.insert(index + 1, tail)
        return tail.id

    def merge_shots(self, shot_ids: Iterable[str]) -> str:
        """Merge shots into the first listed one; returns its id or ``""``.

        Needs at least two distinct known shots. Script text and notes are
        joined in list order, durations summed, tags united; frames of the
        removed shots move to the survivor after its own frames.
        """
        members: list[Shot] = []
        for shot_id in _unique(shot_ids):
            shot = self._find_shot(shot_id)
            if shot is not None:
                members.append(shot)
        if len(members) < 2:
            logger.debug(f"merge_shots: need 2+ known shots, got {len(members)}")
            return ""

        survivor = members[0]
        absorbed = members[1:]

        with self._mutation("merge_shots"):
            merged = survivor.model_copy(deep=True, update={
                "script_text": MERGE_SEPARATOR.join(s.script_text for s in members),
                "duration": sum(s.duration for s in members),
                "tags": _unique(tag for s in members for tag in s.tags),
                "camera_notes": _join_non_empty(s.camera_notes for s in members),
                "animation_notes": _join_non_empty(s.animation_notes for s in members),
                "general_notes": _join_non_empty(s.general_notes for s in members),
            })
            absorbed_ids = {s.id for s in absorbed}
            self._shots = [
                merged if shot.id == survivor.id else shot
                for shot in self._shots
                if shot.id not in absorbed_ids
            ]

            next_index = len([f for f in self._frames if f.shot_id == survivor.id])
            for shot in absorbed:
                for frame in sorted((f for f in self._frames if f.shot_id == shot.id), key=lambda f: f.order_index):
                    frame.shot_id = survivor.id
                    frame.order_index = next_index
                    next_index += 1

        logger.info(f"🔗 Merged {len(members)} shots into {survivor.id[:8]}")
        return survivor.id

    # =========================================================================
    # Frames
    # =========================================================================

    def add_frame(self, shot_id: str, image: str, caption: str = "") -> str:
        """Append a frame to a shot; returns its id or ``""`` for an unknown shot."""
        if self._find_shot(shot_id) is None:
            logger.debug(f"add_frame: unknown shot {shot_id}")
            return ""
        with self._mutation("add_frame"):
            order_index = max([-1, *(f.order_index for f in self._frames if f.shot_id == shot_id)]) + 1
            frame = Frame(shot_id=shot_id, image=image, caption=caption, order_index=order_index, version=1)
            self._frames.append(frame)
        return frame.id

    def update_frame(self, frame_id: str, **fields: Any) -> None:
        """Merge fields into a frame; a new image bumps ``version``."""
        index = self._index_of(self._frames, frame_id)
        if index is None:
            logger.debug(f"update_frame: unknown frame {frame_id}")
            return
        with self._mutation("update_frame"):
            current = self._frames[index]
            updated = _merged(current, fields, _FRAME_PROTECTED)
            if updated.image != current.image and "version" not in fields:
                updated.version = current.version + 1
            self._frames[index] = updated

    def delete_frame(self, frame_id: str) -> None:
        if self._find_frame(frame_id) is None:
            logger.debug(f"delete_frame: unknown frame {frame_id}")
            return
        with self._mutation("delete_frame"):
            self._frames = [f for f in self._frames if f.id != frame_id]

    def reorder_frames(self, shot_id: str, ordered_ids: Iterable[str]) -> None:
        """Reorder one shot's frames; unlisted frames keep their relative order at the end."""
        shot_frames = sorted((f for f in self._frames if f.shot_id == shot_id), key=lambda f: f.order_index)
        ordered = compute_frame_order(ordered_ids, shot_frames)
        if not ordered:
            logger.debug(f"reorder_frames: no known frames of shot {shot_id} in order list")
            return
        with self._mutation("reorder_frames"):
            placed = {frame.id for frame in ordered}
            omitted = [f for f in shot_frames if f.id not in placed]
            for offset, frame in enumerate(omitted):
                frame.order_index = len(ordered) + offset
            self._frames = [f for f in self._frames if f.shot_id != shot_id] + ordered + omitted

    # =========================================================================
    # Versions
    # =========================================================================

    def save_version(self, description: str = "") -> str:
        """Save a named snapshot of the current project. Not part of undo history."""
        version = ProjectVersion(description=description, snapshot=self.snapshot())
        self._versions.append(version)
        self._persist()
        logger.info(f"🏷️ Version saved: '{description}' ({version.id[:8]})")
        return version.id

    def restore_version(self, version_id: str) -> bool:
        """Replace project content with a saved version (undoable)."""
        version = next((v for v in self._versions if v.id == version_id), None)
        if version is None:
            logger.debug(f"restore_version: unknown version {version_id}")
            return False
        with self._mutation("restore_version"):
            self._set_entities(version.snapshot.model_copy(deep=True))
        logger.info(f"⏪ Restored version '{version.description}' ({version.id[:8]})")
        return True

    def delete_version(self, version_id: str) -> bool:
        remaining = [v for v in self._versions if v.id != version_id]
        if len(remaining) == len(self._versions):
            return False
        self._versions = remaining
        self._persist()
        return True

    # =========================================================================
    # Undo / Redo
    # =========================================================================

    def undo(self) -> bool:
        """Restore the previous history entry. Restoring is not persisted."""
        previous = self._history.undo()
        if previous is None:
            return False
        self._set_entities(previous)
        logger.debug(f"↩️ Undo → history entry {self._history.cursor}")
        return True

    def redo(self) -> bool:
        """Restore the next history entry. Restoring is not persisted."""
        following = self._history.redo()
        if following is None:
            return False
        self._set_entities(following)
        logger.debug(f"↪️ Redo → history entry {self._history.cursor}")
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _mutation(self, description: str, *, record_history: bool = True) -> Iterator[None]:
        rollback = self.snapshot()
        try:
            yield
        except Exception:
            self._set_entities(rollback)
            logger.warning(f"⏪ {description} rolled back")
            raise

        self._normalize()
        self._project.updated_at = utc_now()
        self._version += 1
        if record_history:
            self._history.push(self._capture())
        self._persist()

    def _capture(self) -> HistorySnapshot:
        return HistorySnapshot(version=self._version, state=self.snapshot())

    def _set_entities(self, snapshot: ProjectSnapshot) -> None:
        """Install a snapshot the store exclusively owns as live state."""
        self._project = snapshot.project
        self._sequences = list(snapshot.sequences)
        self._scenes = list(snapshot.scenes)
        self._shots = renumber_shots(snapshot.shots)
        self._frames = list(snapshot.frames)

    def _replace_all(self, state: ProjectState, *, persist: bool = True) -> None:
        """Install a whole document and restart history from it."""
        self._set_entities(state)
        self._versions = list(state.versions)
        self._normalize()
        self._history.reset(self._capture())
        if persist:
            self._persist()

    def _normalize(self) -> None:
        sequence_ids = {s.id for s in self._sequences}
        for scene in self._scenes:
            if scene.sequence_id is not None and scene.sequence_id not in sequence_ids:
                scene.sequence_id = None

        scene_ids = {s.id for s in self._scenes}
        for shot in self._shots:
            if shot.scene_id is not None and shot.scene_id not in scene_ids:
                shot.scene_id = None
            if shot.duration < MIN_SHOT_DURATION_MS:
                logger.debug(f"Shot {shot.id[:8]} duration {shot.duration}ms clamped to {MIN_SHOT_DURATION_MS}ms")
                shot.duration = MIN_SHOT_DURATION_MS
            shot.tags = _unique(shot.tags)
        self._shots = compute_shot_order([s.id for s in self._shots], self._shots)

        shot_ids = {s.id for s in self._shots}
        orphans = [f for f in self._frames if f.shot_id not in shot_ids]
        if orphans:
            logger.debug(f"Dropping {len(orphans)} frame(s) without a shot")
        self._frames = renumber_frames([f for f in self._frames if f.shot_id in shot_ids])

    def _persist(self) -> None:
        self._saver.schedule(self._build_state().to_document())

    def _build_state(self) -> ProjectState:
        return ProjectState(
            project=self._project,
            sequences=self._sequences,
            scenes=self._scenes,
            shots=self._shots,
            frames=self._frames,
            versions=self._versions,
        )

    def _append_shot(self, scene_id: str | None) -> Shot:
        order_index = len(self._shots)
        shot = Shot(scene_id=scene_id, order_index=order_index, shot_code=shot_code(order_index))
        self._shots.append(shot)
        return shot

    def _default_scene(self) -> Scene | None:
        return next((s for s in self._scenes if s.scene_number == DEFAULT_SCENE_NUMBER), None)

    def _ensure_default_scene(self) -> str:
        scene = self._default_scene()
        if scene is None:
            scene = Scene(scene_number=DEFAULT_SCENE_NUMBER, title="Scene 0", order_index=0)
            self._scenes.append(scene)
            logger.debug(f"Created default scene {scene.id[:8]}")
        return scene.id

    def _next_scene_number(self) -> int:
        numbers = [int(s.scene_number) for s in self._scenes if _is_scene_number(s.scene_number)]
        return max([0, *numbers]) + 1

    @staticmethod
    def _index_of(items: list[Any], item_id: str) -> int | None:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        return None

    def _find_shot(self, shot_id: str) -> Shot | None:
        return next((s for s in self._shots if s.id == shot_id), None)

    def _find_scene(self, scene_id: str) -> Scene | None:
        return next((s for s in self._scenes if s.id == scene_id), None)

    def _find_sequence(self, sequence_id: str) -> Sequence | None:
        return next((s for s in self._sequences if s.id == sequence_id), None)

    def _find_frame(self, frame_id: str) -> Frame | None:
        return next((f for f in self._frames if f.id == frame_id), None)
