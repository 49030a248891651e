"""Default project layout used on first start and by clear-all."""
from __future__ import annotations

from storyboard.config import (
    DEFAULT_PROJECT_TITLE,
    DEFAULT_SCENE_COUNT,
    DEFAULT_SHOT_DURATION_MS,
    DEFAULT_SHOTS_PER_SCENE,
)
from storyboard.core.ordering import shot_code
from storyboard.models.entities import Project, Scene, Shot, ShotStatus, utc_now
from storyboard.models.state import ProjectState


def build_default_state(
    title: str = DEFAULT_PROJECT_TITLE,
    scene_count: int = DEFAULT_SCENE_COUNT,
    shots_per_scene: int = DEFAULT_SHOTS_PER_SCENE,
) -> ProjectState:
    """Build a fresh project: scenes ``"0"``..``"n-1"`` with equal shot counts.

    Shots are numbered globally across scenes, so with the defaults scene
    ``"1"`` starts at shot code ``"050"``.
    """
    now = utc_now()
    project = Project(title=title, created_at=now, updated_at=now)
    scenes: list[Scene] = []
    shots: list[Shot] = []

    for scene_num in range(scene_count):
        scene = Scene(
            scene_number=str(scene_num),
            title=f"Scene {scene_num}",
            order_index=scene_num,
        )
        scenes.append(scene)
        for shot_num in range(shots_per_scene):
            order_index = scene_num * shots_per_scene + shot_num
            shots.append(Shot(
                scene_id=scene.id,
                order_index=order_index,
                shot_code=shot_code(order_index),
                duration=DEFAULT_SHOT_DURATION_MS,
                status=ShotStatus.TODO,
            ))

    return ProjectState(project=project, scenes=scenes, shots=shots)
