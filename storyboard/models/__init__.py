"""Pydantic models for storyboard projects."""
from storyboard.models.base import CamelModel, to_camel
from storyboard.models.entities import (
    Frame,
    Project,
    Scene,
    Sequence,
    Shot,
    ShotStatus,
    generate_id,
    utc_now,
)
from storyboard.models.state import (
    ProjectSnapshot,
    ProjectState,
    ProjectVersion,
    StateDocument,
)

__all__ = [
    "CamelModel",
    "to_camel",
    "Frame",
    "Project",
    "Scene",
    "Sequence",
    "Shot",
    "ShotStatus",
    "generate_id",
    "utc_now",
    "ProjectSnapshot",
    "ProjectState",
    "ProjectVersion",
    "StateDocument",
]
