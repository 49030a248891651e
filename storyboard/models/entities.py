"""Entity models for a storyboard project.

Project → Sequences (optional) → Scenes → Shots → Frames.

These are plain data definitions. Every structural rule (ordering,
shot codes, cascades, the duration floor) is enforced by
``storyboard.core.state_store.ProjectStateStore``, never here, so a
document written by an older editor can always be loaded and then
normalized.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from storyboard.config import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_FPS,
    DEFAULT_PROJECT_TITLE,
    DEFAULT_SHOT_DURATION_MS,
)
from storyboard.models.base import CamelModel


def generate_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class ShotStatus(str, Enum):
    """Production status of a shot."""
    TODO = "todo"
    BOARDED = "boarded"
    ANIMATED = "animated"
    NEEDS_REVIEW = "needs-review"


class Project(CamelModel):
    """Singleton root of a storyboard project."""

    id: str = Field(default_factory=generate_id)
    title: str = DEFAULT_PROJECT_TITLE
    fps: float = DEFAULT_FPS
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    target_duration: Optional[float] = Field(default=None, description="Target running time in ms")
    style_notes: str = ""
    reference_links: list[str] = Field(default_factory=list)
    global_notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Sequence(CamelModel):
    """Optional grouping of scenes."""

    id: str = Field(default_factory=generate_id)
    name: str = ""
    order_index: int = 0
    notes: str = ""


class Scene(CamelModel):
    """A narrative grouping of shots.

    ``scene_number`` is free text; ``"0"`` marks the default bucket that
    shots land in when no scene is given.
    """

    id: str = Field(default_factory=generate_id)
    sequence_id: Optional[str] = None
    scene_number: str = ""
    title: str = ""
    summary: str = ""
    order_index: int = 0
    notes: str = ""


class Shot(CamelModel):
    """One continuous framed action with a duration."""

    id: str = Field(default_factory=generate_id)
    scene_id: Optional[str] = None
    order_index: int = 0
    shot_code: str = "000"
    script_text: str = ""
    duration: float = Field(default=DEFAULT_SHOT_DURATION_MS, description="Duration in ms, fractional values allowed")
    status: ShotStatus = ShotStatus.TODO
    tags: list[str] = Field(default_factory=list)
    camera_notes: str = ""
    animation_notes: str = ""
    general_notes: str = ""


class Frame(CamelModel):
    """A still storyboard image attached to a shot.

    ``image`` is an opaque payload (data URI, blob URL, ...) and
    ``overlay_data`` carries annotation markup; neither is interpreted.
    """

    id: str = Field(default_factory=generate_id)
    shot_id: str
    image: str = ""
    caption: str = ""
    overlay_data: Optional[Any] = None
    order_index: int = 0
    version: int = 1
