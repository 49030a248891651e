"""Whole-project documents: snapshots, saved versions and the persisted state."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

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

# camelCase, JSON-ready form of ``ProjectState`` handed to persistence gateways.
StateDocument = dict[str, Any]


class ProjectSnapshot(CamelModel):
    """Every entity collection of a project at one point in time."""

    project: Project = Field(default_factory=Project)
    sequences: list[Sequence] = Field(default_factory=list)
    scenes: list[Scene] = Field(default_factory=list)
    shots: list[Shot] = Field(default_factory=list)
    frames: list[Frame] = Field(default_factory=list)


class ProjectVersion(CamelModel):
    """A named snapshot saved on request, kept outside undo history."""

    id: str = Field(default_factory=generate_id)
    timestamp: datetime = Field(default_factory=utc_now)
    description: str = ""
    snapshot: ProjectSnapshot


class ProjectState(ProjectSnapshot):
    """The persisted document: a snapshot plus saved versions."""

    versions: list[ProjectVersion] = Field(default_factory=list)

    def to_document(self) -> StateDocument:
        """Serialize to the camelCase JSON form stored by gateways."""
        return self.model_dump(mode="json", by_alias=True)
