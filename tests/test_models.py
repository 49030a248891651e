"""Tests for the storyboard pydantic models and their camelCase wire format."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from storyboard.core.defaults import build_default_state
from storyboard.models import (
    CamelModel,
    Frame,
    Project,
    ProjectState,
    Scene,
    Shot,
    ShotStatus,
    to_camel,
)


class TestCamelCase:

    @pytest.mark.parametrize("name,expected", [
        ("title", "title"),
        ("order_index", "orderIndex"),
        ("script_text", "scriptText"),
        ("overlay_data", "overlayData"),
    ])
    def test_to_camel(self, name, expected):
        assert to_camel(name) == expected

    def test_field_name_for(self):
        assert Shot.field_name_for("scriptText") == "script_text"
        assert Shot.field_name_for("script_text") == "script_text"
        assert Shot.field_name_for("nonsense") is None

    def test_dump_by_alias(self):
        dumped = Shot(id="a", script_text="hi").model_dump(by_alias=True)
        assert dumped["scriptText"] == "hi"
        assert "script_text" not in dumped

    def test_populate_by_either_name(self):
        assert Scene(sceneNumber="4").scene_number == "4"
        assert Scene(scene_number="4").scene_number == "4"

    def test_all_entities_are_camel_models(self):
        for model in (Project, Scene, Shot, Frame, ProjectState):
            assert issubclass(model, CamelModel)


class TestEntityDefaults:

    def test_project_defaults(self):
        project = Project()
        assert project.title == "Untitled Project"
        assert project.fps == 24
        assert project.aspect_ratio == "16:9"
        assert project.target_duration is None
        assert project.created_at.tzinfo is not None

    def test_shot_defaults(self):
        shot = Shot()
        assert shot.duration == 1000
        assert shot.status == ShotStatus.TODO
        assert shot.shot_code == "000"
        assert shot.scene_id is None

    def test_ids_unique(self):
        assert Shot().id != Shot().id

    def test_frame_requires_shot(self):
        with pytest.raises(ValidationError):
            Frame()

    def test_status_values(self):
        assert Shot(status="needs-review").status == ShotStatus.NEEDS_REVIEW
        with pytest.raises(ValidationError):
            Shot(status="done")

    def test_fractional_numbers_accepted(self):
        assert Shot(duration=1234.56).duration == 1234.56
        project = Project(fps=23.976, targetDuration=90000.5)
        assert project.fps == 23.976
        assert project.target_duration == 90000.5

    def test_epoch_millis_accepted(self):
        project = Project(createdAt=1700000000000)
        assert project.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


class TestProjectStateDocument:

    def test_document_is_json_ready(self):
        state = build_default_state()
        document = state.to_document()

        assert isinstance(document["project"]["createdAt"], str)
        assert document["shots"][0]["shotCode"] == "000"
        assert document["shots"][0]["status"] == "todo"
        assert document["versions"] == []

    def test_document_validates_back(self):
        state = build_default_state(title="Round")
        restored = ProjectState.model_validate(state.to_document())
        assert restored.model_dump() == state.model_dump()


class TestDefaultState:

    def test_layout(self):
        state = build_default_state()
        assert [s.scene_number for s in state.scenes] == ["0", "1", "2"]
        assert [s.title for s in state.scenes] == ["Scene 0", "Scene 1", "Scene 2"]
        assert len(state.shots) == 15
        assert [s.shot_code for s in state.shots][:6] == ["000", "010", "020", "030", "040", "050"]

    def test_custom_counts(self):
        state = build_default_state(title="Short", scene_count=2, shots_per_scene=2)
        assert state.project.title == "Short"
        assert len(state.scenes) == 2
        assert [s.order_index for s in state.shots] == [0, 1, 2, 3]
        assert state.shots[2].scene_id == state.scenes[1].id
