"""
Tests for the ``storyboard`` CLI.

All CLI-level tests use ``typer.testing.CliRunner`` against a SQLite file
in ``tmp_path``; each command opens and disposes its own engine.
"""

import json

import pytest
from typer.testing import CliRunner

from storyboard.cli import cli, summarize
from storyboard.core.defaults import build_default_state
from storyboard.errors import ExitCode
from storyboard.models.entities import Frame

runner = CliRunner()


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'storyboard.db'}"


def _invoke(*args: str, input: str | None = None):
    return runner.invoke(cli, list(args), input=input)


class TestInitDb:

    def test_creates_database(self, tmp_path, db_url):
        result = _invoke("init-db", "--database-url", db_url)
        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "Database ready" in result.output
        assert (tmp_path / "storyboard.db").exists()

    def test_bad_url_is_internal_error(self):
        result = _invoke("init-db", "--database-url", "nosuchdialect+nodriver://nowhere")
        assert result.exit_code == ExitCode.INTERNAL_ERROR
        assert "❌" in result.output


class TestShow:

    def test_nothing_stored(self, db_url):
        result = _invoke("show", "--database-url", db_url)
        assert result.exit_code == ExitCode.NOT_FOUND
        assert "No stored project" in result.output

    def test_after_reset(self, db_url):
        _invoke("reset", "--yes", "--database-url", db_url)
        result = _invoke("show", "--database-url", db_url)

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "Untitled Project" in result.output
        assert "3 scenes · 15 shots · 0 frames · 15.0s" in result.output
        assert "140" in result.output

    def test_json(self, db_url):
        _invoke("reset", "--yes", "--database-url", db_url)
        result = _invoke("show", "--json", "--database-url", db_url)

        assert result.exit_code == ExitCode.SUCCESS, result.output
        summary = json.loads(result.stdout)
        assert summary["shotCount"] == 15
        assert summary["sceneCount"] == 3
        assert summary["totalDurationMs"] == 15000
        assert [row["shotCode"] for row in summary["shots"]][:3] == ["000", "010", "020"]
        assert {row["sceneNumber"] for row in summary["shots"]} == {"0", "1", "2"}


class TestReset:

    def test_with_yes(self, db_url):
        result = _invoke("reset", "--yes", "--database-url", db_url)
        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "3 scenes, 15 shots" in result.output

    def test_declined(self, db_url):
        result = _invoke("reset", "--database-url", db_url, input="n\n")
        assert result.exit_code == ExitCode.USER_ERROR
        assert "Aborted" in result.output
        assert _invoke("show", "--database-url", db_url).exit_code == ExitCode.NOT_FOUND

    def test_confirmed(self, db_url):
        result = _invoke("reset", "--database-url", db_url, input="y\n")
        assert result.exit_code == ExitCode.SUCCESS, result.output

    def test_replaces_project(self, db_url):
        _invoke("reset", "--yes", "--database-url", db_url)
        first = json.loads(_invoke("show", "--json", "--database-url", db_url).stdout)["id"]
        _invoke("reset", "--yes", "--database-url", db_url)
        second = json.loads(_invoke("show", "--json", "--database-url", db_url).stdout)["id"]
        assert first != second


class TestSummarize:

    def test_counts_frames_and_first_script_line(self):
        state = build_default_state()
        state.shots[0].script_text = "INT. LIGHTHOUSE - NIGHT\nThe lamp turns."
        state.frames.append(Frame(shot_id=state.shots[0].id, image="img"))
        state.scenes[0].id = "renamed"

        summary = summarize(state)

        first = summary["shots"][0]
        assert first["script"] == "INT. LIGHTHOUSE - NIGHT"
        assert first["frames"] == 1
        assert first["sceneNumber"] is None
        assert summary["frameCount"] == 1
