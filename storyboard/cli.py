"""Maintenance CLI for the persisted storyboard project.

Commands
--------
``storyboard init-db``
    Create the ``project_states`` table in the configured database.
``storyboard show [--json]``
    Print a summary of the stored project: title, counts, running time
    and the shot list in shot-code order.
``storyboard reset [--yes]``
    Replace the stored project with a fresh default one (3 scenes × 5
    shots). Asks for confirmation unless ``--yes`` is given.

Every command accepts ``--database-url``; the default comes from
``STORYBOARD_DATABASE_URL`` (SQLite ``./storyboard.db`` when unset).
"""
from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator
from typing import Any, Optional

import typer

from storyboard.config import settings
from storyboard.core.state_store import ProjectStateStore
from storyboard.db.database import close_db, init_db
from storyboard.errors import ExitCode
from storyboard.models.state import ProjectState
from storyboard.persistence.sql_gateway import SqlAlchemyGateway

logger = logging.getLogger(__name__)

cli = typer.Typer(
    name="storyboard",
    help="Inspect and reset the persisted storyboard project.",
    no_args_is_help=True,
)

_DATABASE_URL_OPTION = typer.Option(
    None,
    "--database-url",
    help="SQLAlchemy async URL (default: STORYBOARD_DATABASE_URL).",
    metavar="URL",
)


@cli.callback()
def _main() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@contextlib.asynccontextmanager
async def open_gateway(database_url: str | None = None) -> AsyncIterator[SqlAlchemyGateway]:
    """Yield a gateway on a fresh engine; the schema is created if missing.

    The engine is disposed on exit.
    """
    factory = await init_db(database_url)
    try:
        yield SqlAlchemyGateway(factory)
    finally:
        await close_db()


def summarize(state: ProjectState) -> dict[str, Any]:
    """Build the JSON-ready summary printed by ``storyboard show``."""
    scene_numbers = {scene.id: scene.scene_number for scene in state.scenes}
    shots = sorted(state.shots, key=lambda s: s.order_index)
    frame_counts: dict[str, int] = {}
    for frame in state.frames:
        frame_counts[frame.shot_id] = frame_counts.get(frame.shot_id, 0) + 1

    return {
        "id": state.project.id,
        "title": state.project.title,
        "fps": state.project.fps,
        "aspectRatio": state.project.aspect_ratio,
        "updatedAt": state.project.updated_at.isoformat(),
        "sceneCount": len(state.scenes),
        "shotCount": len(state.shots),
        "frameCount": len(state.frames),
        "versionCount": len(state.versions),
        "totalDurationMs": sum(s.duration for s in state.shots),
        "shots": [
            {
                "shotCode": shot.shot_code,
                "sceneNumber": scene_numbers.get(shot.scene_id) if shot.scene_id else None,
                "duration": shot.duration,
                "status": shot.status.value,
                "frames": frame_counts.get(shot.id, 0),
                "script": shot.script_text.splitlines()[0] if shot.script_text else "",
            }
            for shot in shots
        ],
    }


def _render_summary(summary: dict[str, Any]) -> None:
    typer.echo(f"🎬 {summary['title']}  ({summary['fps']:g} fps, {summary['aspectRatio']})")
    typer.echo(
        f"   {summary['sceneCount']} scenes · {summary['shotCount']} shots · "
        f"{summary['frameCount']} frames · {summary['totalDurationMs'] / 1000:.1f}s"
    )
    typer.echo("")
    typer.echo(f"{'SHOT':<6} {'SCENE':<6} {'MS':>6}  {'STATUS':<13} {'FRAMES':>6}  SCRIPT")
    for row in summary["shots"]:
        scene = row["sceneNumber"] if row["sceneNumber"] is not None else "-"
        typer.echo(
            f"{row['shotCode']:<6} {scene:<6} {row['duration']:>6g}  "
            f"{row['status']:<13} {row['frames']:>6}  {row['script'][:40]}"
        )


async def _show_async(gateway: SqlAlchemyGateway, as_json: bool) -> None:
    document = await gateway.load()
    if document is None:
        typer.echo("No stored project. Run `storyboard reset --yes` to create one.")
        raise typer.Exit(code=ExitCode.NOT_FOUND)

    summary = summarize(ProjectState.model_validate(document))
    if as_json:
        typer.echo(json.dumps(summary, indent=2))
    else:
        _render_summary(summary)


async def _reset_async(gateway: SqlAlchemyGateway) -> ProjectState:
    store = ProjectStateStore(gateway=gateway)
    store.clear_all_content()
    await store.flush()
    if store.last_save_error:
        raise RuntimeError(store.last_save_error)
    return store.to_state()


@cli.command("init-db")
def init_db_cmd(database_url: Optional[str] = _DATABASE_URL_OPTION) -> None:
    """Create the persistence table."""
    async def _run() -> None:
        async with open_gateway(database_url):
            pass

    try:
        asyncio.run(_run())
    except Exception as exc:
        typer.echo(f"❌ storyboard init-db failed: {exc}")
        logger.error("❌ storyboard init-db error: %s", exc, exc_info=True)
        raise typer.Exit(code=ExitCode.INTERNAL_ERROR)
    typer.echo("✅ Database ready")


@cli.command("show")
def show_cmd(
    database_url: Optional[str] = _DATABASE_URL_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit the summary as JSON."),
) -> None:
    """Print a summary of the stored project."""
    async def _run() -> None:
        async with open_gateway(database_url) as gateway:
            await _show_async(gateway, as_json)

    try:
        asyncio.run(_run())
    except typer.Exit:
        raise
    except Exception as exc:
        typer.echo(f"❌ storyboard show failed: {exc}")
        logger.error("❌ storyboard show error: %s", exc, exc_info=True)
        raise typer.Exit(code=ExitCode.INTERNAL_ERROR)


@cli.command("reset")
def reset_cmd(
    database_url: Optional[str] = _DATABASE_URL_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Replace the stored project with a fresh default one."""
    if not yes and not typer.confirm("Replace the stored project with an empty default?"):
        typer.echo("Aborted.")
        raise typer.Exit(code=ExitCode.USER_ERROR)

    async def _run() -> ProjectState:
        async with open_gateway(database_url) as gateway:
            return await _reset_async(gateway)

    try:
        state = asyncio.run(_run())
    except Exception as exc:
        typer.echo(f"❌ storyboard reset failed: {exc}")
        logger.error("❌ storyboard reset error: %s", exc, exc_info=True)
        raise typer.Exit(code=ExitCode.INTERNAL_ERROR)
    typer.echo(
        f"✅ New project {state.project.id[:8]}: "
        f"{len(state.scenes)} scenes, {len(state.shots)} shots"
    )


if __name__ == "__main__":
    cli()
