"""
Demo command: record a scripted session, replay it, compare canvases
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from diagram_replay.config import ReplayConfig, parse_cadence
from diagram_replay.core.canvas import canvas_fingerprint
from diagram_replay.core.events import Event, EventType
from diagram_replay.logging_config import get_logger
from diagram_replay.replay.scheduler import AsyncioScheduler

from ._session import record_session, resolve_script

console = Console()


async def run_demo(
    ops: List[Dict[str, Any]],
    config: ReplayConfig,
    seed: Optional[int] = None,
    progress: Optional[Progress] = None,
) -> Dict[str, Any]:
    """
    Record ops, replay them on the running loop and fingerprint both canvases.
    """
    editor = record_session(AsyncioScheduler(), config, ops, seed=seed)
    session = editor.session
    logger = get_logger(__name__, trace_id=config.session_id)

    live_hash = canvas_fingerprint(editor.canvas)
    total = len(session.events)
    logger.info("Recorded %d events from %d gestures", total, len(ops))

    task = progress.add_task("Replaying", total=total) if progress is not None else None
    applied = 0

    def apply_and_count(event: Event) -> None:
        nonlocal applied
        editor.applier(event)
        if event.event_type is EventType.SNAPSHOT:
            return
        applied += 1
        if task is not None:
            progress.update(task, completed=applied)

    session.toggle_replay(apply_and_count)
    final = await session.wait_idle()
    replay_hash = canvas_fingerprint(editor.canvas)

    return {
        "events_recorded": total,
        "events_replayed": applied,
        "replay_speed_ms": final.replay_speed,
        "cadence": config.cadence.value,
        "live_canvas_hash": live_hash,
        "replayed_canvas_hash": replay_hash,
        "match": live_hash == replay_hash,
        "canvas": editor.canvas.to_dict(),
    }


def demo_command(
    speed: Optional[int] = typer.Option(None, "--speed", "-s", help="Milliseconds between replayed events"),
    cadence: Optional[str] = typer.Option(None, "--cadence", "-c", help="fixed or recorded"),
    script: Optional[str] = typer.Option(None, "--script", help="Path to a JSON gesture script"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for random node placement"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Record a scripted editing session, replay it and verify the canvas.

    Examples:
        diagram-replay demo
        diagram-replay demo --speed 200
        diagram-replay demo --script gestures.json --cadence recorded
        diagram-replay demo --json
    """
    try:
        config = ReplayConfig.from_env()
        if speed is not None:
            config = ReplayConfig(
                replay_speed=speed,
                session_id=config.session_id,
                user_id=config.user_id,
                cadence=config.cadence,
            )
        if cadence is not None:
            config.cadence = parse_cadence(cadence.strip().lower())
        ops = resolve_script(script)

        if json_output:
            result = asyncio.run(run_demo(ops, config, seed=seed))
        else:
            console.print(
                f"[bold]Replaying {len(ops)} gestures at {config.replay_speed} ms "
                f"({config.cadence.value} cadence)...[/bold]"
            )
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=console,
            ) as progress:
                result = asyncio.run(run_demo(ops, config, seed=seed, progress=progress))
    except FileNotFoundError:
        if json_output:
            print(json.dumps({"error": "Script file not found", "path": script}))
        else:
            console.print(f"[red]Error: Script file not found:[/red] {script}")
        raise typer.Exit(2)
    except Exception as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if json_output:
        print(json.dumps(result, indent=2))
    else:
        table = Table(title="Replay Result", show_header=False)
        table.add_column("Field", style="green")
        table.add_column("Value", style="cyan")
        table.add_row("Events recorded", str(result["events_recorded"]))
        table.add_row("Events replayed", str(result["events_replayed"]))
        table.add_row("Nodes", str(len(result["canvas"]["nodes"])))
        table.add_row("Edges", str(len(result["canvas"]["edges"])))
        table.add_row("Live canvas", result["live_canvas_hash"][:16])
        table.add_row("Replayed canvas", result["replayed_canvas_hash"][:16])
        console.print(table)
        if result["match"]:
            console.print("[green]✓ Replayed canvas matches the live canvas[/green]")
        else:
            console.print("[red]✗ Replayed canvas differs from the live canvas[/red]")

    raise typer.Exit(0 if result["match"] else 1)
