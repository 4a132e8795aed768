"""
Event log commands: show
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from diagram_replay.config import ReplayConfig
from diagram_replay.core.events import EventType
from diagram_replay.replay.scheduler import ManualScheduler

from ._session import record_session, resolve_script

app = typer.Typer()
console = Console()


@app.command()
def show(
    script: Optional[str] = typer.Option(None, "--script", help="Path to a JSON gesture script"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for random node placement"),
    event_type: Optional[str] = typer.Option(None, "--type", "-t", help="Filter by event type"),
    show_payload: bool = typer.Option(False, "--payload", "-p", help="Show full payload"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Record a scripted session and print its event log.

    Examples:
        diagram-replay log show
        diagram-replay log show --type node_add
        diagram-replay log show --payload --json
    """
    try:
        if event_type is not None:
            event_type = EventType.parse(event_type).value
        editor = record_session(
            ManualScheduler(), ReplayConfig.from_env(), resolve_script(script), seed=seed
        )
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

    log = editor.session.log
    rows = [
        (idx, ev) for idx, ev in enumerate(log)
        if event_type is None or ev.event_type.value == event_type
    ]

    if json_output:
        events = []
        for idx, ev in rows:
            rec = ev.to_dict()
            rec["index"] = idx
            if not show_payload:
                rec["data"] = "<hidden>"
            events.append(rec)
        print(json.dumps({"events": events, "count": len(events), "counts": log.count_by_type()}, indent=2))
        raise typer.Exit(0)

    if not rows:
        console.print("[yellow]No events match the filters[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Event Log: {editor.session.config.session_id}")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Timestamp", style="yellow")
    table.add_column("Payload" if show_payload else "Target", style="dim")

    for idx, ev in rows:
        data = ev.data if isinstance(ev.data, dict) else {}
        target = data.get("id") or data.get("nodeId") or data.get("edgeId") or ""
        table.add_row(
            str(idx),
            ev.event_type.value,
            str(ev.timestamp),
            json.dumps(ev.data) if show_payload else str(target),
        )
    console.print(table)

    counts = Table(title="Event Counts")
    counts.add_column("Event Type", style="green")
    counts.add_column("Count", style="cyan", justify="right")
    for name, count in log.count_by_type().items():
        counts.add_row(name, str(count))
    console.print(counts)

    console.print("\n[bold]Final canvas:[/bold]")
    console.print(Syntax(json.dumps(editor.canvas.to_dict(), indent=2), "json", theme="monokai"))
    raise typer.Exit(0)
