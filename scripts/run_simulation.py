#!/usr/bin/env python3
"""
Tactical Board - Command Line Simulation Tool
Play a formation plan (or recorded movement data) headlessly and report analytics
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger
from rich.console import Console
from rich.table import Table

from config import settings
from tactical_board.analysis.formations import available_formations
from tactical_board.board.controller import TacticalBoard
from tactical_board.core.models import Phase, Position, Role, Team
from tactical_board.core.playback import ManualFrameScheduler
from tactical_board.exceptions import TacticalBoardError


console = Console()


def build_demo_plan(board: TacticalBoard, duration: float):
    """Three keyframes: shape at kick-off, midfield push, attacking phase"""
    board.set_duration(duration)

    for step, phase in ((duration / 2, Phase.TRANSITION), (duration, Phase.ATTACK)):
        push = 10.0 if phase is Phase.TRANSITION else 20.0
        for entity in board.entities:
            if entity.team is Team.HOME and entity.role is not Role.GOALKEEPER:
                board.drag_entity(
                    entity.id, Position(entity.position.x + push / 2, entity.position.y)
                )
        board.record_keyframe(phase, time=step)


def metrics_row(table: Table, time: float, board: TacticalBoard):
    metrics = board.metrics()
    home = metrics.team_shapes.get(Team.HOME)
    away = metrics.team_shapes.get(Team.AWAY)
    offside = metrics.offside_lines.get(Team.AWAY)
    table.add_row(
        f"{time:.1f}",
        home.shape.value if home else "-",
        f"{home.width:.1f}" if home else "-",
        away.shape.value if away else "-",
        f"{offside:.1f}" if offside is not None else "-",
        str(metrics.collision_count),
    )


def main():
    parser = argparse.ArgumentParser(
        description="Run a tactical board simulation from the command line"
    )
    parser.add_argument(
        "--home",
        type=str,
        default="4-4-2",
        help="Home formation (default: 4-4-2)"
    )
    parser.add_argument(
        "--away",
        type=str,
        default="4-3-3",
        help="Away formation (default: 4-3-3)"
    )
    parser.add_argument(
        "--movement",
        type=str,
        help="Movement data JSON file to play instead of the demo plan"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=settings.default_duration,
        help=f"Demo plan duration in seconds (default: {settings.default_duration})"
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=settings.default_speed,
        help="Playback speed multiplier"
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save the plan to the database"
    )
    parser.add_argument(
        "--name",
        type=str,
        help="Plan name when saving"
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Export the plan as JSON to the output directory"
    )
    parser.add_argument(
        "--image",
        type=str,
        help="Write the final pitch view to this image file"
    )
    parser.add_argument(
        "--list-formations",
        action="store_true",
        help="List available formations and exit"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    # Setup logging
    log_level = "DEBUG" if args.verbose else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=log_level)

    if args.list_formations:
        for name in available_formations():
            console.print(f"  {name}")
        return

    renderer = None
    if args.image:
        from tactical_board.render.pitch_renderer import PitchRenderer
        renderer = PitchRenderer(settings.pitch_length, settings.pitch_width)

    scheduler = ManualFrameScheduler()
    board = TacticalBoard(settings, scheduler=scheduler, renderer=renderer)

    console.print("\n[bold blue]Tactical Board Simulation[/bold blue]")
    console.print("=" * 50)

    try:
        board.load_formations(args.home, args.away)
        if args.movement:
            movement_path = Path(args.movement)
            if not movement_path.exists():
                console.print(f"[red]Error: Movement file not found: {movement_path}[/red]")
                sys.exit(1)
            board.import_movement(movement_path)
            console.print(f"Movement: [green]{movement_path.name}[/green]")
        else:
            build_demo_plan(board, args.duration)
            console.print(f"Formations: [green]{args.home}[/green] vs [green]{args.away}[/green]")
        board.set_speed(args.speed)
    except TacticalBoardError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(f"Keyframes: {len(board.timeline)}  Duration: {board.timeline.duration:.1f}s")
    console.print("=" * 50 + "\n")

    table = Table(title="Playback Analytics")
    table.add_column("Time (s)", justify="right")
    table.add_column("Home Shape")
    table.add_column("Home Width", justify="right")
    table.add_column("Away Shape")
    table.add_column("Offside Line", justify="right")
    table.add_column("Collisions", justify="right")

    frame_delta = 1.0 / settings.frame_rate
    next_report = 0.0

    board.stop()
    board.seek(0.0)
    board.play()
    metrics_row(table, board.current_time, board)
    next_report += 1.0
    while board.clock.is_playing:
        scheduler.advance(frame_delta)
        if board.current_time >= next_report or not board.clock.is_playing:
            metrics_row(table, board.current_time, board)
            next_report = board.current_time + 1.0

    console.print(table)
    console.print("\n[bold]Context summary[/bold]")
    console.print(board.context_summary())

    if args.save:
        from tactical_board.database.models import get_session_factory, init_database
        from tactical_board.database.repository import PlanRepository

        engine = init_database()
        repository = PlanRepository(get_session_factory(engine))
        try:
            plan_id = board.save_plan(repository, args.name)
        except TacticalBoardError as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)
        console.print(f"\n[green]Saved plan id={plan_id}[/green]")

    if args.export:
        path = board.export_plan()
        console.print(f"[green]Exported plan to {path}[/green]")

    if renderer is not None:
        path = renderer.save(args.image)
        console.print(f"[green]Pitch image written to {path}[/green]")

    board.release()


if __name__ == "__main__":
    main()
