from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.scheduling.manual_scheduler import ManualScheduler
from app.config import load_settings
from domain.models import DEFAULT_SEGMENT_LENGTH, MAX_SEGMENT_LENGTH, MIN_SEGMENT_LENGTH, Layer
from domain.services.generate_path import count_drawable_chars, generate_path
from domain.services.layer_stack import LayerStack
from domain.services.loop_growth import LoopGrowthController, LoopStatus

app = typer.Typer(no_args_is_help=True)
console = Console()


def _segment_length_option() -> int:
    return typer.Option(
        DEFAULT_SEGMENT_LENGTH,
        "--segment-length",
        "-l",
        min=MIN_SEGMENT_LENGTH,
        max=MAX_SEGMENT_LENGTH,
        help="Distance covered by every segment.",
    )


@app.command("trace")
def trace(
    text: str = typer.Argument(..., help="Text to turn into a curve."),
    segment_length: int = _segment_length_option(),
) -> None:
    path = generate_path(text, segment_length)
    bounds = path.bounds

    table = Table(title=f"Curve for {text!r}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Drawable chars", str(count_drawable_chars(text)))
    table.add_row("Points", str(len(path.points)))
    table.add_row("End point", f"({path.end_point.x:.3f}, {path.end_point.y:.3f})")
    table.add_row("Distance to origin", f"{path.end_point.distance_to_origin():.3f}")
    table.add_row("Bounds x", f"{bounds.min_x:.3f} .. {bounds.max_x:.3f}")
    table.add_row("Bounds y", f"{bounds.min_y:.3f} .. {bounds.max_y:.3f}")
    table.add_row("Size", f"{bounds.width:.3f} x {bounds.height:.3f}")
    console.print(table)


@app.command("loop")
def loop(
    text: str = typer.Argument(..., help="Seed text repeated until the curve closes."),
    segment_length: int = _segment_length_option(),
    max_ticks: int = typer.Option(10_000, min=1, help="Give up after this many appends."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = load_settings(config)
    stack = LayerStack([Layer(id="cli", name="cli", text=text, segment_length=segment_length)])
    scheduler = ManualScheduler()
    controller = LoopGrowthController(stack, scheduler, settings.loop.to_loop_config())

    if not controller.start(stack.require("cli")):
        console.print("[red]Cannot loop an empty seed.[/]")
        raise typer.Exit(code=1)
    ticks = scheduler.run_until_idle(max_ticks)
    controller.stop()

    step = controller.last_step
    final = stack.require("cli")
    if step is not None and step.status is LoopStatus.CLOSED:
        console.print(
            f"[green]Closed[/] after {ticks} appends: {len(final.text)} chars, "
            f"distance {step.distance:.4f}, offset ({final.x:.3f}, {final.y:.3f})"
        )
    elif step is not None and step.status is LoopStatus.LIMIT_REACHED:
        console.print(f"[yellow]Length limit reached[/] at {len(final.text)} chars")
    else:
        console.print(f"[yellow]No closure within {max_ticks} appends[/] ({len(final.text)} chars)")
    console.print(final.text, markup=False, highlight=False, soft_wrap=True)


@app.command("serve")
def serve(
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    host: Optional[str] = typer.Option(None, help="Bind address (overrides settings)."),
    port: Optional[int] = typer.Option(None, help="Bind port (overrides settings)."),
) -> None:
    import uvicorn

    from app.web_main import create_app

    settings = load_settings(config)
    uvicorn.run(
        create_app(settings),
        host=host or settings.server.host,
        port=port or settings.server.port,
        log_level=settings.server.log_level,
    )


if __name__ == "__main__":
    app()
