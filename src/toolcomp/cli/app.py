"""CLI application entry point for toolcomp.

This module provides the main CLI interface using Typer.
"""

import time
from pathlib import Path
from typing import Annotated

import typer

from toolcomp import __version__
from toolcomp.cli.output import (
    SYM_OK,
    console,
    print_error,
    print_header,
    print_path_info,
    print_step,
    print_success,
    print_warnings,
)
from toolcomp.config import LoggingConfig, OutputConfig, OutputUnit, ToolcompSettings
from toolcomp.core import CompensationResult, Compensator
from toolcomp.domain import Quantity, ToolPosition, TraceFlags, Unit, to_mm
from toolcomp.exceptions import (
    InvalidArgumentError,
    OutputWriteError,
    PathLoadError,
    ToolcompError,
)
from toolcomp.io import GcodeWriter, PathReader, commands_to_json, forward, parse_unit, write_text
from toolcomp.utils import RunLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="toolcomp",
    help="Offset a polyline by the tool radius and write the compensated toolpath.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Toolcomp[/bold blue] v{__version__}")
        raise typer.Exit()


def parse_start(value: str, unit: Unit) -> ToolPosition:
    """Parse ``X,Y,Z`` into a tool position in millimetres.

    Empty fields leave that axis unknown, so ``,,5`` only sets Z.

    Raises:
        ValueError: If the value has more than three fields or a bad number
    """
    fields = value.split(",")
    if len(fields) > 3:
        raise ValueError(f"expected X,Y,Z, got '{value}'")
    fields += [""] * (3 - len(fields))
    axes = [to_mm(float(f), unit) if f.strip() else None for f in fields]
    return ToolPosition(*axes)


def build_flags(
    left: bool,
    right: bool,
    closed: bool,
    keep_z: bool,
    restore_z: bool,
    arc_in: bool,
    arc_out: bool,
    quiet_warnings: bool,
) -> TraceFlags:
    """Collect the command-line switches into a flag set."""
    flags = TraceFlags(0)
    for enabled, flag in (
        (left, TraceFlags.LEFT),
        (right, TraceFlags.RIGHT),
        (closed, TraceFlags.CLOSED),
        (keep_z, TraceFlags.KEEPZ),
        (restore_z, TraceFlags.OLDZ),
        (arc_in, TraceFlags.ARCIN),
        (arc_out, TraceFlags.ARCOUT),
        (quiet_warnings, TraceFlags.QUIET),
    ):
        if enabled:
            flags |= flag
    return flags


@app.command()
def compensate(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Path file (.json, or text with one 'x y [z]' per line)",
            show_default=False,
        ),
    ],
    width: Annotated[
        float,
        typer.Option(
            "--width",
            "-w",
            help="Offset distance (tool radius) in input units",
        ),
    ],
    left: Annotated[
        bool,
        typer.Option("--left", help="Offset to the left of travel (G41 sense)"),
    ] = False,
    right: Annotated[
        bool,
        typer.Option("--right", help="Offset to the right of travel (G42 sense, default)"),
    ] = False,
    closed: Annotated[
        bool,
        typer.Option("--closed", help="Treat the path as closed"),
    ] = False,
    keep_z: Annotated[
        bool,
        typer.Option("--keep-z", help="Cut at the starting Z, ignoring point Z values"),
    ] = False,
    restore_z: Annotated[
        bool,
        typer.Option("--restore-z", help="Rapid back to the starting Z when done"),
    ] = False,
    arc_in: Annotated[
        bool,
        typer.Option("--arc-in", help="Enter the path on a tangential arc"),
    ] = False,
    arc_out: Annotated[
        bool,
        typer.Option("--arc-out", help="Leave the path on a tangential arc"),
    ] = False,
    quiet_warnings: Annotated[
        bool,
        typer.Option("--quiet-warnings", help="Leave advisories out of the output"),
    ] = False,
    units: Annotated[
        str,
        typer.Option("--units", help="Unit of width, --start and file coordinates (mm|inch)"),
    ] = "mm",
    output_units: Annotated[
        str,
        typer.Option("--output-units", help="Unit written to the G-code (mm|inch)"),
    ] = "mm",
    start: Annotated[
        str | None,
        typer.Option("--start", help="Tool position before the cut as X,Y,Z"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (gcode|json)"),
    ] = "gcode",
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-comp.ngc or {name}-comp.json)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Compute and summarize the toolpath without writing it",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Offset a path by the tool radius and write the compensated toolpath.

    Convex corners are rounded with arcs, concave corners are cut to the
    meeting point of the offset lines, and corners too tight for the tool
    are removed.

    Example:
        toolcomp outline.json --width 3 --closed --right

    This will create outline-comp.ngc next to the input file.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_path.exists():
        print_error(
            f"Input file not found: {input_path}",
            details=f"The file '{input_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_path.is_file():
        print_error(
            f"Input path is not a file: {input_path}",
            details="Please provide a path to a JSON or text path file.",
        )
        raise typer.Exit(code=1)

    output_format = output_format.lower()
    if output_format not in ("gcode", "json"):
        print_error(f"Invalid format: {output_format}", details="Valid values: gcode, json")
        raise typer.Exit(code=1)

    try:
        input_unit = parse_unit(units)
        out_unit = OutputUnit(parse_unit(output_units).value)
        position = parse_start(start, input_unit) if start else ToolPosition()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    settings = ToolcompSettings(
        output=OutputConfig(units=out_unit),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )
    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )
    run_logger = RunLogger(logger)
    source = str(input_path)

    try:
        if not quiet:
            print_step("Loading path")

        reader = PathReader(input_path, units=input_unit)
        reader.load()
        is_closed = closed or bool(reader.closed)

        if not quiet:
            print_path_info(
                path_file=source,
                points=len(reader.points),
                units=reader.units.value,
                closed=is_closed,
            )
            print_step("Compensating")

        flags = build_flags(
            left, right, is_closed, keep_z, restore_z, arc_in, arc_out, quiet_warnings
        )
        run_logger.stats.start_time = time.time()
        run_logger.log_path_start(source, len(reader.points))
        try:
            result = Compensator(settings).compute(
                reader.points,
                Quantity(width, reader.units),
                flags,
                position,
            )
        except InvalidArgumentError as e:
            run_logger.log_error(source, e)
            raise
        run_logger.stats.end_time = time.time()
        _record(run_logger, source, result)

        if not quiet:
            if result.warnings:
                print_warnings(result.warnings)
            if verbose:
                console.print(
                    f"  {len(result.points)} points after reduction "
                    f"({result.reduction.reversals_removed} reversals removed)"
                )

        if dry_run:
            if not quiet:
                _print_summary(None, run_logger)
                console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green], no file written")
            raise typer.Exit(code=0)

        suffix = ".json" if output_format == "json" else ".ngc"
        output_path = output or GcodeWriter.get_output_path(input_path, suffix=suffix)

        if output_format == "json":
            write_text(output_path, commands_to_json(result.commands) + "\n")
        else:
            writer = GcodeWriter(settings.output, position)
            forward(result.commands, writer)
            writer.save(output_path)

        if not quiet:
            _print_summary(str(output_path), run_logger)

    except PathLoadError as e:
        print_error(f"Could not load path: {e.reason}")
        raise typer.Exit(code=1)
    except OutputWriteError as e:
        print_error(f"Could not write output: {e.reason}")
        raise typer.Exit(code=1)
    except ToolcompError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _record(run_logger: RunLogger, source: str, result: CompensationResult) -> None:
    """Feed one result into the run statistics."""
    for warning in result.warnings:
        run_logger.log_warning(source, warning.kind.value, warning.text)
    run_logger.log_path_complete(
        source,
        moves=result.move_count,
        arcs=result.arc_count,
        corners_removed=result.reduction.corners_removed,
        duration_ms=result.duration_ms,
    )


def _print_summary(output_path: str | None, run_logger: RunLogger) -> None:
    stats = run_logger.stats
    print_success(
        output_path=output_path,
        total_time_s=stats.duration_seconds,
        moves=stats.moves,
        arcs=stats.arcs,
        corners_removed=stats.corners_removed,
        warnings=stats.warning_count,
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
