"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with formatted steps, advisories and summaries.
"""

from rich.console import Console
from rich.text import Text

from toolcomp.domain import Warning

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Advisory
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Toolcomp[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_path_info(path_file: str, points: int, units: str, closed: bool) -> None:
    """Print information about the loaded path.

    Args:
        path_file: Path to the input file
        points: Number of points read
        units: Unit of the file's coordinates
        closed: Whether the path is treated as closed
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(path_file)
    console.print(line)
    topology = "closed" if closed else "open"
    console.print(f"  {points:,} points {SYM_DOT} {units} {SYM_DOT} {topology}")


def print_warnings(warnings: list[Warning]) -> None:
    """Print advisories raised during compensation."""
    for warning in warnings:
        line = Text(f"  {SYM_WARN} ", style="yellow")
        line.append(f"{warning.kind.value}: ", style="bold yellow")
        line.append(warning.text)
        console.print(line)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str | None,
    total_time_s: float,
    moves: int,
    arcs: int,
    corners_removed: int,
    warnings: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file, or None when nothing was written
        total_time_s: Total processing time in seconds
        moves: Number of straight moves emitted
        arcs: Number of arcs emitted
        corners_removed: Unreachable corners removed by reduction
        warnings: Number of advisories raised
    """
    time_str = _format_time(total_time_s)
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    if output_path is not None:
        line = Text("  ")
        line.append(output_path, style="bold")
        console.print(line)

    warn_style = "yellow" if warnings > 0 else "green"
    console.print(
        f"  {moves} moves {SYM_DOT} {arcs} arcs {SYM_DOT} "
        f"{corners_removed} corners removed {SYM_DOT} "
        f"[{warn_style}]{warnings} warnings[/{warn_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
