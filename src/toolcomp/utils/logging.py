"""Logging utilities for Toolcomp."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class RunStats:
    """Statistics from a compensation run."""

    paths_processed: int = 0
    moves: int = 0
    arcs: int = 0
    corners_removed: int = 0
    warning_count: int = 0
    error_count: int = 0
    warnings: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"toolcomp_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("toolcomp")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class RunLogger:
    """Logger for tracking compensation runs and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = RunStats()

    def log_path_start(self, source: str, points: int) -> None:
        """Log start of a path."""
        self._logger.debug("Compensating path", source=source, points=points)

    def log_path_complete(
        self,
        source: str,
        moves: int,
        arcs: int,
        corners_removed: int,
        duration_ms: float,
    ) -> None:
        """Log a successfully compensated path."""
        self._logger.info(
            "Path compensated",
            source=source,
            moves=moves,
            arcs=arcs,
            corners_removed=corners_removed,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.paths_processed += 1
        self._stats.moves += moves
        self._stats.arcs += arcs
        self._stats.corners_removed += corners_removed

    def log_warning(self, source: str, kind: str, text: str) -> None:
        """Log an advisory raised for a path."""
        self._logger.warning("Path advisory", source=source, kind=kind, text=text)
        self._stats.warning_count += 1
        self._stats.warnings.append((kind, text))

    def log_error(self, source: str, error: Exception) -> None:
        """Log a failed path."""
        self._logger.error(
            "Path compensation failed",
            source=source,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.error_count += 1

    @property
    def stats(self) -> RunStats:
        """Get current run statistics."""
        return self._stats
