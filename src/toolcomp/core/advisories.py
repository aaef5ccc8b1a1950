"""Collection of non-fatal advisories raised during a run."""

import structlog

from toolcomp.domain import Warning, WarningKind

logger = structlog.get_logger(__name__)


class Advisories:
    """Collects Warning commands in the order they are raised.

    Every advisory is logged. It is only added to the emitted stream when
    warnings are not suppressed.
    """

    def __init__(self, quiet: bool = False) -> None:
        self._quiet = quiet
        self._warnings: list[Warning] = []
        self._raised: list[WarningKind] = []

    def warn(self, kind: WarningKind, text: str) -> None:
        """Raise an advisory."""
        logger.warning("Advisory", kind=kind.value, text=text, suppressed=self._quiet)
        self._raised.append(kind)
        if not self._quiet:
            self._warnings.append(Warning(kind, text))

    @property
    def warnings(self) -> list[Warning]:
        """Advisories to emit, in order."""
        return list(self._warnings)

    @property
    def raised(self) -> list[WarningKind]:
        """Kinds of every advisory raised, including suppressed ones."""
        return list(self._raised)
