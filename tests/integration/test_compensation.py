"""End-to-end tests for the compensation pipeline.

Runs whole paths through Compensator and tracepath_comp and checks the
properties a consumer of the command stream relies on.
"""

import pytest

from toolcomp.config import OutputConfig, ToolcompSettings
from toolcomp.core import Compensator, tracepath_comp
from toolcomp.core.advisories import Advisories
from toolcomp.core.frames import SegmentFrames
from toolcomp.core.reducer import reduce_concave_corners
from toolcomp.domain import (
    ARC_TYPES,
    ArcCCW,
    ArcCCWRelative,
    ArcCW,
    ArcCWRelative,
    Comment,
    Move,
    MoveRelative,
    Point,
    Quantity,
    RapidMove,
    ToolPosition,
    TraceFlags,
    Unit,
    Warning,
    WarningKind,
)
from toolcomp.exceptions import ArgumentErrorKind, InvalidArgumentError
from toolcomp.io import GcodeWriter, RecordingSink

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


@pytest.fixture
def quiet_settings() -> ToolcompSettings:
    """Settings without informational comments."""
    return ToolcompSettings(output=OutputConfig(emit_comments=False))


def geometry(commands):
    return [c for c in commands if not isinstance(c, (Comment, Warning))]


def end_points(commands):
    """Absolute XY after every positioning command, following relative moves."""
    points = []
    x = y = None
    for c in commands:
        if isinstance(c, (MoveRelative, ArcCWRelative, ArcCCWRelative)):
            x, y = x + c.dx, y + c.dy
        elif isinstance(c, (RapidMove, Move, ArcCW, ArcCCW)) and c.x is not None:
            x, y = c.x, c.y
        else:
            continue
        points.append((x, y))
    return points


class TestValidation:
    """Fatal argument errors."""

    @pytest.mark.parametrize(
        "width,kind",
        [
            (0.0, ArgumentErrorKind.NON_POSITIVE_WIDTH),
            (-2.0, ArgumentErrorKind.NON_POSITIVE_WIDTH),
            (Quantity(45.0, Unit.DEG), ArgumentErrorKind.NON_DISTANCE_WIDTH),
            ("wide", ArgumentErrorKind.NON_SCALAR_WIDTH),
        ],
    )
    def test_bad_width_emits_only_an_error(self, width, kind) -> None:
        """Test that nothing but one error reaches the sink."""
        sink = RecordingSink()
        with pytest.raises(InvalidArgumentError) as exc_info:
            tracepath_comp(SQUARE, width, TraceFlags.RIGHT, sink)
        assert exc_info.value.kind is kind
        assert sink.operations() == ["error"]

    def test_bad_flags(self) -> None:
        sink = RecordingSink()
        with pytest.raises(InvalidArgumentError):
            tracepath_comp(SQUARE, 1.0, 2.5, sink)
        assert sink.operations() == ["error"]

    def test_error_message_names_kind(self) -> None:
        sink = RecordingSink()
        with pytest.raises(InvalidArgumentError):
            tracepath_comp([(0, 0)], 1.0, TraceFlags.RIGHT, sink)
        (_, (message,)) = sink.calls[0]
        assert "too-few-points" in message


class TestStraightPath:
    """A single straight segment."""

    def test_entry_move_exit(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0), (10, 0)], 1.0, TraceFlags.RIGHT | TraceFlags.KEEPZ
        )
        kinds = [type(c) for c in result.commands]
        assert kinds == [RapidMove, Move, MoveRelative]
        assert result.arc_count == 0
        assert result.move_count == 3

    def test_comments_bracket_geometry(self) -> None:
        result = Compensator().compute([(0, 0), (10, 0)], 1.0, TraceFlags.RIGHT)
        assert isinstance(result.commands[0], Comment)
        assert "width 1mm" in result.commands[0].text
        assert result.commands[-1] == Comment("end of tool compensation")

    def test_inch_width(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0), (100, 0)], Quantity.inch(0.1), TraceFlags.RIGHT
        )
        assert result.commands[0].y == pytest.approx(-2.54)


class TestClosedSquare:
    """Closed square, outside and inside."""

    def test_outside_square_four_arcs_and_closure(self, quiet_settings) -> None:
        """Test four quarter arcs of the tool radius and a closed loop."""
        result = Compensator(quiet_settings).compute(
            SQUARE, 2.0, TraceFlags.RIGHT | TraceFlags.CLOSED
        )
        arcs = [c for c in result.commands if isinstance(c, ARC_TYPES)]
        assert len(arcs) == 4
        assert all(isinstance(a, ArcCCW) and a.radius == 2.0 for a in arcs)
        first = result.commands[0]
        assert (arcs[-1].x, arcs[-1].y) == pytest.approx((first.x, first.y))
        assert result.advisories == []

    def test_inside_square_too_wide(self, quiet_settings) -> None:
        """Test an inside offset wider than half the side removes the corners."""
        result = Compensator(quiet_settings).compute(
            SQUARE, 6.0, TraceFlags.LEFT | TraceFlags.CLOSED
        )
        kinds = [w.kind for w in result.warnings]
        assert WarningKind.UNREACHABLE_CORNER_REMOVED in kinds
        assert WarningKind.PATH_COLLAPSED in kinds
        assert geometry(result.commands) == []

    def test_inside_moves_stay_inside(self, quiet_settings) -> None:
        """Test no inside move overshoots the square."""
        result = Compensator(quiet_settings).compute(
            SQUARE, 4.5, TraceFlags.LEFT | TraceFlags.CLOSED
        )
        for x, y in end_points(result.commands):
            assert -1e-9 <= x <= 10.0 + 1e-9
            assert -1e-9 <= y <= 10.0 + 1e-9


class TestDuplicatesAndReversals:
    """Coincident points and 180 degree turns."""

    def test_repeated_point_collapses(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0), (5, 0), (5, 0), (5, 5)], 1.0, TraceFlags.RIGHT
        )
        assert result.warnings == []
        assert len(result.points) == 3
        moves = [(c.x, c.y) for c in result.commands if type(c) is Move]
        assert len(moves) == len(set(moves))

    def test_legal_reversal_half_circle(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0), (10, 0), (10, -5), (10, 0), (20, 0)], 1.0, TraceFlags.RIGHT
        )
        arcs = [c for c in result.commands if isinstance(c, ARC_TYPES)]
        assert len(arcs) == 1
        assert isinstance(arcs[0], ArcCCWRelative)
        assert arcs[0].radius == 1.0
        assert (arcs[0].dx**2 + arcs[0].dy**2) ** 0.5 == pytest.approx(2.0)

    def test_wrong_side_reversal_removed(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0), (10, 0), (10, 5), (10, 0), (20, 0)], 1.0, TraceFlags.RIGHT
        )
        assert result.arc_count == 0
        assert result.warnings == []
        assert result.reduction.reversals_removed == 1


class TestAdvisories:
    """Non-fatal advisories in the stream."""

    def test_default_side(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute([(0, 0), (10, 0)], 1.0, 0)
        assert result.commands[0] == Warning(
            WarningKind.DEFAULT_SIDE_ASSUMED,
            "Neither left nor right side selected, assuming right",
        )

    def test_quiet_suppresses_all(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0, 0), (10, 0, 0), (10, 10, 0), (0, 0, -1)], 1.0, TraceFlags.QUIET
        )
        assert result.warnings == []
        assert WarningKind.DEFAULT_SIDE_ASSUMED in result.advisories
        assert WarningKind.AUTO_CLOSED_PATH_Z_MISMATCH in result.advisories

    def test_entry_exit_collision(self, quiet_settings) -> None:
        coords = [(0, 0), (10, 0), (10, 10), (-10, 5), (-10, -10)]
        result = Compensator(quiet_settings).compute(
            coords, 1.0, TraceFlags.RIGHT | TraceFlags.CLOSED
        )
        assert [w.kind for w in result.warnings] == [WarningKind.ENTRY_EXIT_COLLISION]

    def test_warnings_precede_geometry(self) -> None:
        sink = RecordingSink()
        tracepath_comp([(0, 0), (10, 0)], 1.0, 0, sink)
        ops = sink.operations()
        assert ops.index("warning") < ops.index("rapid_move")


class TestZPolicies:
    """Z fill, keep and restore."""

    def test_z_filled_from_tool(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0), (10, 0)], 1.0, TraceFlags.RIGHT, ToolPosition(z=-1.0)
        )
        assert result.commands[1] == Move(z=-1.0)
        assert result.commands[2].z == -1.0

    def test_restore_z(self, quiet_settings) -> None:
        result = Compensator(quiet_settings).compute(
            [(0, 0, -3), (10, 0, -3)],
            1.0,
            TraceFlags.RIGHT | TraceFlags.OLDZ,
            ToolPosition(0.0, 0.0, 5.0),
        )
        assert result.commands[-1] == RapidMove(z=5.0)


class TestIdempotence:
    """Re-running reduction on a reduced path."""

    def test_reduced_path_is_stable(self, quiet_settings) -> None:
        coords = [(0, 0), (10, 0), (10, -0.5), (20, -10.5), (30, -10.5)]
        result = Compensator(quiet_settings).compute(coords, 1.0, TraceFlags.RIGHT)
        assert result.reduction.corners_removed == 1

        advisories = Advisories()
        frames = SegmentFrames(result.points, side=1.0, closed=False, advisories=advisories)
        frames.build()
        second = reduce_concave_corners(frames, 1.0, advisories)
        assert not second.changed
        assert advisories.raised == []
        assert frames.points == result.points

    def test_zigzag_cascade_stays_near_outline(self, quiet_settings) -> None:
        """Test a cascade of folds leaves no bisector move far off the path."""
        coords = [(7, 2), (8, 0), (6, 5), (4, 3), (3, 6)]
        result = Compensator(quiet_settings).compute(coords, 2.0, TraceFlags.RIGHT)
        for x, y in end_points(result.commands):
            assert 1.0 - 1e-9 <= x <= 10.0 + 1e-9
            assert -2.0 - 1e-9 <= y <= 8.0 + 1e-9

        advisories = Advisories()
        frames = SegmentFrames(result.points, side=1.0, closed=False, advisories=advisories)
        frames.build()
        assert not reduce_concave_corners(frames, 2.0, advisories).changed


class TestRoundTrip:
    """Offsetting right then left by the same width."""

    def test_round_trip_returns_to_original_lines(self, quiet_settings) -> None:
        original = [(0.0, 0.0), (10.0, 0.0), (10.0, -10.0)]
        compensator = Compensator(quiet_settings)

        first = compensator.compute(original, 1.0, TraceFlags.RIGHT)
        offset_path = end_points(first.commands)[:-1]  # drop exit move
        second = compensator.compute(offset_path, 1.0, TraceFlags.LEFT)
        back = end_points(second.commands)[:-1]

        assert back[0] == pytest.approx(original[0])
        assert back[-1] == pytest.approx(original[-1])
        for x, y in back[1:-1]:
            on_first_edge = abs(y) < 1e-9 and -1e-9 <= x <= 10.0 + 1e-9
            on_second_edge = abs(x - 10.0) < 1e-9 and -10.0 - 1e-9 <= y <= 1e-9
            assert on_first_edge or on_second_edge


class TestGcodeOutput:
    """The pipeline rendered as G-code."""

    def test_outside_square_program(self) -> None:
        writer = GcodeWriter()
        tracepath_comp(SQUARE, 2.0, TraceFlags.RIGHT | TraceFlags.CLOSED, writer)
        lines = writer.lines
        assert lines[:2] == ["G21", "G90"]
        assert lines[3] == "G0 X0.0000 Y-2.0000"
        assert sum(line.startswith("G3") for line in lines) == 4
        assert lines[-1] == "(end of tool compensation)"
        assert writer.position.x == pytest.approx(0.0)
        assert writer.position.y == pytest.approx(-4.0)

    def test_points_are_point_instances(self) -> None:
        result = Compensator().compute(SQUARE, 1.0, TraceFlags.RIGHT | TraceFlags.CLOSED)
        assert all(isinstance(p, Point) for p in result.points)
