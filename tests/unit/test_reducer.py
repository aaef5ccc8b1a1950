"""Unit tests for the concave-corner reducer.

Tests cover:
- Corners with enough room are left alone
- Folding the exit or the entry of a short segment
- Deleting corners with equal room on both sides
- Wrong-side and legal reversals
- Cascading removals that reach back upstream, open and closed
- Every remaining corner fits the tool, on random paths
"""

import random

import pytest

from toolcomp.core.advisories import Advisories
from toolcomp.core.frames import CornerKind, SegmentFrames
from toolcomp.core.reducer import Edit, reduce_concave_corners, reduce_vertex
from toolcomp.domain import Point, WarningKind

RIGHT = 1.0
LEFT = -1.0


def make_frames(coords, side=RIGHT, closed=False, quiet=False):
    """Build frames for a list of coordinate tuples."""
    advisories = Advisories(quiet=quiet)
    frames = SegmentFrames(
        [Point(*c) for c in coords], side=side, closed=closed, advisories=advisories
    )
    frames.build()
    return frames, advisories


def xy(frames):
    return [(round(p.x, 9), round(p.y, 9)) for p in frames.points]


def assert_machinable(frames, width) -> None:
    """Check every concave corner has room for its bisector move on both sides."""
    tol = frames.tolerance
    for j in range(len(frames)):
        if not frames.has_corner(j) or frames.classify(j).kind is not CornerKind.CONCAVE:
            continue
        k_in = frames.incoming(j)
        run = frames.bisector_run(j, width)
        room_in = frames.length(k_in) - frames.bisector_run(k_in, width)
        room_out = frames.length(j) - frames.bisector_run(frames.next_index(j), width)
        assert run <= room_in + tol, (j, run, room_in)
        assert run <= room_out + tol, (j, run, room_out)


def assert_stable(frames, width, advisories) -> None:
    """Check a second pass over reduced frames changes nothing."""
    before = list(frames.points)
    raised = len(advisories.raised)
    result = reduce_concave_corners(frames, width, advisories)
    assert not result.changed
    assert frames.points == before
    assert len(advisories.raised) == raised


class TestReachableCorners:
    """Tests for corners the tool fits into."""

    def test_roomy_inside_corner_unchanged(self) -> None:
        frames, advisories = make_frames([(0, 0), (10, 0), (10, -10)])
        result = reduce_concave_corners(frames, 2.0, advisories)
        assert not result.changed
        assert len(frames) == 3
        assert advisories.raised == []

    def test_convex_corner_never_reduced(self) -> None:
        """Test that an outside corner is kept however short its segments."""
        frames, _ = make_frames([(0, 0), (0.1, 0), (0.1, 0.1)])
        assert reduce_vertex(frames, 1, 5.0) is Edit.NONE

    def test_exact_fit(self) -> None:
        """Test a corner whose bisector run equals the segment length."""
        frames, advisories = make_frames([(0, 0), (10, 0), (10, -2)])
        result = reduce_concave_corners(frames, 2.0, advisories)
        assert not result.changed


class TestFolding:
    """Tests for folding short segments onto their neighbours."""

    def test_fold_exit(self) -> None:
        """Test a short outgoing segment folds back onto the incoming one."""
        frames, advisories = make_frames([(0, 0), (10, 0), (10, -0.5), (20, -10.5)])
        result = reduce_concave_corners(frames, 1.0, advisories)
        assert result.corners_removed == 1
        assert result.reversals_removed == 0
        assert xy(frames) == [(0.0, 0.0), (9.5, 0.0), (20.0, -10.5)]
        assert [w.kind for w in advisories.warnings] == [WarningKind.UNREACHABLE_CORNER_REMOVED]

    def test_fold_entry(self) -> None:
        """Test the mirrored path folds its short incoming segment."""
        frames, advisories = make_frames(
            [(20, -10.5), (10, -0.5), (10, 0), (0, 0)], side=LEFT
        )
        result = reduce_concave_corners(frames, 1.0, advisories)
        assert result.corners_removed == 1
        assert xy(frames) == [(20.0, -10.5), (9.5, 0.0), (0.0, 0.0)]

    def test_fold_keeps_z(self) -> None:
        frames, advisories = make_frames(
            [(0, 0, -1), (10, 0, -1), (10, -0.5, -2), (20, -10.5, -2)]
        )
        reduce_concave_corners(frames, 1.0, advisories)
        moved = frames.points[1]
        assert (moved.x, moved.y) == pytest.approx((9.5, 0.0))
        assert moved.z == -2.0

    def test_fold_exit_projects_at_path_end(self) -> None:
        """Test the last segment of an open path is projected orthogonally."""
        frames, advisories = make_frames([(0, 0), (10, 0), (10, -0.5)])
        result = reduce_concave_corners(frames, 1.0, advisories)
        assert result.corners_removed == 1
        assert xy(frames) == [(0.0, 0.0), (10.0, 0.0)]

    def test_frames_consistent_after_fold(self) -> None:
        frames, advisories = make_frames([(0, 0), (10, 0), (10, -0.5), (20, -10.5)])
        reduce_concave_corners(frames, 1.0, advisories)
        assert len(frames.directions) == frames.segment_count
        d = frames.directions[1]
        assert d.x == pytest.approx(2**-0.5)
        assert d.y == pytest.approx(-(2**-0.5))


class TestEqualRoom:
    """Tests for corners with equal room on both sides."""

    def test_inside_square_collapses(self) -> None:
        """Test an inside offset wider than half the square removes everything."""
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        frames, advisories = make_frames(square, side=LEFT, closed=True)
        result = reduce_concave_corners(frames, 6.0, advisories)
        assert result.corners_removed >= 1
        assert len(frames) < 2
        assert advisories.raised == [WarningKind.UNREACHABLE_CORNER_REMOVED]

    def test_single_warning_counts_removals(self) -> None:
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        frames, advisories = make_frames(square, side=LEFT, closed=True)
        result = reduce_concave_corners(frames, 6.0, advisories)
        (warning,) = advisories.warnings
        assert f"Removed {result.corners_removed} " in warning.text

    def test_symmetric_v_deletes_corner(self) -> None:
        """Test an open V with equal arms loses its corner and keeps both ends."""
        frames, advisories = make_frames([(-3, -3), (0, 0), (3, -3)])
        result = reduce_concave_corners(frames, 5.0, advisories)
        assert result.corners_removed == 1
        assert xy(frames) == [(-3.0, -3.0), (3.0, -3.0)]

    def test_symmetric_v_that_fits(self) -> None:
        frames, advisories = make_frames([(-3, -3), (0, 0), (3, -3)])
        result = reduce_concave_corners(frames, 4.0, advisories)
        assert not result.changed
        assert len(frames) == 3

    def test_tie_within_tolerance(self) -> None:
        """Test arms differing by less than the tolerance count as equal."""
        points = [Point(-3.0, -3.0), Point(0.0, 0.0), Point(3.0, -3.0005)]
        frames = SegmentFrames(
            points, side=RIGHT, closed=False, advisories=Advisories(), tolerance=1e-3
        )
        frames.build()
        assert reduce_vertex(frames, 1, 5.0) is Edit.CORNER_DELETED
        assert xy(frames) == [(-3.0, -3.0), (3.0, -3.0005)]

    def test_tie_outside_tolerance(self) -> None:
        """Test a slightly longer exit arm folds the entry onto it instead."""
        points = [Point(-3.0, -3.0), Point(0.0, 0.0), Point(3.0, -3.005)]
        frames = SegmentFrames(
            points, side=RIGHT, closed=False, advisories=Advisories(), tolerance=1e-3
        )
        frames.build()
        assert reduce_vertex(frames, 1, 5.0) is Edit.ENTRY_FOLDED
        assert len(frames) == 2
        entry = frames.points[0]
        assert (entry.x, entry.y) == pytest.approx((0.0025, -0.0025), abs=1e-4)
        assert (frames.points[1].x, frames.points[1].y) == (3.0, -3.005)

    def test_inside_square_that_fits(self) -> None:
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        frames, advisories = make_frames(square, side=LEFT, closed=True)
        result = reduce_concave_corners(frames, 4.0, advisories)
        assert not result.changed
        assert len(frames) == 4

    def test_quiet_suppresses_warning(self) -> None:
        frames, advisories = make_frames(
            [(0, 0), (10, 0), (10, -0.5), (20, -10.5)], quiet=True
        )
        reduce_concave_corners(frames, 1.0, advisories)
        assert advisories.warnings == []
        assert advisories.raised == [WarningKind.UNREACHABLE_CORNER_REMOVED]


class TestReversals:
    """Tests for 180 degree turns."""

    def test_legal_reversal_kept(self) -> None:
        """Test a reversal on the tool side survives reduction."""
        frames, advisories = make_frames([(0, 0), (10, 0), (10, -5), (10, 0), (20, 0)])
        result = reduce_concave_corners(frames, 1.0, advisories)
        assert not result.changed
        assert len(frames) == 5

    def test_wrong_side_reversal_removed(self) -> None:
        """Test a spike away from the tool is removed without an advisory."""
        frames, advisories = make_frames([(0, 0), (10, 0), (10, 5), (10, 0), (20, 0)])
        result = reduce_concave_corners(frames, 1.0, advisories)
        assert result.reversals_removed == 1
        assert result.corners_removed == 0
        assert xy(frames) == [(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)]
        assert advisories.raised == []


class TestIdempotence:
    """Tests for re-running the pass."""

    @pytest.mark.parametrize(
        "coords,side,closed,width",
        [
            ([(0, 0), (10, 0), (10, -0.5), (20, -10.5)], RIGHT, False, 1.0),
            ([(0, 0), (10, 0), (10, 5), (10, 0), (20, 0)], RIGHT, False, 1.0),
            ([(0, 0), (10, 0), (10, 10), (0, 10)], LEFT, True, 3.0),
            ([(0, 0), (4, 3), (8, 0), (8, 8), (0, 8)], RIGHT, True, 1.5),
        ],
    )
    def test_second_pass_is_noop(self, coords, side, closed, width) -> None:
        """Test a reduced path passes through the reducer unchanged."""
        frames, advisories = make_frames(coords, side=side, closed=closed)
        reduce_concave_corners(frames, width, advisories)
        assert_stable(frames, width, advisories)

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("closed", [False, True])
    def test_random_paths(self, seed: int, closed: bool) -> None:
        """Test random grid paths end up machinable and stable."""
        rng = random.Random(seed)
        for _ in range(50):
            coords = [
                (rng.randint(0, 10), rng.randint(0, 10)) for _ in range(rng.randint(3, 8))
            ]
            side = rng.choice([RIGHT, LEFT])
            width = rng.choice([0.5, 1.0, 2.0, 3.0])
            frames, advisories = make_frames(coords, side=side, closed=closed)
            reduce_concave_corners(frames, width, advisories)
            assert_machinable(frames, width)
            assert_stable(frames, width, advisories)


class TestCascade:
    """Tests for edits that make an earlier corner unreachable."""

    ZIGZAG = [(7, 2), (8, 0), (6, 5), (4, 3), (3, 6)]

    def test_entry_fold_rechecks_upstream_corner(self) -> None:
        """Test a corner two vertices before an entry fold is reduced as well."""
        frames, advisories = make_frames(self.ZIGZAG)
        result = reduce_concave_corners(frames, 2.0, advisories)
        assert result.corners_removed >= 2
        assert_machinable(frames, 2.0)
        assert_stable(frames, 2.0, advisories)

    def test_reduced_points_stay_on_original_outline(self) -> None:
        frames, advisories = make_frames(self.ZIGZAG)
        reduce_concave_corners(frames, 2.0, advisories)
        for p in frames.points:
            assert 3.0 - 1e-9 <= p.x <= 8.0 + 1e-9
            assert -1e-9 <= p.y <= 6.0 + 1e-9

    def test_closed_zigzag(self) -> None:
        frames, advisories = make_frames(self.ZIGZAG, closed=True)
        reduce_concave_corners(frames, 2.0, advisories)
        assert_machinable(frames, 2.0)
        assert_stable(frames, 2.0, advisories)

    @pytest.mark.parametrize("closed", [False, True])
    def test_staircase(self, closed: bool) -> None:
        """Test a run of short steps into a deep pocket reduces to a fit."""
        stairs = [(0, 0), (10, 0), (10, -1), (11, -1), (11, -2), (12, -2), (12, -3), (20, -12)]
        frames, advisories = make_frames(stairs, closed=closed)
        result = reduce_concave_corners(frames, 1.5, advisories)
        assert result.corners_removed >= 1
        assert_machinable(frames, 1.5)
        assert_stable(frames, 1.5, advisories)
