"""Tests for the coordinate transform and the edge classifier.

Validates Y flip and half-up rounding, number rendering, and the
straight/curved decision for every edge of open and closed paths.
"""

from __future__ import annotations

import math

import pytest

from scrap_export.errors import GeometryError
from scrap_export.scene.nodes import Segment
from scrap_export.th2.geometry import (
    Edge,
    classify_edges,
    format_number,
    format_point,
    round_half_up,
    transform,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def curved_square() -> tuple[Segment, ...]:
    """Closed path whose every vertex has handles on both sides."""
    return (
        Segment(anchor=(-580, -92), handle_in=(2, 5), handle_out=(-2, -5)),
        Segment(anchor=(-566, -125), handle_in=(-14, 3), handle_out=(14, -3)),
        Segment(anchor=(-524, -126), handle_in=(-4, -7), handle_out=(4, 7)),
        Segment(anchor=(-524, -90), handle_in=(1, -4), handle_out=(-1, 4)),
    )


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------


class TestTransform:
    def test_flips_y(self) -> None:
        assert transform(10, -20) == (10, 20)

    def test_keeps_two_decimals(self) -> None:
        assert transform(-130.87, -18.95) == (-130.87, 18.95)

    def test_rounds_half_up(self) -> None:
        assert round_half_up(0.125) == 0.13
        assert round_half_up(-0.125) == -0.12

    def test_zero_has_no_sign(self) -> None:
        x, y = transform(0.0, 0.0)
        assert format_number(x) == "0"
        assert format_number(y) == "0"
        assert math.copysign(1.0, y) == 1.0

    def test_double_negation_restores_y(self) -> None:
        assert transform(*transform(3.25, -7.5)) == (3.25, -7.5)

    def test_custom_precision(self) -> None:
        assert transform(1.23456, -1.23456, precision=3) == (1.235, 1.235)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad: float) -> None:
        with pytest.raises(GeometryError, match="Non-finite"):
            transform(bad, 0.0)

    def test_overflow_when_scaled_rejected(self) -> None:
        with pytest.raises(GeometryError, match="out of range"):
            transform(1e307, 0.0)

    def test_large_value_without_overflow(self) -> None:
        assert transform(1e300, 0.0, precision=0) == (1e300, 0.0)


class TestFormatNumber:
    def test_integral_has_no_fraction(self) -> None:
        assert format_number(10.0) == "10"
        assert format_number(-525.0) == "-525"

    def test_fraction_kept(self) -> None:
        assert format_number(18.95) == "18.95"
        assert format_number(-107.18) == "-107.18"

    def test_format_point(self) -> None:
        assert format_point((-43.84, -18.53)) == "-43.84 18.53"


# ---------------------------------------------------------------------------
# Edge classifier
# ---------------------------------------------------------------------------


class TestClassifyEdges:
    def test_open_corner_path_is_all_straight(self) -> None:
        segments = [Segment.corner(0, 0), Segment.corner(10, -5), Segment.corner(20, 5)]
        edges = classify_edges(segments, closed=False)
        assert [e.render() for e in edges] == ["0 0", "10 5", "20 -5"]
        assert all(len(e.points) == 1 for e in edges)

    def test_open_path_first_edge_is_straight(self, curved_square) -> None:
        edges = classify_edges(curved_square, closed=False)
        assert edges[0].render() == "-580 92"
        assert all(len(e.points) == 3 for e in edges[1:])

    def test_closed_path_repeats_first_line(self, curved_square) -> None:
        edges = classify_edges(curved_square, closed=True)
        assert len(edges) == 5
        assert edges[-1].closing
        assert edges[-1].render() == edges[0].render()

    def test_closed_curved_square(self, curved_square) -> None:
        rendered = [e.render() for e in classify_edges(curved_square, closed=True)]
        assert rendered == [
            "-525 86 -578 87 -580 92",
            "-582 97 -580 122 -566 125",
            "-552 128 -528 133 -524 126",
            "-520 119 -523 94 -524 90",
            "-525 86 -578 87 -580 92",
        ]

    def test_corner_side_control_collapses_to_anchor(self) -> None:
        segments = [
            Segment.corner(-43.84, -18.53),
            Segment(
                anchor=(-24.76, -91.72),
                handle_in=(-82.42, 0.21),
                handle_out=(82.42, -0.21),
            ),
            Segment.corner(-7.14, -18.74),
        ]
        edges = classify_edges(segments, closed=False)
        assert edges[1].render() == "-43.84 18.53 -107.18 91.51 -24.76 91.72"
        assert edges[2].render() == "57.66 91.93 -7.14 18.74 -7.14 18.74"

    def test_zero_handle_counts_as_corner(self) -> None:
        segments = [
            Segment(anchor=(0, 0), handle_out=(0.0, 0.0)),
            Segment(anchor=(10, 0), handle_in=(0, 0)),
        ]
        edges = classify_edges(segments, closed=False)
        assert edges[1] == Edge(index=1, points=((10, 0),))

    def test_tiny_handle_forces_curve(self) -> None:
        segments = [
            Segment(anchor=(0, 0), handle_out=(0.001, 0)),
            Segment.corner(10, 0),
        ]
        edges = classify_edges(segments, closed=False)
        assert len(edges[1].points) == 3
        assert edges[1].render() == "0 0 10 0 10 0"

    def test_empty_path(self) -> None:
        assert classify_edges([], closed=True) == []
