"""Closed 2D profiles for walls, openings and rings.

A profile is a closed polygon in a solid's local plane, later extruded into
a slab by solids.extrude(). Profile x is the radial coordinate for walls
(distance from the habitat axis) and profile y is the vertical coordinate
relative to the wall's vertical center.

Conventions:
    - Counter-clockwise winding (positive signed area)
    - The first point is repeated at the end (closed loop)
    - Chain-built profiles list their vertices so that vertex i and vertex
      (count - 1 - i) sit at the same height. solids.extrude() relies on
      this pairing to triangulate caps without a general triangulator.
    - Ring profiles carry a second loop (the hole) with the same point
      count and angles as the outer loop.

Degenerate requests (a wall that would poke through the bounding sphere)
return EMPTY_PROFILE, which extrudes to a zero-volume solid.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from habitat_gen.sphere import cross_section_radius

log = logging.getLogger(__name__)

Point2 = tuple[float, float]


@dataclass(frozen=True)
class Profile:
    """A closed polygon, optionally with one hole.

    Attributes:
        points: Outer loop, first point repeated at the end.
        hole: Inner loop (same convention), empty for solid profiles.
    """

    points: tuple[Point2, ...] = ()
    hole: tuple[Point2, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.points) < 4

    @property
    def is_closed(self) -> bool:
        return not self.points or self.points[0] == self.points[-1]

    def __len__(self) -> int:
        return len(self.points)

    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the outer loop."""
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def center(self) -> Point2:
        """Center of the bounding box."""
        x0, y0, x1, y1 = self.bounds()
        return ((x0 + x1) / 2, (y0 + y1) / 2)

    def signed_area(self) -> float:
        """Shoelace area of the outer loop (positive when counter-clockwise)."""
        return _signed_area(self.points)


EMPTY_PROFILE = Profile()


def _signed_area(points: tuple[Point2, ...]) -> float:
    area = 0.0
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        area += x0 * y1 - x1 * y0
    return area / 2


def _close(points: list[Point2]) -> tuple[Point2, ...]:
    return tuple(points) + (points[0],)


# ---------------------------------------------------------------------------
# Sphere-conforming walls
# ---------------------------------------------------------------------------


def _wall_loop(
    heights: list[float],
    vertical_center: float,
    inner_radius: float,
    sphere_radius: float,
) -> Profile:
    """Outer chain up the sphere, inner chain down the core, closed."""
    outer: list[Point2] = []
    for y in heights:
        r = cross_section_radius(sphere_radius, y)
        if r is None or r <= inner_radius:
            log.debug(
                "wall span degenerate at y=%.3f (sphere r=%.3f, inner r=%.3f)",
                y,
                sphere_radius,
                inner_radius,
            )
            return EMPTY_PROFILE
        outer.append((r, y - vertical_center))

    inner = [(inner_radius, y - vertical_center) for y in reversed(heights)]
    return Profile(_close(outer + inner))


def build_wall_profile(
    height: float,
    vertical_center: float,
    inner_radius: float,
    sphere_radius: float,
    segments: int,
) -> Profile:
    """Cross-section of a radial partition wall bounded by the sphere.

    The outer edge follows the sphere's curvature with ``segments`` straight
    pieces; the inner edge is the vertical line at ``inner_radius``. The
    polyline error shrinks as segments grows (roughly height² / segments²).

    Returns EMPTY_PROFILE when either end of the span lies outside the
    sphere, or when the sphere closes in to the inner radius inside the span.
    """
    n = max(int(segments), 1)
    y_start = vertical_center - height / 2
    y_end = vertical_center + height / 2
    if (
        cross_section_radius(sphere_radius, y_start) is None
        or cross_section_radius(sphere_radius, y_end) is None
    ):
        log.debug(
            "wall [%.3f, %.3f] pokes through sphere r=%.3f",
            y_start,
            y_end,
            sphere_radius,
        )
        return EMPTY_PROFILE

    heights = [y_start + (y_end - y_start) * i / n for i in range(n + 1)]
    return _wall_loop(heights, vertical_center, inner_radius, sphere_radius)


def build_upper_wall_profile(
    y_floor: float,
    y_ceiling: float,
    inner_radius: float,
    sphere_radius: float,
    segments: int,
) -> Profile:
    """Wall profile that starts and ends flush with the floor and ceiling.

    Same loop as build_wall_profile(), but the terminal outer points are
    pinned to exactly y_floor and y_ceiling instead of being sampled, so the
    wall leaves no free top edge under the dome.
    """
    n = max(int(segments), 1)
    vertical_center = (y_floor + y_ceiling) / 2
    heights = [y_floor + (y_ceiling - y_floor) * i / n for i in range(n + 1)]
    heights[0] = y_floor
    heights[-1] = y_ceiling
    return _wall_loop(heights, vertical_center, inner_radius, sphere_radius)


# ---------------------------------------------------------------------------
# Openings and rings
# ---------------------------------------------------------------------------


def build_door_outline(width: float, height: float, arch_segments: int = 6) -> Profile:
    """Door leaf: straight jambs with a rounded head, base on y=0.

    The head is a quarter-circle per side of radius width/2, stopping just
    short of the apex so the two halves meet on a short flat lintel.
    """
    half = width / 2
    if width <= 0 or height <= half:
        return EMPTY_PROFILE
    n = max(int(arch_segments), 1)
    spring = height - half  # where the rounded head starts

    right: list[Point2] = [(half, 0.0)]
    for k in range(n):
        theta = (math.pi / 2) * k / n
        right.append((half * math.cos(theta), spring + half * math.sin(theta)))
    left = [(-x, y) for x, y in reversed(right)]
    return Profile(_close(right + left))


def build_window_outline(radius: float, segments: int = 16) -> Profile:
    """Round porthole centered on the origin.

    Vertices are placed at half-step angles so each right-side vertex has a
    left-side twin at the same height.
    """
    if radius <= 0:
        return EMPTY_PROFILE
    k = max(int(segments) // 2, 2)
    right: list[Point2] = []
    for j in range(k):
        theta = -math.pi / 2 + math.pi * (j + 0.5) / k
        right.append((radius * math.cos(theta), radius * math.sin(theta)))
    left = [(-x, y) for x, y in reversed(right)]
    return Profile(_close(right + left))


def build_ring_profile(
    outer_radius: float | None,
    inner_radius: float,
    segments: int = 32,
) -> Profile:
    """Flat annulus: hatch rims, ring floors, and (extruded upward) core walls.

    Accepts a degenerate outer radius (None) straight from a cross-section
    lookup and returns EMPTY_PROFILE for it.
    """
    if outer_radius is None or outer_radius <= inner_radius or inner_radius <= 0:
        log.debug("ring degenerate (outer=%s, inner=%.3f)", outer_radius, inner_radius)
        return EMPTY_PROFILE
    n = max(int(segments), 3)
    angles = [2 * math.pi * j / n for j in range(n)]
    outer = [(outer_radius * math.cos(a), outer_radius * math.sin(a)) for a in angles]
    hole = [(inner_radius * math.cos(a), inner_radius * math.sin(a)) for a in angles]
    return Profile(_close(outer), _close(hole))


# Hatch rims are plain rings; the alias keeps call sites readable.
build_hatch_ring = build_ring_profile


def build_sector_plate(
    outer_radius: float | None,
    inner_radius: float,
    start_angle: float,
    sweep: float,
    segments: int = 8,
    hole_center: Point2 | None = None,
    hole_radius: float = 0.0,
    hole_segments: int = 24,
) -> Profile:
    """Plan-view annular sector, optionally pierced by a round hole.

    Points are (cos(a) * r, sin(a) * r), the same angle convention as sector
    placement. The outer arc runs up the sweep and the inner arc back down,
    so vertex i and vertex (count - 1 - i) share an angle. A hole (the stair
    hatch) breaks that pairing; solids.extrude() triangulates it instead.
    """
    if outer_radius is None or outer_radius <= inner_radius or inner_radius <= 0 or sweep <= 0:
        log.debug("sector plate degenerate (outer=%s, inner=%.3f)", outer_radius, inner_radius)
        return EMPTY_PROFILE
    n = max(int(segments), 1)
    angles = [start_angle + sweep * i / n for i in range(n + 1)]
    outer = [(outer_radius * math.cos(a), outer_radius * math.sin(a)) for a in angles]
    inner = [(inner_radius * math.cos(a), inner_radius * math.sin(a)) for a in reversed(angles)]

    hole: tuple[Point2, ...] = ()
    if hole_center is not None and hole_radius > 0:
        cx, cy = hole_center
        k = max(int(hole_segments), 3)
        ring = [2 * math.pi * j / k for j in range(k)]
        hole = _close([(cx + hole_radius * math.cos(a), cy + hole_radius * math.sin(a)) for a in ring])
    return Profile(_close(outer + inner), hole)
