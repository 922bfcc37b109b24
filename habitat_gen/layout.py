"""Angular sectors of a deck and the polar placement formula.

A deck is divided into equal wedges around the central core. Everything that
is placed inside a wedge (partition walls, doors, fixtures, conduit anchors)
gets its pose from one formula:

    angle  = start_angle + angle_fraction * sweep
    radius = inner_radius + radius_fraction * (outer_radius - inner_radius)
    x, z   = cos(angle) * radius, sin(angle) * radius
    yaw    = -angle + yaw_offset

With yaw = -angle an object's local +x points radially outward. Placement is
a formula, not a packer: nothing here checks whether two placements overlap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from habitat_gen.primitives import Placement, rot_x, rot_y
from habitat_gen.sphere import Level

TWO_PI = 2 * math.pi


@dataclass(frozen=True)
class Sector:
    """One angular wedge of a deck."""

    index: int
    start_angle: float
    sweep: float
    inner_radius: float
    outer_radius: float

    @property
    def end_angle(self) -> float:
        # Computed like the next sector's start so neighbours share the
        # exact same float.
        return (self.index + 1) * self.sweep

    @property
    def mid_angle(self) -> float:
        return self.start_angle + self.sweep / 2

    def angle_at(self, fraction: float) -> float:
        return self.start_angle + fraction * self.sweep

    def radius_at(self, fraction: float) -> float:
        return self.inner_radius + fraction * (self.outer_radius - self.inner_radius)


def partition(sector_count: int, inner_radius: float, outer_radius: float) -> tuple[Sector, ...]:
    """Split a full turn into ``sector_count`` equal sectors starting at angle 0.

    A count below 1 is degenerate and yields no sectors.
    """
    if sector_count < 1:
        return ()
    sweep = TWO_PI / sector_count
    return tuple(
        Sector(i, i * sweep, sweep, inner_radius, outer_radius) for i in range(sector_count)
    )


@dataclass(frozen=True)
class Pose:
    """Position plus heading about the vertical axis.

    Attributes:
        position: (x, y, z) in the parent frame.
        yaw: Rotation about +y in radians.
        tilt: Rotation about local +x, applied before yaw (lays extruded
            slabs flat: -pi/2 turns local +z into +y).
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    yaw: float = 0.0
    tilt: float = 0.0

    def rotation(self) -> np.ndarray:
        return rot_y(self.yaw) @ rot_x(self.tilt)

    def matrix(self) -> np.ndarray:
        m = np.eye(4)
        m[:3, :3] = self.rotation()
        m[:3, 3] = self.position
        return m


IDENTITY = Pose()


def polar_pose(angle: float, radius: float, y: float, yaw_offset: float = 0.0, tilt: float = 0.0) -> Pose:
    return Pose(
        (math.cos(angle) * radius, y, math.sin(angle) * radius),
        -angle + yaw_offset,
        tilt,
    )


def place_pose(
    sector: Sector,
    angle_fraction: float,
    radius_fraction: float,
    vertical_offset: float,
    yaw_offset: float = 0.0,
) -> Pose:
    """Deterministic pose inside a sector; vertical_offset is an absolute height."""
    return polar_pose(
        sector.angle_at(angle_fraction),
        sector.radius_at(radius_fraction),
        vertical_offset,
        yaw_offset,
    )


@dataclass(frozen=True)
class PlacementRule:
    """Named placement fractions.

    Attributes:
        angle_fraction: Position across the sector's sweep, 0 to 1.
        radius_fraction: Position between core and hull, 0 to 1.
        height: Offset above the deck floor.
        yaw_offset: Extra heading on top of the radial one.
    """

    angle_fraction: float = 0.5
    radius_fraction: float = 0.5
    height: float = 0.0
    yaw_offset: float = 0.0

    def pose(self, sector: Sector, level: Level) -> Pose:
        return place_pose(
            sector,
            self.angle_fraction,
            self.radius_fraction,
            level.y_floor + self.height,
            self.yaw_offset,
        )


DEFAULT_RULES: dict[Placement, PlacementRule] = {
    Placement.HULL: PlacementRule(0.5, 0.82),
    Placement.CORE: PlacementRule(0.5, 0.15, yaw_offset=math.pi),
    Placement.PARTITION: PlacementRule(0.15, 0.5, yaw_offset=math.pi / 2),
    Placement.CENTER: PlacementRule(0.5, 0.5),
}
