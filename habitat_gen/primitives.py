"""Primitive geometry types for habitat generation.

Prims map directly to MuJoCo geom types. Fixtures and stairs compose
primitives; walls, floors and conduits are meshes (see solids.py).

Coordinate convention (engine frame):
    - Y-up, right-handed
    - Polar placement: x = cos(angle) * r, z = sin(angle) * r
    - Fixture origin at the center of its footprint on the deck (y=0 is bottom)
    - Fixture local +x points radially outward once placed (yaw = -angle)

Size convention (matches MuJoCo, with the long axis on Y instead of Z):
    - BOX: (half_x, half_y, half_z)
    - CYLINDER: (radius, half_height, 0)  -- aligned along Y axis
    - SPHERE: (radius, 0, 0)
    - CAPSULE: (radius, half_height, 0)  -- aligned along Y axis
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

import mujoco
import numpy as np


class Placement(Enum):
    """Where a fixture prefers to sit inside a deck sector."""

    HULL = "hull"  # Against the outer sphere, back facing outward
    CORE = "core"  # Against the central structural cylinder
    PARTITION = "partition"  # Along a partition wall at the sector edge
    CENTER = "center"  # Middle of the sector


class GeomType(IntEnum):
    """MuJoCo geom types for primitive shapes."""

    BOX = mujoco.mjtGeom.mjGEOM_BOX
    CYLINDER = mujoco.mjtGeom.mjGEOM_CYLINDER
    SPHERE = mujoco.mjtGeom.mjGEOM_SPHERE
    CAPSULE = mujoco.mjtGeom.mjGEOM_CAPSULE
    ELLIPSOID = mujoco.mjtGeom.mjGEOM_ELLIPSOID


@dataclass(frozen=True)
class Prim:
    """A single primitive shape positioned relative to its owner's origin.

    Attributes:
        geom_type: Shape type (box, cylinder, sphere, etc.)
        size: Size parameters; meaning depends on geom_type (see module doc)
        pos: Position relative to the owner's origin (x, y, z)
        rgba: Color and opacity (r, g, b, a), values in [0, 1]
        euler: Rotation in radians about (x, y, z), applied x, then y, then z
    """

    geom_type: GeomType
    size: tuple[float, float, float]
    pos: tuple[float, float, float]
    rgba: tuple[float, float, float, float]
    euler: tuple[float, float, float] = (0.0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# Common material colors (use in fixtures for a consistent look)
# ---------------------------------------------------------------------------

REGOLITH = (0.545, 0.271, 0.075, 1.0)  # outer protective shell
FABRIC_SHELL = (0.80, 0.80, 0.80, 0.5)  # inner structural sphere, always see-through
WIRE_CYAN = (0.0, 0.733, 1.0, 1.0)  # inner shell wireframe
WIRE_OLIVE = (0.533, 0.533, 0.0, 1.0)  # outer shell wireframe

DECK_GRAY = (0.62, 0.63, 0.66, 1.0)
PARTITION_WHITE = (0.88, 0.88, 0.86, 1.0)
CORE_STEEL = (0.58, 0.60, 0.64, 1.0)
HATCH_YELLOW = (0.90, 0.75, 0.15, 1.0)
DOOR_BLUE = (0.30, 0.42, 0.62, 1.0)
GLASS = (0.65, 0.80, 0.90, 0.35)

METAL_GRAY = (0.55, 0.55, 0.55, 1.0)
METAL_DARK = (0.30, 0.30, 0.30, 1.0)
METAL_CHROME = (0.75, 0.75, 0.78, 1.0)

PLASTIC_WHITE = (0.90, 0.90, 0.88, 1.0)
PLASTIC_BLACK = (0.15, 0.15, 0.15, 1.0)

FABRIC_BLUE = (0.25, 0.35, 0.55, 1.0)
FABRIC_GRAY = (0.45, 0.45, 0.45, 1.0)
FABRIC_CREAM = (0.95, 0.92, 0.84, 1.0)

PIPE_COPPER = (0.72, 0.45, 0.20, 1.0)
CABLE_ORANGE = (0.95, 0.45, 0.10, 1.0)
COOLANT_GREEN = (0.20, 0.55, 0.35, 1.0)
PLANT_GREEN = (0.25, 0.55, 0.22, 1.0)

# Functional-zone accents (sleep, hygiene, exercise, food, life support)
ZONE_SLEEP = (0.85, 0.25, 0.25, 1.0)
ZONE_HYGIENE = (0.25, 0.75, 0.35, 1.0)
ZONE_EXERCISE = (0.90, 0.85, 0.20, 1.0)
ZONE_FOOD = (0.95, 0.60, 0.10, 1.0)
ZONE_LIFE_SUPPORT = (0.15, 0.80, 0.85, 1.0)

# ---------------------------------------------------------------------------
# Rotation utilities (for placing rotated primitives)
# ---------------------------------------------------------------------------


def rot_x(angle: float) -> np.ndarray:
    """3x3 rotation about the X axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rot_y(angle: float) -> np.ndarray:
    """3x3 rotation about the Y (vertical) axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rot_z(angle: float) -> np.ndarray:
    """3x3 rotation about the Z axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def euler_to_matrix(euler: tuple[float, float, float]) -> np.ndarray:
    """Euler angles (XYZ extrinsic) to a 3x3 rotation matrix."""
    rx, ry, rz = euler
    return rot_z(rz) @ rot_y(ry) @ rot_x(rx)


def prim_matrix(prim: Prim) -> np.ndarray:
    """4x4 transform of a prim relative to its owner's origin."""
    m = np.eye(4)
    m[:3, :3] = euler_to_matrix(prim.euler)
    m[:3, 3] = prim.pos
    return m


def prim_height_range(prims: tuple[Prim, ...]) -> tuple[float, float]:
    """Vertical extent (min_y, max_y) of a set of unrotated prims.

    Rotated prims are approximated by their largest half-extent.
    """
    if not prims:
        return (0.0, 0.0)

    lo = float("inf")
    hi = float("-inf")
    for p in prims:
        if p.geom_type == GeomType.SPHERE:
            half = p.size[0]
        elif p.geom_type in (GeomType.CYLINDER, GeomType.CAPSULE):
            half = p.size[1] + (p.size[0] if p.geom_type == GeomType.CAPSULE else 0.0)
        else:
            half = p.size[1]
        if p.euler != (0.0, 0.0, 0.0):
            half = max(p.size)
        lo = min(lo, p.pos[1] - half)
        hi = max(hi, p.pos[1] + half)
    return (lo, hi)


def prim_volume(prim: Prim) -> float:
    """Enclosed volume of a prim in cubic meters (rotation has no effect)."""
    a, b, c = prim.size
    if prim.geom_type == GeomType.BOX:
        return 8.0 * a * b * c
    if prim.geom_type == GeomType.CYLINDER:
        return np.pi * a * a * 2.0 * b
    if prim.geom_type == GeomType.SPHERE:
        return 4.0 / 3.0 * np.pi * a**3
    if prim.geom_type == GeomType.CAPSULE:
        return np.pi * a * a * 2.0 * b + 4.0 / 3.0 * np.pi * a**3
    return 4.0 / 3.0 * np.pi * a * b * c  # ellipsoid
