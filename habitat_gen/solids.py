"""Mesh solids: profile extrusion, frustums, and prim meshes for exporters.

A Solid wraps a trimesh.Trimesh. Closed-form meshes are built directly from
vertex and face arrays (process=False, so vertex order is part of the
contract). Solids are produced once and never mutated; placement happens
through the Pose of the scene Part that owns them.

Extrusion convention:
    - The profile lies in the local XY plane and is extruded along +Z
    - The result is re-centered by (-bbox_center_x, 0, -thickness/2) so the
      solid pivots about its own middle; the offset is kept as Solid.pivot
    - Faces wind counter-clockwise seen from outside (outward normals)
    - Caps of paired-chain and ring profiles are closed form; every other
      simple polygon goes through shapely + earcut

An empty profile extrudes to an empty Solid (no vertices, zero volume).
Scene composition treats it like any other solid; exporters skip it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import trimesh
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient

from habitat_gen.primitives import DECK_GRAY, GeomType, Prim, rot_x
from habitat_gen.profiles import Profile

log = logging.getLogger(__name__)

# Polygon count for round prims and frustums.
N_SIDES = 16


@dataclass(frozen=True, eq=False)
class Solid:
    """An immutable mesh with a display color.

    Attributes:
        mesh: Triangle mesh in the solid's local frame.
        rgba: Color and opacity, values in [0, 1].
        pivot: Translation applied to center the mesh on its local origin.
        wireframe: Render edges only (shell overlays).
    """

    mesh: trimesh.Trimesh
    rgba: tuple[float, float, float, float] = DECK_GRAY
    pivot: tuple[float, float, float] = (0.0, 0.0, 0.0)
    wireframe: bool = False

    @property
    def is_empty(self) -> bool:
        return len(self.mesh.faces) == 0

    @property
    def volume(self) -> float:
        if self.is_empty:
            return 0.0
        return float(self.mesh.volume)


def make_mesh(vertices: np.ndarray, faces) -> trimesh.Trimesh:
    """Wrap raw arrays without merging or reordering vertices."""
    return trimesh.Trimesh(
        vertices=np.asarray(vertices, dtype=np.float64).reshape(-1, 3),
        faces=np.asarray(faces, dtype=np.int64).reshape(-1, 3),
        process=False,
    )


def empty_solid(rgba: tuple[float, float, float, float] = DECK_GRAY) -> Solid:
    """Zero-extent solid for degenerate requests."""
    return Solid(make_mesh(np.empty((0, 3)), np.empty((0, 3))), rgba)


# ---------------------------------------------------------------------------
# Extrusion
# ---------------------------------------------------------------------------


def _open_loop(points) -> np.ndarray:
    """Drop the closing repeat and force counter-clockwise order."""
    pts = list(points)
    if len(pts) > 1 and pts[0] == pts[-1]:
        pts = pts[:-1]
    loop = np.asarray(pts, dtype=np.float64)
    x, y = loop[:, 0], loop[:, 1]
    area = np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y) / 2
    if area < 0:
        loop = loop[::-1]
    return loop


def _cap_triangles(n_outer: int, n_hole: int) -> list[tuple[int, int, int]]:
    """Counter-clockwise cap triangles over the stacked (outer, hole) vertices.

    With a hole: one quad per angular step between the two loops.
    Without: paired chains (vertex i twins vertex n-1-i) are stitched into a
    strip of quads; an odd count falls back to a fan, valid for convex loops.
    """
    tris: list[tuple[int, int, int]] = []
    if n_hole:
        n = n_outer
        for j in range(n):
            jn = (j + 1) % n
            tris.append((j, jn, n + jn))
            tris.append((j, n + jn, n + j))
        return tris

    n = n_outer
    if n % 2 == 0:
        for i in range(n // 2 - 1):
            a, b, c, d = i, i + 1, n - 2 - i, n - 1 - i
            tris.append((a, b, c))
            tris.append((a, c, d))
    else:
        for i in range(1, n - 1):
            tris.append((0, i, i + 1))
    return tris


def _signed_areas(base: np.ndarray, tris) -> np.ndarray:
    t = np.asarray(tris, dtype=np.int64).reshape(-1, 3)
    a, b, c = base[t[:, 0]], base[t[:, 1]], base[t[:, 2]]
    return ((b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (c[:, 0] - a[:, 0]) * (b[:, 1] - a[:, 1])) / 2


def _loop_area(loop: np.ndarray) -> float:
    x, y = loop[:, 0], loop[:, 1]
    return float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y) / 2)


def _caps_tile(base: np.ndarray, tris, area: float) -> bool:
    """True if every cap triangle winds counter-clockwise and they cover the area once."""
    if not tris:
        return False
    areas = _signed_areas(base, tris)
    return bool(np.all(areas > 1e-12)) and abs(areas.sum() - area) <= 1e-9 * max(1.0, abs(area))


def _closed_form(loops: list[np.ndarray], thickness: float) -> trimesh.Trimesh | None:
    """Extrusion with closed-form caps, or None when the profile isn't pairable."""
    outer = loops[0]
    n_hole = len(loops[1]) if len(loops) > 1 else 0
    if n_hole and n_hole != len(outer):
        return None

    base = np.vstack(loops)
    area = _loop_area(outer) - (_loop_area(loops[1]) if n_hole else 0.0)
    caps = _cap_triangles(len(outer), n_hole)
    if not _caps_tile(base, caps, area):
        return None

    m = len(base)
    verts = np.zeros((2 * m, 3), dtype=np.float64)
    verts[:m, :2] = base
    verts[m:, :2] = base
    verts[m:, 2] = thickness

    faces: list[tuple[int, int, int]] = []

    # Side walls: quads between bottom and top copies of each loop edge.
    # The hole is walked backwards so its walls face into the opening.
    start = 0
    for k, loop in enumerate(loops):
        idx = list(range(start, start + len(loop)))
        if k > 0:
            idx.reverse()
        for a, b in zip(idx, idx[1:] + idx[:1]):
            faces.append((a, b, b + m))
            faces.append((a, b + m, a + m))
        start += len(loop)

    for a, b, c in caps:
        faces.append((a + m, b + m, c + m))  # top cap, +z
        faces.append((a, c, b))  # bottom cap, -z
    return make_mesh(verts, faces)


def _triangulated(loops: list[np.ndarray], thickness: float) -> trimesh.Trimesh | None:
    """Extrusion of an arbitrary simple polygon through an ear-clipping triangulation."""
    polygon = Polygon(loops[0], loops[1:])
    if not polygon.is_valid or polygon.area <= 0:
        return None
    mesh = trimesh.creation.extrude_polygon(orient(polygon, sign=1.0), thickness, engine="earcut")
    if mesh.volume < 0:
        mesh.invert()
    return mesh


def extrude(
    profile: Profile,
    thickness: float,
    rgba: tuple[float, float, float, float] = DECK_GRAY,
) -> Solid:
    """Extrude a closed profile into a slab of the given thickness.

    Paired-chain and ring profiles get closed-form caps. Any other simple
    polygon, including one whose hole does not mirror the outer loop, is
    triangulated by earcut. A self-intersecting profile extrudes to an
    empty solid.
    """
    if profile.is_empty or thickness <= 0:
        log.debug("extrude: degenerate input (%d points, t=%.3f)", len(profile), thickness)
        return empty_solid(rgba)

    loops = [_open_loop(profile.points)]
    if profile.hole:
        loops.append(_open_loop(profile.hole))

    mesh = _closed_form(loops, thickness)
    if mesh is None:
        log.debug("extrude: %d-point profile is not pairable; triangulating", len(profile))
        mesh = _triangulated(loops, thickness)
    if mesh is None:
        log.warning("extrude: profile with %d points is self-intersecting; left empty", len(profile))
        return empty_solid(rgba)

    cx, _ = profile.center()
    pivot = (-cx, 0.0, -thickness / 2)
    mesh.apply_translation(pivot)
    return Solid(mesh, rgba, pivot)


# ---------------------------------------------------------------------------
# Frustum (engine bells, tank domes)
# ---------------------------------------------------------------------------


def frustum(
    bottom_r: float,
    half_h: float,
    top_r: float,
    rgba: tuple[float, float, float, float] = DECK_GRAY,
    sides: int = N_SIDES,
) -> Solid:
    """Closed truncated cone centered on the origin, axis along Y.

    Bottom ring at y = -half_h with radius bottom_r, top ring at y = +half_h
    with radius top_r. Cap centers are the last two vertices (bottom, top).
    """
    if half_h <= 0 or bottom_r <= 0 or top_r <= 0:
        return empty_solid(rgba)

    angles = np.linspace(0, 2 * np.pi, sides, endpoint=False)
    cos, sin = np.cos(angles), np.sin(angles)

    verts = np.empty((2 * sides + 2, 3), dtype=np.float64)
    verts[:sides, 0] = cos * bottom_r
    verts[:sides, 1] = -half_h
    verts[:sides, 2] = sin * bottom_r
    verts[sides : 2 * sides, 0] = cos * top_r
    verts[sides : 2 * sides, 1] = half_h
    verts[sides : 2 * sides, 2] = sin * top_r
    verts[-2] = [0, -half_h, 0]
    verts[-1] = [0, half_h, 0]

    bc, tc = 2 * sides, 2 * sides + 1
    faces: list[tuple[int, int, int]] = []
    for i in range(sides):
        j = (i + 1) % sides
        faces.append((i, j + sides, j))
        faces.append((i, i + sides, j + sides))
        faces.append((bc, i, j))
        faces.append((tc, j + sides, i + sides))

    return Solid(make_mesh(verts, faces), rgba)


# ---------------------------------------------------------------------------
# Prim meshes (exporters only; MuJoCo renders prims natively)
# ---------------------------------------------------------------------------

_Y_UP = np.eye(4)
_Y_UP[:3, :3] = rot_x(-np.pi / 2)  # trimesh builds round prims along Z


def prim_mesh(prim: Prim) -> trimesh.Trimesh:
    """Triangle mesh of a prim in its own frame (prim.pos/euler not applied)."""
    sx, sy, sz = prim.size
    if prim.geom_type == GeomType.BOX:
        return trimesh.creation.box(extents=(2 * sx, 2 * sy, 2 * sz))
    if prim.geom_type == GeomType.CYLINDER:
        mesh = trimesh.creation.cylinder(radius=sx, height=2 * sy, sections=N_SIDES)
        mesh.apply_transform(_Y_UP)
        return mesh
    if prim.geom_type == GeomType.CAPSULE:
        mesh = trimesh.creation.capsule(height=2 * sy, radius=sx, count=[N_SIDES, N_SIDES])
        mesh.apply_transform(_Y_UP)
        return mesh
    if prim.geom_type == GeomType.ELLIPSOID:
        mesh = trimesh.creation.icosphere(subdivisions=2, radius=1.0)
        mesh.apply_scale((sx, sy, sz))
        return mesh
    return trimesh.creation.icosphere(subdivisions=3, radius=sx)
