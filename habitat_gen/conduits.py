"""Conduits: curves between anchor points and tubes swept along them.

Two curve types:
    - QuadraticBezier: one run from start to end whose single control point
      is midpoint + sag_offset. A downward sag reads as a gravity-fed pipe, a
      sideways one as dressed cabling.
    - CatmullRomSpline: a longer run that passes through every anchor in
      order (uniform parameterisation, end tangents from reflected anchors).

sweep() turns a curve into one closed tube mesh. Rings of vertices are placed
at each tessellation sample and oriented with parallel-transported frames,
so the tube does not twist where the curve bends. Neighbouring segments
share their ring, which leaves no seams. The two cap centre vertices are the
last two vertices of the mesh (start, then end).

A curve whose start and end coincide has no direction: sweep() returns None
and the caller emits nothing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from habitat_gen.primitives import PIPE_COPPER
from habitat_gen.solids import Solid, make_mesh

log = logging.getLogger(__name__)

Vec3 = tuple[float, float, float]

# Below this length a vector counts as zero.
EPS = 1e-9


def _vec(v) -> np.ndarray:
    return np.asarray(v, dtype=np.float64)


@dataclass(frozen=True)
class QuadraticBezier:
    start: Vec3
    control: Vec3
    end: Vec3

    @property
    def is_degenerate(self) -> bool:
        return float(np.linalg.norm(_vec(self.end) - _vec(self.start))) < EPS

    def point(self, t: float) -> np.ndarray:
        p0, c, p1 = _vec(self.start), _vec(self.control), _vec(self.end)
        u = 1.0 - t
        return u * u * p0 + 2 * u * t * c + t * t * p1

    def sample(self, segments: int) -> np.ndarray:
        """segments + 1 points, the first and last exactly at the anchors."""
        n = max(int(segments), 1)
        pts = np.array([self.point(i / n) for i in range(n + 1)])
        pts[0] = self.start
        pts[-1] = self.end
        return pts

    def length(self, segments: int = 64) -> float:
        pts = self.sample(segments)
        return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())


@dataclass(frozen=True)
class CatmullRomSpline:
    anchors: tuple[Vec3, ...]

    @property
    def start(self) -> Vec3:
        return self.anchors[0]

    @property
    def end(self) -> Vec3:
        return self.anchors[-1]

    @property
    def is_degenerate(self) -> bool:
        return len(self.anchors) < 2

    def _controls(self) -> np.ndarray:
        pts = _vec(self.anchors)
        head = 2 * pts[0] - pts[1]
        tail = 2 * pts[-1] - pts[-2]
        return np.vstack([head, pts, tail])

    def sample(self, segments: int) -> np.ndarray:
        """segments + 1 points spread evenly in parameter over all spans."""
        n = max(int(segments), 1)
        ctrl = self._controls()
        spans = len(self.anchors) - 1
        pts = np.empty((n + 1, 3))
        for i in range(n + 1):
            u = spans * i / n
            k = min(int(u), spans - 1)
            t = u - k
            p0, p1, p2, p3 = ctrl[k], ctrl[k + 1], ctrl[k + 2], ctrl[k + 3]
            pts[i] = 0.5 * (
                2 * p1
                + (p2 - p0) * t
                + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t * t
                + (3 * p1 - p0 - 3 * p2 + p3) * t * t * t
            )
        pts[0] = self.anchors[0]
        pts[-1] = self.anchors[-1]
        return pts

    def length(self, segments: int = 64) -> float:
        pts = self.sample(segments)
        return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())


def route(start: Vec3, end: Vec3, sag_offset: Vec3 = (0.0, 0.0, 0.0)) -> QuadraticBezier:
    """Single-run curve; the control point sits at the midpoint plus sag."""
    mid = (_vec(start) + _vec(end)) / 2
    control = tuple(float(v) for v in mid + _vec(sag_offset))
    return QuadraticBezier(
        tuple(float(v) for v in start), control, tuple(float(v) for v in end)
    )


def route_through(anchors) -> CatmullRomSpline:
    """Smooth run through an ordered anchor list.

    Consecutive duplicate anchors are dropped; fewer than two distinct
    anchors gives a degenerate spline.
    """
    kept: list[Vec3] = []
    for a in anchors:
        a = tuple(float(v) for v in a)
        if kept and np.linalg.norm(_vec(a) - _vec(kept[-1])) < EPS:
            continue
        kept.append(a)
    return CatmullRomSpline(tuple(kept))


# ---------------------------------------------------------------------------
# Tube sweep
# ---------------------------------------------------------------------------


def _tangents(pts: np.ndarray) -> np.ndarray:
    t = np.empty_like(pts)
    t[0] = pts[1] - pts[0]
    t[-1] = pts[-1] - pts[-2]
    t[1:-1] = pts[2:] - pts[:-2]
    out = np.empty_like(t)
    prev = None
    for i, v in enumerate(t):
        norm = np.linalg.norm(v)
        if norm < EPS:
            # Cusp: keep heading the way we were going
            out[i] = prev if prev is not None else np.array([0.0, 0.0, 1.0])
        else:
            out[i] = v / norm
        prev = out[i]
    return out


def _frames(tangents: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Parallel-transported normal and binormal at each sample."""
    t0 = tangents[0]
    axis = np.zeros(3)
    axis[int(np.argmin(np.abs(t0)))] = 1.0
    n = axis - np.dot(axis, t0) * t0
    n /= np.linalg.norm(n)

    normals = np.empty_like(tangents)
    normals[0] = n
    for i in range(1, len(tangents)):
        t = tangents[i]
        cand = normals[i - 1] - np.dot(normals[i - 1], t) * t
        norm = np.linalg.norm(cand)
        normals[i] = cand / norm if norm > EPS else normals[i - 1]
    binormals = np.cross(tangents, normals)
    return normals, binormals


def sweep(
    curve,
    radius: float,
    tessellation: int,
    radial_segments: int = 8,
    rgba: tuple[float, float, float, float] = PIPE_COPPER,
) -> Solid | None:
    """Closed tube of the given radius along a curve, or None if degenerate."""
    if curve.is_degenerate or radius <= 0:
        log.debug("sweep skipped: degenerate curve or radius %.3f", radius)
        return None

    n = max(int(tessellation), 1)
    m = max(int(radial_segments), 3)
    centers = curve.sample(n)
    normals, binormals = _frames(_tangents(centers))

    phi = np.linspace(0, 2 * math.pi, m, endpoint=False)
    cos, sin = np.cos(phi), np.sin(phi)

    verts = np.empty(((n + 1) * m + 2, 3))
    for i in range(n + 1):
        ring = centers[i] + radius * (np.outer(cos, normals[i]) + np.outer(sin, binormals[i]))
        verts[i * m : (i + 1) * m] = ring
    verts[-2] = centers[0]
    verts[-1] = centers[-1]

    def idx(i: int, j: int) -> int:
        return i * m + j % m

    faces: list[tuple[int, int, int]] = []
    for i in range(n):
        for j in range(m):
            faces.append((idx(i, j), idx(i, j + 1), idx(i + 1, j + 1)))
            faces.append((idx(i, j), idx(i + 1, j + 1), idx(i + 1, j)))

    s, e = len(verts) - 2, len(verts) - 1
    for j in range(m):
        faces.append((s, idx(0, j + 1), idx(0, j)))
        faces.append((e, idx(n, j), idx(n, j + 1)))

    return Solid(make_mesh(verts, faces), rgba)


@dataclass(frozen=True)
class ConduitSpec:
    """A single sagging run, fixed once built."""

    start: Vec3
    end: Vec3
    sag_offset: Vec3 = (0.0, 0.0, 0.0)
    radius: float = 0.04
    tessellation: int = 16
    radial_segments: int = 8
    rgba: tuple[float, float, float, float] = PIPE_COPPER

    def curve(self) -> QuadraticBezier:
        return route(self.start, self.end, self.sag_offset)

    def build(self) -> Solid | None:
        return sweep(self.curve(), self.radius, self.tessellation, self.radial_segments, self.rgba)
