"""Spiral stairs between two stacked hatches.

A stair is a central pole plus a run of box treads winding around it. Tread
i sits at height i * step_height and at angle (i / step_count) * sweep, half
way out from the pole to the hatch rim, turned so its long axis points
away from the pole.

Origin: center of the lower hatch, on the lower floor (y=0).

Usage:
    prims = generate(total_rise=3.0, step_height=0.2, hatch_radius=0.6,
                     angular_sweep=2.5 * math.pi)
    pole, *steps = prims   # 15 steps
"""

from __future__ import annotations

import math
from functools import lru_cache

from habitat_gen.layout import Pose
from habitat_gen.primitives import METAL_DARK, METAL_GRAY, GeomType, Prim

STEP_RADIAL_FRACTION = 0.5  # tread center, as a fraction of the hatch radius
POLE_RADIUS = 0.05
TREAD_HALF_THICKNESS = 0.025
TREAD_HALF_DEPTH = 0.12

# 0.6 / 0.2 is 2.9999999999999996 in floating point.
_COUNT_EPS = 1e-9


def step_count(total_rise: float, step_height: float) -> int:
    if step_height <= 0 or total_rise <= 0:
        return 0
    return int(math.floor(total_rise / step_height + _COUNT_EPS))


@lru_cache(maxsize=32)
def generate(
    total_rise: float,
    step_height: float,
    hatch_radius: float,
    angular_sweep: float,
    pole_radius: float = POLE_RADIUS,
    tread_rgba: tuple[float, float, float, float] = METAL_GRAY,
    pole_rgba: tuple[float, float, float, float] = METAL_DARK,
) -> tuple[Prim, ...]:
    """Pole first, then the treads bottom to top.

    A rise below one step yields the pole alone; no rise at all yields
    nothing.
    """
    if total_rise <= 0:
        return ()

    half_rise = total_rise / 2
    prims: list[Prim] = [
        Prim(GeomType.CYLINDER, (pole_radius, half_rise, 0.0), (0.0, half_rise, 0.0), pole_rgba)
    ]

    count = step_count(total_rise, step_height)
    if count == 0:
        return tuple(prims)

    increment = angular_sweep / count
    r_off = hatch_radius * STEP_RADIAL_FRACTION
    half_len = max(r_off - pole_radius, pole_radius)
    for i in range(count):
        angle = i * increment
        prims.append(
            Prim(
                GeomType.BOX,
                (half_len, TREAD_HALF_THICKNESS, TREAD_HALF_DEPTH),
                (math.cos(angle) * r_off, i * step_height, math.sin(angle) * r_off),
                tread_rgba,
                euler=(0.0, -angle, 0.0),
            )
        )
    return tuple(prims)


def stair_between(
    lower_hatch: Pose,
    upper_hatch: Pose,
    step_height: float,
    hatch_radius: float,
    angular_sweep: float,
) -> tuple[Pose, tuple[Prim, ...]]:
    """Stair rising from one hatch to the hatch above it.

    Returns the stair's origin pose (the lower hatch) and its prims.
    """
    rise = upper_hatch.position[1] - lower_hatch.position[1]
    return (
        Pose(lower_hatch.position, lower_hatch.yaw),
        generate(rise, step_height, hatch_radius, angular_sweep),
    )
