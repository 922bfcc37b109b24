"""Storage locker: a bank of stowage doors.

Parameters:
    width:      Locker width along the sector (Z)
    depth:      Locker depth (X, radial)
    height:     Locker height
    doors:      Number of doors across the front (1-3)
    color:      RGBA for the body
    door_color: RGBA for the doors
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    FABRIC_CREAM,
    METAL_CHROME,
    METAL_GRAY,
    PLASTIC_WHITE,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.CORE
ZONE = "stowage"


@dataclass(frozen=True)
class Params:
    width: float = 0.8
    depth: float = 0.5
    height: float = 1.2
    doors: int = 2
    color: tuple[float, float, float, float] = METAL_GRAY
    door_color: tuple[float, float, float, float] = PLASTIC_WHITE


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    hw = params.width / 2
    hd = params.depth / 2
    hh = params.height / 2

    prims = [Prim(GeomType.BOX, (hd, hh, hw), (0, hh, 0), params.color)]

    n = max(1, min(params.doors, 3))
    door_hw = hw / n - 0.01
    for k in range(n):
        z = -hw + (2 * k + 1) * hw / n
        prims.append(
            Prim(GeomType.BOX, (0.01, hh - 0.03, door_hw), (-hd - 0.01, hh, z), params.door_color)
        )
        prims.append(
            Prim(GeomType.BOX, (0.015, 0.05, 0.01), (-hd - 0.03, hh, z + door_hw - 0.05), METAL_CHROME)
        )
    return tuple(prims)


VARIATIONS: dict[str, Params] = {
    "stowage locker": Params(),
    "tall locker": Params(width=0.5, height=1.45, doors=1),
    "wide locker": Params(width=1.2, doors=3),
    "soft stowage": Params(doors=1, door_color=FABRIC_CREAM),
}
