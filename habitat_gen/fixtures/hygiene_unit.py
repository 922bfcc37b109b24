"""Hygiene unit: enclosed cubicle with a door panel and a hand basin.

Parameters:
    width:      Cubicle width along the sector (Z)
    depth:      Cubicle depth (X, radial)
    height:     Cubicle height
    has_basin:  Hand basin mounted on the outside face
    color:      RGBA for the cubicle walls
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    METAL_CHROME,
    PLASTIC_WHITE,
    ZONE_HYGIENE,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.PARTITION
ZONE = "hygiene"

FROSTED = (0.85, 0.90, 0.92, 0.6)


@dataclass(frozen=True)
class Params:
    width: float = 1.0
    depth: float = 1.0
    height: float = 1.45
    has_basin: bool = True
    color: tuple[float, float, float, float] = PLASTIC_WHITE


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    hw = params.width / 2
    hd = params.depth / 2
    hh = params.height / 2
    t = 0.02
    c = params.color

    prims = [
        # Back and two side walls
        Prim(GeomType.BOX, (t, hh, hw), (hd - t, hh, 0), c),
        Prim(GeomType.BOX, (hd, hh, t), (0, hh, -hw + t), c),
        Prim(GeomType.BOX, (hd, hh, t), (0, hh, hw - t), c),
        # Roof
        Prim(GeomType.BOX, (hd, t, hw), (0, params.height - t, 0), c),
        # Frosted door on the core side
        Prim(GeomType.BOX, (t / 2, hh - t, hw - 2 * t), (-hd + t / 2, hh, 0), FROSTED),
        # Zone strip above the door
        Prim(GeomType.BOX, (t / 2, 0.025, hw), (-hd, params.height - 0.08, 0), ZONE_HYGIENE),
    ]
    if params.has_basin:
        prims.append(
            Prim(GeomType.CYLINDER, (0.14, 0.06, 0), (-hd - 0.15, 0.8, hw * 0.5), METAL_CHROME)
        )
    return tuple(prims)


VARIATIONS: dict[str, Params] = {
    "hygiene cubicle": Params(),
    "shower stall": Params(width=0.9, depth=0.9, has_basin=False),
    "wide cubicle": Params(width=1.3),
}
