"""Life support rack: a standard equipment rack with modules and a fan.

The conduit router picks up a rack's pipe stub (the top of the rack, on its
core-facing side) as the start of a feed line to the core.

Parameters:
    width:      Rack width along the sector (Z)
    depth:      Rack depth (X, radial)
    height:     Rack height
    modules:    Number of stacked equipment modules (1-4)
    has_fan:    Circular fan grille on the front face
    color:      RGBA for the rack frame
"""

import math
from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    METAL_DARK,
    METAL_GRAY,
    PLASTIC_WHITE,
    ZONE_LIFE_SUPPORT,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.HULL
ZONE = "life support"


@dataclass(frozen=True)
class Params:
    width: float = 0.9
    depth: float = 0.7
    height: float = 1.4
    modules: int = 3
    has_fan: bool = True
    color: tuple[float, float, float, float] = METAL_GRAY


def pipe_stub(params: Params = Params()) -> tuple[float, float, float]:
    """Fixture-local point where a feed line leaves the rack."""
    return (-params.depth / 2, params.height - 0.1, 0.0)


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Frame + modules + status strip + optional fan (max 8 prims)."""
    hw = params.width / 2
    hd = params.depth / 2
    hh = params.height / 2

    prims: list[Prim] = [Prim(GeomType.BOX, (hd, hh, hw), (0, hh, 0), params.color)]

    n = max(1, min(params.modules, 4))
    slot = (params.height - 0.2) / n
    for k in range(n):
        y = 0.1 + slot * (k + 0.5)
        prims.append(
            Prim(GeomType.BOX, (0.01, slot * 0.4, hw * 0.85), (-hd - 0.01, y, 0), PLASTIC_WHITE)
        )

    prims.append(
        Prim(GeomType.BOX, (0.012, 0.02, hw), (-hd - 0.012, params.height - 0.04, 0), ZONE_LIFE_SUPPORT)
    )

    if params.has_fan and len(prims) < 8:
        prims.append(
            Prim(
                GeomType.CYLINDER,
                (hw * 0.35, 0.015, 0),
                (-hd - 0.02, 0.1 + slot * 0.5, hw * 0.5),
                METAL_DARK,
                euler=(0.0, 0.0, math.pi / 2),
            )
        )

    return tuple(prims[:8])


VARIATIONS: dict[str, Params] = {
    "air revitalization": Params(),
    "water recovery": Params(modules=4, has_fan=False),
    "thermal control": Params(width=0.7, modules=2),
    "oxygen generator": Params(height=1.2, modules=2, color=METAL_DARK),
}
