"""Battery bank: a low row of cell modules with a cable tray.

Parameters:
    cells:      Number of modules along the sector (1-6)
    cell_size:  Edge length of one cubic module
    color:      RGBA for the modules
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    CABLE_ORANGE,
    METAL_DARK,
    PLASTIC_BLACK,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.CORE
ZONE = "life support"


@dataclass(frozen=True)
class Params:
    cells: int = 4
    cell_size: float = 0.3
    color: tuple[float, float, float, float] = PLASTIC_BLACK


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    n = max(1, min(params.cells, 6))
    h = params.cell_size / 2
    pitch = params.cell_size + 0.02
    span = pitch * n

    prims = [
        Prim(GeomType.BOX, (h, h, h), (0, h, -span / 2 + pitch * (k + 0.5)), params.color)
        for k in range(n)
    ]
    # Cable tray along the top edge
    prims.append(
        Prim(GeomType.BOX, (0.03, 0.02, span / 2), (-h + 0.03, 2 * h + 0.02, 0), CABLE_ORANGE)
    )
    prims.append(Prim(GeomType.BOX, (h + 0.02, 0.01, span / 2), (0, 0.01, 0), METAL_DARK))
    return tuple(prims)


VARIATIONS: dict[str, Params] = {
    "battery bank": Params(),
    "short bank": Params(cells=2),
    "long bank": Params(cells=6, cell_size=0.25),
}
