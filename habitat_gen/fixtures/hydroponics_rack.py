"""Hydroponics rack: shelved grow trays with plants and grow lights.

Parameters:
    width:      Rack width along the sector (Z)
    depth:      Tray depth (X, radial)
    tiers:      Number of grow trays (1-3)
    tier_gap:   Vertical spacing between trays
    color:      RGBA for the frame and trays
    foliage:    RGBA for the plant canopy
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    METAL_CHROME,
    PLANT_GREEN,
    PLASTIC_WHITE,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.HULL
ZONE = "food"

GROW_LIGHT = (0.85, 0.35, 0.90, 1.0)
HERB_GREEN = (0.45, 0.70, 0.25, 1.0)


@dataclass(frozen=True)
class Params:
    width: float = 1.2
    depth: float = 0.5
    tiers: int = 2
    tier_gap: float = 0.55
    color: tuple[float, float, float, float] = PLASTIC_WHITE
    foliage: tuple[float, float, float, float] = PLANT_GREEN


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Back panel + per tier (tray, canopy, light) - up to 10 prims."""
    hw = params.width / 2
    hd = params.depth / 2
    n = max(1, min(params.tiers, 3))
    total_h = 0.15 + n * params.tier_gap

    prims: list[Prim] = [
        Prim(GeomType.BOX, (0.015, total_h / 2, hw), (hd - 0.015, total_h / 2, 0), METAL_CHROME),
    ]
    for k in range(n):
        y = 0.15 + k * params.tier_gap
        prims.append(Prim(GeomType.BOX, (hd, 0.04, hw), (0, y, 0), params.color))
        # Canopy: flattened ellipsoid over the tray
        prims.append(
            Prim(
                GeomType.ELLIPSOID,
                (hd * 0.8, 0.12, hw * 0.9),
                (0, y + 0.14, 0),
                params.foliage,
            )
        )
        prims.append(
            Prim(GeomType.BOX, (hd * 0.6, 0.01, hw * 0.9), (0, y + params.tier_gap - 0.06, 0), GROW_LIGHT)
        )
    return tuple(prims)


VARIATIONS: dict[str, Params] = {
    "salad rack": Params(),
    "herb tray": Params(tiers=1, width=0.9, foliage=HERB_GREEN),
    "tall grow rack": Params(tiers=3, tier_gap=0.42),
}
