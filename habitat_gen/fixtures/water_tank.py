"""Water tank: an upright cylindrical tank on a skid.

Parameters:
    radius:     Tank radius
    height:     Cylindrical body height (domes add one radius each end)
    has_skid:   Square base plate under the tank
    has_gauge:  Sight gauge strip on the core-facing side
    color:      RGBA for the tank
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    COOLANT_GREEN,
    GLASS,
    METAL_CHROME,
    METAL_DARK,
    PLASTIC_WHITE,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.HULL
ZONE = "life support"


@dataclass(frozen=True)
class Params:
    radius: float = 0.35
    height: float = 0.7
    has_skid: bool = True
    has_gauge: bool = True
    color: tuple[float, float, float, float] = PLASTIC_WHITE


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Capsule body on an optional skid (1-3 prims)."""
    r = params.radius
    skid_t = 0.04 if params.has_skid else 0.0
    body_half = params.height / 2

    prims: list[Prim] = [
        # Capsule half-height excludes the dome caps
        Prim(GeomType.CAPSULE, (r, body_half, 0), (0, skid_t + r + body_half, 0), params.color),
    ]
    if params.has_skid:
        prims.append(Prim(GeomType.BOX, (r + 0.05, skid_t / 2, r + 0.05), (0, skid_t / 2, 0), METAL_DARK))
    if params.has_gauge:
        prims.append(
            Prim(
                GeomType.BOX,
                (0.01, body_half * 0.8, 0.02),
                (-r - 0.005, skid_t + r + body_half, 0),
                GLASS,
            )
        )
    return tuple(prims)


VARIATIONS: dict[str, Params] = {
    "potable water": Params(),
    "grey water": Params(color=METAL_CHROME),
    "coolant reservoir": Params(radius=0.28, height=0.5, color=COOLANT_GREEN),
    "slim tank": Params(radius=0.22, height=0.9, has_skid=False),
}
