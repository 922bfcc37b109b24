"""Exercise station: a treadmill deck or a cycle ergometer.

Parameters:
    kind:       "treadmill" or "cycle"
    length:     Footprint length along the sector (Z)
    width:      Footprint width (X, radial)
    color:      RGBA for the frame
    accent:     RGBA for belts, seat and grips
"""

import math
from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    METAL_DARK,
    METAL_GRAY,
    PLASTIC_BLACK,
    ZONE_EXERCISE,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.CENTER
ZONE = "exercise"

QUARTER_TURN = math.pi / 2  # lays a Y-aligned prim along X


@dataclass(frozen=True)
class Params:
    kind: str = "treadmill"
    length: float = 1.6
    width: float = 0.7
    color: tuple[float, float, float, float] = METAL_GRAY
    accent: tuple[float, float, float, float] = ZONE_EXERCISE


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate the station (4-6 prims)."""
    hl = params.length / 2
    hw = params.width / 2
    c = params.color

    if params.kind == "cycle":
        return (
            # Base rail
            Prim(GeomType.BOX, (0.08, 0.03, hl * 0.6), (0, 0.03, 0), c),
            # Flywheel
            Prim(GeomType.CYLINDER, (0.22, 0.03, 0), (0, 0.3, hl * 0.35), METAL_DARK, euler=(0, 0, QUARTER_TURN)),
            # Seat post and seat
            Prim(GeomType.CAPSULE, (0.025, 0.3, 0), (0, 0.36, -hl * 0.25), c),
            Prim(GeomType.BOX, (0.12, 0.03, 0.14), (0, 0.7, -hl * 0.25), PLASTIC_BLACK),
            # Handlebar
            Prim(GeomType.CAPSULE, (0.02, 0.2, 0), (0, 0.95, hl * 0.3), params.accent, euler=(0, 0, QUARTER_TURN)),
        )

    uprights_h = 0.55
    return (
        # Deck
        Prim(GeomType.BOX, (hw, 0.08, hl), (0, 0.08, 0), c),
        # Belt
        Prim(GeomType.BOX, (hw * 0.75, 0.005, hl * 0.9), (0, 0.165, 0), PLASTIC_BLACK),
        # Uprights at the +Z end
        Prim(GeomType.CAPSULE, (0.025, uprights_h, 0), (hw * 0.85, 0.16 + uprights_h, hl * 0.8), c),
        Prim(GeomType.CAPSULE, (0.025, uprights_h, 0), (-hw * 0.85, 0.16 + uprights_h, hl * 0.8), c),
        # Console bar with harness anchor accent
        Prim(GeomType.BOX, (hw, 0.06, 0.08), (0, 0.16 + 2 * uprights_h, hl * 0.8), params.accent),
    )


VARIATIONS: dict[str, Params] = {
    "treadmill": Params(),
    "cycle ergometer": Params(kind="cycle", length=1.1, width=0.5),
    "short treadmill": Params(length=1.3, width=0.6),
}
