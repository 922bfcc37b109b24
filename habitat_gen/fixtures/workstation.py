"""Workstation: a wall-mounted desk with a display and a stool.

Parameters:
    width:         Desk width along the sector (Z)
    depth:         Desk depth (X, radial)
    height:        Desk surface height
    screens:       Number of displays (0-2)
    has_stool:     Include a round stool in front
    color:         RGBA for the desk
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    FABRIC_GRAY,
    METAL_DARK,
    METAL_GRAY,
    PLASTIC_BLACK,
    PLASTIC_WHITE,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.HULL
ZONE = "operations"

SCREEN_GLOW = (0.20, 0.45, 0.75, 1.0)


@dataclass(frozen=True)
class Params:
    width: float = 1.2
    depth: float = 0.55
    height: float = 0.75
    screens: int = 1
    has_stool: bool = True
    color: tuple[float, float, float, float] = PLASTIC_WHITE


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Desk top + support + screens + optional stool (max 8 prims)."""
    hw = params.width / 2
    hd = params.depth / 2
    ht = 0.02

    prims: list[Prim] = [
        Prim(GeomType.BOX, (hd, ht, hw), (0, params.height - ht, 0), params.color),
        # Pedestal under the hull edge
        Prim(
            GeomType.BOX,
            (hd * 0.4, (params.height - 2 * ht) / 2, hw * 0.3),
            (hd * 0.5, (params.height - 2 * ht) / 2, 0),
            METAL_GRAY,
        ),
    ]

    n = max(0, min(params.screens, 2))
    for k in range(n):
        z = 0.0 if n == 1 else (-0.3 if k == 0 else 0.3)
        prims.append(
            Prim(GeomType.BOX, (0.015, 0.17, 0.26), (hd - 0.1, params.height + 0.25, z), PLASTIC_BLACK)
        )
        prims.append(
            Prim(GeomType.BOX, (0.002, 0.15, 0.24), (hd - 0.117, params.height + 0.25, z), SCREEN_GLOW)
        )

    if params.has_stool:
        seat_h = params.height * 0.6
        prims.append(
            Prim(GeomType.CYLINDER, (0.03, seat_h / 2, 0), (-hd - 0.3, seat_h / 2, 0), METAL_DARK)
        )
        prims.append(
            Prim(GeomType.CYLINDER, (0.2, 0.03, 0), (-hd - 0.3, seat_h, 0), FABRIC_GRAY)
        )

    return tuple(prims[:8])


VARIATIONS: dict[str, Params] = {
    "ops desk": Params(),
    "dual-screen desk": Params(width=1.4, screens=2),
    "standing console": Params(height=1.05, has_stool=False),
    "comms desk": Params(width=1.0, screens=2, color=METAL_GRAY),
}
