"""Sleep pod: an enclosed bunk against the hull.

Parameters:
    length:       Bunk length along the sector (Z) in meters
    depth:        Bunk depth (X, radial) in meters
    height:       Overall pod height
    bunk_height:  Height of the mattress surface above the deck
    has_curtain:  Include a privacy panel on the open (front) side
    has_upper:    Second bunk stacked above the first
    color:        RGBA for the pod shell
    bedding:      RGBA for the mattress
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    FABRIC_BLUE,
    FABRIC_CREAM,
    FABRIC_GRAY,
    PLASTIC_WHITE,
    ZONE_SLEEP,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.HULL
ZONE = "sleep"

PILLOW = (0.95, 0.95, 0.97, 1.0)


@dataclass(frozen=True)
class Params:
    length: float = 2.0
    depth: float = 0.9
    height: float = 1.3
    bunk_height: float = 0.35
    has_curtain: bool = True
    has_upper: bool = False
    color: tuple[float, float, float, float] = PLASTIC_WHITE
    bedding: tuple[float, float, float, float] = FABRIC_BLUE


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a sleep pod (back + roof + mattress + pillow, up to 8 prims)."""
    hl = params.length / 2
    hd = params.depth / 2
    wall = 0.02
    c = params.color

    prims: list[Prim] = [
        # Back wall, flat against the hull side
        Prim(GeomType.BOX, (wall, params.height / 2, hl), (hd - wall, params.height / 2, 0), c),
        # Roof
        Prim(GeomType.BOX, (hd, wall, hl), (0, params.height - wall, 0), c),
        # Berth base
        Prim(
            GeomType.BOX,
            (hd, params.bunk_height / 2 - 0.05, hl),
            (0, params.bunk_height / 2 - 0.05, 0),
            c,
        ),
        # Mattress
        Prim(GeomType.BOX, (hd - 0.03, 0.05, hl - 0.03), (0, params.bunk_height, 0), params.bedding),
        # Pillow at the -Z end
        Prim(
            GeomType.ELLIPSOID,
            (0.18, 0.06, 0.12),
            (0, params.bunk_height + 0.1, -hl + 0.2),
            PILLOW,
        ),
    ]

    if params.has_upper:
        upper_y = params.bunk_height + (params.height - params.bunk_height) / 2
        prims.append(
            Prim(GeomType.BOX, (hd - 0.03, 0.05, hl - 0.03), (0, upper_y, 0), params.bedding)
        )

    if params.has_curtain:
        # Privacy panel covering the inner half of the opening
        prims.append(
            Prim(
                GeomType.BOX,
                (0.01, params.height / 2 - wall, hl / 2),
                (-hd, params.height / 2, hl / 2),
                FABRIC_GRAY,
            )
        )

    # Zone accent stripe along the roof edge
    prims.append(
        Prim(GeomType.BOX, (0.01, 0.02, hl), (-hd, params.height - 0.06, 0), ZONE_SLEEP)
    )

    return tuple(prims[:8])


VARIATIONS: dict[str, Params] = {
    "crew bunk": Params(),
    "double bunk": Params(height=1.4, has_upper=True, has_curtain=False),
    "guest bunk": Params(length=1.9, bedding=FABRIC_CREAM, has_curtain=False),
    "compact bunk": Params(length=1.8, depth=0.8, height=1.1, bunk_height=0.3),
}
