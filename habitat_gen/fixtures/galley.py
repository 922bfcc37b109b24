"""Galley: counter with food warmer, sink and an overhead locker.

Parameters:
    length:       Counter length along the sector (Z)
    depth:        Counter depth (X, radial)
    height:       Counter top height
    has_sink:     Round basin with a tap
    has_warmer:   Food warmer door on the front face
    has_locker:   Overhead locker above the counter
    color:        RGBA for the cabinet body
    top_color:    RGBA for the work surface
"""

from dataclasses import dataclass
from functools import lru_cache

from habitat_gen.primitives import (
    METAL_CHROME,
    METAL_DARK,
    PLASTIC_BLACK,
    PLASTIC_WHITE,
    ZONE_FOOD,
    GeomType,
    Placement,
    Prim,
)

PLACEMENT = Placement.HULL
ZONE = "food"


@dataclass(frozen=True)
class Params:
    length: float = 1.6
    depth: float = 0.6
    height: float = 0.9
    has_sink: bool = True
    has_warmer: bool = True
    has_locker: bool = False
    color: tuple[float, float, float, float] = PLASTIC_WHITE
    top_color: tuple[float, float, float, float] = METAL_CHROME


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    hl = params.length / 2
    hd = params.depth / 2
    top_t = 0.02
    body_h = (params.height - 2 * top_t) / 2

    prims: list[Prim] = [
        Prim(GeomType.BOX, (hd, body_h, hl), (0, body_h, 0), params.color),
        Prim(GeomType.BOX, (hd + 0.02, top_t, hl + 0.02), (0, params.height - top_t, 0), params.top_color),
        # Toe kick accent
        Prim(GeomType.BOX, (0.01, 0.04, hl), (-hd, 0.04, 0), ZONE_FOOD),
    ]

    if params.has_sink:
        # Basin sits in the -Z half, rim flush with the worktop
        prims.append(
            Prim(GeomType.CYLINDER, (0.16, 0.01, 0), (0, params.height + 0.001, -hl / 2), METAL_DARK)
        )
        prims.append(
            Prim(
                GeomType.CAPSULE,
                (0.012, 0.08, 0),
                (hd - 0.08, params.height + 0.1, -hl / 2),
                METAL_CHROME,
            )
        )

    if params.has_warmer:
        prims.append(
            Prim(
                GeomType.BOX,
                (0.01, body_h * 0.6, hl * 0.35),
                (-hd - 0.01, body_h, hl / 2),
                PLASTIC_BLACK,
            )
        )

    if params.has_locker:
        locker_h = 0.25
        prims.append(
            Prim(
                GeomType.BOX,
                (hd * 0.6, locker_h, hl),
                (hd * 0.4, params.height + 0.6 + locker_h, 0),
                params.color,
            )
        )

    return tuple(prims[:8])


VARIATIONS: dict[str, Params] = {
    "galley counter": Params(),
    "galley with locker": Params(has_locker=True),
    "drinks station": Params(length=0.8, has_warmer=False),
    "prep counter": Params(length=1.2, has_sink=False, top_color=PLASTIC_WHITE),
}
