"""Fixture registry: auto-discovers fixture modules in this package.

=== HOW TO ADD A NEW FIXTURE ===

Each fixture is a single Python file in this directory. It must define:

1. A frozen dataclass called `Params` with sensible defaults
2. A function `generate(params: Params) -> tuple[Prim, ...]`
   decorated with @lru_cache
3. `PLACEMENT`, the Placement it prefers inside a sector
4. `ZONE`, the functional zone its occupied volume counts toward
5. `VARIATIONS`, a dict of named Params for catalogs and deck programs

Drop the file here and it's auto-discovered.

Example (habitat_gen/fixtures/storage_locker.py, trimmed):

    @dataclass(frozen=True)
    class Params:
        depth: float = 0.5
        height: float = 1.2
        width: float = 0.6
        color: tuple[float, float, float, float] = METAL_GRAY

    @lru_cache(maxsize=128)
    def generate(params: Params = Params()) -> tuple[Prim, ...]:
        hd, hh, hw = params.depth / 2, params.height / 2, params.width / 2
        return (Prim(GeomType.BOX, (hd, hh, hw), (0, hh, 0), params.color),)

=== CONVENTIONS ===

Coordinate system:
    - Y-up, origin at center of footprint on the deck floor
    - +X points radially outward once placed: the back of a hull fixture
      is at +X, its front faces the core (-X)
    - Z runs along the sector, tangential to the deck

Sizes (MuJoCo geom_size semantics, long axis on Y):
    - BOX: (half_x, half_y, half_z)
    - CYLINDER / CAPSULE: (radius, half_height, 0), Y-aligned
    - SPHERE: (radius, 0, 0)

Colors:
    - Import from habitat_gen.primitives: METAL_GRAY, PLASTIC_WHITE,
      FABRIC_BLUE, ZONE_SLEEP, etc.

Keep it simple:
    - Params should fit the lowest deck (under 1.5 m tall)
      unless the fixture is only used on the main deck
    - generate() returns a tuple (hashable, safe to share across sectors)
    - Typical fixtures use 3-8 primitives
"""

from __future__ import annotations

import importlib
import pkgutil

_registry: dict[str, object] = {}


def _discover():
    """Auto-discover fixture modules that define Params + generate."""
    for info in pkgutil.iter_modules(__path__):
        mod = importlib.import_module(f".{info.name}", __package__)
        if hasattr(mod, "generate") and hasattr(mod, "Params"):
            _registry[info.name] = mod


_discover()


def get(name: str):
    """Get a fixture module by name. Raises KeyError if not found."""
    return _registry[name]


def list_fixtures() -> list[str]:
    """List all available fixture names."""
    return sorted(_registry.keys())


def all_fixtures() -> dict[str, object]:
    """Return the full registry {name: module}."""
    return dict(_registry)
