"""Procedural geometry for a spherical multi-deck habitat.

Builds a layered habitat inside two concentric spheres: decks carved from
the inner shell, partitioned into sectors, furnished from parametric
fixtures, linked by spiral stairs and piped with swept conduits, over a
lander base. The outer regolith shell toggles between opaque and
transparent.

Fixtures are pure functions: frozen params -> primitives, cached via
@lru_cache. The builder is deterministic: one config, one habitat.

Usage:
    from habitat_gen import HabitatConfig, build_habitat, describe_habitat

    habitat = build_habitat(HabitatConfig())
    print(describe_habitat(habitat))
    habitat.toggle()                   # outer shell -> transparent
"""

from habitat_gen.builder import build_habitat, describe_habitat, zone_volumes
from habitat_gen.config import HabitatConfig
from habitat_gen.primitives import GeomType, Prim
from habitat_gen.scene import Group, Habitat, Part, ViewMode

__all__ = [
    "HabitatConfig",
    "build_habitat",
    "describe_habitat",
    "zone_volumes",
    "Habitat",
    "Group",
    "Part",
    "ViewMode",
    "Prim",
    "GeomType",
]
