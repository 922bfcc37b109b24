"""
Centralized configuration for habitat generation.

Every number the generator reads lives here, in one flat record. There is
no validation layer: inconsistent values (a level above the shell, zero
sectors) come out as empty geometry, not as errors.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass


@dataclass
class HabitatConfig:
    """Complete habitat configuration."""

    # Shells
    inner_shell_radius: float = 4.8  # Structural sphere; decks are carved from it
    outer_shell_radius: float = 5.0  # Regolith shell, toggles opaque/transparent
    shell_segments: int = 32  # Sphere and ring tessellation

    # Decks: consecutive heights bound each deck, paired with names/sectors by index
    level_heights: tuple[float, ...] = (-3.2, -1.5, 1.5, 3.6)
    level_names: tuple[str, ...] = ("lower_deck", "main_deck", "upper_deck")
    sector_counts: tuple[int, ...] = (4, 6, 4)
    hull_clearance: float = 0.1  # Gap between fixtures and the sphere

    # Core and hatches
    core_radius: float = 0.9
    core_wall_thickness: float = 0.06
    hatch_radius: float = 0.6
    hatch_angle: float = math.pi / 6  # Inside sector 0 for 4- and 6-sector decks
    hatch_distance: float = 1.8  # Hatch center from the habitat axis

    # Walls, floors, openings
    wall_segments: int = 12
    wall_thickness: float = 0.06
    floor_thickness: float = 0.08
    door_width: float = 0.8
    door_height: float = 1.9  # Clipped to the deck height
    window_radius: float = 0.22

    # Conduits
    tube_tessellation: int = 24
    conduit_radius: float = 0.04
    conduit_sag: float = 0.35  # Downward sag of rack feed lines

    # Stairs
    step_height: float = 0.2
    stair_sweep: float = 2.5 * math.pi

    # Lander systems
    lander_legs: int = 4
    lander_tanks: int = 4

    # View toggle
    shell_transparent_alpha: float = 0.1
    wireframe_transparent_alpha: float = 0.25

    def to_flat_dict(self) -> dict:
        """Convert to a flat dict (for logs and benchmark records)."""
        return asdict(self)

    @classmethod
    def for_preview(cls) -> HabitatConfig:
        """Coarser tessellation for interactive viewing."""
        return cls(
            shell_segments=24,
            wall_segments=6,
            tube_tessellation=12,
        )

    @classmethod
    def for_smoketest(cls) -> HabitatConfig:
        """Minimal tessellation for fast end-to-end validation."""
        return cls(
            shell_segments=12,
            wall_segments=2,
            tube_tessellation=4,
            lander_legs=3,
            lander_tanks=2,
        )
