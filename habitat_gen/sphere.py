"""Sphere cross-sections and the decks carved out of them.

Every piece of interior structure must fit inside the inner structural
sphere, so the outer bound of a deck is not a constant: at height y it is
the radius of the sphere's horizontal slice, sqrt(r² - y²).

A slice that misses the sphere (|y| >= r) has no real radius. Instead of
raising or leaking NaN into a mesh, the lookup returns None (the
degenerate marker) and callers emit an empty element.

Usage:
    shell = Sphere(4.8)
    deck = Level(y_floor=-1.5, y_ceiling=1.5, inner_radius=0.9, shell=shell)
    deck.outer_radius(0.0)   # 4.8
    deck.outer_radius(5.0)   # None
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def cross_section_radius(sphere_radius: float, y: float) -> float | None:
    """Radius of the sphere's horizontal cross-section at height y.

    Returns None when the plane does not cut the sphere (y² >= r²).
    """
    if y * y >= sphere_radius * sphere_radius:
        return None
    return math.sqrt(sphere_radius * sphere_radius - y * y)


@dataclass(frozen=True)
class Sphere:
    """A spherical shell centered on the origin."""

    radius: float

    def cross_section(self, y: float) -> float | None:
        return cross_section_radius(self.radius, y)


@dataclass(frozen=True)
class Level:
    """A deck: a horizontal band between two heights inside a shell.

    Attributes:
        y_floor: Height of the deck floor.
        y_ceiling: Height of the deck ceiling.
        inner_radius: Constant inner bound, set by the central core cylinder.
        shell: Sphere the deck is carved from; sets the outer bound per height.
    """

    y_floor: float
    y_ceiling: float
    inner_radius: float
    shell: Sphere

    @property
    def height(self) -> float:
        return self.y_ceiling - self.y_floor

    @property
    def center(self) -> float:
        return (self.y_floor + self.y_ceiling) / 2

    def outer_radius(self, y: float) -> float | None:
        """Outer bound at height y, or None if y lies outside the shell."""
        return self.shell.cross_section(y)

    @property
    def usable_radius(self) -> float | None:
        """Largest radius that is inside the shell over the deck's full height.

        The sphere narrows away from its equator, so this is the smaller of
        the floor and ceiling slices. None if either slice is degenerate.
        """
        floor_r = self.outer_radius(self.y_floor)
        ceiling_r = self.outer_radius(self.y_ceiling)
        if floor_r is None or ceiling_r is None:
            return None
        return min(floor_r, ceiling_r)
