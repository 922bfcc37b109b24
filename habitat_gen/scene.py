"""Scene tree handed to renderers, plus the one piece of runtime state.

The habitat is an immutable tree: Groups own child Groups and Parts, each
node exclusively. A Part is one shape (a native Prim or a mesh Solid) with
a pose relative to its group. The tree is built bottom-up once and never
edited; renderers read it through Group.walk().

The only thing that changes after construction is the view mode. The outer
shell and its wireframe overlay share a ToggleView: one toggle() switches
both between opaque and see-through. Geometry is untouched.

Usage:
    habitat = build_habitat(HabitatConfig())
    for path, part, world in habitat.root.walk():
        ...
    habitat.toggle()          # -> ViewMode.TRANSPARENT
    habitat.rgba_of(part)     # current color for a part
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

import numpy as np

from habitat_gen.layout import IDENTITY, Pose
from habitat_gen.primitives import Prim
from habitat_gen.solids import Solid

Shape = Union[Prim, Solid]


class ViewMode(Enum):
    OPAQUE = "opaque"
    TRANSPARENT = "transparent"


@dataclass(frozen=True)
class ShellMaterial:
    """A material whose opacity follows the view mode.

    Attributes:
        name: Key parts use to refer to this material.
        rgb: Base color.
        opaque_alpha: Alpha in OPAQUE mode.
        transparent_alpha: Alpha in TRANSPARENT mode (near invisible).
    """

    name: str
    rgb: tuple[float, float, float]
    opaque_alpha: float = 1.0
    transparent_alpha: float = 0.1

    def alpha(self, mode: ViewMode) -> float:
        return self.transparent_alpha if mode is ViewMode.TRANSPARENT else self.opaque_alpha

    def rgba(self, mode: ViewMode) -> tuple[float, float, float, float]:
        return (*self.rgb, self.alpha(mode))

    def blending(self, mode: ViewMode) -> bool:
        return mode is ViewMode.TRANSPARENT


class ToggleView:
    """Two-state view switch shared by a fixed set of materials."""

    def __init__(self, materials=(), mode: ViewMode = ViewMode.OPAQUE):
        self._materials: dict[str, ShellMaterial] = {m.name: m for m in materials}
        self._mode = mode

    @property
    def mode(self) -> ViewMode:
        return self._mode

    def toggle(self) -> ViewMode:
        """Flip the mode and return the new one."""
        if self._mode is ViewMode.OPAQUE:
            self._mode = ViewMode.TRANSPARENT
        else:
            self._mode = ViewMode.OPAQUE
        return self._mode

    def rgba(self, name: str) -> tuple[float, float, float, float]:
        return self._materials[name].rgba(self._mode)

    def blending(self, name: str) -> bool:
        return self._materials[name].blending(self._mode)

    def state(self) -> dict[str, tuple[tuple[float, float, float, float], bool]]:
        """Current (rgba, blending) for every registered material."""
        return {
            name: (m.rgba(self._mode), m.blending(self._mode))
            for name, m in self._materials.items()
        }


@dataclass(frozen=True, eq=False)
class Part:
    """One shape placed in its group's frame.

    Attributes:
        name: Unique among its siblings.
        shape: Native primitive or mesh solid.
        pose: Placement relative to the owning group.
        material: Name of a ToggleView material overriding the shape color.
    """

    name: str
    shape: Shape
    pose: Pose = IDENTITY
    material: str | None = None

    @property
    def is_mesh(self) -> bool:
        return isinstance(self.shape, Solid)

    @property
    def is_empty(self) -> bool:
        return self.is_mesh and self.shape.is_empty

    @property
    def rgba(self) -> tuple[float, float, float, float]:
        return self.shape.rgba


@dataclass(frozen=True, eq=False)
class Group:
    """Named node owning an ordered tuple of children.

    Attributes:
        name: Unique among its siblings.
        children: Child Groups and Parts, in build order.
        pose: Placement relative to the parent group.
        zone: Functional zone whose occupied volume this group counts toward.
    """

    name: str
    children: tuple = field(default_factory=tuple)
    pose: Pose = IDENTITY
    zone: str | None = None

    def find(self, name: str) -> "Group | Part":
        """Depth-first lookup by name (self included). Raises KeyError."""
        if self.name == name:
            return self
        for child in self.children:
            if child.name == name:
                return child
            if isinstance(child, Group):
                try:
                    return child.find(name)
                except KeyError:
                    continue
        raise KeyError(name)

    def groups(self) -> list[str]:
        """Names of the direct child groups."""
        return [c.name for c in self.children if isinstance(c, Group)]

    def parts(self) -> list[Part]:
        """Every part below this group, in walk order."""
        return [part for _, part, _ in self.walk()]

    def zoned(self) -> Iterator["Group"]:
        """Descendant groups tagged with a zone; their own subgroups are not searched."""
        for child in self.children:
            if not isinstance(child, Group):
                continue
            if child.zone is not None:
                yield child
            else:
                yield from child.zoned()

    def walk(
        self,
        parent: np.ndarray | None = None,
        prefix: str = "",
    ) -> Iterator[tuple[str, Part, np.ndarray]]:
        """Yield (path, part, world_matrix) for every part, depth first.

        Paths join node names with '/', starting below the node walked.
        """
        frame = (np.eye(4) if parent is None else parent) @ self.pose.matrix()
        for child in self.children:
            path = f"{prefix}{child.name}"
            if isinstance(child, Group):
                yield from child.walk(frame, path + "/")
            else:
                yield path, child, frame @ child.pose.matrix()


@dataclass(eq=False)
class Habitat:
    """Generated scene: the tree plus the view toggle."""

    root: Group
    view: ToggleView

    def toggle(self) -> ViewMode:
        return self.view.toggle()

    @property
    def mode(self) -> ViewMode:
        return self.view.mode

    def find(self, name: str) -> "Group | Part":
        return self.root.find(name)

    def groups(self) -> list[str]:
        return self.root.groups()

    def rgba_of(self, part: Part) -> tuple[float, float, float, float]:
        if part.material is not None:
            return self.view.rgba(part.material)
        return part.rgba
