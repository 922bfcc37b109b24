"""File export through trimesh: GLB, OBJ and STL.

to_trimesh_scene() flattens the habitat tree into a trimesh.Scene, one node
per part, keeping the engine's y-up frame (glTF is y-up too). Prims become
meshes (see solids.prim_mesh), wireframe overlays become Path3D line sets,
empty solids are skipped. Colors follow the current view mode.

Usage:
    export_scene(build_habitat(), "habitat.glb")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import trimesh
from trimesh.path import Path3D
from trimesh.path.entities import Line

from habitat_gen.primitives import prim_matrix
from habitat_gen.scene import Habitat
from habitat_gen.solids import prim_mesh

log = logging.getLogger(__name__)

FORMATS = ("glb", "obj", "stl")


def _rgba8(rgba) -> np.ndarray:
    return np.clip(np.round(np.asarray(rgba) * 255), 0, 255).astype(np.uint8)


def _edges(mesh: trimesh.Trimesh, rgba) -> Path3D:
    entities = [Line(e) for e in mesh.edges_unique]
    path = Path3D(entities=entities, vertices=mesh.vertices.copy(), process=False)
    path.colors = np.tile(_rgba8(rgba), (len(entities), 1))
    return path


def to_trimesh_scene(habitat: Habitat, include_wireframes: bool = True) -> trimesh.Scene:
    """Scene with one node per exported part, named by its path."""
    scene = trimesh.Scene()
    for path, part, world in habitat.root.walk():
        rgba = habitat.rgba_of(part)
        if not part.is_mesh:
            mesh = prim_mesh(part.shape)
            mesh.visual.face_colors = _rgba8(rgba)
            scene.add_geometry(mesh, node_name=path, geom_name=path, transform=world @ prim_matrix(part.shape))
            continue

        solid = part.shape
        if solid.is_empty:
            continue
        if solid.wireframe:
            if include_wireframes:
                scene.add_geometry(_edges(solid.mesh, rgba), node_name=path, geom_name=path, transform=world)
            continue
        mesh = solid.mesh.copy()
        mesh.visual.face_colors = _rgba8(rgba)
        scene.add_geometry(mesh, node_name=path, geom_name=path, transform=world)
    return scene


def _flatten(scene: trimesh.Scene) -> trimesh.Trimesh:
    """All triangle meshes of a scene, moved to world space and merged."""
    meshes = []
    for node in scene.graph.nodes_geometry:
        transform, name = scene.graph[node]
        geometry = scene.geometry[name]
        if isinstance(geometry, trimesh.Trimesh):
            meshes.append(geometry.copy().apply_transform(transform))
    return trimesh.util.concatenate(meshes)


def export_scene(habitat: Habitat, path: str | Path) -> Path:
    """Write the habitat to disk; format from the file suffix.

    STL has no scene graph, so STL output is the concatenated triangle soup
    (wireframes dropped). Raises ValueError for an unknown suffix.
    """
    path = Path(path)
    fmt = path.suffix.lstrip(".").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format {path.suffix!r}; expected one of {FORMATS}")

    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "stl":
        scene = to_trimesh_scene(habitat, include_wireframes=False)
        mesh = _flatten(scene)
        mesh.export(path, file_type="stl")
    else:
        scene = to_trimesh_scene(habitat, include_wireframes=fmt == "glb")
        scene.export(path, file_type=fmt)

    log.info("Exported %s (%s)", path, fmt.upper())
    return path
