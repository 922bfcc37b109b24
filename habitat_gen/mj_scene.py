"""MuJoCo seam: compile the habitat tree into an MjSpec.

The generator works y-up; MuJoCo is z-up. Every pose and vertex crosses the
seam through one fixed rotation C, (x, y, z) -> (x, -z, y):

    geom pos   = C @ p
    geom frame = C @ R @ C.T
    mesh verts = C @ v

Prims keep their long axis on local Y; in the MuJoCo frame that axis is local
Z, which is what MuJoCo's cylinders and capsules expect. Box and ellipsoid
half-extents swap Y and Z accordingly.

All geoms are visual only (contype=0, conaffinity=0) and sit on the
worldbody. Empty solids and wireframe overlays are not exported.

Geom names are the part's path in the tree, e.g. "main_deck/wall_3". The
toggled shell materials are written into a compiled model by apply_view().

Usage:
    habitat = build_habitat()
    spec = build_spec(habitat)
    model = spec.compile()
    habitat.toggle()
    apply_view(model, habitat)
"""

from __future__ import annotations

import logging

import mujoco
import numpy as np

from habitat_gen.primitives import GeomType, Prim, prim_matrix
from habitat_gen.scene import Habitat

log = logging.getLogger(__name__)

# Engine (y-up) to MuJoCo (z-up)
C = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, -1.0], [0.0, 1.0, 0.0]])


def to_mujoco_frame(matrix: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """(pos, quat) of an engine-frame 4x4 transform, in MuJoCo's frame."""
    pos = C @ matrix[:3, 3]
    rot = C @ matrix[:3, :3] @ C.T
    quat = np.zeros(4)
    mujoco.mju_mat2Quat(quat, rot.flatten())
    return pos, quat


def geom_size(prim: Prim) -> list[float]:
    """MuJoCo geom size for an engine-frame prim."""
    sx, sy, sz = prim.size
    if prim.geom_type in (GeomType.BOX, GeomType.ELLIPSOID):
        return [sx, sz, sy]
    return [sx, sy, sz]


def _visual_only(geom, rgba) -> None:
    geom.rgba = list(rgba)
    geom.contype = 0
    geom.conaffinity = 0


def add_prim(body, prim: Prim, name: str, world: np.ndarray | None = None, rgba=None):
    """Add one prim as a geom under body; world is the owner's transform."""
    m = prim_matrix(prim) if world is None else world @ prim_matrix(prim)
    pos, quat = to_mujoco_frame(m)
    geom = body.add_geom()
    geom.name = name
    geom.type = mujoco.mjtGeom(int(prim.geom_type))
    geom.size = geom_size(prim)
    geom.pos = pos
    geom.quat = quat
    _visual_only(geom, prim.rgba if rgba is None else rgba)
    return geom


def _add_mesh(spec, name: str, mesh) -> None:
    asset = spec.add_mesh()
    asset.name = name
    asset.uservert = (np.asarray(mesh.vertices) @ C.T).flatten().tolist()
    asset.userface = np.asarray(mesh.faces).flatten().tolist()


def prepare_visual(spec, offscreen: tuple[int, int] | None) -> None:
    if offscreen is not None:
        width, height = offscreen
        spec.visual.global_.offwidth = max(spec.visual.global_.offwidth, width)
        spec.visual.global_.offheight = max(spec.visual.global_.offheight, height)
    light = spec.worldbody.add_light()
    light.pos = [0.0, -6.0, 12.0]
    light.dir = [0.0, 0.4, -1.0]


def build_spec(habitat: Habitat, offscreen: tuple[int, int] | None = None) -> mujoco.MjSpec:
    """One geom per exported part, meshes registered as assets.

    Args:
        habitat: Generated habitat.
        offscreen: Minimum offscreen framebuffer (width, height), for renders.
    """
    spec = mujoco.MjSpec()
    spec.modelname = "habitat"
    prepare_visual(spec, offscreen)

    skipped = 0
    for path, part, world in habitat.root.walk():
        rgba = habitat.rgba_of(part)
        if not part.is_mesh:
            add_prim(spec.worldbody, part.shape, path, world, rgba)
            continue

        solid = part.shape
        if solid.is_empty or solid.wireframe:
            skipped += 1
            continue
        _add_mesh(spec, path, solid.mesh)
        pos, quat = to_mujoco_frame(world)
        geom = spec.worldbody.add_geom()
        geom.name = path
        geom.type = mujoco.mjtGeom.mjGEOM_MESH
        geom.meshname = path
        geom.pos = pos
        geom.quat = quat
        _visual_only(geom, rgba)

    log.debug("build_spec: %d parts skipped (empty or wireframe)", skipped)
    return spec


def compile_habitat(
    habitat: Habitat, offscreen: tuple[int, int] | None = None
) -> tuple[mujoco.MjModel, mujoco.MjData]:
    """Compile and run forward kinematics once so geoms are placed."""
    model = build_spec(habitat, offscreen).compile()
    data = mujoco.MjData(model)
    apply_view(model, habitat)
    mujoco.mj_forward(model, data)
    return model, data


def apply_view(model: mujoco.MjModel, habitat: Habitat) -> int:
    """Write the current toggled colors into a compiled model.

    Wireframe overlays are never compiled, so only the outer shell geom is
    updated here and the return value is 1 for the stock habitat. The
    wireframe's toggled alpha reaches exported files only (see export.py).

    Returns the number of geoms updated. Geometry is untouched.
    """
    updated = 0
    for path, part, _ in habitat.root.walk():
        if part.material is None:
            continue
        gid = mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_GEOM, path)
        if gid < 0:
            continue
        model.geom_rgba[gid] = habitat.rgba_of(part)
        updated += 1
    return updated
