"""Habitat builder: turns a HabitatConfig into the scene tree.

Build order, bottom-up, each node attached once:

    habitat
      habitat_shells      outer regolith shell + wireframe (toggled),
                          inner structural sphere + wireframe
      lower_deck          floor plates (hatch cut), core wall, partitions, doors,
      main_deck           portholes, fixtures per the deck program, hatch rim,
      upper_deck          stair to the next deck, conduits (racks, ring main)
      lander_systems      thrust plate, tanks, engine bell, legs, feed lines

Decks are the bands between consecutive level_heights, carved out of the
inner shell. A deck whose band leaves the shell produces an empty group;
a wall whose span leaves the shell produces an empty solid. Neither stops
the build.

Usage:
    habitat = build_habitat(HabitatConfig())
    print(describe_habitat(habitat))
"""

from __future__ import annotations

import logging
import math

import numpy as np
import trimesh

from habitat_gen.conduits import ConduitSpec, route, route_through, sweep
from habitat_gen.config import HabitatConfig
from habitat_gen.fixtures import life_support_rack
from habitat_gen.layout import TWO_PI, Pose, Sector, partition, polar_pose
from habitat_gen.primitives import (
    COOLANT_GREEN,
    CORE_STEEL,
    DECK_GRAY,
    DOOR_BLUE,
    FABRIC_SHELL,
    GLASS,
    HATCH_YELLOW,
    METAL_CHROME,
    METAL_DARK,
    METAL_GRAY,
    PARTITION_WHITE,
    PIPE_COPPER,
    REGOLITH,
    WIRE_CYAN,
    WIRE_OLIVE,
    GeomType,
    Prim,
    prim_volume,
)
from habitat_gen.profiles import (
    build_door_outline,
    build_hatch_ring,
    build_ring_profile,
    build_sector_plate,
    build_upper_wall_profile,
    build_wall_profile,
    build_window_outline,
)
from habitat_gen.programs import PROGRAMS, DeckProgram
from habitat_gen.scene import Group, Habitat, Part, ShellMaterial, ToggleView
from habitat_gen.solids import Solid, extrude, frustum
from habitat_gen.sphere import Level, Sphere
from habitat_gen.stairs import stair_between

log = logging.getLogger(__name__)

# Stable group names
SHELLS = "habitat_shells"
LANDER = "lander_systems"

# Toggled materials
OUTER_SHELL = "outer_shell"
OUTER_WIREFRAME = "outer_wireframe"

LAY_FLAT = -math.pi / 2  # tilt that turns an extrusion's +z into +y
PLAN_VIEW = math.pi / 2  # tilt that maps profile y onto +z, for plan-view outlines

HATCH_RIM_WIDTH = 0.06
HATCH_RIM_HEIGHT = 0.03
DOOR_CLEARANCE = 0.15  # headroom kept above a door
WINDOW_SILL = 1.3  # porthole center above the floor
WINDOW_ANGLE_FRACTION = 0.2
WINDOW_INSET = 0.03
WINDOW_THICKNESS = 0.04
RING_MAIN_RADIUS_FRACTION = 0.65
CEILING_RUN_DROP = 0.12  # ring main hangs this far below the ceiling

# Lander layout, measured down from just below the outer shell
LANDER_GAP = 0.1
PLATE_RADIUS = 1.6
PLATE_HALF_THICKNESS = 0.08
TANK_RADIUS = 0.45
TANK_RING = 1.1
BELL_HALF_HEIGHT = 0.5
LEG_HIP_RING = 1.4
LEG_FOOT_RING = 2.8
LEG_DROP = 2.1
LEG_RADIUS = 0.07
PAD_RADIUS = 0.3


def make_levels(config: HabitatConfig) -> list[tuple[str, Level, int]]:
    """(name, level, sector_count) per deck, paired by index."""
    shell = Sphere(config.inner_shell_radius)
    heights = config.level_heights
    return [
        (name, Level(lo, hi, config.core_radius, shell), count)
        for name, lo, hi, count in zip(
            config.level_names, heights, heights[1:], config.sector_counts
        )
    ]


def hatch_pose(config: HabitatConfig, y: float) -> Pose:
    return polar_pose(config.hatch_angle, config.hatch_distance, y)


def _xyz(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def _polar_point(angle: float, radius: float, y: float) -> tuple[float, float, float]:
    return polar_pose(angle, radius, y).position


# ---------------------------------------------------------------------------
# Shells
# ---------------------------------------------------------------------------


def shell_view(config: HabitatConfig) -> ToggleView:
    """The outer shell and its wireframe, switched together."""
    return ToggleView(
        (
            ShellMaterial(OUTER_SHELL, REGOLITH[:3], 1.0, config.shell_transparent_alpha),
            ShellMaterial(OUTER_WIREFRAME, WIRE_OLIVE[:3], 1.0, config.wireframe_transparent_alpha),
        )
    )


def _wireframe(radius: float, segments: int, rgba) -> Solid:
    mesh = trimesh.creation.uv_sphere(radius=radius, count=[segments, segments])
    return Solid(mesh, rgba, wireframe=True)


def build_shells(config: HabitatConfig) -> Group:
    outer = config.outer_shell_radius
    inner = config.inner_shell_radius
    segs = config.shell_segments
    origin = (0.0, 0.0, 0.0)
    return Group(
        SHELLS,
        (
            Part(OUTER_SHELL, Prim(GeomType.SPHERE, (outer, 0, 0), origin, REGOLITH), material=OUTER_SHELL),
            Part(OUTER_WIREFRAME, _wireframe(outer * 1.002, segs, WIRE_OLIVE), material=OUTER_WIREFRAME),
            Part("inner_shell", Prim(GeomType.SPHERE, (inner, 0, 0), origin, FABRIC_SHELL)),
            Part("inner_wireframe", _wireframe(inner, segs, WIRE_CYAN)),
        ),
    )


# ---------------------------------------------------------------------------
# Deck structure
# ---------------------------------------------------------------------------


def _hatch_clear(sector: Sector, config: HabitatConfig, inner: float, outer: float) -> bool:
    """Whether the hatch disc clears every edge of this sector's floor plate."""
    d = config.hatch_distance
    r = config.hatch_radius
    rel = (config.hatch_angle - sector.start_angle) % TWO_PI
    # Distance to a radial edge is d * sin(angle) until the edge falls behind the disc.
    edges = [d * math.sin(a) if a < math.pi / 2 else d for a in (rel, sector.sweep - rel)]
    return d - r > inner and d + r < outer and min(edges) > r


def _floor(level: Level, sectors: tuple[Sector, ...], config: HabitatConfig, hatch: bool) -> list[Part]:
    """One plate per sector; the plate under the hatch is pierced when ``hatch`` is set."""
    core_outer = config.core_radius + config.core_wall_thickness
    outer = level.outer_radius(level.y_floor)
    y = level.y_floor - config.floor_thickness / 2
    parts: list[Part] = []
    for s in sectors:
        segments = max(2, math.ceil(config.shell_segments * s.sweep / TWO_PI))
        hole = {}
        under_hatch = (config.hatch_angle - s.start_angle) % TWO_PI < s.sweep
        if hatch and under_hatch and outer is not None:
            if _hatch_clear(s, config, core_outer, outer):
                hole = {
                    "hole_center": (
                        config.hatch_distance * math.cos(config.hatch_angle),
                        config.hatch_distance * math.sin(config.hatch_angle),
                    ),
                    "hole_radius": config.hatch_radius,
                    "hole_segments": config.shell_segments,
                }
            else:
                log.warning(
                    "hatch overlaps the edge of floor_%d at y=%.2f; plate left whole", s.index, level.y_floor
                )
        plate = build_sector_plate(outer, core_outer, s.start_angle, s.sweep, segments, **hole)
        solid = extrude(plate, config.floor_thickness, DECK_GRAY)
        pose = Pose((-solid.pivot[0], y, 0.0), tilt=PLAN_VIEW)
        parts.append(Part(f"floor_{s.index}", solid, pose))
    return parts


def _structure(level: Level, sectors: tuple[Sector, ...], config: HabitatConfig, top: bool, hatch: bool) -> list:
    """Floor plates, core wall, partitions with doors, portholes."""
    core_outer = config.core_radius + config.core_wall_thickness
    segs = config.shell_segments
    parts: list = _floor(level, sectors, config, hatch)

    core = extrude(build_ring_profile(core_outer, config.core_radius, segs), level.height, CORE_STEEL)
    parts.append(Part("core_wall", core, Pose((0.0, level.center, 0.0), tilt=LAY_FLAT)))

    door_outline = build_door_outline(
        config.door_width, min(config.door_height, level.height - DOOR_CLEARANCE)
    )
    window_outline = build_window_outline(config.window_radius)
    rim_profile = build_ring_profile(config.window_radius + 0.04, config.window_radius, 16)

    # Each part gets its own solid; outlines are shared, meshes are not.
    for s in sectors:
        if top:
            profile = build_upper_wall_profile(
                level.y_floor, level.y_ceiling, core_outer, level.shell.radius, config.wall_segments
            )
        else:
            profile = build_wall_profile(
                level.height, level.center, core_outer, level.shell.radius, config.wall_segments
            )
        wall = extrude(profile, config.wall_thickness, PARTITION_WHITE)
        parts.append(
            Part(f"wall_{s.index}", wall, polar_pose(s.start_angle, -wall.pivot[0], level.center))
        )
        door = extrude(door_outline, config.wall_thickness + 0.02, DOOR_BLUE)
        parts.append(
            Part(f"door_{s.index}", door, polar_pose(s.start_angle, s.radius_at(0.5), level.y_floor))
        )

        y = level.y_floor + min(WINDOW_SILL, level.height / 2)
        r = level.outer_radius(y)
        if r is None:
            log.debug("porthole skipped at y=%.3f (outside shell)", y)
            continue
        tilt = -math.asin(y / level.shell.radius)
        pose = polar_pose(
            s.angle_at(WINDOW_ANGLE_FRACTION), r - WINDOW_INSET, y, math.pi / 2, tilt
        )
        window = extrude(window_outline, WINDOW_THICKNESS, GLASS)
        rim = extrude(rim_profile, WINDOW_THICKNESS + 0.02, METAL_GRAY)
        parts.append(Part(f"porthole_{s.index}", window, pose))
        parts.append(Part(f"porthole_rim_{s.index}", rim, pose))

    return parts


def _hatch_rim(level: Level, config: HabitatConfig) -> Part:
    rim = extrude(
        build_hatch_ring(config.hatch_radius + HATCH_RIM_WIDTH, config.hatch_radius, config.shell_segments),
        HATCH_RIM_HEIGHT,
        HATCH_YELLOW,
    )
    pos = hatch_pose(config, level.y_floor + HATCH_RIM_HEIGHT / 2).position
    return Part("hatch_rim", rim, Pose(pos, tilt=LAY_FLAT))


def _stair(lower: Level, upper: Level, upper_name: str, config: HabitatConfig) -> Group:
    pose, prims = stair_between(
        hatch_pose(config, lower.y_floor),
        hatch_pose(config, upper.y_floor),
        config.step_height,
        config.hatch_radius,
        config.stair_sweep,
    )
    parts = [Part("pole" if i == 0 else f"step_{i - 1:02d}", p) for i, p in enumerate(prims)]
    return Group(f"stair_to_{upper_name}", tuple(parts), pose)


# ---------------------------------------------------------------------------
# Fixtures and conduits
# ---------------------------------------------------------------------------


def _fixtures(
    level: Level,
    sectors: tuple[Sector, ...],
    program: DeckProgram,
) -> tuple[list[Group], list[tuple[Pose, object]]]:
    """Fixture groups, plus (pose, params) of every life support rack."""
    groups: list[Group] = []
    racks: list[tuple[Pose, object]] = []
    for s in sectors:
        for j, slot in enumerate(program.slots_for(s.index)):
            params = slot.params()
            pose = slot.placement_rule().pose(s, level)
            prims = slot.module().generate(params)
            parts = tuple(Part(f"g{k}", p) for k, p in enumerate(prims))
            groups.append(Group(f"s{s.index}_{j}_{slot.fixture}", parts, pose, zone=slot.module().ZONE))
            if slot.fixture == "life_support_rack":
                racks.append((pose, params))
    return groups, racks


def _conduits(
    level: Level,
    sectors: tuple[Sector, ...],
    racks: list[tuple[Pose, object]],
    config: HabitatConfig,
    ring_main: bool,
) -> list[Part]:
    """Feed lines from rack stubs to the core, and the ceiling ring main."""
    core_outer = config.core_radius + config.core_wall_thickness
    parts: list[Part] = []

    for k, (pose, params) in enumerate(racks):
        stub = pose.matrix() @ np.array([*life_support_rack.pipe_stub(params), 1.0])
        angle = math.atan2(stub[2], stub[0])
        spec = ConduitSpec(
            start=_xyz(stub),
            end=_polar_point(angle, core_outer + config.conduit_radius, level.y_ceiling - 0.2),
            sag_offset=(0.0, -config.conduit_sag, 0.0),
            radius=config.conduit_radius,
            tessellation=config.tube_tessellation,
            rgba=PIPE_COPPER,
        )
        solid = spec.build()
        if solid is None:
            continue
        parts.append(Part(f"feed_line_{k}", solid))

    if ring_main and len(sectors) >= 2:
        y = level.y_ceiling - CEILING_RUN_DROP
        anchors = [
            _polar_point(s.mid_angle, s.radius_at(RING_MAIN_RADIUS_FRACTION), y) for s in sectors
        ]
        solid = sweep(
            route_through(anchors),
            config.conduit_radius * 1.5,
            config.tube_tessellation * (len(anchors) - 1),
            rgba=COOLANT_GREEN,
        )
        if solid is not None:
            parts.append(Part("ring_main", solid))

    return parts


def build_deck(
    name: str,
    level: Level,
    sector_count: int,
    config: HabitatConfig,
    index: int = 0,
    top: bool = False,
    stair: Group | None = None,
) -> Group:
    usable = level.usable_radius
    if usable is None:
        log.debug("deck %s lies outside the shell; left empty", name)
        return Group(name)

    core_outer = config.core_radius + config.core_wall_thickness
    sectors = partition(sector_count, core_outer, usable - config.hull_clearance)
    program = PROGRAMS.get(name, DeckProgram(name, zone=""))

    children: list = _structure(level, sectors, config, top, hatch=index > 0)
    if index > 0:
        children.append(_hatch_rim(level, config))
    if stair is not None:
        children.append(stair)

    fixture_groups, racks = _fixtures(level, sectors, program)
    children.extend(fixture_groups)

    conduits = _conduits(level, sectors, racks, config, ring_main=index == 0)
    if conduits:
        children.append(Group("conduits", tuple(conduits)))

    return Group(name, tuple(children))


# ---------------------------------------------------------------------------
# Lander systems
# ---------------------------------------------------------------------------


def build_lander(config: HabitatConfig) -> Group:
    top = -config.outer_shell_radius - LANDER_GAP
    plate_y = top - PLATE_HALF_THICKNESS
    under = top - 2 * PLATE_HALF_THICKNESS
    origin = (0.0, 0.0, 0.0)

    parts: list[Part] = [
        Part(
            "thrust_plate",
            Prim(GeomType.CYLINDER, (PLATE_RADIUS, PLATE_HALF_THICKNESS, 0), (0.0, plate_y, 0.0), METAL_DARK),
        ),
        Part(
            "engine_bell",
            frustum(0.75, BELL_HALF_HEIGHT, 0.3, METAL_GRAY),
            Pose((0.0, under - BELL_HALF_HEIGHT, 0.0)),
        ),
    ]

    tanks = max(int(config.lander_tanks), 0)
    throat_y = under - 0.05
    for k in range(tanks):
        a = 2 * math.pi * k / tanks + math.pi / tanks
        center = _polar_point(a, TANK_RING, under - TANK_RADIUS)
        parts.append(Part(f"tank_{k}", Prim(GeomType.SPHERE, (TANK_RADIUS, 0, 0), center, METAL_CHROME)))
        line = sweep(
            route(
                (center[0], center[1] - TANK_RADIUS, center[2]),
                _polar_point(a, 0.3, throat_y),
                (0.0, -0.25, 0.0),
            ),
            config.conduit_radius,
            config.tube_tessellation,
            rgba=PIPE_COPPER,
        )
        if line is not None:
            parts.append(Part(f"feed_line_{k}", line))

    legs = max(int(config.lander_legs), 0)
    beta = math.atan2(LEG_FOOT_RING - LEG_HIP_RING, LEG_DROP)
    length = math.hypot(LEG_FOOT_RING - LEG_HIP_RING, LEG_DROP)
    for k in range(legs):
        a = 2 * math.pi * k / legs
        hip = np.array(_polar_point(a, LEG_HIP_RING, under))
        foot = np.array(_polar_point(a, LEG_FOOT_RING, under - LEG_DROP))
        leg = Prim(GeomType.CAPSULE, (LEG_RADIUS, length / 2, 0), origin, METAL_GRAY)
        parts.append(Part(f"leg_{k}", leg, Pose(_xyz((hip + foot) / 2), -a + math.pi / 2, -beta)))
        pad = Prim(GeomType.CYLINDER, (PAD_RADIUS, 0.03, 0), (0.0, -LEG_RADIUS, 0.0), METAL_DARK)
        parts.append(Part(f"foot_pad_{k}", pad, Pose(_xyz(foot))))

    return Group(LANDER, tuple(parts))


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def build_habitat(config: HabitatConfig | None = None) -> Habitat:
    """Generate the full habitat. Never raises for degenerate geometry."""
    config = config or HabitatConfig()
    levels = make_levels(config)

    decks: list[Group] = []
    for i, (name, level, count) in enumerate(levels):
        stair = None
        if i + 1 < len(levels):
            upper_name, upper, _ = levels[i + 1]
            stair = _stair(level, upper, upper_name, config)
        decks.append(
            build_deck(name, level, count, config, index=i, top=i == len(levels) - 1, stair=stair)
        )

    root = Group("habitat", (build_shells(config), *decks, build_lander(config)))
    log.info("Built habitat: %d decks, %d parts", len(decks), len(root.parts()))
    return Habitat(root, shell_view(config))


def occupied_volume(group: Group) -> float:
    """Volume taken up by a group's prims and closed solids, in cubic meters."""
    total = 0.0
    for part in group.parts():
        if not part.is_mesh:
            total += prim_volume(part.shape)
        elif not part.is_empty and part.shape.mesh.is_watertight:
            total += abs(float(part.shape.mesh.volume))
    return total


def zone_volumes(habitat: Habitat) -> dict[str, float]:
    """Occupied volume per functional zone, summed over every zoned group."""
    volumes: dict[str, float] = {}
    for group in habitat.root.zoned():
        volumes[group.zone] = volumes.get(group.zone, 0.0) + occupied_volume(group)
    return dict(sorted(volumes.items()))


def describe_habitat(habitat: Habitat) -> str:
    """Multi-line summary of the scene tree and the occupied volume per zone.

    Example output:
        Habitat  view=opaque  5 groups
          habitat_shells    4 parts  (2 prims, 2 meshes)  1,284 verts
          lower_deck       61 parts  (27 prims, 34 meshes)  5,120 verts  [2 empty]  (life support)
          ...
        Occupied volume
          exercise          1.412 m3
          ...
          total             9.876 m3
    """
    groups = [c for c in habitat.root.children if isinstance(c, Group)]
    lines = [f"Habitat  view={habitat.mode.value}  {len(groups)} groups"]
    width = max((len(g.name) for g in groups), default=0)
    for g in groups:
        parts = g.parts()
        meshes = [p for p in parts if p.is_mesh]
        empty = sum(1 for p in meshes if p.is_empty)
        verts = sum(len(p.shape.mesh.vertices) for p in meshes)
        line = (
            f"  {g.name:<{width}}  {len(parts):3d} parts  "
            f"({len(parts) - len(meshes)} prims, {len(meshes)} meshes)  {verts:,} verts"
        )
        if empty:
            line += f"  [{empty} empty]"
        program = PROGRAMS.get(g.name)
        if program is not None and program.zone:
            line += f"  ({program.zone})"
        lines.append(line)

    volumes = zone_volumes(habitat)
    zone_width = max([len("total"), *(len(z) for z in volumes)])
    lines.append("Occupied volume")
    for zone, volume in volumes.items():
        lines.append(f"  {zone:<{zone_width}}  {volume:8.3f} m3")
    lines.append(f"  {'total':<{zone_width}}  {sum(volumes.values()):8.3f} m3")
    return "\n".join(lines)
