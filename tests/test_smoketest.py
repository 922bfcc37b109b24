"""
Fast end-to-end smoketest for the habitat pipeline.

Validates that the builder, the MuJoCo compile, the view toggle and the
file exporters all work together. Runs in seconds.
"""

import math

import mujoco
import numpy as np
import pytest

from habitat_gen import HabitatConfig, ViewMode, build_habitat, describe_habitat, zone_volumes
from habitat_gen.builder import LANDER, OUTER_SHELL, OUTER_WIREFRAME, SHELLS, make_levels
from habitat_gen.export import export_scene, to_trimesh_scene
from habitat_gen.mj_scene import C, apply_view, build_spec, compile_habitat, to_mujoco_frame
from habitat_gen.primitives import prim_volume
from habitat_gen.programs import PROGRAMS


def _smoketest_config():
    return HabitatConfig.for_smoketest()


def _floor_plates(habitat, deck):
    """World-space (vertices, faces) of every floor plate on a deck."""
    for _, part, world in habitat.find(deck).walk():
        if part.name.startswith("floor_"):
            mesh = part.shape.mesh
            yield mesh.vertices @ world[:3, :3].T + world[:3, 3], mesh.faces


def _covers(tri, p):
    """Whether 2D triangle ``tri`` strictly contains point ``p``."""
    d = [
        (b[0] - a[0]) * (p[1] - a[1]) - (b[1] - a[1]) * (p[0] - a[0])
        for a, b in ((tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0]))
    ]
    return all(x > 0 for x in d) or all(x < 0 for x in d)


@pytest.fixture(scope="module")
def habitat():
    return build_habitat(_smoketest_config())


class TestBuilder:
    """Test the generated scene tree."""

    def test_top_level_groups(self, habitat):
        assert habitat.groups() == [SHELLS, "lower_deck", "main_deck", "upper_deck", LANDER]

    def test_levels_follow_config(self):
        levels = make_levels(_smoketest_config())
        assert [name for name, _, _ in levels] == ["lower_deck", "main_deck", "upper_deck"]
        _, main, count = levels[1]
        assert count == 6
        assert main.outer_radius(0.0) == pytest.approx(4.8)
        assert main.outer_radius(5.0) is None

    def test_config_flat_dict(self):
        flat = HabitatConfig().to_flat_dict()
        assert flat["inner_shell_radius"] == 4.8
        assert flat["sector_counts"] == (4, 6, 4)

    def test_sector_walls(self, habitat):
        for deck, count in (("lower_deck", 4), ("main_deck", 6), ("upper_deck", 4)):
            group = habitat.find(deck)
            walls = [c for c in group.children if c.name.startswith("wall_")]
            assert len(walls) == count

    def test_floor_plate_per_sector(self, habitat):
        cfg = _smoketest_config()
        core_outer = cfg.core_radius + cfg.core_wall_thickness
        for name, level, count in make_levels(cfg):
            plates = list(_floor_plates(habitat, name))
            assert len(plates) == count
            outer = level.outer_radius(level.y_floor)
            for verts, _ in plates:
                assert verts[:, 1].max() == pytest.approx(level.y_floor)
                radii = np.hypot(verts[:, 0], verts[:, 2])
                assert radii.min() >= core_outer - 1e-6
                assert radii.max() <= outer + 1e-6

    def test_hatch_cut_through_upper_floors(self, habitat):
        cfg = _smoketest_config()
        center = cfg.hatch_distance * np.array([math.cos(cfg.hatch_angle), math.sin(cfg.hatch_angle)])

        def hatch_hits(deck):
            """(faces covering the hatch center, closest vertex to it)"""
            hits, closest = 0, math.inf
            for verts, faces in _floor_plates(habitat, deck):
                xz = verts[:, [0, 2]]
                closest = min(closest, float(np.linalg.norm(xz - center, axis=1).min()))
                hits += sum(_covers(xz[face], center) for face in faces)
            return hits, closest

        for deck in ("main_deck", "upper_deck"):
            hits, closest = hatch_hits(deck)
            assert hits == 0, deck
            assert closest >= cfg.hatch_radius - 1e-6, deck
        # The stair stands on the lowest floor, which stays whole
        assert hatch_hits("lower_deck")[0] > 0

    def test_stairs_link_decks(self, habitat):
        stair = habitat.find("stair_to_main_deck")
        steps = [c for c in stair.children if c.name.startswith("step_")]
        # lower deck is 1.7 m tall, 0.2 m steps
        assert len(steps) == 8
        assert habitat.find("stair_to_upper_deck")

    def test_every_part_inside_outer_shell(self, habitat):
        radius = _smoketest_config().outer_shell_radius
        for path, part, world in habitat.root.walk():
            if path.startswith(LANDER):
                continue
            assert np.linalg.norm(world[:3, 3]) <= radius + 1e-6, path

    def test_lander_below_shell(self, habitat):
        radius = _smoketest_config().outer_shell_radius
        for path, part, world in habitat.find(LANDER).walk():
            # Feed lines are swept in place and prims carry their own offset
            top = world[1, 3]
            if part.is_mesh:
                top += float(part.shape.mesh.vertices[:, 1].max())
            else:
                top += part.shape.pos[1]
            assert top < -radius, path

    def test_degenerate_deck_is_empty(self):
        cfg = HabitatConfig.for_smoketest()
        cfg.level_heights = (-3.2, -1.5, 1.5, 3.6, 5.2)
        cfg.level_names = (*cfg.level_names, "observation_deck")
        cfg.sector_counts = (4, 6, 4, 4)
        habitat = build_habitat(cfg)
        assert habitat.find("observation_deck").children == ()

    def test_describe(self, habitat):
        desc = describe_habitat(habitat)
        assert desc.startswith("Habitat  view=opaque")
        for name in habitat.groups():
            assert name in desc
        assert "(life support)" in desc
        assert "Occupied volume" in desc
        for zone in zone_volumes(habitat):
            assert zone in desc

    def test_occupied_volume_sums_fixture_prims(self, habitat):
        expected = 0.0
        for name, _, count in make_levels(_smoketest_config()):
            for i in range(count):
                for slot in PROGRAMS[name].slots_for(i):
                    expected += sum(prim_volume(p) for p in slot.module().generate(slot.params()))
        volumes = zone_volumes(habitat)
        assert sum(volumes.values()) == pytest.approx(expected)
        assert {"sleep", "hygiene", "exercise", "food", "life support"} <= set(volumes)
        assert all(v > 0 for v in volumes.values())

    def test_deterministic(self):
        a = describe_habitat(build_habitat(_smoketest_config()))
        b = describe_habitat(build_habitat(_smoketest_config()))
        assert a == b


class TestViewToggle:
    def test_toggle_changes_only_shell_colors(self):
        habitat = build_habitat(_smoketest_config())
        before = {path: habitat.rgba_of(part) for path, part, _ in habitat.root.walk()}
        assert habitat.toggle() is ViewMode.TRANSPARENT
        after = {path: habitat.rgba_of(part) for path, part, _ in habitat.root.walk()}
        changed = {p for p in before if before[p] != after[p]}
        assert changed == {f"{SHELLS}/{OUTER_SHELL}", f"{SHELLS}/{OUTER_WIREFRAME}"}
        assert after[f"{SHELLS}/{OUTER_SHELL}"][3] < 0.5
        habitat.toggle()
        assert {path: habitat.rgba_of(part) for path, part, _ in habitat.root.walk()} == before


class TestMujoco:
    def test_frame_conversion(self):
        m = np.eye(4)
        m[:3, 3] = (1.0, 2.0, 3.0)
        pos, quat = to_mujoco_frame(m)
        assert pos == pytest.approx((1.0, -3.0, 2.0))
        assert quat == pytest.approx((1.0, 0.0, 0.0, 0.0))
        assert C @ np.array([0.0, 1.0, 0.0]) == pytest.approx((0.0, 0.0, 1.0))

    def test_compile_and_toggle(self):
        habitat = build_habitat(_smoketest_config())
        model, data = compile_habitat(habitat)
        assert model.ngeom > 100
        gid = mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_GEOM, f"{SHELLS}/{OUTER_SHELL}")
        assert gid >= 0
        assert model.geom_rgba[gid][3] == pytest.approx(1.0)

        habitat.toggle()
        assert apply_view(model, habitat) == 1
        assert model.geom_rgba[gid][3] == pytest.approx(_smoketest_config().shell_transparent_alpha)

    def test_wireframes_not_compiled(self, habitat):
        model = build_spec(habitat).compile()

        def gid(name):
            return mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_GEOM, name)

        assert gid(f"{SHELLS}/{OUTER_WIREFRAME}") == -1
        assert gid(f"{SHELLS}/{OUTER_SHELL}") >= 0


class TestExport:
    @pytest.mark.parametrize("suffix", ["glb", "obj", "stl"])
    def test_export_formats(self, habitat, tmp_path, suffix):
        path = export_scene(habitat, tmp_path / f"habitat.{suffix}")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_unknown_format(self, habitat, tmp_path):
        with pytest.raises(ValueError):
            export_scene(habitat, tmp_path / "habitat.fbx")

    def test_scene_nodes_are_paths(self, habitat):
        scene = to_trimesh_scene(habitat, include_wireframes=False)
        assert "lower_deck/floor_0" in scene.graph.nodes
