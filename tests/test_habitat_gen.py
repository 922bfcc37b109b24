"""Fast tests for the habitat generation system.

Validates that:
- Sphere cross-sections and deck bounds degrade to None, never NaN
- Wall, door, window, ring and sector-plate profiles are closed and well wound
- Sectors tile a full turn and placement is deterministic
- Extruded solids, concave or pierced, have the expected volume and outward caps
- Conduit tubes start and end exactly at their anchors
- Spiral stairs have the right tread count, heights and winding
- Every registered fixture generates valid primitives and names its zone
- Deck programs only reference fixtures and variations that exist
- The view toggle round-trips and the scene tree lookup behaves
"""

import math

import numpy as np
import pytest

from habitat_gen import fixtures
from habitat_gen.conduits import ConduitSpec, route, route_through, sweep
from habitat_gen.layout import DEFAULT_RULES, TWO_PI, Pose, partition, place_pose
from habitat_gen.primitives import GeomType, Placement, Prim, prim_height_range, prim_volume
from habitat_gen.profiles import (
    EMPTY_PROFILE,
    Profile,
    build_door_outline,
    build_ring_profile,
    build_sector_plate,
    build_upper_wall_profile,
    build_wall_profile,
    build_window_outline,
)
from habitat_gen.programs import PROGRAMS
from habitat_gen.scene import Group, Part, ShellMaterial, ToggleView, ViewMode
from habitat_gen.solids import empty_solid, extrude, frustum, prim_mesh
from habitat_gen.sphere import Level, Sphere, cross_section_radius
from habitat_gen.stairs import generate as stair_generate
from habitat_gen.stairs import stair_between, step_count


# ---------------------------------------------------------------------------
# Sphere and levels
# ---------------------------------------------------------------------------


class TestSphere:
    def test_equator_is_full_radius(self):
        assert cross_section_radius(4.8, 0.0) == pytest.approx(4.8)

    def test_cross_section_pythagoras(self):
        assert cross_section_radius(5.0, 3.0) == pytest.approx(4.0)

    def test_outside_sphere_is_none(self):
        assert cross_section_radius(4.8, 5.0) is None
        assert cross_section_radius(4.8, -5.0) is None

    def test_tangent_plane_is_none(self):
        assert cross_section_radius(4.8, 4.8) is None

    def test_level_outer_radius(self):
        deck = Level(-1.5, 1.5, 0.9, Sphere(4.8))
        assert deck.outer_radius(0.0) == pytest.approx(4.8)
        assert deck.outer_radius(5.0) is None
        assert deck.height == pytest.approx(3.0)
        assert deck.center == pytest.approx(0.0)

    def test_usable_radius_is_narrower_slice(self):
        deck = Level(1.5, 3.6, 0.9, Sphere(4.8))
        assert deck.usable_radius == pytest.approx(math.sqrt(4.8**2 - 3.6**2))

    def test_usable_radius_none_when_band_leaves_shell(self):
        deck = Level(4.0, 5.5, 0.9, Sphere(4.8))
        assert deck.usable_radius is None


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TestProfiles:
    def test_wall_profile_closed_and_counted(self):
        p = build_wall_profile(3.0, 0.0, 0.96, 4.8, 12)
        assert p.is_closed
        # 13 samples up the sphere, 13 down the core, closing repeat
        assert len(p) == 27
        assert p.signed_area() > 0

    def test_wall_outer_edge_follows_sphere(self):
        p = build_wall_profile(3.0, 0.0, 0.96, 4.8, 4)
        for x, y in p.points[:5]:
            assert x == pytest.approx(math.sqrt(4.8**2 - y**2))

    def test_wall_through_sphere_is_empty(self):
        assert build_wall_profile(3.0, 4.0, 0.96, 4.8, 12) is EMPTY_PROFILE

    def test_wall_squeezed_by_core_is_empty(self):
        assert build_wall_profile(0.6, 4.0, 2.5, 4.8, 12) is EMPTY_PROFILE

    def test_upper_wall_pinned_to_floor_and_ceiling(self):
        p = build_upper_wall_profile(1.5, 3.6, 0.96, 4.8, 5)
        ys = [y for _, y in p.points]
        assert min(ys) == pytest.approx(-1.05)
        assert max(ys) == pytest.approx(1.05)

    def test_door_outline(self):
        p = build_door_outline(0.8, 1.9)
        x0, y0, x1, y1 = p.bounds()
        assert p.is_closed
        assert (x0, x1) == pytest.approx((-0.4, 0.4))
        assert y0 == pytest.approx(0.0)
        assert y1 <= 1.9 + 1e-9

    def test_door_too_short_is_empty(self):
        assert build_door_outline(0.8, 0.3).is_empty

    def test_window_is_symmetric(self):
        p = build_window_outline(0.2, 16)
        assert p.is_closed
        assert p.center() == pytest.approx((0.0, 0.0))

    def test_ring_has_matching_hole(self):
        p = build_ring_profile(2.0, 1.0, 24)
        assert len(p.points) == len(p.hole) == 25

    def test_ring_degenerate_outer(self):
        assert build_ring_profile(None, 1.0) is EMPTY_PROFILE
        assert build_ring_profile(0.5, 1.0) is EMPTY_PROFILE

    def test_wall_curvature_error_shrinks_with_segments(self):
        errors = []
        for n in (1, 2, 4, 8, 16, 32):
            outer = build_wall_profile(3.0, 0.0, 0.96, 4.8, n).points[: n + 1]
            # Gap between the sphere and each chord, measured at the chord midpoint
            errors.append(
                max(
                    math.sqrt(4.8**2 - ((y0 + y1) / 2) ** 2) - (x0 + x1) / 2
                    for (x0, y0), (x1, y1) in zip(outer, outer[1:])
                )
            )
        assert all(a > b for a, b in zip(errors, errors[1:]))
        assert errors[0] == pytest.approx(0.240, abs=1e-3)
        assert errors[-1] < 1e-3

    def test_sector_plate_pairs_angles(self):
        p = build_sector_plate(4.0, 1.0, 0.0, math.pi / 2, 4)
        assert p.is_closed
        n = len(p) - 1
        assert n == 10
        for i in range(n // 2):
            (x0, y0), (x1, y1) = p.points[i], p.points[n - 1 - i]
            assert math.atan2(y0, x0) == pytest.approx(math.atan2(y1, x1))
            assert math.hypot(x0, y0) == pytest.approx(4.0)
            assert math.hypot(x1, y1) == pytest.approx(1.0)
        assert p.signed_area() > 0
        assert p.hole == ()

    def test_sector_plate_hole(self):
        p = build_sector_plate(4.0, 1.0, 0.0, math.pi / 2, 4, (1.5, 1.5), 0.5, 12)
        assert len(p.hole) == 13
        for x, y in p.hole:
            assert math.hypot(x - 1.5, y - 1.5) == pytest.approx(0.5)

    def test_sector_plate_degenerate(self):
        assert build_sector_plate(None, 1.0, 0.0, 1.0) is EMPTY_PROFILE
        assert build_sector_plate(0.8, 1.0, 0.0, 1.0) is EMPTY_PROFILE
        assert build_sector_plate(4.0, 1.0, 0.0, 0.0) is EMPTY_PROFILE


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class TestLayout:
    def test_partition_tiles_full_turn(self):
        sectors = partition(6, 1.0, 4.0)
        assert len(sectors) == 6
        assert sum(s.sweep for s in sectors) == pytest.approx(TWO_PI)
        assert sectors[0].start_angle == 0.0

    def test_partition_contiguous(self):
        sectors = partition(5, 1.0, 4.0)
        for a, b in zip(sectors, sectors[1:]):
            assert a.end_angle == b.start_angle

    def test_partition_zero_is_empty(self):
        assert partition(0, 1.0, 4.0) == ()

    def test_place_pose_deterministic(self):
        s = partition(4, 1.0, 4.0)[1]
        a = place_pose(s, 0.5, 0.5, 0.2)
        b = place_pose(s, 0.5, 0.5, 0.2)
        assert a == b

    def test_place_pose_polar_formula(self):
        s = partition(4, 1.0, 3.0)[1]
        pose = place_pose(s, 0.5, 0.5, -1.0)
        angle = 0.75 * math.pi
        assert pose.position == pytest.approx((math.cos(angle) * 2.0, -1.0, math.sin(angle) * 2.0))
        assert pose.yaw == pytest.approx(-angle)

    def test_radial_yaw_points_local_x_outward(self):
        pose = place_pose(partition(3, 1.0, 3.0)[2], 0.3, 0.5, 0.0)
        out = pose.rotation() @ np.array([1.0, 0.0, 0.0])
        radial = np.array(pose.position) / np.linalg.norm(pose.position)
        assert out == pytest.approx(radial)

    def test_every_placement_has_a_default_rule(self):
        assert set(DEFAULT_RULES) == set(Placement)


# ---------------------------------------------------------------------------
# Solids
# ---------------------------------------------------------------------------


class TestSolids:
    def test_rectangle_extrusion_volume(self):
        rect = Profile(((0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (0.0, 1.0), (0.0, 0.0)))
        solid = extrude(rect, 0.5)
        assert solid.volume == pytest.approx(1.0)
        assert solid.mesh.is_watertight

    def test_extrusion_is_centered(self):
        rect = Profile(((1.0, 0.0), (3.0, 0.0), (3.0, 1.0), (1.0, 1.0), (1.0, 0.0)))
        solid = extrude(rect, 0.2)
        assert solid.pivot == pytest.approx((-2.0, 0.0, -0.1))
        lo, hi = solid.mesh.bounds
        assert lo[2] == pytest.approx(-0.1)
        assert hi[2] == pytest.approx(0.1)

    def test_wall_extrusion_volume_matches_area(self):
        p = build_wall_profile(3.0, 0.0, 0.96, 4.8, 12)
        solid = extrude(p, 0.06)
        assert solid.volume == pytest.approx(p.signed_area() * 0.06, rel=1e-6)

    def test_ring_extrusion_volume(self):
        p = build_ring_profile(2.0, 1.0, 32)
        solid = extrude(p, 0.1)
        outer = 32 * 0.5 * 2.0**2 * math.sin(TWO_PI / 32)
        inner = 32 * 0.5 * 1.0**2 * math.sin(TWO_PI / 32)
        assert solid.volume == pytest.approx((outer - inner) * 0.1, rel=1e-6)

    def test_empty_profile_gives_empty_solid(self):
        solid = extrude(EMPTY_PROFILE, 0.1)
        assert solid.is_empty
        assert solid.volume == 0.0
        assert empty_solid().is_empty

    def test_frustum_cap_centers(self):
        solid = frustum(0.75, 0.5, 0.3)
        assert solid.mesh.vertices[-2] == pytest.approx((0.0, -0.5, 0.0))
        assert solid.mesh.vertices[-1] == pytest.approx((0.0, 0.5, 0.0))
        assert solid.volume > 0

    def test_frustum_degenerate(self):
        assert frustum(0.0, 0.5, 0.3).is_empty

    def test_cylinder_prim_mesh_is_y_up(self):
        prim = Prim(GeomType.CYLINDER, (0.1, 0.5, 0.0), (0, 0, 0), (1, 1, 1, 1))
        lo, hi = prim_mesh(prim).bounds
        assert hi[1] - lo[1] == pytest.approx(1.0)

    @staticmethod
    def _assert_caps_face_out(solid, thickness):
        mesh = solid.mesh
        z = mesh.vertices[mesh.faces][:, :, 2]
        top = np.all(np.isclose(z, thickness / 2), axis=1)
        bottom = np.all(np.isclose(z, -thickness / 2), axis=1)
        assert top.any() and bottom.any()
        assert np.all(mesh.face_normals[top][:, 2] > 0)
        assert np.all(mesh.face_normals[bottom][:, 2] < 0)

    def test_concave_arrow_extrusion(self):
        # Notched tail: the fan from vertex 0 would fold over itself
        arrow = Profile(((0.0, 0.0), (4.0, 1.0), (0.0, 2.0), (1.0, 1.5), (1.0, 0.5), (0.0, 0.0)))
        solid = extrude(arrow, 0.2)
        assert solid.volume == pytest.approx(2.5 * 0.2)
        assert solid.mesh.is_watertight
        self._assert_caps_face_out(solid, 0.2)

    def test_u_channel_extrusion(self):
        u = Profile(
            (
                (0.0, 0.0), (3.0, 0.0), (3.0, 2.0), (2.0, 2.0),
                (2.0, 1.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0), (0.0, 0.0),
            )
        )
        solid = extrude(u, 0.1)
        assert solid.volume == pytest.approx(5.0 * 0.1)
        assert solid.mesh.is_watertight
        self._assert_caps_face_out(solid, 0.1)

    def test_sector_plate_extrusions(self):
        whole = extrude(build_sector_plate(4.0, 1.0, 0.0, math.pi / 2, 4), 0.1)
        pierced = extrude(build_sector_plate(4.0, 1.0, 0.0, math.pi / 2, 4, (1.5, 1.5), 0.5, 12), 0.1)
        hole_area = 12 * 0.5 * 0.5**2 * math.sin(TWO_PI / 12)
        assert pierced.mesh.is_watertight
        assert whole.volume - pierced.volume == pytest.approx(hole_area * 0.1, rel=1e-6)
        self._assert_caps_face_out(pierced, 0.1)

    def test_self_intersecting_profile_is_empty(self):
        bowtie = Profile(((0.0, 0.0), (1.0, 1.0), (1.0, 0.0), (0.0, 1.0), (0.0, 0.0)))
        assert extrude(bowtie, 0.1).is_empty


# ---------------------------------------------------------------------------
# Conduits
# ---------------------------------------------------------------------------


class TestConduits:
    def test_tube_cap_centers_at_endpoints(self):
        start, end = (0.0, 1.0, 0.0), (2.0, 1.0, 1.0)
        solid = sweep(route(start, end, (0.0, -0.3, 0.0)), 0.04, 8)
        assert solid.mesh.vertices[-2] == pytest.approx(start)
        assert solid.mesh.vertices[-1] == pytest.approx(end)

    def test_tube_vertex_count(self):
        solid = sweep(route((0, 0, 0), (1, 0, 0)), 0.05, 6, radial_segments=8)
        assert len(solid.mesh.vertices) == 7 * 8 + 2
        assert solid.mesh.is_watertight

    def test_coincident_endpoints_give_nothing(self):
        assert sweep(route((1, 1, 1), (1, 1, 1), (0, -1, 0)), 0.04, 8) is None
        assert ConduitSpec((0, 0, 0), (0, 0, 0)).build() is None

    def test_sag_lowers_midpoint(self):
        curve = route((0, 0, 0), (2, 0, 0), (0, -0.4, 0))
        assert curve.point(0.5)[1] == pytest.approx(-0.2)
        assert curve.length() > 2.0
        assert route((0, 0, 0), (2, 0, 0)).length() == pytest.approx(2.0)

    def test_spline_passes_through_anchors(self):
        anchors = [(0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1)]
        pts = route_through(anchors).sample(6)
        for k, a in enumerate(anchors):
            assert pts[2 * k] == pytest.approx(a)

    def test_spline_drops_duplicate_anchors(self):
        spline = route_through([(0, 0, 0), (0, 0, 0), (1, 0, 0)])
        assert len(spline.anchors) == 2
        assert route_through([(0, 0, 0), (0, 0, 0)]).is_degenerate


# ---------------------------------------------------------------------------
# Stairs
# ---------------------------------------------------------------------------


class TestStairs:
    def test_fifteen_steps_for_three_meters(self):
        prims = stair_generate(3.0, 0.2, 0.6, 2.5 * math.pi)
        pole, *steps = prims
        assert pole.geom_type == GeomType.CYLINDER
        assert len(steps) == 15

    def test_step_heights(self):
        _, *steps = stair_generate(3.0, 0.2, 0.6, 2.5 * math.pi)
        assert steps[0].pos[1] == pytest.approx(0.0)
        assert steps[14].pos[1] == pytest.approx(2.8)
        heights = [s.pos[1] for s in steps]
        assert heights == sorted(heights)

    def test_treads_wind_around_pole(self):
        _, *steps = stair_generate(3.0, 0.2, 0.6, 2.5 * math.pi)
        angles = np.unwrap([math.atan2(s.pos[2], s.pos[0]) for s in steps])
        increment = 2.5 * math.pi / 15
        assert np.all(np.diff(angles) > 0)
        assert angles == pytest.approx([i * increment for i in range(15)])
        for angle, step in zip(angles, steps):
            assert step.euler[1] == pytest.approx(-angle)

    def test_treads_fit_through_hatch(self):
        _, *steps = stair_generate(3.0, 0.2, 0.6, 2.5 * math.pi)
        for s in steps:
            reach = math.hypot(math.hypot(s.pos[0], s.pos[2]) + s.size[0], s.size[2])
            assert reach < 0.6

    def test_step_count_float_edge(self):
        assert step_count(0.6, 0.2) == 3

    def test_pole_spans_rise(self):
        pole = stair_generate(3.0, 0.2, 0.6, 2.5 * math.pi)[0]
        assert prim_height_range((pole,)) == pytest.approx((0.0, 3.0))

    def test_no_rise_no_stair(self):
        assert stair_generate(0.0, 0.2, 0.6, math.pi) == ()
        assert len(stair_generate(0.1, 0.2, 0.6, math.pi)) == 1

    def test_stair_between_hatches(self):
        lower = Pose((1.0, -1.5, 0.5))
        upper = Pose((1.0, 1.5, 0.5))
        pose, prims = stair_between(lower, upper, 0.2, 0.6, 2.5 * math.pi)
        assert pose.position == lower.position
        assert len(prims) == 16


# ---------------------------------------------------------------------------
# Fixture validation
# ---------------------------------------------------------------------------


class TestFixtures:
    """Every fixture module must generate valid prims."""

    @pytest.fixture(params=fixtures.list_fixtures())
    def fixture_name(self, request):
        return request.param

    def test_has_params_and_generate(self, fixture_name):
        mod = fixtures.get(fixture_name)
        assert hasattr(mod, "Params"), f"{fixture_name} missing Params dataclass"
        assert hasattr(mod, "generate"), f"{fixture_name} missing generate()"

    def test_has_placement(self, fixture_name):
        mod = fixtures.get(fixture_name)
        assert isinstance(getattr(mod, "PLACEMENT", None), Placement)

    def test_has_zone(self, fixture_name):
        zone = getattr(fixtures.get(fixture_name), "ZONE", None)
        assert isinstance(zone, str) and zone, f"{fixture_name} missing ZONE"

    def test_all_variations_generate(self, fixture_name):
        mod = fixtures.get(fixture_name)
        variations = getattr(mod, "VARIATIONS", None)
        assert variations, f"{fixture_name} missing VARIATIONS dict"
        for var_name, params in variations.items():
            prims = mod.generate(params)
            assert isinstance(prims, tuple), f"{fixture_name}/{var_name}: not a tuple"
            assert 1 <= len(prims) <= 12, f"{fixture_name}/{var_name}: {len(prims)} prims"
            for p in prims:
                assert isinstance(p.geom_type, GeomType)
                assert len(p.size) == 3 and len(p.pos) == 3
                assert all(0 <= c <= 1 for c in p.rgba), f"rgba out of range: {p.rgba}"

    def test_sits_on_floor(self, fixture_name):
        mod = fixtures.get(fixture_name)
        lo, hi = prim_height_range(mod.generate(mod.Params()))
        assert lo >= -0.01, f"{fixture_name} dips below the deck floor ({lo:.3f})"
        assert hi > 0

    def test_generate_is_cached(self, fixture_name):
        mod = fixtures.get(fixture_name)
        assert mod.generate(mod.Params()) is mod.generate(mod.Params())

    def test_unknown_fixture(self):
        with pytest.raises(KeyError):
            fixtures.get("jacuzzi")

    def test_registry_lists_every_module(self):
        assert sorted(fixtures.all_fixtures()) == fixtures.list_fixtures()
        assert len(fixtures.list_fixtures()) == 10


class TestPrimVolume:
    @pytest.mark.parametrize(
        "geom_type, size, expected",
        [
            (GeomType.BOX, (0.5, 0.5, 0.5), 1.0),
            (GeomType.CYLINDER, (1.0, 0.5, 0.0), math.pi),
            (GeomType.SPHERE, (1.0, 0.0, 0.0), 4 / 3 * math.pi),
            (GeomType.CAPSULE, (1.0, 0.5, 0.0), math.pi + 4 / 3 * math.pi),
            (GeomType.ELLIPSOID, (1.0, 2.0, 3.0), 8 * math.pi),
        ],
    )
    def test_volume(self, geom_type, size, expected):
        prim = Prim(geom_type, size, (0.0, 0.0, 0.0), (1, 1, 1, 1), euler=(0.3, 0.2, 0.1))
        assert prim_volume(prim) == pytest.approx(expected)


class TestPrograms:
    def test_slots_reference_real_variations(self):
        for program in PROGRAMS.values():
            for sector in program.sectors:
                for slot in sector:
                    mod = fixtures.get(slot.fixture)
                    assert slot.variation in mod.VARIATIONS, (
                        f"{program.name}: {slot.fixture}/{slot.variation}"
                    )

    def test_every_fixture_is_programmed(self):
        used = set().union(*(p.fixture_names() for p in PROGRAMS.values()))
        assert used == set(fixtures.list_fixtures())

    def test_slots_cycle(self):
        program = PROGRAMS["main_deck"]
        assert program.slots_for(len(program.sectors)) == program.slots_for(0)

    def test_default_rule_follows_placement(self):
        slot = PROGRAMS["lower_deck"].slots_for(1)[1]
        assert slot.placement_rule() == DEFAULT_RULES[slot.module().PLACEMENT]


# ---------------------------------------------------------------------------
# Scene tree and view toggle
# ---------------------------------------------------------------------------


class TestScene:
    def _view(self):
        return ToggleView((ShellMaterial("outer_shell", (0.5, 0.4, 0.3), 1.0, 0.1),))

    def test_toggle_round_trip(self):
        view = self._view()
        before = view.state()
        assert view.toggle() is ViewMode.TRANSPARENT
        assert view.rgba("outer_shell")[3] == pytest.approx(0.1)
        assert view.blending("outer_shell")
        assert view.toggle() is ViewMode.OPAQUE
        assert view.state() == before

    def test_walk_paths_and_transforms(self):
        prim = Prim(GeomType.SPHERE, (0.1, 0, 0), (0, 0, 0), (1, 1, 1, 1))
        inner = Group("inner", (Part("ball", prim, Pose((0.0, 1.0, 0.0))),), Pose((2.0, 0.0, 0.0)))
        root = Group("root", (inner,))
        [(path, part, world)] = list(root.walk())
        assert path == "inner/ball"
        assert world[:3, 3] == pytest.approx((2.0, 1.0, 0.0))

    def test_find_raises_key_error(self):
        root = Group("root", (Group("deck"),))
        assert root.find("deck").name == "deck"
        with pytest.raises(KeyError):
            root.find("attic")

    def test_zoned_stops_at_tagged_group(self):
        bunk = Group("bunk", (Group("frame", zone="stowage"),), zone="sleep")
        root = Group("root", (Group("deck", (bunk, Group("walls"))),))
        assert [g.name for g in root.zoned()] == ["bunk"]
