"""Render named variations of each fixture into labeled PNG grids.

Each variation is compiled into its own small model (prims on the
worldbody, visual only) and framed by a camera fitted to its prims.

Usage:
    uv run python -m habitat_gen.render_catalog                  # all fixtures
    uv run python -m habitat_gen.render_catalog galley           # single fixture
    uv run python -m habitat_gen.render_catalog --out docs/      # custom output dir
"""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path

import mujoco
import numpy as np
from PIL import Image, ImageDraw

from habitat_gen import fixtures
from habitat_gen.mj_scene import add_prim, prepare_visual
from habitat_gen.primitives import Prim, prim_height_range
from habitat_gen.render_habitat import BG_COLOR, paste_labeled, try_load_font

# Render settings
CELL_W = 400
CELL_H = 400
LABEL_H = 36


def _compile_prims(prims: tuple[Prim, ...]) -> tuple[mujoco.MjModel, mujoco.MjData]:
    spec = mujoco.MjSpec()
    prepare_visual(spec, (CELL_W, CELL_H))
    floor = spec.worldbody.add_geom()
    floor.type = mujoco.mjtGeom.mjGEOM_PLANE
    floor.size = [3.0, 3.0, 0.05]
    floor.rgba = [0.35, 0.36, 0.38, 1.0]
    for k, prim in enumerate(prims):
        add_prim(spec.worldbody, prim, f"g{k}")
    model = spec.compile()
    data = mujoco.MjData(model)
    mujoco.mj_forward(model, data)
    return model, data


def _camera_for_prims(prims: tuple[Prim, ...]) -> mujoco.MjvCamera:
    """Compute a camera that frames the given prims nicely.

    Uses a fixed 3/4 overhead angle and adapts only the lookat height and
    distance to the bounding box. Prims are y-up; the camera is z-up.
    """
    y_min, y_max = prim_height_range(prims)
    xz_max = 0.0
    for p in prims:
        px, _, pz = p.pos
        reach = max(p.size)
        xz_max = max(xz_max, abs(px) + reach, abs(pz) + reach)

    extent = max(y_max - y_min, xz_max * 2, 0.3)

    cam = mujoco.MjvCamera()
    cam.lookat[:] = [0, 0, (y_min + y_max) / 2]
    # Fixtures face the core along -X, so look from that side
    cam.azimuth = -35
    cam.elevation = -25
    cam.distance = extent * 2.0
    return cam


def _render_variation(fixture_name: str, params: object) -> np.ndarray:
    """Render a single fixture variation, return RGB array."""
    prims = fixtures.get(fixture_name).generate(params)
    model, data = _compile_prims(prims)
    renderer = mujoco.Renderer(model, height=CELL_H, width=CELL_W)
    renderer.update_scene(data, _camera_for_prims(prims))
    pixels = renderer.render().copy()
    renderer.close()
    return pixels


def render_fixture(fixture_name: str, out_dir: Path) -> Path | None:
    """Render all variations of a fixture into a labeled grid PNG."""
    fixture_mod = fixtures.get(fixture_name)
    variations: dict[str, object] | None = getattr(fixture_mod, "VARIATIONS", None)
    if not variations:
        print(f"  {fixture_name}: no VARIATIONS defined, skipping")
        return None

    names = list(variations.keys())
    n = len(names)
    cols = min(4, n)
    rows = math.ceil(n / cols)

    cell_total_h = CELL_H + LABEL_H
    grid = Image.new("RGB", (cols * CELL_W, rows * cell_total_h), BG_COLOR)
    draw = ImageDraw.Draw(grid)
    font = try_load_font(18)

    for idx, name in enumerate(names):
        pixels = _render_variation(fixture_name, variations[name])
        x = (idx % cols) * CELL_W
        y = (idx // cols) * cell_total_h
        paste_labeled(grid, draw, font, pixels, name, x, y, CELL_W, CELL_H, LABEL_H)

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{fixture_name}.png"
    grid.save(out_path)
    return out_path


def main():
    parser = argparse.ArgumentParser(description="Render fixture variation catalogs")
    parser.add_argument("fixtures", nargs="*", help="Fixture names (default: all)")
    parser.add_argument("--out", default="docs/fixtures", help="Output directory")
    args = parser.parse_args()

    out_dir = Path(args.out)
    available = fixtures.list_fixtures()
    targets = args.fixtures or available

    for name in targets:
        if name not in available:
            print(f"Error: unknown fixture '{name}'. Available: {', '.join(available)}")
            sys.exit(1)

    for name in targets:
        print(f"Rendering {name}...")
        path = render_fixture(name, out_dir)
        if path:
            print(f"  -> {path}")

    print("Done.")


if __name__ == "__main__":
    main()
