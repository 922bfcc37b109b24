"""Render the habitat offscreen, opaque and transparent side by side.

The left cell shows the regolith shell as built; the right cell shows the
same model after one toggle, with the outer shell see-through so the decks
are visible. Geometry is compiled once; only colors change between cells.

Usage:
    uv run python -m habitat_gen.render_habitat                  # default config
    uv run python -m habitat_gen.render_habitat --preview        # coarse tessellation
    uv run python -m habitat_gen.render_habitat --out docs/renders
"""

from __future__ import annotations

import argparse
from pathlib import Path

import mujoco
import numpy as np
from PIL import Image, ImageDraw, ImageFont

from habitat_gen.builder import build_habitat
from habitat_gen.config import HabitatConfig
from habitat_gen.mj_scene import apply_view, compile_habitat
from habitat_gen.scene import Habitat

# Render settings
CELL_W = 640
CELL_H = 480
LABEL_H = 32
BG_COLOR = (40, 42, 48)
LABEL_BG = (30, 32, 36)
LABEL_FG = (220, 220, 220)


def try_load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try to load a nice font, fall back to default."""
    candidates = [
        "/System/Library/Fonts/SFNSMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
        "/System/Library/Fonts/Helvetica.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    ]
    for path in candidates:
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default()


def paste_labeled(
    grid: Image.Image,
    draw: ImageDraw.ImageDraw,
    font,
    pixels: np.ndarray,
    label: str,
    x: int,
    y: int,
    cell_w: int,
    cell_h: int,
    label_h: int,
) -> None:
    """Paste one rendered cell at (x, y) with a centered label strip below."""
    grid.paste(Image.fromarray(pixels), (x, y))
    label_y = y + cell_h
    draw.rectangle([x, label_y, x + cell_w, label_y + label_h], fill=LABEL_BG)
    bbox = font.getbbox(label)
    tw = bbox[2] - bbox[0]
    tx = x + (cell_w - tw) // 2
    ty = label_y + (label_h - (bbox[3] - bbox[1])) // 2
    draw.text((tx, ty), label, fill=LABEL_FG, font=font)


def make_camera(radius: float) -> mujoco.MjvCamera:
    """3/4 overhead view of the whole habitat, lander included."""
    cam = mujoco.MjvCamera()
    # Lander hangs below the sphere, so aim a little under its center
    cam.lookat[:] = [0, 0, -radius * 0.25]
    cam.azimuth = 135
    cam.elevation = -20
    # MuJoCo default FOV is 45°; 3.2 radii keeps sphere and legs in frame
    cam.distance = radius * 3.2
    return cam


def render_views(habitat: Habitat, out_dir: Path, radius: float) -> Path:
    """Render both view modes into one labeled PNG. Returns output path.

    The habitat is left in the mode it started in.
    """
    model, data = compile_habitat(habitat, offscreen=(CELL_W, CELL_H))
    renderer = mujoco.Renderer(model, height=CELL_H, width=CELL_W)
    cam = make_camera(radius)

    grid = Image.new("RGB", (2 * CELL_W, CELL_H + LABEL_H), BG_COLOR)
    draw = ImageDraw.Draw(grid)
    font = try_load_font(16)

    for idx in range(2):
        label = f"{habitat.mode.value}  ({model.ngeom} geoms)"
        renderer.update_scene(data, cam)
        pixels = renderer.render().copy()
        paste_labeled(grid, draw, font, pixels, label, idx * CELL_W, 0, CELL_W, CELL_H, LABEL_H)
        print(f"  [{idx + 1}/2] {label}")

        habitat.toggle()
        apply_view(model, habitat)

    renderer.close()

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "habitat.png"
    grid.save(out_path)
    return out_path


def main():
    parser = argparse.ArgumentParser(description="Render the habitat in both view modes")
    parser.add_argument("--out", default="docs/renders", help="Output directory")
    parser.add_argument(
        "--preview", action="store_true", help="Coarser tessellation (faster)"
    )
    args = parser.parse_args()

    config = HabitatConfig.for_preview() if args.preview else HabitatConfig()

    print("Building habitat...")
    habitat = build_habitat(config)

    print("Rendering opaque and transparent views...")
    path = render_views(habitat, Path(args.out), config.outer_shell_radius)
    print(f"\n-> {path}")


if __name__ == "__main__":
    main()
