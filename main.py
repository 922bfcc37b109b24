"""
Habitat generator CLI.

Single entry point for all modes: describe, export, view, render, catalog
and bench.

Usage:
    uv run python main.py                          # Describe the default habitat
    uv run python main.py describe [--transparent]
    uv run python main.py export habitat.glb       # .glb, .obj or .stl
    uv run mjpython main.py view                   # MuJoCo viewer, Space toggles
    uv run python main.py render [--out DIR]       # Opaque/transparent PNG
    uv run python main.py catalog [FIXTURE ...]    # Fixture variation grids
    uv run python main.py bench [--count N]

Every subcommand takes --preview / --smoketest to pick a coarser config.
Requires mjpython (not plain python) for the viewer on macOS.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from habitat_gen import HabitatConfig, build_habitat, describe_habitat

log = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure root logger level, a console handler and an excepthook.

    The excepthook sends unhandled exceptions through whatever handlers are
    active at the time.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)

    # Capture unhandled exceptions to the log
    _original_excepthook = sys.excepthook

    def _logging_excepthook(exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.critical(
                "Unhandled exception", exc_info=(exc_type, exc_value, exc_tb)
            )
        _original_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = _logging_excepthook


def _config_from(args) -> HabitatConfig:
    if args.smoketest:
        return HabitatConfig.for_smoketest()
    if args.preview:
        return HabitatConfig.for_preview()
    return HabitatConfig()


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Habitat generator - single entry point for all modes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    presets = argparse.ArgumentParser(add_help=False)
    group = presets.add_mutually_exclusive_group()
    group.add_argument("--preview", action="store_true", help="Coarser tessellation")
    group.add_argument("--smoketest", action="store_true", help="Minimal tessellation")

    sub = parser.add_subparsers(dest="command")

    # describe
    p_desc = sub.add_parser("describe", parents=[presets], help="Print scene tree summary")
    p_desc.add_argument("--transparent", action="store_true", help="Toggle once before describing")

    # export
    p_export = sub.add_parser("export", parents=[presets], help="Write GLB/OBJ/STL")
    p_export.add_argument("path", type=Path, help="Output file; format from suffix")
    p_export.add_argument("--transparent", action="store_true", help="Export with the shell see-through")

    # view
    sub.add_parser("view", parents=[presets], help="Launch MuJoCo viewer")

    # render
    p_render = sub.add_parser("render", parents=[presets], help="Render both view modes to PNG")
    p_render.add_argument("--out", type=Path, default=Path("docs/renders"), help="Output directory")

    # catalog
    p_cat = sub.add_parser("catalog", help="Render fixture variation grids")
    p_cat.add_argument("fixtures", nargs="*", help="Fixture names (default: all)")
    p_cat.add_argument("--out", type=Path, default=Path("docs/fixtures"), help="Output directory")

    # bench
    p_bench = sub.add_parser("bench", parents=[presets], help="Benchmark generation")
    p_bench.add_argument("--count", type=int, default=20, help="Number of builds")
    p_bench.add_argument("--no-compile", action="store_true", help="Skip MjSpec compile")

    return parser


def main():
    parser = _build_parser()
    args = parser.parse_args()
    _setup_logging(args.verbose)

    if args.command is None:
        # No subcommand -> describe the default habitat
        print(describe_habitat(build_habitat()))

    elif args.command == "describe":
        habitat = build_habitat(_config_from(args))
        if args.transparent:
            habitat.toggle()
        print(describe_habitat(habitat))

    elif args.command == "export":
        from habitat_gen.export import export_scene
        habitat = build_habitat(_config_from(args))
        if args.transparent:
            habitat.toggle()
        try:
            path = export_scene(habitat, args.path)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"-> {path}")

    elif args.command == "view":
        from preview import run_preview
        run_preview(_config_from(args))

    elif args.command == "render":
        from habitat_gen.render_habitat import render_views
        config = _config_from(args)
        path = render_views(build_habitat(config), args.out, config.outer_shell_radius)
        print(f"-> {path}")

    elif args.command == "catalog":
        from habitat_gen import fixtures
        from habitat_gen.render_catalog import render_fixture
        available = fixtures.list_fixtures()
        for name in args.fixtures or available:
            if name not in available:
                print(f"Error: unknown fixture '{name}'. Available: {', '.join(available)}")
                sys.exit(1)
            path = render_fixture(name, args.out)
            if path:
                print(f"  -> {path}")

    elif args.command == "bench":
        from habitat_gen.bench_gen import bench
        stats = bench(max(args.count, 1), _config_from(args), compile_model=not args.no_compile)
        for key, value in stats.items():
            print(f"  {key:<18} {value:.3f}" if isinstance(value, float) else f"  {key:<18} {value}")


if __name__ == "__main__":
    main()
