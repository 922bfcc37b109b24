"""Interactive habitat preview in the MuJoCo viewer.

Opens the viewer on a generated habitat. The geometry is compiled once;
toggling only rewrites the shell colors in the compiled model.

Controls:
    Space:      Toggle the outer shell opaque / transparent
    Backspace:  Print the scene summary again
    Q/Escape:   Quit (handled by MuJoCo viewer)
"""

import time

import mujoco
import mujoco.viewer

from habitat_gen import HabitatConfig, build_habitat, describe_habitat
from habitat_gen.mj_scene import apply_view, compile_habitat

# GLFW key codes
KEY_SPACE = 32
KEY_BACKSPACE = 259

FRAME_TIME = 1 / 60


def run_preview(config: HabitatConfig | None = None):
    """Build a habitat and browse it in the MuJoCo viewer."""
    config = config or HabitatConfig.for_preview()
    print("Building habitat...")
    print("Controls: Space=toggle shell, Backspace=describe")
    print()

    habitat = build_habitat(config)
    m, d = compile_habitat(habitat)

    def _describe():
        print(f"{'=' * 55}")
        print(f"  {describe_habitat(habitat).replace(chr(10), chr(10) + '  ')}")
        print(f"{'=' * 55}")
        print()

    def on_key(keycode):
        if keycode == KEY_SPACE:
            mode = habitat.toggle()
            n = apply_view(m, habitat)
            print(f"  view={mode.value}  ({n} geoms recolored)")
        elif keycode == KEY_BACKSPACE:
            _describe()

    _describe()

    with mujoco.viewer.launch_passive(m, d, key_callback=on_key) as viewer:
        viewer.cam.lookat[:] = [0, 0, 0]
        viewer.cam.distance = config.outer_shell_radius * 3
        while viewer.is_running():
            frame_start = time.time()
            viewer.sync()
            remaining = FRAME_TIME - (time.time() - frame_start)
            if remaining > 0:
                time.sleep(remaining)
