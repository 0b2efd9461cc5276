'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Matplotlib front end. Drives the move scheduler from FuncAnimation frames, renders
mid-turn poses and forwards keyboard / right-drag input to the game session.

'''

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, FFMpegWriter, PillowWriter
from typing import Optional

from cubeplay.game import GameSession
from cubeplay.visualisation.utils_visualization import R_axis_angle, ViewCamera, ease_in_out

DRAG_BUTTON = 3  # right mouse button; left drag stays matplotlib's view rotation


class PuzzleAnimator:
    """
    Animate queued slice turns by overriding the poses of the turning cubies.

    The puzzle state only changes when the scheduler completes a move; in between,
    each frame rotates the active slice by the eased fraction of its quarter turn
    around the world axis through the center.
    """

    def __init__(
        self,
        session: GameSession,
        fps: int = 30,
        elev: float = 30.0,
        azim: float = -60.0,
        figsize: tuple[float, float] = (5.5, 5.5),
    ):
        if fps <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self.session = session
        self.fps = fps

        self.fig = plt.figure(figsize=figsize)
        self.ax = self.fig.add_subplot(111, projection='3d')
        self.ax.view_init(elev=elev, azim=azim)
        # DRAG_BUTTON turns slices, so it must not zoom the view as well
        self.ax.mouse_init(rotate_btn=1, zoom_btn=[])

        # poly -> cubie index of the last drawn frame
        self._artists: dict = {}
        self._grab: Optional[tuple[int, float, float]] = None  # (cubie_idx, x_px, y_px)
        self._anim: Optional[FuncAnimation] = None

    @property
    def camera(self) -> ViewCamera:
        return ViewCamera.from_axes(self.ax)

    def _intermediate_poses(self) -> dict[int, tuple[np.ndarray, np.ndarray]]:
        """
        Build pose_override for the active move at the scheduler's current progress.
        """
        scheduler = self.session.scheduler
        move = scheduler.active
        if move is None:
            return {}

        theta = ease_in_out(scheduler.progress) * (np.pi / 2) * move.direction
        R = R_axis_angle(move.axis, theta)

        pose_override: dict[int, tuple[np.ndarray, np.ndarray]] = {}
        for cubie in self.session.puzzle.select_slice(move.axis, move.slice):
            R0, t0 = cubie.world_pose()
            # pivot is the origin: R' = R * R0 ; t' = R * t0
            pose_override[cubie.cubie_idx] = (R @ R0, R @ t0)
        return pose_override

    # ---------- Matplotlib animation glue ----------

    def _draw_frame(self, frame_idx: int):
        """Called by FuncAnimation for each global frame index."""
        self.session.tick(1.0 / self.fps)

        elev, azim = self.ax.elev, self.ax.azim
        self.ax.clear()
        self.ax.view_init(elev=elev, azim=azim)
        self._artists = self.session.puzzle.plot_3d(
            self.ax, pose_override=self._intermediate_poses(), pickable=True
        )
        self.ax.set_title(self.session.display_time())

    def connect_controls(self) -> None:
        """Bind keys (layout keys, space=scramble, backspace=reset, 2/3/4=size) and right-drags."""
        bound = {"2", "3", "4", " ", "backspace"}
        for layout in self.session.config.key_layouts.values():
            bound |= set(layout.keys())
        for name, keys in plt.rcParams.items():
            if name.startswith("keymap.") and isinstance(keys, list):
                plt.rcParams[name] = [k for k in keys if k not in bound]

        canvas = self.fig.canvas
        canvas.mpl_connect("key_press_event", self._on_key)
        canvas.mpl_connect("pick_event", self._on_pick)
        canvas.mpl_connect("button_release_event", self._on_release)

    def _on_key(self, event) -> None:
        key = event.key or ""
        if key == " ":
            self.session.scramble()
        elif key == "backspace":
            self.session.reset()
        elif key in ("2", "3", "4"):
            self.session.change_size(int(key))
        else:
            self.session.press_key(key, self.camera)

    def _on_pick(self, event) -> None:
        mouse = event.mouseevent
        if mouse.button != DRAG_BUTTON or self._grab is not None:
            return
        idx = self._artists.get(event.artist)
        if idx is not None:
            self._grab = (idx, mouse.x, mouse.y)

    def _on_release(self, event) -> None:
        if event.button != DRAG_BUTTON or self._grab is None:
            return
        idx, x0, y0 = self._grab
        self._grab = None
        if event.x is None or event.y is None:
            return
        cubies = self.session.puzzle.cubies
        if idx >= len(cubies):
            return
        # matplotlib pixels grow upwards, screen deltas grow downwards
        dx, dy = event.x - x0, -(event.y - y0)
        self.session.drag(cubies[idx].position, dx, dy, self.camera)

    def animate(self, outfile: str | None = None, duration_s: float | None = None):
        """
        If outfile is provided (.mp4 or .gif), save to disk. Otherwise show() live.
        If duration_s is given, cap total frames; otherwise frames cover the queued moves.
        """
        if duration_s is not None:
            max_frames = int(duration_s * self.fps)
        elif outfile:
            scheduler = self.session.scheduler
            queued = ([scheduler.active] if scheduler.active else []) + list(scheduler.queue)
            max_frames = int(sum(m.duration for m in queued) * self.fps) + 2 * self.fps
        else:
            max_frames = None

        self._anim = FuncAnimation(
            self.fig,
            self._draw_frame,
            frames=max_frames,
            interval=1000 / self.fps,
            blit=False,
            repeat=False,
            cache_frame_data=False,
        )

        if outfile:
            if outfile.endswith(".mp4"):
                writer = FFMpegWriter(fps=self.fps, bitrate=4000)
            elif outfile.endswith(".gif"):
                writer = PillowWriter(fps=self.fps)
            else:
                raise ValueError("outfile must end with .mp4 or .gif")
            self._anim.save(outfile, writer=writer)
            return outfile
        else:
            self.connect_controls()
            plt.show()
            return None
