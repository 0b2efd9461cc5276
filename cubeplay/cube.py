"""
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: NxNxN puzzle state, slice rotation engine and orientation-free solved detection.

"""
import random
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import List, Tuple, Callable, Any, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from cubeplay.cubies import (
    Cubie,
    AXES,
    AXIS_INDEX,
    COLOR_NAMES,
    SLICE_EPSILON,
    FACE_ALIGN_COS,
    face_axis_sign,
    quarter_turn,
)
from cubeplay.visualisation.utils_visualization import _unit_cubie_quads, to_plot

DEFAULT_DURATION = 0.3
HISTORY_COLUMNS = ["step", "axis", "slice", "direction", "phase"]

# Facelet grid per world face (local face id order): (row axis, row sign, col axis, col sign),
# each face read from outside with +y up (U/D read with the front edge nearest to F)
FACE_GRID = {
    0: (1, -1, 2, -1),  # +x (R)
    1: (1, -1, 2, +1),  # -x (L)
    2: (2, +1, 0, +1),  # +y (U)
    3: (2, -1, 0, +1),  # -y (D)
    4: (1, -1, 0, +1),  # +z (F)
    5: (1, -1, 0, -1),  # -z (B)
}


@dataclass(frozen=True)
class Move:
    """
    A single quarter turn of one slice.

    Attributes:
        axis: world rotation axis, "x", "y" or "z".
        slice: lattice coordinate along `axis` selecting the rotating layer.
        direction: +1 or -1, right-hand-rule sign of the 90 degree rotation.
        duration: animation time in seconds; has no effect on the resulting state.
    """
    axis: str
    slice: float
    direction: int
    duration: float = DEFAULT_DURATION

    def __post_init__(self) -> None:
        if self.axis not in AXES:
            raise ValueError(f"axis must be one of {AXES}, got {self.axis!r}")
        if self.direction not in (1, -1):
            raise ValueError(f"direction must be +1 or -1, got {self.direction!r}")
        if self.duration < 0:
            raise ValueError(f"duration must be >= 0, got {self.duration}")

    def inverse(self) -> "Move":
        return Move(self.axis, self.slice, -self.direction, self.duration)


def track_history(method: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator for Puzzle.rotate: logs every applied move into `self._history`,
    unless history is disabled. Phase is taken from `self._phase` ("scramble"/"solve").
    """
    @wraps(method)
    def wrapper(self, move: Move) -> Any:
        # state change is primary
        result = method(self, move)

        if self._history_enabled:
            step = int(self._history.shape[0])
            self._history.loc[step] = {
                "step": step,
                "axis": move.axis,
                "slice": float(move.slice),
                "direction": int(move.direction),
                "phase": self._phase,
            }
        return result
    return wrapper


class Puzzle:
    """
    NxNxN twisty puzzle built on explicit cubie objects.

    The N³ cubies are stored in a flat list (x-major, then y, then z) and never
    replaced: moves rotate the selected cubies in place and snap them back to
    the lattice, so positions stay exact half-integers and orientations exact
    integer matrices.

    Coordinates are centered: a cubie coordinate is ``i - (N-1)/2`` for
    ``i in 0..N-1``, so the outer shell sits at ``±offset``. World axes are
    right-handed with +y up and +z towards the viewer.

    Attributes
    ----------
    size : int
        Edge length N (2, 3 or 4).
    offset : float
        Shell coordinate (N-1)/2.
    cubies : list[Cubie]
        All cubies, including colorless core cubies.

    Key methods
    -----------
    rotate(move)
        Move engine: turn one slice by 90 degrees.
    is_solved()
        Every world face shows a single color, whatever the global orientation.
    to_facelets(), print_net(), plot_3d()
        Derived views of the state.

    Example
    -------
        p = Puzzle(3)
        p.rotate(Move("x", 1, 1))
        p.print_net()
    """

    SIZES = (2, 3, 4)
    _COLORS = COLOR_NAMES

    def __init__(self, size: int = 3):
        if size not in self.SIZES:
            raise ValueError(f"size must be one of {self.SIZES}, got {size}")
        self.size = size
        self.offset = (size - 1) / 2.0
        self.cubies: List[Cubie] = []
        for x in range(size):
            for y in range(size):
                for z in range(size):
                    home = (x - self.offset, y - self.offset, z - self.offset)
                    self.cubies.append(Cubie.at_lattice(home, self.offset, cubie_idx=len(self.cubies)))

        self._init_history_fields()

    @property
    def coords(self) -> List[float]:
        """Valid lattice coordinates along any axis."""
        return [i - self.offset for i in range(self.size)]

    # ---------- history ----------
    def _init_history_fields(self) -> None:
        self._history = pd.DataFrame(columns=HISTORY_COLUMNS)
        self._scramble_len = 0
        self._history_enabled = True
        self._phase = "solve"

    @contextmanager
    def history_phase(self, phase: str):
        """
        Temporarily set the history 'phase' for recorded moves ('scramble' or 'solve').
        Usage:
            with puzzle.history_phase('scramble'):
                puzzle.rotate(Move('x', 1, 1))
        """
        prev = self._phase
        self._phase = phase
        try:
            yield
        finally:
            self._phase = prev

    def set_phase(self, phase: str) -> None:
        """Set the phase for moves applied later (e.g. by a scheduler)."""
        self._phase = phase

    @contextmanager
    def no_history(self):
        """
        Temporarily disable history recording (e.g. for test_move or internal checks).
        """
        prev = self._history_enabled
        self._history_enabled = False
        try:
            yield
        finally:
            self._history_enabled = prev

    def clear_history(self) -> None:
        """Clear the history DataFrame and reset the scramble checkpoint."""
        self._history = pd.DataFrame(columns=HISTORY_COLUMNS)
        self._scramble_len = 0

    def mark_scrambled(self) -> None:
        """Checkpoint: everything logged so far belongs to the scramble."""
        self._scramble_len = int(self._history.shape[0])
        self._phase = "solve"

    def moves_since_scramble(self) -> int:
        """Number of moves logged after the scramble checkpoint."""
        return max(0, int(self._history.shape[0]) - int(self._scramble_len))

    def get_history(self) -> pd.DataFrame:
        """
        Return a copy of the move history DataFrame.

        Columns:
            step (int)         : 0-based move index
            axis (str)         : 'x', 'y' or 'z'
            slice (float)      : slice coordinate
            direction (int)    : +1 / -1
            phase (str)        : 'scramble' or 'solve'
        """
        return self._history.copy()

    # ---------- move engine ----------
    def select_slice(self, axis: str, slice_value: float) -> List[Cubie]:
        """
        Cubies whose current coordinate on `axis` matches `slice_value`.

        Matching is tolerance based on the current position, never on cubie identity.
        """
        a = AXIS_INDEX[axis]
        return [c for c in self.cubies if abs(c.position[a] - slice_value) < SLICE_EPSILON]

    @track_history
    def rotate(self, move: Move) -> List[Cubie]:
        """
        Apply a quarter turn of one slice.

        The selected cubies are rotated about the world axis through the puzzle
        center (positions and orientations), then snapped to the lattice. A slice
        value matching no cubie is a legal no-op.

        Args:
            move: the move to apply.

        Returns:
            The cubies that were turned (possibly empty).
        """
        turned = self.select_slice(move.axis, move.slice)
        if not turned:
            return turned
        rot = quarter_turn(move.axis, move.direction)
        for cubie in turned:
            cubie.turn(rot)
        return turned

    def apply_moves(self, moves: List[Move]) -> None:
        """Apply a sequence of moves right away, in order."""
        for m in moves:
            self.rotate(m)

    def random_moves(self, length: int, rng: random.Random | None = None, duration: float = DEFAULT_DURATION) -> List[Move]:
        """
        Draw `length` random slice moves over every axis, lattice slice and direction.
        """
        rng = rng or random.Random()
        return [
            Move(rng.choice(AXES), rng.choice(self.coords), rng.choice((1, -1)), duration)
            for _ in range(length)
        ]

    def scramble(self, length: int | None = None, seed: int | None = None) -> List[Move]:
        """
        Apply a random scramble immediately and mark its length as the scramble checkpoint.

        Args:
            length: number of quarter turns; defaults to 20 + 5N.
            seed: optional RNG seed for reproducibility.

        Returns:
            The applied moves.
        """
        if length is None:
            length = 20 + 5 * self.size
        moves = self.random_moves(length, random.Random(seed))
        with self.history_phase("scramble"):
            self.apply_moves(moves)
        self.mark_scrambled()
        return moves

    # ---------- solved detection ----------
    def face_cubies(self, axis: str, sign: int) -> List[Cubie]:
        """Cubies currently on the world face at coordinate sign*offset of `axis`."""
        return self.select_slice(axis, sign * self.offset)

    def face_is_uniform(self, axis: str, sign: int) -> bool:
        """
        True if every cubie on the world face shows the same color towards it.

        An empty face, an unaligned cubie or a colorless visible face all count as failure.
        """
        on_face = self.face_cubies(axis, sign)
        if not on_face:
            return False
        world_dir = np.zeros(3)
        world_dir[AXIS_INDEX[axis]] = sign
        reference = on_face[0].visible_color(world_dir, FACE_ALIGN_COS)
        if reference is None:
            return False
        for cubie in on_face[1:]:
            if cubie.visible_color(world_dir, FACE_ALIGN_COS) != reference:
                return False
        return True

    def is_solved(self) -> bool:
        """
        Check if the puzzle is solved in any global orientation.

        Each of the six world faces must show a single color; which color ends
        up on which side does not matter.
        """
        for axis in AXES:
            for sign in (1, -1):
                if not self.face_is_uniform(axis, sign):
                    return False
        return True

    check_solved = is_solved

    # ---------- helpers ----------
    def snapshot(self) -> List[Tuple[Tuple[float, ...], Tuple[int, ...]]]:
        return [c.state_key() for c in self.cubies]

    def test_move(self, move: Move) -> None:
        """
        Test a single move for internal consistency.

        Performs:
          - m followed by its inverse  → identity
          - m⁴                         → identity
        """
        snap = self.snapshot()
        with self.no_history():
            self.rotate(move)
            self.rotate(move.inverse())
            assert snap == self.snapshot()
            for _ in range(4):
                self.rotate(move)
            assert snap == self.snapshot()

    def dispose(self) -> None:
        """Release every cubie at once; the puzzle is unusable afterwards."""
        self.cubies = []

    # ---------- VIEWS ----------
    def to_facelets(self) -> np.ndarray:
        """
        Generate a 6×N×N integer array of the colors seen on each world face.

        Faces are indexed like local faces (0=+x, 1=-x, 2=+y, 3=-y, 4=+z, 5=-z);
        -1 marks a cell whose cubie shows no color (only possible mid-corruption).

        Returns:
            A NumPy array F[6, N, N].
        """
        n = self.size
        F = np.full((6, n, n), -1, dtype=int)
        for face in range(6):
            axis, sign = face_axis_sign(face)
            world_dir = np.zeros(3)
            world_dir[axis] = sign
            row_axis, row_sign, col_axis, col_sign = FACE_GRID[face]
            for cubie in self.face_cubies(AXES[axis], sign):
                r = self._grid_index(cubie.position[row_axis], row_sign)
                c = self._grid_index(cubie.position[col_axis], col_sign)
                col = cubie.visible_color(world_dir)
                F[face, r, c] = -1 if col is None else col
        return F

    def _grid_index(self, coord: float, sign: int) -> int:
        i = int(round(coord + self.offset))
        return i if sign > 0 else self.size - 1 - i

    def print_net(self, use_color: bool = True) -> None:
        """
        Print a compact text-based net to the terminal.

              [U]
        [L] [F] [R] [B]
              [D]

        Args:
            use_color: If True, apply ANSI color codes to facelet numbers.
        """
        F = self.to_facelets()
        n = self.size
        # face units, scaled by N below
        layout = {
            2: (0, 1),  # U above F
            1: (1, 0),  # L F R B in a row
            4: (1, 1),
            0: (1, 2),
            5: (1, 3),
            3: (2, 1),  # D below F
        }

        COLOR_CODES = {
            0: "\033[91m",
            1: "\033[95m",
            2: "\033[97m",
            3: "\033[93m",
            4: "\033[92m",
            5: "\033[94m",
        }
        RESET = "\033[0m"

        rows = 3 * n
        cols = 4 * n
        grid = [[" " for _ in range(cols)] for _ in range(rows)]

        for face_id, (rt, ct) in layout.items():
            for r in range(n):
                for c in range(n):
                    val = int(F[face_id, r, c])
                    txt = "." if val < 0 else str(val)
                    grid[rt * n + r][ct * n + c] = (
                        f"{COLOR_CODES[val]}{txt}{RESET}" if use_color and val >= 0 else txt
                    )

        for row in grid:
            print(" ".join(row))

    def plot_3d(
        self,
        ax: plt.Axes | None = None,
        figsize: tuple[int, int] = (6, 6),
        edgecolor: str = "k",
        pose_override: Optional[dict[int, tuple[np.ndarray, np.ndarray]]] = None,
        pickable: bool = False,
    ) -> dict:
        """
        Render the puzzle in a 3D matplotlib view.

        Each cubie is drawn from its own pose, so a half-turned slice can be shown
        by passing `pose_override` {cubie_idx: (rotation, translation)}.

        Args:
            ax: Optional matplotlib 3D axis to plot on. If None, creates a new figure.
            figsize: Size of the figure (if created internally).
            edgecolor: Edge color for sticker outlines.
            pose_override: mid-animation poses replacing `Cubie.world_pose()`.
            pickable: mark sticker polygons as pickable (mouse drags).

        Returns:
            dict mapping each drawn Poly3DCollection to its cubie index.
        """
        fig = None
        if ax is None:
            fig = plt.figure(figsize=figsize)
            ax = fig.add_subplot(111, projection="3d")

        ax.set_box_aspect([1, 1, 1])
        pose_override = pose_override or {}
        quads = _unit_cubie_quads()
        artists = {}

        for cubie in self.cubies:
            R, t = pose_override.get(cubie.cubie_idx, cubie.world_pose())
            for face, color in enumerate(cubie.face_colors):
                if color is None:
                    continue
                corners = to_plot(quads[face] @ np.asarray(R).T + t)
                poly = Poly3DCollection([corners])
                poly.set_facecolor(self._COLORS[color])
                poly.set_edgecolor(edgecolor)
                if pickable:
                    poly.set_picker(True)
                ax.add_collection3d(poly)
                artists[poly] = cubie.cubie_idx

        ax.set_axis_off()
        lim = self.offset + 0.5
        ax.set_xlim(-lim, lim)
        ax.set_ylim(-lim, lim)
        ax.set_zlim(-lim, lim)
        if fig is not None:
            plt.show()
        return artists
