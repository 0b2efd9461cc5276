"""
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Single cubie of an NxNxN puzzle, its local face table and the exact quarter-turn algebra.

"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional

import numpy as np

AXES: Tuple[str, str, str] = ("x", "y", "z")
AXIS_INDEX: Dict[str, int] = {"x": 0, "y": 1, "z": 2}

# Local face ids: 0=+x, 1=-x, 2=+y, 3=-y, 4=+z, 5=-z
LOCAL_FACES: List[str] = ["+x", "-x", "+y", "-y", "+z", "-z"]
LOCAL_NORMALS: np.ndarray = np.array(
    [
        [1, 0, 0],
        [-1, 0, 0],
        [0, 1, 0],
        [0, -1, 0],
        [0, 0, 1],
        [0, 0, -1],
    ],
    dtype=int,
)

# Color id equals the local face that carries it in the solved state
COLOR_NAMES: Dict[int, str] = {0: "red", 1: "orange", 2: "white", 3: "yellow", 4: "green", 5: "blue"}

# Shell and slice matching tolerance (lattice step is 1.0, half-steps on even sizes)
SLICE_EPSILON: float = 0.1
# A local normal "faces" a world direction when their dot product exceeds this (cos ~18 deg)
FACE_ALIGN_COS: float = 0.95


def face_axis_sign(face: int) -> Tuple[int, int]:
    """Return (axis index, sign) of a local face id."""
    return face // 2, (1 if face % 2 == 0 else -1)


def quarter_turn(axis: str, direction: int) -> np.ndarray:
    """
    Exact integer matrix for a 90 degree rotation about a world axis.

    Right-hand rule: direction=+1 turns counter-clockwise when looking down the
    positive axis towards the origin.

    Args:
        axis: "x", "y" or "z".
        direction: +1 or -1.

    Returns:
        3x3 int matrix R such that R @ v rotates v.
    """
    d = int(direction)
    if axis == "x":
        return np.array([[1, 0, 0], [0, 0, -d], [0, d, 0]], dtype=int)
    if axis == "y":
        return np.array([[0, 0, d], [0, 1, 0], [-d, 0, 0]], dtype=int)
    if axis == "z":
        return np.array([[0, -d, 0], [d, 0, 0], [0, 0, 1]], dtype=int)
    raise ValueError(f"axis must be one of {AXES}, got {axis!r}")


def snap_position(p: np.ndarray) -> np.ndarray:
    # nearest half step; + 0.0 turns -0.0 into 0.0
    return np.round(np.asarray(p, dtype=float) * 2.0) / 2.0 + 0.0


def snap_orientation(m: np.ndarray) -> np.ndarray:
    return np.rint(np.asarray(m, dtype=float)).astype(int)


@dataclass(eq=False)
class Cubie:
    """
    One unit piece of the puzzle.

    A cubie is identified by its `home` lattice position. Its colors are fixed at
    construction per *local* face; moves only change `position` and
    `orientation`, which together decide which *world* direction every local
    face is pointing to.

    Attributes:
        home: lattice position in the solved state, coordinates i - (N-1)/2.
        face_colors: color id (0..5) per local face, None for interior faces.
        position: current lattice position (float vector of exact half-integers).
        orientation: current 3x3 integer rotation relative to the home placement.
        cubie_idx: index of the cubie in the puzzle arena.
    """
    home: Tuple[float, float, float]
    face_colors: Tuple[Optional[int], ...]
    position: Optional[np.ndarray] = field(default=None)
    orientation: Optional[np.ndarray] = field(default=None)
    cubie_idx: int | None = None

    def __post_init__(self) -> None:
        if self.position is None:
            self.position = np.array(self.home, dtype=float)
        if self.orientation is None:
            self.orientation = np.eye(3, dtype=int)

    @classmethod
    def at_lattice(cls, home: Tuple[float, float, float], offset: float, cubie_idx: int | None = None) -> "Cubie":
        """
        Build a cubie at `home`, coloring every local face that lies on the outer shell.

        Args:
            home: lattice position of the cubie.
            offset: shell coordinate of the puzzle, (N-1)/2.
            cubie_idx: optional arena index.
        """
        colors: List[Optional[int]] = []
        for face in range(6):
            axis, sign = face_axis_sign(face)
            on_shell = abs(home[axis] - sign * offset) < SLICE_EPSILON
            colors.append(face if on_shell else None)
        return cls(home=tuple(float(c) for c in home), face_colors=tuple(colors), cubie_idx=cubie_idx)

    def turn(self, rot: np.ndarray) -> None:
        """
        Rotate this cubie about the puzzle center and snap it back onto the lattice.

        Args:
            rot: 3x3 rotation matrix (world frame, pivot at the origin).
        """
        self.position = rot @ self.position
        self.orientation = rot @ self.orientation
        self.snap()

    def snap(self) -> None:
        self.position = snap_position(self.position)
        self.orientation = snap_orientation(self.orientation)

    def world_normal(self, face: int) -> np.ndarray:
        """World direction the given local face currently points to."""
        return self.orientation @ LOCAL_NORMALS[face]

    def visible_face(self, world_dir: np.ndarray, threshold: float = FACE_ALIGN_COS) -> Optional[int]:
        """
        Local face currently pointing along `world_dir`, or None if no face is aligned.
        """
        for face in range(6):
            if float(np.dot(self.world_normal(face), world_dir)) > threshold:
                return face
        return None

    def visible_color(self, world_dir: np.ndarray, threshold: float = FACE_ALIGN_COS) -> Optional[int]:
        """
        Color shown towards `world_dir`.

        Returns None both when no local face is aligned and when the aligned face
        is colorless; callers treat either case as "not solved".
        """
        face = self.visible_face(world_dir, threshold)
        if face is None:
            return None
        return self.face_colors[face]

    def is_core(self, offset: float) -> bool:
        # strictly inside the shell on every axis, hence no color at all
        return bool(np.all(np.abs(np.asarray(self.home)) < offset - SLICE_EPSILON))

    def world_pose(self) -> Tuple[np.ndarray, np.ndarray]:
        """(rotation, translation) of the cubie in world space, for renderers."""
        return self.orientation.astype(float), self.position.copy()

    def state_key(self) -> Tuple[Tuple[float, ...], Tuple[int, ...]]:
        return tuple(float(c) for c in self.position), tuple(int(v) for v in self.orientation.ravel())

    def __repr__(self) -> str:
        pos = tuple(float(c) for c in self.position)
        return f"Cubie: home={self.home} pos={pos} colors={self.face_colors} idx={self.cubie_idx}"
