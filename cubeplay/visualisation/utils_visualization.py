'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Geometry shared by the matplotlib renderer, the animator and the view camera.

'''
from dataclasses import dataclass

import numpy as np

# world (x, y-up, z-front)  ->  matplotlib (x, y-depth, z-up)
WORLD_TO_PLOT = np.array([[1, 0, 0], [0, 0, -1], [0, 1, 0]], dtype=float)


def to_plot(points: np.ndarray) -> np.ndarray:
    """Map world points (..., 3) into matplotlib's z-up frame."""
    return np.asarray(points, dtype=float) @ WORLD_TO_PLOT.T


def to_world(points: np.ndarray) -> np.ndarray:
    return np.asarray(points, dtype=float) @ WORLD_TO_PLOT


def R_axis_angle(axis: str, theta: float) -> np.ndarray:
    """
    Rotation matrix about a world axis by `theta` radians (right-hand rule).

    At theta = direction * pi/2 this equals `cubies.quarter_turn(axis, direction)`.
    """
    c, s = np.cos(theta), np.sin(theta)
    if axis == "x":
        return np.array([[1, 0, 0], [0, c, -s], [0, s, c]])
    if axis == "y":
        return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]])
    if axis == "z":
        return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]])
    raise ValueError(f"axis must be 'x', 'y' or 'z', got {axis!r}")


def ease_in_out(alpha: float) -> float:
    # cosine ease, same curve for every turn
    alpha = min(1.0, max(0.0, alpha))
    return 0.5 - 0.5 * np.cos(np.pi * alpha)


def _unit_cubie_quads(size: float = 0.96) -> dict[int, np.ndarray]:
    """
    Axis-aligned cubie at origin; returns the 6 face quads (4x3 each) keyed by local face id
    (0=+x, 1=-x, 2=+y, 3=-y, 4=+z, 5=-z), world frame.
    """
    s = size / 2.0
    return {
        0: np.array([[+s, -s, +s], [+s, -s, -s], [+s, +s, -s], [+s, +s, +s]]),
        1: np.array([[-s, -s, -s], [-s, -s, +s], [-s, +s, +s], [-s, +s, -s]]),
        2: np.array([[-s, +s, +s], [+s, +s, +s], [+s, +s, -s], [-s, +s, -s]]),
        3: np.array([[-s, -s, -s], [+s, -s, -s], [+s, -s, +s], [-s, -s, +s]]),
        4: np.array([[-s, -s, +s], [+s, -s, +s], [+s, +s, +s], [-s, +s, +s]]),
        5: np.array([[+s, -s, -s], [-s, -s, -s], [-s, +s, -s], [+s, +s, -s]]),
    }


@dataclass
class ViewCamera:
    """
    Camera looking at the puzzle center from matplotlib view angles (degrees).

    Exposes the camera's screen-right and screen-up directions as world unit
    vectors, which is all the control mapping needs.
    """
    elev: float = 30.0
    azim: float = -60.0

    @classmethod
    def from_axes(cls, ax) -> "ViewCamera":
        return cls(elev=float(ax.elev), azim=float(ax.azim))

    def _eye(self) -> np.ndarray:
        el, az = np.radians(self.elev), np.radians(self.azim)
        return np.array([np.cos(el) * np.cos(az), np.cos(el) * np.sin(az), np.sin(el)])

    def right(self) -> np.ndarray:
        az = np.radians(self.azim)
        r_plot = np.array([-np.sin(az), np.cos(az), 0.0])
        return to_world(r_plot)

    def up(self) -> np.ndarray:
        az = np.radians(self.azim)
        r_plot = np.array([-np.sin(az), np.cos(az), 0.0])
        u_plot = np.cross(self._eye(), r_plot)
        u_plot = u_plot / np.linalg.norm(u_plot)
        return to_world(u_plot)
