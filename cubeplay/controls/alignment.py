'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Camera-relative axis resolution for keyboard and drag controls.

'''
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from cubeplay.cubies import AXES

AXIS_VEC = {name: vec for name, vec in zip(AXES, np.eye(3))}


@dataclass(frozen=True)
class Alignment:
    """
    World axes that currently *look* horizontal and vertical on screen.

    h_axis / h_sign
        Axis best aligned with the camera up vector. Turning about it moves
        stickers horizontally (rows).
    v_axis / v_sign
        Axis best aligned with the camera right vector. Turning about it moves
        stickers vertically (columns).
    """
    h_axis: str
    h_sign: int
    v_axis: str
    v_sign: int
    camera_right: np.ndarray
    camera_up: np.ndarray

    def axis_dot_right(self, axis: str) -> float:
        return float(np.dot(AXIS_VEC[axis], self.camera_right))

    def axis_dot_up(self, axis: str) -> float:
        return float(np.dot(AXIS_VEC[axis], self.camera_up))


def _sign(value: float) -> int:
    # zero counts as positive
    return -1 if value < 0 else 1


def resolve_alignment(camera_right, camera_up) -> Alignment:
    """
    Pick, for the camera's up and right vectors, the closest world axis and its sign.

    Axes are scanned in x, y, z order with a strict ``>``, so the first of several
    equally aligned axes wins.

    Args:
        camera_right: world-space unit vector pointing to the right of the screen.
        camera_up: world-space unit vector pointing to the top of the screen.

    Returns:
        Alignment for this view.
    """
    right = np.asarray(camera_right, dtype=float)
    up = np.asarray(camera_up, dtype=float)

    h_axis, max_dot_up, h_sign = "y", -1.0, 1
    v_axis, max_dot_right, v_sign = "y", -1.0, 1

    for name in AXES:
        vec = AXIS_VEC[name]

        dot_up = float(np.dot(vec, up))
        if abs(dot_up) > max_dot_up:
            max_dot_up = abs(dot_up)
            h_axis = name
            h_sign = _sign(dot_up)

        dot_right = float(np.dot(vec, right))
        if abs(dot_right) > max_dot_right:
            max_dot_right = abs(dot_right)
            v_axis = name
            v_sign = _sign(dot_right)

    return Alignment(h_axis, h_sign, v_axis, v_sign, right, up)


def alignment_for(camera) -> Alignment:
    """Resolve from any camera exposing `right()` and `up()` world vectors."""
    return resolve_alignment(camera.right(), camera.up())
