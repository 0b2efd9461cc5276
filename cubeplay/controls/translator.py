'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Turns logical keys and mouse drags into concrete slice moves for the current view.

'''
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from cubeplay.cube import Move, DEFAULT_DURATION
from cubeplay.cubies import AXIS_INDEX
from cubeplay.controls.alignment import Alignment

DRAG_THRESHOLD_PX = 10.0


@dataclass(frozen=True)
class KeyLayout:
    """
    Keys bound to columns (left to right on screen) and rows (top to bottom).
    """
    cols: Tuple[str, ...]
    rows: Tuple[str, ...]

    def keys(self) -> Tuple[str, ...]:
        return self.cols + self.rows

    def __contains__(self, key: str) -> bool:
        return key.lower() in self.keys()


DEFAULT_KEY_LAYOUTS: Dict[int, KeyLayout] = {
    2: KeyLayout(cols=("q", "e"), rows=("a", "d")),
    3: KeyLayout(cols=("q", "w", "e"), rows=("a", "s", "d")),
    4: KeyLayout(cols=("q", "w", "e", "r"), rows=("a", "s", "d", "f")),
}


def slice_index(idx: int, total: int) -> float:
    """Centered lattice coordinate of the idx-th of `total` layers."""
    return idx - (total - 1) / 2


def column_move(idx: int, total: int, alignment: Alignment, duration: float = DEFAULT_DURATION) -> Move:
    """
    Move for the idx-th column control.

    The column turns about the axis that looks horizontal-across-screen (the
    vertical-control axis); its slice is mirrored when that axis points left.
    """
    raw = slice_index(idx, total)
    axis = alignment.v_axis
    if alignment.axis_dot_right(axis) < 0:
        raw *= -1
    return Move(axis, raw, alignment.v_sign, duration)


def row_move(idx: int, total: int, alignment: Alignment, duration: float = DEFAULT_DURATION) -> Move:
    """
    Move for the idx-th row control.

    Rows count top to bottom while lattice coordinates grow upwards, hence the
    unconditional flip; the second flip mirrors the slice when the axis points down.
    """
    raw = slice_index(idx, total)
    raw *= -1
    axis = alignment.h_axis
    if alignment.axis_dot_up(axis) < 0:
        raw *= -1
    return Move(axis, raw, alignment.h_sign, duration)


def translate_key(
    key: str,
    layout: KeyLayout,
    alignment: Alignment,
    duration: float = DEFAULT_DURATION,
) -> Optional[Move]:
    """
    Map a key press to a move, or None if the key is not bound in `layout`.
    """
    k = key.lower()
    if k in layout.cols:
        return column_move(layout.cols.index(k), len(layout.cols), alignment, duration)
    if k in layout.rows:
        return row_move(layout.rows.index(k), len(layout.rows), alignment, duration)
    return None


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def translate_drag(
    position: Sequence[float],
    dx: float,
    dy: float,
    alignment: Alignment,
    threshold: float = DRAG_THRESHOLD_PX,
    duration: float = DEFAULT_DURATION,
) -> Optional[Move]:
    """
    Map a drag that started on a cubie to a move.

    Args:
        position: lattice position of the grabbed cubie.
        dx, dy: screen delta in pixels (y grows downwards).
        alignment: current view alignment.
        threshold: below this in both directions the gesture is a click.
        duration: animation time of the resulting move.

    Returns:
        The move, or None for a click.

    Notes:
        The slice is the grabbed coordinate rounded half up. On even sizes the
        lattice sits on half-integers, so the result may select no layer; the
        engine then treats it as a no-op.
    """
    if abs(dx) < threshold and abs(dy) < threshold:
        return None

    if abs(dx) > abs(dy):
        axis = alignment.v_axis
        visual_dir = 1 if dx > 0 else -1
        direction = visual_dir * alignment.v_sign
    else:
        axis = alignment.h_axis
        visual_dir = 1 if dy > 0 else -1
        direction = visual_dir * alignment.h_sign

    slice_value = _round_half_up(position[AXIS_INDEX[axis]])
    return Move(axis, slice_value, direction, duration)
