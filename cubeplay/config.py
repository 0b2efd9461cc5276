'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Game configuration.

'''
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from cubeplay.controls.translator import KeyLayout, DEFAULT_KEY_LAYOUTS, DRAG_THRESHOLD_PX


@dataclass
class GameConfig:
    """
    Configuration for a play session.

    Key ideas:
    - Durations only shape the animation; the puzzle state after a move never depends on them.
    - Input is throttled (not queued forever) when the player types faster than moves play.
    - The win check waits a little after the timer starts so a lucky scramble can't "win" instantly.
    """

    size: int = 3
    # Edge length of the puzzle (2, 3 or 4).

    move_duration: float = 0.3
    # Seconds per player quarter turn.

    scramble_duration: float = 0.05
    # Seconds per scramble quarter turn (scrambles play fast).

    scramble_base: int = 20
    scramble_per_size: int = 5
    # Scramble length = scramble_base + scramble_per_size * size.

    max_pending_input: int = 2
    # While animating, input is dropped once more than this many moves are waiting.

    drag_threshold: float = DRAG_THRESHOLD_PX
    # Pixels; shorter drags in both directions are clicks, not moves.

    min_solve_seconds: float = 1.0
    # Earliest win check after the timer starts.

    key_layouts: Dict[int, KeyLayout] = field(default_factory=lambda: dict(DEFAULT_KEY_LAYOUTS))
    # Column / row keys per puzzle size.

    ranking_path: str = "cube_rank.csv"
    # CSV file holding the best times.
    ranking_size: int = 5
    # How many best times are kept.

    verbose: bool = True
    # Print session events (scramble, win, ranking) to the console.

    def scramble_length(self, size: int | None = None) -> int:
        return self.scramble_base + self.scramble_per_size * (size if size is not None else self.size)

    def layout_for(self, size: int) -> KeyLayout:
        if size not in self.key_layouts:
            raise ValueError(f"no key layout for size {size}, have {sorted(self.key_layouts)}")
        return self.key_layouts[size]
