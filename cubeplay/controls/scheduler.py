'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Sequential move scheduler. One move in flight, FIFO queue, "settled" once per drain.

'''
from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List, Optional

from cubeplay.cube import Puzzle, Move, DEFAULT_DURATION
from cubeplay.cubies import Cubie


class MoveScheduler:
    """
    Serializes moves on a puzzle.

    Two states: **Idle** (`active is None`) and **Animating**. Time only moves
    when the owner calls `tick(dt)` (a render loop, a game loop or a test), so the
    scheduler does not depend on any animation or timing library. A move changes
    the puzzle state only when its full duration has elapsed.

    Hooks
    -----
    on_move_start(move)
        A move leaves the queue and starts animating.
    on_move_end(move, cubies)
        The engine applied the move; `cubies` are the ones that turned.
    on_settled()
        The queue drained; fires exactly once per drain, never per move.

    Examples
    --------
    >>> s = MoveScheduler(Puzzle(3))
    >>> s.queue_move("x", 1, 1, duration=0.3)
    >>> s.is_animating
    True
    >>> s.tick(0.3)
    >>> s.is_animating
    False
    """

    def __init__(
        self,
        puzzle: Puzzle,
        on_move_start: Optional[Callable[[Move], None]] = None,
        on_move_end: Optional[Callable[[Move, List[Cubie]], None]] = None,
        on_settled: Optional[Callable[[], None]] = None,
    ) -> None:
        self.puzzle = puzzle
        self.on_move_start = on_move_start
        self.on_move_end = on_move_end
        self.on_settled = on_settled

        self.queue: Deque[Move] = deque()
        self.active: Optional[Move] = None
        self.elapsed: float = 0.0

    @property
    def is_animating(self) -> bool:
        return self.active is not None

    @property
    def pending(self) -> int:
        """Moves waiting behind the active one."""
        return len(self.queue)

    @property
    def progress(self) -> float:
        """Fraction (0..1) of the active move's duration already played."""
        if self.active is None:
            return 0.0
        if self.active.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.active.duration)

    def enqueue(self, move: Move) -> None:
        """
        Append a move; starts it right away when idle. Never rejects.
        """
        self.queue.append(move)
        if self.active is None:
            self._start_next()

    def queue_move(self, axis: str, slice_value: float, direction: int, duration: float = DEFAULT_DURATION) -> None:
        self.enqueue(Move(axis, slice_value, direction, duration))

    def tick(self, dt: float) -> None:
        """
        Advance time by `dt` seconds, completing as many moves as fit.

        Leftover time after a move completes is carried into the next one, so a
        large `dt` behaves like several small ones.
        """
        if self.active is None:
            return
        self.elapsed += max(0.0, dt)
        while self.active is not None and self.elapsed >= self.active.duration:
            carry = self.elapsed - self.active.duration
            self._finish_active()
            if self.active is not None:
                self.elapsed = carry

    def drain(self) -> None:
        """Play every queued move to completion synchronously."""
        while self.active is not None:
            self._finish_active()

    def clear(self) -> None:
        """
        Drop the queue and the active move without applying them.

        Only meant for a full reset where the puzzle is discarded as well.
        """
        self.queue.clear()
        self.active = None
        self.elapsed = 0.0

    # ---------- internals ----------
    def _start_next(self) -> None:
        self.active = self.queue.popleft()
        self.elapsed = 0.0
        if self.on_move_start is not None:
            self.on_move_start(self.active)

    def _finish_active(self) -> None:
        move = self.active
        cubies = self.puzzle.rotate(move)
        if self.on_move_end is not None:
            self.on_move_end(move, cubies)
        self.active = None
        self.elapsed = 0.0

        if self.queue:
            self._start_next()
        elif self.on_settled is not None:
            self.on_settled()
