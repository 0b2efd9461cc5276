'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Play session. Owns the puzzle and its scheduler, runs scramble/timer/win logic and keeps the ranking.

'''
from __future__ import annotations

import random
import time
from typing import Callable, List, Optional, Sequence

from cubeplay.config import GameConfig
from cubeplay.cube import Puzzle, Move
from cubeplay.controls.scheduler import MoveScheduler
from cubeplay.controls.alignment import alignment_for
from cubeplay.controls.translator import translate_key, translate_drag
from cubeplay.ranking import Ranking, format_elapsed

RESET_DISPLAY = "00:00:00"


class GameSession:
    """
    One player session on one puzzle at a time.

    Flow: `scramble()` queues a fast random sequence; when it settles the timer
    starts. Every later drain of the move queue triggers a win check; a win
    stops the timer and exposes `final_time`, which `save_score(name)` stores.

    The camera passed to `press_key` / `drag` only has to expose `right()` and
    `up()` world vectors (see `visualisation.utils_visualization.ViewCamera`).

    Hooks (plain attributes, may be None)
    -------------------------------------
    on_move_start(move)
        A move starts playing (click sounds, HUD flashes).
    on_scrambled()
        The scramble finished playing and the timer started.
    on_win(final_time)
        The puzzle was solved after a scramble.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        ranking: Ranking | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.clock = clock
        self.ranking = ranking or Ranking(self.config.ranking_path, self.config.ranking_size)

        self.on_move_start: Optional[Callable[[Move], None]] = None
        self.on_scrambled: Optional[Callable[[], None]] = None
        self.on_win: Optional[Callable[[str], None]] = None

        self.is_running = False
        self.is_scrambled = False
        self._scrambling = False
        self.start_time = 0.0
        self.stop_time: float | None = None
        self.final_time: str | None = None

        self.puzzle: Puzzle | None = None
        self.scheduler: MoveScheduler | None = None
        self.new_puzzle(self.config.size)

    # ---------- lifecycle ----------
    def new_puzzle(self, size: int) -> Puzzle:
        """
        Discard the current puzzle (and anything still queued) and build a solved one.
        """
        layout = self.config.layout_for(size)
        puzzle = Puzzle(size)
        if self.scheduler is not None:
            self.scheduler.clear()
        if self.puzzle is not None:
            self.puzzle.dispose()

        self.size = size
        self.layout = layout
        self.puzzle = puzzle
        self.scheduler = MoveScheduler(
            puzzle,
            on_move_start=self._move_started,
            on_settled=self._settled,
        )
        return puzzle

    def reset(self, size: int | None = None) -> None:
        """Stop the clock and start over on a solved puzzle, optionally of another size."""
        self.new_puzzle(self.size if size is None else size)
        self.stop_timer()
        self.stop_time = None
        self.is_scrambled = False
        self._scrambling = False
        self.final_time = None

    def change_size(self, size: int) -> None:
        self.reset(size)

    def scramble(self, seed: int | None = None) -> List[Move]:
        """
        Reset and queue a random scramble; the timer starts once it has played.

        Refused (returns []) while moves are still animating.
        """
        if self.scheduler.is_animating:
            return []
        self.reset()

        length = self.config.scramble_length(self.size)
        moves = self.puzzle.random_moves(length, random.Random(seed), self.config.scramble_duration)
        self.puzzle.set_phase("scramble")
        self._scrambling = True
        for m in moves:
            self.scheduler.enqueue(m)
        if self.config.verbose:
            print(f"Scrambling {self.size}x{self.size}x{self.size} with {length} moves")
        return moves

    # ---------- input ----------
    def accepts_input(self) -> bool:
        # player moves never mix into a playing scramble
        if self._scrambling:
            return False
        return not (self.scheduler.is_animating and self.scheduler.pending > self.config.max_pending_input)

    def press_key(self, key: str, camera) -> Optional[Move]:
        """
        Translate a key for the current view and queue it.

        Returns the queued move, or None if the key is unbound or input is throttled.
        """
        if not self.accepts_input():
            return None
        move = translate_key(key, self.layout, alignment_for(camera), self.config.move_duration)
        if move is not None:
            self.scheduler.enqueue(move)
        return move

    def drag(self, position: Sequence[float], dx: float, dy: float, camera) -> Optional[Move]:
        """
        Translate a drag started on a cubie at `position` and queue it.

        Returns the queued move, or None for clicks and throttled input.
        """
        if not self.accepts_input():
            return None
        move = translate_drag(
            position, dx, dy, alignment_for(camera),
            threshold=self.config.drag_threshold,
            duration=self.config.move_duration,
        )
        if move is not None:
            self.scheduler.enqueue(move)
        return move

    def tick(self, dt: float) -> None:
        self.scheduler.tick(dt)

    # ---------- timer ----------
    def start_timer(self) -> None:
        if self.is_running:
            return
        self.start_time = self.clock()
        self.stop_time = None
        self.is_running = True

    def stop_timer(self) -> None:
        if self.is_running:
            self.stop_time = self.clock()
        self.is_running = False

    def elapsed(self) -> float:
        if self.is_running:
            return self.clock() - self.start_time
        if self.stop_time is not None:
            return self.stop_time - self.start_time
        return 0.0

    def display_time(self) -> str:
        if not self.is_running and self.stop_time is None:
            return RESET_DISPLAY
        return format_elapsed(self.elapsed())

    # ---------- win / ranking ----------
    def check_win(self) -> bool:
        """
        Win check run on every settle; only counts after a scramble and a short grace period.
        """
        if not (self.is_running and self.is_scrambled):
            return False
        if self.elapsed() <= self.config.min_solve_seconds:
            return False
        if not self.puzzle.check_solved():
            return False

        self.stop_timer()
        self.is_scrambled = False
        self.final_time = format_elapsed(self.elapsed())
        if self.config.verbose:
            print(f"Solved in {self.final_time} ({self.puzzle.moves_since_scramble()} moves)")
        if self.on_win is not None:
            self.on_win(self.final_time)
        return True

    def save_score(self, name: str) -> list[dict]:
        """Store the last solve; each solve can be saved once."""
        if self.final_time is None:
            raise ValueError("no finished solve to save")
        rank = self.ranking.save(name, self.final_time)
        self.final_time = None
        if self.config.verbose:
            for i, r in enumerate(rank):
                print(f"#{i + 1} {r['name']:<12} {r['time']}")
        return rank

    # ---------- scheduler hooks ----------
    def _move_started(self, move: Move) -> None:
        if self.on_move_start is not None:
            self.on_move_start(move)

    def _settled(self) -> None:
        if self._scrambling:
            self._scrambling = False
            self.puzzle.mark_scrambled()
            self.is_scrambled = True
            self.start_timer()
            if self.on_scrambled is not None:
                self.on_scrambled()
            return
        self.check_win()
