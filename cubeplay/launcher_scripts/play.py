'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Play the puzzle in a matplotlib window, or render a scripted scramble to .gif/.mp4.

'''
#!/usr/bin/env python3
import argparse

# project imports
from cubeplay.config import GameConfig
from cubeplay.controls.alignment import alignment_for
from cubeplay.controls.translator import translate_key
from cubeplay.game import GameSession
from cubeplay.visualisation.animator import PuzzleAnimator


def main():
    p = argparse.ArgumentParser("Play an NxNxN twisty puzzle")
    p.add_argument("--size", type=int, default=3, choices=[2, 3, 4])
    p.add_argument("--scramble", action="store_true", help="start scrambled")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--keys", type=str, default="", help="key presses queued after the scramble (scripted runs)")
    p.add_argument("--move-duration", type=float, default=0.3, dest="move_duration")
    p.add_argument("--scramble-duration", type=float, default=0.05, dest="scramble_duration")
    p.add_argument("--fps", type=int, default=30)
    p.add_argument("--elev", type=float, default=30.0)
    p.add_argument("--azim", type=float, default=-60.0)
    p.add_argument("--outfile", type=str, default=None, help=".gif or .mp4; omit for a live window")
    p.add_argument("--duration", type=float, default=None, help="cap the recording length (seconds)")
    p.add_argument("--rank-path", type=str, default="cube_rank.csv", dest="rank_path")
    p.add_argument("--name", type=str, default="UNK", help="ranking name used when a solve finishes")
    p.add_argument("--quiet", action="store_true")
    args = p.parse_args()

    cfg = GameConfig(
        size=args.size,
        move_duration=args.move_duration,
        scramble_duration=args.scramble_duration,
        ranking_path=args.rank_path,
        verbose=not args.quiet,
    )
    session = GameSession(cfg)
    animator = PuzzleAnimator(session, fps=args.fps, elev=args.elev, azim=args.azim)
    session.on_win = lambda final_time: session.save_score(args.name)

    def queue_keys():
        # once only; scripted keys bypass the live input throttle
        session.on_scrambled = None
        alignment = alignment_for(animator.camera)
        for key in args.keys:
            move = translate_key(key, session.layout, alignment, cfg.move_duration)
            if move is not None:
                session.scheduler.enqueue(move)

    if args.scramble:
        # keys play after the scramble has settled and the timer runs
        session.on_scrambled = queue_keys
        session.scramble(seed=args.seed)
    else:
        queue_keys()

    duration = args.duration
    if args.outfile and duration is None and args.scramble:
        # the key moves are not queued yet, so size the recording up front
        scramble_s = cfg.scramble_length(args.size) * cfg.scramble_duration
        duration = scramble_s + len(args.keys) * cfg.move_duration + 2.0

    animator.animate(outfile=args.outfile, duration_s=duration)


if __name__ == "__main__":
    main()
