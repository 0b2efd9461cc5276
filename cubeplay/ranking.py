'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Best-times ranking persisted to a csv file.

'''
from __future__ import annotations

import os
from typing import Dict, List

import pandas as pd

RANK_COLUMNS = ["name", "time"]
MAX_DISPLAY_SECONDS = 99 * 60 + 59.99


def format_elapsed(seconds: float) -> str:
    """
    Fixed-width 'MM:SS.cc' timer string.

    Fixed width makes plain string order equal time order, which is what the
    ranking sorts on. Times are clamped to 99:59.99.
    """
    seconds = min(max(0.0, float(seconds)), MAX_DISPLAY_SECONDS)
    centis = int(round(seconds * 100))
    minutes, rem = divmod(centis, 60 * 100)
    secs, cs = divmod(rem, 100)
    return f"{minutes:02d}:{secs:02d}.{cs:02d}"


class Ranking:
    """
    Top-N list of (name, time) entries, best (smallest) time first.

    Parameters
    ----------
    path : str
        CSV file; created on the first save.
    capacity : int, default=5
        Number of entries kept.
    """

    def __init__(self, path: str, capacity: int = 5) -> None:
        if capacity <= 0:
            raise ValueError(f"'capacity' must be > 0, got {capacity}")
        self.path = path
        self.capacity = capacity

    def _read(self) -> pd.DataFrame:
        if not os.path.exists(self.path):
            return pd.DataFrame(columns=RANK_COLUMNS)
        # times are strings like '01:05.20', keep them that way
        return pd.read_csv(self.path, dtype=str, keep_default_na=False)

    def load(self) -> List[Dict[str, str]]:
        """Current ranking as a list of {'name', 'time'} dicts."""
        return self._read()[RANK_COLUMNS].to_dict("records")

    def save(self, name: str, time_str: str) -> List[Dict[str, str]]:
        """
        Insert an entry, keep the best `capacity`, persist and return the ranking.
        """
        name = name.strip() or "UNK"
        df = self._read()
        entry = pd.DataFrame([{"name": name, "time": time_str}])
        df = entry if df.empty else pd.concat([df, entry], ignore_index=True)
        df = df.sort_values("time", kind="stable").head(self.capacity).reset_index(drop=True)

        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        df[RANK_COLUMNS].to_csv(self.path, index=False)
        return df[RANK_COLUMNS].to_dict("records")

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
