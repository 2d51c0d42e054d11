#!/usr/bin/env python3
# ascii_image/ui/state.py
"""Mutable runtime state for the ASCII image viewer."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import List, Tuple

from ascii_image.config import Config


def split_rows(text: str) -> List[str]:
    """
    Split an ASCII image into display rows.
    Each row after the first starts with the separator space left behind
    by the previous row's newline; that space is dropped here.
    """
    rows = text.split("\n")
    if text.endswith("\n "):
        rows.pop()
    elif rows == [""]:
        return []
    return rows[:1] + [r[1:] if r.startswith(" ") else r for r in rows[1:]]


@dataclass
class ViewerState:
    cfg: Config
    text: str
    title: str = ""

    rows: List[str] = field(init=False)
    grid_width: int = field(init=False)
    grid_height: int = field(init=False)

    # Scroll offset in terminal cells
    top: int = 0
    left: int = 0
    info_msg: str = ""

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self):
        self.rows = split_rows(self.text)
        self.grid_height = len(self.rows)
        self.grid_width = max((len(r) for r in self.rows), default=0)

    # ------------- scrolling -------------

    def scroll(self, dx: int, dy: int, view_w: int, view_h: int) -> None:
        with self._lock:
            max_left = max(0, self.grid_width - max(1, view_w))
            max_top = max(0, self.grid_height - max(1, view_h))
            self.left = max(0, min(max_left, self.left + int(dx)))
            self.top = max(0, min(max_top, self.top + int(dy)))

    def home(self) -> None:
        with self._lock:
            self.left = 0
            self.top = 0

    # ------------- info -------------

    def set_info(self, msg: str) -> None:
        with self._lock:
            self.info_msg = msg

    def info(self) -> str:
        with self._lock:
            return self.info_msg

    def clear_info(self) -> None:
        with self._lock:
            self.info_msg = ""

    # ------------- export -------------

    def snapshot(self) -> Tuple[int, int]:
        with self._lock:
            return self.left, self.top
