#!/usr/bin/env python3
# ascii_image/ui/ascii_control.py
"""prompt_toolkit UIControl that shows a scrollable window onto an ASCII image."""

from __future__ import annotations

from typing import List, Tuple

from prompt_toolkit.application import get_app_or_none
from prompt_toolkit.layout.controls import UIContent, UIControl

from ascii_image.ui.state import ViewerState


class AsciiControl(UIControl):
    """Render the visible slice of the image and react to scroll input."""

    def __init__(self, state: ViewerState):
        self.state = state
        self._last_width = 1
        self._last_height = 1
        self._window = None

    # -------- UIControl interface --------

    def is_focusable(self) -> bool:
        return True

    def preferred_width(self, max_available_width: int) -> int:
        return max_available_width

    def preferred_height(
        self,
        width: int,
        max_available_height: int,
        wrap_lines: bool,
        get_line_prefix,
    ) -> int:
        return max_available_height

    def create_content(self, width: int, height: int) -> UIContent:
        width = max(1, int(width))
        height = max(1, int(height))
        self._last_width = width
        self._last_height = height

        # Re-clamp in case the terminal grew
        self.state.scroll(0, 0, width, height)
        lines_frag = self.visible_lines(width, height)

        return UIContent(
            get_line=lambda i: lines_frag[i] if 0 <= i < height else [("", " " * width)],
            line_count=height,
        )

    def bind_window(self, window) -> None:
        """Remember the Window that hosts this control for focus management."""
        self._window = window

    def focus(self) -> None:
        app = get_app_or_none()
        if app and self._window is not None:
            app.layout.focus(self._window)

    # -------- helpers --------

    def visible_lines(self, width: int, height: int) -> List[List[Tuple[str, str]]]:
        left, top = self.state.snapshot()
        rows = self.state.rows
        out: List[List[Tuple[str, str]]] = []
        for y in range(top, top + height):
            text = rows[y][left:left + width] if y < len(rows) else ""
            out.append([("", text.ljust(width))])
        return out

    # -------- user actions --------

    def scroll(self, dx: int, dy: int) -> None:
        self.state.scroll(dx, dy, self._last_width, self._last_height)
        left, top = self.state.snapshot()
        self.state.set_info(f"Offset {left},{top}")

    def page(self, direction: int) -> None:
        self.scroll(0, direction * self._last_height)

    def home(self) -> None:
        self.state.home()
        self.state.set_info("Top left")
