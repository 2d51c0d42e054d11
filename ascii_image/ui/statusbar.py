#!/usr/bin/env python3
# ascii_image/ui/statusbar.py

from __future__ import annotations
from prompt_toolkit.widgets import Label

from ascii_image.ui.state import ViewerState


class StatusBar:
    def __init__(self, state: ViewerState):
        self.state = state
        # Callable text is re-evaluated on every render.
        # Plain text: image titles may contain markup characters.
        self.label = Label(text=self.message, style="class:status")

    def __pt_container__(self):
        return self.label

    def message(self) -> str:
        left, top = self.state.snapshot()
        msg = (
            f" {self.state.title or '<image>'} "
            f"grid={self.state.grid_width}x{self.state.grid_height} "
            f"offset={left},{top}  {self.state.info()}"
        )
        return msg
