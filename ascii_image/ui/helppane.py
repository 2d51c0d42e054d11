#!/usr/bin/env python3
# ascii_image/ui/helppane.py

from __future__ import annotations

from prompt_toolkit.filters import Condition
from prompt_toolkit.layout import ConditionalContainer, HSplit
from prompt_toolkit.widgets import Frame, TextArea

_HELP_TEXT = (
    "Key Bindings:\n"
    "  ↑ ↓ ← →          Scroll\n"
    "  PgUp / PgDn      Scroll one screen\n"
    "  Home             Back to top left\n"
    "  h                Toggle this help\n"
    "  q                Quit\n"
)


class HelpPane:
    def __init__(self):
        self._visible = False
        self.text_area = TextArea(
            text=_HELP_TEXT,
            style="class:help",
            read_only=True,
            focusable=False,
        )
        self.frame = Frame(self.text_area, title="Help", style="class:help")
        self.container = HSplit([self.frame])
        # Layout is built once; visibility is re-checked on every render
        self._conditional = ConditionalContainer(
            self.container,
            filter=Condition(lambda: self._visible),
        )

    def __pt_container__(self):
        return self._conditional

    @property
    def visible(self) -> bool:
        return self._visible

    def toggle(self) -> None:
        self._visible = not self._visible
