#!/usr/bin/env python3
# ascii_image/ui/app.py
"""Compose the prompt_toolkit application for the ASCII image viewer."""

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout, HSplit, Window

from ascii_image.config import Config
from ascii_image.styles import make_style
from ascii_image.ui.ascii_control import AsciiControl
from ascii_image.ui.helppane import HelpPane
from ascii_image.ui.state import ViewerState
from ascii_image.ui.statusbar import StatusBar


class AsciiViewerApp:
    def __init__(self, text: str, cfg: Config, title: str = ""):
        self.cfg = cfg
        self.state = ViewerState(cfg, text, title)
        self.control = AsciiControl(self.state)
        self.status = StatusBar(self.state)
        self.help_pane = HelpPane()

        # Image stretches, accessories stack below.
        self.image_window = Window(
            content=self.control,
            dont_extend_width=False,
            wrap_lines=False,
            style="class:image",
        )
        self.control.bind_window(self.image_window)
        self.root = HSplit([
            self.image_window,
            self.status,
            self.help_pane,     # height 0 when hidden
        ])

        self.kb = self._build_key_bindings()
        self.app = Application(
            layout=Layout(self.root, focused_element=self.image_window),
            key_bindings=self.kb,
            full_screen=True,
            style=make_style(cfg),
            mouse_support=bool(cfg["ui"].get("mouse", True)),
        )

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        step = int(self.cfg["ui"].get("scroll_step", 1))

        @kb.add("q")
        def _(event):
            event.app.exit()

        @kb.add("up")
        def _(event):
            self.control.scroll(0, -step)

        @kb.add("down")
        def _(event):
            self.control.scroll(0, step)

        @kb.add("left")
        def _(event):
            self.control.scroll(-step, 0)

        @kb.add("right")
        def _(event):
            self.control.scroll(step, 0)

        @kb.add("pageup")
        def _(event):
            self.control.page(-1)

        @kb.add("pagedown")
        def _(event):
            self.control.page(1)

        @kb.add("home")
        def _(event):
            self.control.home()

        @kb.add("h")
        def _(event):
            self.help_pane.toggle()
            self.state.clear_info()
            event.app.invalidate()

        return kb

    def run(self):
        self.app.run()
