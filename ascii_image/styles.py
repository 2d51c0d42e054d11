#!/usr/bin/env python3
# ascii_image/styles.py
"""
Style definitions for the ASCII image viewer.
Provides light, dark, and auto themes for prompt_toolkit.
"""

import os

from prompt_toolkit.styles import Style
from ascii_image.config import Config

_BASE_DARK = {
    "image": "bg:#000000 #e0e0e0",
    "status": "bg:#303030 #cccccc",
    "help": "bg:#202020 #dddddd",
}
_BASE_LIGHT = {
    "image": "bg:#ffffff #000000",
    "status": "bg:#cccccc #000000",
    "help": "bg:#eeeeee #000000",
}


def make_style(cfg: Config) -> Style:
    theme = cfg["ui"].get("theme", "auto")

    if theme == "light":
        return Style.from_dict(_BASE_LIGHT)
    if theme == "dark":
        return Style.from_dict(_BASE_DARK)

    # Auto-detect via environment
    if os.getenv("TERM_THEME", "").lower() == "light":
        return Style.from_dict(_BASE_LIGHT)
    return Style.from_dict(_BASE_DARK)
