#!/usr/bin/env python3
# ascii_image/logging_conf.py
"""
Central logging setup for ascii_image.
Supports console and optional rotating file logs.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from ascii_image.config import Config

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(cfg: Config, level_override: Optional[str] = None) -> None:
    level_name = (level_override or cfg["logging"].get("level", "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger().setLevel(level)

    log_file = cfg["logging"].get("file")
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(cfg["logging"].get("rotate_bytes", 5 * 1024 * 1024)),
            backupCount=int(cfg["logging"].get("rotate_keep", 3)),
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(_FORMAT))
        logging.getLogger().addHandler(handler)

    if cfg["logging"].get("http_debug"):
        logging.getLogger("urllib3").setLevel(logging.DEBUG)
        logging.getLogger("requests").setLevel(logging.DEBUG)
