#!/usr/bin/env python3
# ascii_image/config.py
"""
Config loader/saver and defaults for ascii_image.

Goals:
- Single JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.
- No external deps.

Usage:
    from ascii_image.config import Config, ConversionOptions
    cfg = Config.load()                 # ~/.config/ascii_image/ascii_image.json or OS-specific
    opts = ConversionOptions.from_config(cfg)
    cfg["convert"]["max_width"] = 120
    cfg.save()
"""

from __future__ import annotations

import json
import logging
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from ascii_image.geometry import DEFAULT_MAX_HEIGHT, DEFAULT_MAX_WIDTH
from ascii_image.rendering.glyphs import normalize_avoided

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

RESAMPLE_FILTERS = ("lanczos", "bilinear", "bicubic", "nearest", "box", "hamming")
MAX_GRID = 10000

DEFAULT_CONFIG: Dict[str, Any] = {
    "convert": {
        "max_width": DEFAULT_MAX_WIDTH,    # glyphs per row
        "max_height": DEFAULT_MAX_HEIGHT,  # rows
        "avoided_characters": "",          # glyphs removed from the ramp
    },
    "network": {
        "user_agent": "ascii-image/1.2 (+https://example.invalid)",
        "connect_timeout_s": 5.0,
        "read_timeout_s": 15.0,
        "retries": 3,
        "pool_size": 4,
    },
    "render": {
        "resample": "lanczos",             # see RESAMPLE_FILTERS
    },
    "ui": {
        "theme": "auto",                   # auto | light | dark
        "mouse": True,
        "scroll_step": 1,
    },
    "logging": {
        "level": "WARNING",
        "http_debug": False,
        "file": None,                      # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "AsciiImage")
    # macOS: ~/Library/Application Support/AsciiImage
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "AsciiImage")
    # Linux and others: ~/.config/ascii_image
    return os.path.join(os.path.expanduser("~/.config"), "ascii_image")

def _default_config_path() -> str:
    """Resolve default config path, honoring ASCII_IMAGE_CONFIG env override."""
    env = os.environ.get("ASCII_IMAGE_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "ascii_image.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    except Exception:
        # Clean temp on error
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise

def _coerce_num(v: Any, default: float, minmax: Optional[Tuple[float, float]] = None) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    if isinstance(v, bool):
        return int(default)
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

def _coerce_chars(v: Any) -> str:
    """Return avoided characters as a sorted string of unique characters."""
    if v is None:
        return ""
    try:
        chars = normalize_avoided(v if isinstance(v, (str, list, tuple, set, frozenset)) else str(v))
    except ValueError:
        log.warning("Ignoring invalid avoided_characters %r", v)
        return ""
    return "".join(sorted(chars))

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = _deep_merge(DEFAULT_CONFIG, cfg or {})

    # convert
    cv = c["convert"]
    for key, default in (("max_width", DEFAULT_MAX_WIDTH), ("max_height", DEFAULT_MAX_HEIGHT)):
        raw = cv.get(key)
        cv[key] = _coerce_int(raw, default, (1, MAX_GRID))
        if cv[key] != raw:
            log.warning("convert.%s=%r replaced by %d", key, raw, cv[key])
    cv["avoided_characters"] = _coerce_chars(cv.get("avoided_characters"))

    # network
    n = c["network"]
    n["user_agent"] = str(n.get("user_agent") or DEFAULT_CONFIG["network"]["user_agent"])
    n["connect_timeout_s"] = _coerce_num(n.get("connect_timeout_s"), 5.0, (0.2, 60.0))
    n["read_timeout_s"]    = _coerce_num(n.get("read_timeout_s"), 15.0, (0.5, 120.0))
    n["retries"]           = _coerce_int(n.get("retries"), 3, (0, 10))
    n["pool_size"]         = _coerce_int(n.get("pool_size"), 4, (1, 64))

    # render
    r = c["render"]
    if r.get("resample") not in RESAMPLE_FILTERS:
        r["resample"] = DEFAULT_CONFIG["render"]["resample"]

    # ui
    ui = c["ui"]
    if ui.get("theme") not in ("auto", "light", "dark"):
        ui["theme"] = DEFAULT_CONFIG["ui"]["theme"]
    ui["mouse"] = _coerce_bool(ui.get("mouse"), DEFAULT_CONFIG["ui"]["mouse"])
    ui["scroll_step"] = _coerce_int(ui.get("scroll_step"), 1, (1, 50))

    # logging
    lg = c["logging"]
    if lg.get("level") not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
        lg["level"] = DEFAULT_CONFIG["logging"]["level"]
    lg["http_debug"] = _coerce_bool(lg.get("http_debug"), DEFAULT_CONFIG["logging"]["http_debug"])
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), DEFAULT_CONFIG["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), DEFAULT_CONFIG["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate(json.loads(json.dumps(DEFAULT_CONFIG))))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = False) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate(DEFAULT_CONFIG)
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("config root must be an object")
        except (OSError, ValueError):
            # Corrupt file. Backup and regenerate.
            backup = cfg_path + ".corrupt.bak"
            try:
                shutil.copyfile(cfg_path, backup)
            except OSError:
                pass
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)


# ----------------------------
# Per-call conversion options
# ----------------------------

# camelCase spellings are accepted for callers porting from JS configs
_OPTION_ALIASES = {
    "maxWidth": "max_width",
    "maxHeight": "max_height",
    "avoidedCharacters": "avoided_characters",
}


@dataclass(frozen=True)
class ConversionOptions:
    """Options for one conversion. Immutable, safe to share across calls."""
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    avoided_characters: FrozenSet[str] = frozenset()

    def __post_init__(self):
        for name in ("max_width", "max_height"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v < 1:
                raise ValueError(f"{name} must be a positive integer, got {v!r}")
        object.__setattr__(self, "avoided_characters", normalize_avoided(self.avoided_characters))

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "ConversionOptions":
        """Build options from a dict; unset or None values fall back to defaults."""
        if not options:
            return cls()
        kw: Dict[str, Any] = {}
        for k, v in options.items():
            key = _OPTION_ALIASES.get(k, k)
            if key not in ("max_width", "max_height", "avoided_characters"):
                raise ValueError(f"unknown conversion option {k!r}")
            if v is not None:
                kw[key] = v
        return cls(**kw)

    @classmethod
    def from_config(cls, cfg: Config) -> "ConversionOptions":
        cv = cfg["convert"]
        return cls(
            max_width=int(cv["max_width"]),
            max_height=int(cv["max_height"]),
            avoided_characters=cv.get("avoided_characters") or "",
        )

    @classmethod
    def coerce(cls, config: Any) -> "ConversionOptions":
        """Accept None, a ConversionOptions, a Config or a plain mapping."""
        if config is None:
            return cls()
        if isinstance(config, cls):
            return config
        if isinstance(config, Config):
            return cls.from_config(config)
        if isinstance(config, Mapping):
            return cls.from_mapping(config)
        raise TypeError(f"unsupported config type {type(config).__name__}")


__all__ = [
    "Config",
    "ConversionOptions",
    "DEFAULT_CONFIG",
    "RESAMPLE_FILTERS",
    "_default_config_path",
]
