import json
import os

import pytest

from ascii_image.config import DEFAULT_CONFIG, Config, ConversionOptions, _default_config_path


def test_missing_file_gives_defaults(tmp_path):
    path = tmp_path / "none.json"
    cfg = Config.load(str(path))
    assert cfg["convert"]["max_width"] == 300
    assert cfg["convert"]["max_height"] == 500
    assert cfg["convert"]["avoided_characters"] == ""
    assert not path.exists()


def test_create_if_missing(tmp_path):
    path = tmp_path / "sub" / "cfg.json"
    Config.load(str(path), create_if_missing=True)
    assert json.loads(path.read_text())["render"]["resample"] == "lanczos"


def test_user_values_merged_and_validated(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({
        "convert": {"max_width": 0, "max_height": "abc", "avoided_characters": ["b", "a", "a"]},
        "render": {"resample": "sinc"},
        "ui": {"theme": "light", "mouse": "off"},
        "logging": {"level": "LOUD"},
    }))
    cfg = Config.load(str(path))
    assert cfg["convert"]["max_width"] == 1
    assert cfg["convert"]["max_height"] == 500
    assert cfg["convert"]["avoided_characters"] == "ab"
    assert cfg["render"]["resample"] == "lanczos"
    assert cfg["ui"]["theme"] == "light"
    assert cfg["ui"]["mouse"] is False
    assert cfg["logging"]["level"] == "WARNING"
    # untouched sections keep defaults
    assert cfg["network"]["retries"] == DEFAULT_CONFIG["network"]["retries"]


def test_corrupt_file_backed_up(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{not json")
    cfg = Config.load(str(path))
    assert cfg["convert"]["max_width"] == 300
    assert (tmp_path / "cfg.json.corrupt.bak").read_text() == "{not json"


def test_save_and_reload(tmp_path):
    path = tmp_path / "cfg.json"
    cfg = Config.load(str(path))
    cfg["convert"]["max_width"] = 80
    cfg.save()
    assert Config.load(str(path))["convert"]["max_width"] == 80
    assert not [p for p in os.listdir(tmp_path) if p.startswith(".tmp_cfg_")]


def test_update_validates(cfg):
    cfg.update({"convert": {"max_height": 99999, "avoided_characters": "$$@"}})
    assert cfg["convert"]["max_height"] == 10000
    assert cfg["convert"]["avoided_characters"] == "$@"
    assert cfg["convert"]["max_width"] == 300


def test_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("ASCII_IMAGE_CONFIG", str(tmp_path / "env.json"))
    assert _default_config_path() == str(tmp_path / "env.json")


def test_options_defaults():
    opts = ConversionOptions()
    assert (opts.max_width, opts.max_height) == (300, 500)
    assert opts.avoided_characters == frozenset()


def test_options_from_mapping_aliases():
    opts = ConversionOptions.from_mapping({"maxWidth": 40, "maxHeight": None, "avoidedCharacters": "ab"})
    assert opts.max_width == 40
    assert opts.max_height == 500
    assert opts.avoided_characters == frozenset("ab")


def test_options_reject_bad_values():
    with pytest.raises(ValueError):
        ConversionOptions(max_width=0)
    with pytest.raises(ValueError):
        ConversionOptions.from_mapping({"colour": True})
    with pytest.raises(TypeError):
        ConversionOptions.coerce(42)


def test_options_from_config(cfg):
    cfg.update({"convert": {"max_width": 20, "avoided_characters": "xyz"}})
    opts = ConversionOptions.coerce(cfg)
    assert opts.max_width == 20
    assert opts.avoided_characters == frozenset("xyz")


def test_avoided_list_entries_must_be_single_characters(tmp_path, caplog):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"convert": {"avoided_characters": ["ab"]}}))
    cfg = Config.load(str(path))
    assert cfg["convert"]["avoided_characters"] == ""
    assert "avoided_characters" in caplog.text


def test_oversized_grid_clamped_with_warning(cfg, caplog):
    cfg.update({"convert": {"max_width": 20000}})
    assert cfg["convert"]["max_width"] == 10000
    assert "convert.max_width=20000 replaced by 10000" in caplog.text
