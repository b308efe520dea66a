import json

import pytest

from src import config
from src.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_SPEED_MS,
    EDGE_MODE_DIRECTED,
    EDGE_MODE_UNDIRECTED,
    MAX_SPEED_MS,
    MIN_SPEED_MS,
    clamp_speed,
    get_edge_mode,
    get_log_level,
    get_port,
    get_speed_ms,
    load_config,
)

ENV_VARS = ("PATHVIZ_SPEED_MS", "PATHVIZ_EDGE_MODE", "PATHVIZ_PORT", "PATHVIZ_LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize("value,expected", [
    (500, 500),
    ("750", 750),
    (10, MIN_SPEED_MS),
    (99999, MAX_SPEED_MS),
    (123.6, 124),
    ("fast", DEFAULT_SPEED_MS),
    (None, DEFAULT_SPEED_MS),
    (True, DEFAULT_SPEED_MS),
    (float("nan"), DEFAULT_SPEED_MS),
    (10 ** 400, DEFAULT_SPEED_MS),
])
def test_clamp_speed(value, expected):
    assert clamp_speed(value) == expected


def test_defaults_with_empty_config():
    assert get_speed_ms({}) == DEFAULT_SPEED_MS
    assert get_edge_mode({}) == EDGE_MODE_DIRECTED
    assert get_port({}) == DEFAULT_PORT
    assert get_log_level({}) == DEFAULT_LOG_LEVEL


def test_values_from_config_dict():
    cfg = {"speed_ms": 1200, "edge_mode": "Undirected", "port": 9000, "log_level": "debug"}
    assert get_speed_ms(cfg) == 1200
    assert get_edge_mode(cfg) == EDGE_MODE_UNDIRECTED
    assert get_port(cfg) == 9000
    assert get_log_level(cfg) == "DEBUG"


def test_environment_overrides_config(monkeypatch):
    monkeypatch.setenv("PATHVIZ_SPEED_MS", "80")
    monkeypatch.setenv("PATHVIZ_EDGE_MODE", "undirected")
    monkeypatch.setenv("PATHVIZ_PORT", "8123")
    monkeypatch.setenv("PATHVIZ_LOG_LEVEL", "warning")
    cfg = {"speed_ms": 1200, "edge_mode": "directed", "port": 9000, "log_level": "debug"}
    assert get_speed_ms(cfg) == 80
    assert get_edge_mode(cfg) == EDGE_MODE_UNDIRECTED
    assert get_port(cfg) == 8123
    assert get_log_level(cfg) == "WARNING"


def test_invalid_values_fall_back():
    cfg = {"edge_mode": "sideways", "port": float("inf"), "log_level": "chatty", "speed_ms": "slow"}
    assert get_edge_mode(cfg) == EDGE_MODE_DIRECTED
    assert get_port(cfg) == DEFAULT_PORT
    assert get_port({"port": 70000}) == DEFAULT_PORT
    assert get_log_level(cfg) == DEFAULT_LOG_LEVEL
    assert get_speed_ms(cfg) == DEFAULT_SPEED_MS


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"speed_ms": 600, "edge_mode": "undirected"}), encoding="utf-8")
    assert load_config(path) == {"speed_ms": 600, "edge_mode": "undirected"}


def test_load_config_missing_or_broken(tmp_path):
    assert load_config(tmp_path / "missing.json") == {}
    broken = tmp_path / "config.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_config(broken) == {}
    listed = tmp_path / "list.json"
    listed.write_text("[1, 2]", encoding="utf-8")
    assert load_config(listed) == {}


def test_getters_read_config_file_when_not_given(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"speed_ms": 900}), encoding="utf-8")
    monkeypatch.setattr(config, "get_config_path", lambda: path)
    assert get_speed_ms() == 900
