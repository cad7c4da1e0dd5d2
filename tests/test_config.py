import logging

import pytest

from tetraflip.config import DelaunayConfig, load_config
from tetraflip.logging_config import get_logger, setup_logging


def test_defaults():
    cfg = DelaunayConfig()
    assert cfg.eps == pytest.approx(1e-10)
    assert cfg.max_flips_per_point == 10_000
    assert DelaunayConfig.from_dict(cfg.to_dict()) == cfg


@pytest.mark.parametrize("bad", [
    {"eps": -1.0},
    {"flip_tolerance": 1.0},
    {"max_flips_per_point": 0},
    {"log_every": -5},
])
def test_invalid_values(bad):
    with pytest.raises(ValueError):
        DelaunayConfig.from_dict(bad)


def test_unknown_key():
    with pytest.raises(ValueError, match="unknown config keys"):
        DelaunayConfig.from_dict({"epsilon": 1e-6})


def test_load_flat_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("eps: 1.0e-8\nmax_flips_per_point: 50\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.eps == pytest.approx(1e-8)
    assert cfg.max_flips_per_point == 50
    assert cfg.log_every == 0


def test_load_nested_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("delaunay:\n  log_every: 100\n  flip_tolerance: 0.0\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.log_every == 100
    assert cfg.flip_tolerance == 0.0


def test_load_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == DelaunayConfig()


def test_load_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "run.log"
    logger = setup_logging(level="INFO", log_file=str(log_file))
    get_logger("tetraflip.test").info("hello from test")
    for h in logger.handlers:
        h.flush()
    assert "hello from test" in log_file.read_text(encoding="utf-8")
    # повернути рівень для решти тестів
    setup_logging(level=logging.DEBUG)
