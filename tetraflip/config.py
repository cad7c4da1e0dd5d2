# tetraflip/config.py
from __future__ import annotations
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .geom import EPS

logger = logging.getLogger(__name__)


@dataclass
class DelaunayConfig:
    """Параметри інкрементальної Делоне."""
    # відносний поріг виродженості стартового тетраедра; масштабується розміром
    # bounding box входу (L для відстані, L^2 для колінеарності, L^3 для orient3d)
    eps: float = EPS
    # відносний допуск тесту сфери: фліп лише якщо |p - c| < r * (1 - flip_tolerance)
    flip_tolerance: float = 1e-9
    # запобіжник від зациклення фліпів на виродженнях (на одну точку)
    max_flips_per_point: int = 10_000
    # як часто писати прогрес в INFO (0: ніколи)
    log_every: int = 0

    def __post_init__(self) -> None:
        if self.eps < 0:
            raise ValueError("eps must be >= 0")
        if not 0 <= self.flip_tolerance < 1:
            raise ValueError("flip_tolerance must be in [0, 1)")
        if self.max_flips_per_point <= 0:
            raise ValueError("max_flips_per_point must be positive")
        if self.log_every < 0:
            raise ValueError("log_every must be >= 0")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DelaunayConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: Union[str, Path]) -> DelaunayConfig:
    """
    YAML-файл з ключами DelaunayConfig (можна вкласти під 'delaunay:').
    Порожній файл -> значення за замовчуванням.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return DelaunayConfig()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    if "delaunay" in data and isinstance(data["delaunay"], dict):
        data = data["delaunay"]
    cfg = DelaunayConfig.from_dict(data)
    logger.info("Configuration loaded from %s", path)
    return cfg
