"""Shared fixtures for the Potchi test suite."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np
import pytest
from numpy.random import Generator

from potchi.environment.model import EnvironmentModel
from potchi.logger import LOGGER_NAME
from potchi.simulation.config import SimulationConfig


class ZeroNoise:
    """Random source whose continuous draws are always 0 (or the nearest bound).

    Integer draws return the top of the range so that randomize() can be
    checked at its inclusive upper edge.
    """

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        return max(low, min(high, 0.0))

    def integers(self, low: int, high: int, endpoint: bool = False) -> int:
        return high if endpoint else high - 1


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def zero_noise() -> ZeroNoise:
    """A noise-free random source."""
    return ZeroNoise()


@pytest.fixture
def model(rng: Generator) -> EnvironmentModel:
    """A fresh model with default state and a seeded generator."""
    return EnvironmentModel(rng=rng)


@pytest.fixture
def quiet_model(zero_noise: ZeroNoise) -> EnvironmentModel:
    """A fresh model whose simulation steps carry no noise."""
    return EnvironmentModel(rng=zero_noise)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def reset_logger() -> Iterator[logging.Logger]:
    """Hand out the package logger and undo any setup_logger() changes."""
    pkg_logger = logging.getLogger(LOGGER_NAME)
    yield pkg_logger
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
