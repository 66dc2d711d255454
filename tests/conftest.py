"""Shared fixtures for the torus_climate test suite."""

import logging

import numpy as np
import pytest

from torus_climate.generation_config import WorldGenerationConfig
from torus_climate.generator import WorldGenerator
from torus_climate.noise import total_amplitude


@pytest.fixture
def logger():
    return logging.getLogger("torus_climate.tests")


@pytest.fixture
def small_config():
    """A 32x32 world in 4x4 chunks of 8 cells, with default scales."""
    return WorldGenerationConfig(seed=42, world_size=32, chunk_size=8, halo=1)


@pytest.fixture
def generator(small_config, logger):
    return WorldGenerator(small_config, logger)


class ConstantField:
    """Stands in for a NoiseField that returns the same value everywhere."""
    def __init__(self, value):
        self.value = value

    def sample(self, x, y, z, w, frequency=1.0):
        return np.full(np.shape(x), self.value, dtype=np.float64)

    def fractal(self, x, y, z, w, frequency=1.0, octaves=1, persistence=0.5, lacunarity=2.0):
        return np.full(np.shape(x), self.value * total_amplitude(octaves, persistence), dtype=np.float64)


@pytest.fixture
def constant_field():
    return ConstantField
