# torus_climate/__init__.py

# This file makes the 'torus_climate' directory a Python package.
# We also use it to define the public API of the package.

from .biomes import Biome, biome_label, classify_biome
from .builder import generate_chunk, generate_world
from .coordinates import index_toroidal, torus_point
from .generation_config import WorldGenerationConfig, parse_config_fields
from .generator import WorldGenerator
from .grid import Cell, ChunkBuffer, Grid
from .noise import NoiseField

__all__ = [
    "Biome", "biome_label", "classify_biome",
    "generate_chunk", "generate_world",
    "index_toroidal", "torus_point",
    "WorldGenerationConfig", "parse_config_fields",
    "WorldGenerator",
    "Cell", "ChunkBuffer", "Grid",
    "NoiseField",
]
