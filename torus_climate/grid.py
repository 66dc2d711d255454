# torus_climate/grid.py

"""
================================================================================
GRID DATA STRUCTURES
================================================================================
Containers handed from the generation pipeline to external consumers (e.g. a
renderer or a cursor-lookup overlay).

Data is stored as a structure of arrays (one 2D NumPy array per field, shape
(height, width), row-major) because every stage of the pipeline is
vectorized. Consumers that want per-cell records iterate the grid and get
Cell values.

Data Contract:
---------------
- Grid: width * height cells. Read-only once built (arrays are flagged
  non-writeable).
- ChunkBuffer: a chunk of chunk_size x chunk_size visible cells, plus `halo`
  extra columns on its right edge that were computed but are not part of
  the chunk's output.
================================================================================
"""

from collections import Counter
from dataclasses import dataclass

import numpy as np

from .biomes import Biome
from .coordinates import index_toroidal


@dataclass(frozen=True)
class Cell:
    """The climate classification of one grid position."""
    elevation: float
    temperature: float
    moisture: float
    biome: Biome


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class Grid:
    """A fully classified rectangle of cells."""
    def __init__(self, elevation: np.ndarray, temperature: np.ndarray, moisture: np.ndarray, biome: np.ndarray):
        shape = elevation.shape
        if not (temperature.shape == moisture.shape == biome.shape == shape) or len(shape) != 2:
            raise ValueError("All grid layers must be 2D arrays of the same shape.")
        self.height, self.width = shape
        self.elevation = _freeze(elevation)
        self.temperature = _freeze(temperature)
        self.moisture = _freeze(moisture)
        self.biome = _freeze(biome)

    def __len__(self):
        return self.width * self.height

    def __iter__(self):
        """Yields every Cell in row-major order."""
        for i in range(len(self)):
            yield self._cell(i // self.width, i % self.width)

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            np.array_equal(self.elevation, other.elevation)
            and np.array_equal(self.temperature, other.temperature)
            and np.array_equal(self.moisture, other.moisture)
            and np.array_equal(self.biome, other.biome)
        )

    def __repr__(self):
        return f"Grid(width={self.width}, height={self.height})"

    def _cell(self, row: int, col: int) -> Cell:
        return Cell(
            elevation=float(self.elevation[row, col]),
            temperature=float(self.temperature[row, col]),
            moisture=float(self.moisture[row, col]),
            biome=Biome(int(self.biome[row, col])),
        )

    @property
    def cells(self) -> list:
        return list(self)

    def cell_at(self, x: int, y: int) -> Cell:
        """
        Resolves any world coordinate, including negative or out-of-range
        ones, by wrapping it onto the grid. Only meaningful for square,
        whole-world grids.
        """
        if self.width != self.height:
            raise ValueError("Toroidal lookup requires a square world grid.")
        index = index_toroidal(x, y, self.width)
        return self._cell(index // self.width, index % self.width)

    def biome_counts(self) -> Counter:
        """Number of cells per Biome."""
        values, counts = np.unique(self.biome, return_counts=True)
        return Counter({Biome(int(v)): int(c) for v, c in zip(values, counts)})


@dataclass
class ChunkBuffer:
    """
    A halo-widened chunk. Arrays have shape (chunk_size, chunk_size + halo);
    the halo columns sit to the right of the visible area.
    """
    chunk_x: int
    chunk_y: int
    chunk_size: int
    halo: int
    elevation: np.ndarray
    temperature: np.ndarray
    moisture: np.ndarray
    biome: np.ndarray

    @property
    def origin(self) -> tuple:
        """World coordinate of the chunk's top-left visible cell."""
        return self.chunk_x * self.chunk_size, self.chunk_y * self.chunk_size

    def visible(self) -> Grid:
        """Crops the halo away and returns the chunk's own cells."""
        cols = slice(0, self.chunk_size)
        return Grid(
            self.elevation[:, cols].copy(),
            self.temperature[:, cols].copy(),
            self.moisture[:, cols].copy(),
            self.biome[:, cols].copy(),
        )
