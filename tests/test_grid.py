"""Tests for the Grid and ChunkBuffer containers."""

import numpy as np
import pytest

from torus_climate.biomes import Biome
from torus_climate.grid import Cell, ChunkBuffer, Grid


@pytest.fixture
def grid():
    elevation = np.arange(12, dtype=np.float32).reshape(3, 4) * 10.0
    temperature = np.full((3, 4), 12.5, dtype=np.float32)
    moisture = np.linspace(0.0, 1.0, 12, dtype=np.float32).reshape(3, 4)
    biome = np.full((3, 4), Biome.GRASSLAND, dtype=np.uint8)
    biome[0, 0] = Biome.OCEAN
    return Grid(elevation, temperature, moisture, biome)


class TestGrid:

    def test_length_and_iteration_order(self, grid):
        cells = grid.cells
        assert len(grid) == len(cells) == 12
        assert cells[0].biome == Biome.OCEAN
        assert cells[5].elevation == 50.0  # row 1, column 1

    def test_cells_are_values(self, grid):
        cell = next(iter(grid))
        assert cell == Cell(elevation=0.0, temperature=12.5, moisture=0.0, biome=Biome.OCEAN)
        with pytest.raises(AttributeError):
            cell.moisture = 0.5

    def test_layers_are_read_only(self, grid):
        with pytest.raises(ValueError):
            grid.elevation[0, 0] = 1.0

    def test_biome_counts(self, grid):
        counts = grid.biome_counts()
        assert counts[Biome.OCEAN] == 1
        assert counts[Biome.GRASSLAND] == 11

    def test_rejects_mismatched_layers(self):
        with pytest.raises(ValueError):
            Grid(np.zeros((2, 2)), np.zeros((2, 3)), np.zeros((2, 2)), np.zeros((2, 2), dtype=np.uint8))

    def test_toroidal_lookup_requires_square(self, grid):
        with pytest.raises(ValueError):
            grid.cell_at(0, 0)

    def test_toroidal_lookup(self):
        layer = np.arange(9, dtype=np.float32).reshape(3, 3)
        square = Grid(layer.copy(), layer.copy(), layer.copy() / 10.0, np.zeros((3, 3), dtype=np.uint8))
        assert square.cell_at(-1, 0).elevation == 2.0
        assert square.cell_at(0, -1).elevation == 6.0
        assert square.cell_at(4, 4) == square.cell_at(1, 1)


class TestChunkBuffer:

    def test_visible_crops_halo(self):
        shape = (2, 3)
        chunk = ChunkBuffer(
            chunk_x=1, chunk_y=0, chunk_size=2, halo=1,
            elevation=np.arange(6, dtype=np.float32).reshape(shape),
            temperature=np.zeros(shape, dtype=np.float32),
            moisture=np.zeros(shape, dtype=np.float32),
            biome=np.zeros(shape, dtype=np.uint8),
        )
        visible = chunk.visible()
        assert (visible.width, visible.height) == (2, 2)
        np.testing.assert_array_equal(visible.elevation, [[0, 1], [3, 4]])
        assert chunk.origin == (2, 0)
