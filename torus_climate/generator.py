# torus_climate/generator.py

"""
================================================================================
CORE WORLD GENERATOR
================================================================================
This module contains the main WorldGenerator class, responsible for creating
the raw climate layers of a toroidal world (elevation, temperature, moisture)
and classifying them into biomes.

Generation runs in two stages:
  1. Primary fields. Every cell's elevation, temperature and raw moisture
     depend only on its own coordinate and the config, so any rectangle can
     be computed independently, in any order, by any process.
  2. Moisture advection and classification. A cell's final moisture reads
     its upwind (x + 1) neighbor, so a row can only be finalized once the
     whole row, plus one column beyond it, has finished stage 1.

Data Contract:
---------------
- Inputs (on initialization):
    - config (WorldGenerationConfig): The immutable generation parameters.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - float32 NumPy arrays of elevation [0, 100] (small overshoot allowed),
      temperature (Celsius) and moisture [0, 1], and uint8 biome maps.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same config, the output is bit-identical, no matter
  how the world is partitioned into chunks or workers.
================================================================================
"""

import logging

import numpy as np

from . import config as DEFAULTS
from . import coordinates
from .biomes import calculate_biome_map
from .generation_config import WorldGenerationConfig
from .grid import ChunkBuffer, Grid
from .noise import NoiseField, total_amplitude


class WorldGenerator:
    """
    Generates the climate layers of a procedurally generated toroidal world.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: WorldGenerationConfig, logger: logging.Logger):
        """
        Initializes the world generator.

        Args:
            config (WorldGenerationConfig): The generation parameters.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.config = config
        self.logger.info("WorldGenerator initializing...")

        # --- Initialize Noise ---
        # One independent field per purpose, derived from the master seed.
        # Terrain and continental stay centred on the origin, so land and sea
        # balance around SEA_BIAS. The jitter fields are shifted off the
        # origin vertex, where gradient noise would stay near zero.
        seed = config.seed
        self.terrain_noise = NoiseField(seed + DEFAULTS.TERRAIN_SEED_OFFSET)
        self.continental_noise = NoiseField(seed + DEFAULTS.CONTINENTAL_SEED_OFFSET)
        self.temperature_noise = NoiseField(seed + DEFAULTS.TEMPERATURE_SEED_OFFSET, offset_domain=True)
        self.moisture_noise = NoiseField(seed + DEFAULTS.MOISTURE_SEED_OFFSET, offset_domain=True)
        self._terrain_amplitude = total_amplitude(config.octave_count, DEFAULTS.TERRAIN_PERSISTENCE)

        # --- Pre-computation ---
        # A cell's torus point depends on x and y separately, so one ring per
        # axis is enough. Indexing these tables also guarantees that a cell's
        # point is the same bits whichever chunk it is generated in.
        ring = np.arange(config.world_size)
        self._ring_nx, self._ring_ny, self._ring_nz, self._ring_nw = coordinates.torus_point(
            ring, ring, config.world_size, config.scaling_factor
        )

        self.logger.info(f"WorldGenerator initialized with seed: {config.seed}")
        self.logger.info(
            f"Scales: terrain={config.terrain_scale}, continental={config.continental_scale}, "
            f"temperature={config.temperature_scale}, moisture={config.moisture_scale}, "
            f"octaves={config.octave_count}, sea threshold={config.sea_threshold}, "
            f"scaling factor={config.scaling_factor}"
        )
        self.logger.info(
            f"World dimensions: {config.world_size}x{config.world_size} cells in "
            f"{config.chunks_per_side}x{config.chunks_per_side} chunks of {config.chunk_size}"
        )

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------
    def get_torus_points(self, x_coords: np.ndarray, y_coords: np.ndarray) -> tuple:
        """Looks up the 4D torus points for integer grid coordinates."""
        size = self.config.world_size
        xi = coordinates.wrap(np.asarray(x_coords, dtype=np.int64), size)
        yi = coordinates.wrap(np.asarray(y_coords, dtype=np.int64), size)
        return self._ring_nx[xi], self._ring_ny[xi], self._ring_nz[yi], self._ring_nw[yi]

    # ------------------------------------------------------------------
    # Elevation
    # ------------------------------------------------------------------
    @staticmethod
    def land_strength(continental: np.ndarray) -> np.ndarray:
        """
        How much terrain detail may perturb elevation, by continental band.
        Weak in deep ocean, dominant on continents.
        """
        c = np.asarray(continental, dtype=np.float64)
        conditions = []
        choices = []
        lower = -1.0
        for upper, weight in DEFAULTS.LAND_STRENGTH_BANDS:
            conditions.append((c > lower) & (c <= upper))
            choices.append(weight)
            lower = upper
        return np.select(conditions, choices, default=0.0)

    def get_elevation(self, points: tuple) -> np.ndarray:
        """
        Combines fractal terrain detail with a low-frequency continental
        shape. Returns elevation on the absolute [0, MAX_ELEVATION] scale,
        unclamped.
        """
        nx, ny, nz, nw = points
        cfg = self.config

        # 1. Fractal terrain, normalized to [-1, 1].
        terrain_sum = self.terrain_noise.fractal(
            nx, ny, nz, nw,
            frequency=cfg.terrain_scale,
            octaves=cfg.octave_count,
            persistence=DEFAULTS.TERRAIN_PERSISTENCE,
            lacunarity=DEFAULTS.TERRAIN_LACUNARITY,
        )
        terrain_norm = terrain_sum / self._terrain_amplitude

        # 2. Continental shape.
        continental = self.continental_noise.sample(nx, ny, nz, nw, frequency=cfg.continental_scale)

        # 3. Combine, weighting detail by land strength.
        normalized = (continental - DEFAULTS.SEA_BIAS) + terrain_norm * self.land_strength(continental)

        # 4. Rescale [-1, 1] -> [0, MAX_ELEVATION].
        return ((normalized + 1.0) / 2.0) * DEFAULTS.MAX_ELEVATION

    # ------------------------------------------------------------------
    # Climate
    # ------------------------------------------------------------------
    def get_temperature(self, points: tuple, y_coords: np.ndarray, elevation: np.ndarray) -> np.ndarray:
        """
        Temperature in Celsius: latitude gradient, plus non-linear cooling
        with altitude, plus bounded noise jitter. Not clamped.
        """
        nx, ny, nz, nw = points
        latitude = coordinates.latitude_factor(y_coords, self.config.world_size)

        latitude_temp_c = DEFAULTS.EQUATOR_TEMP_C - DEFAULTS.POLAR_TEMPERATURE_DROP_C * latitude

        h = np.clip(elevation / DEFAULTS.MAX_ELEVATION, 0.0, None)
        altitude_drop_c = np.power(h, DEFAULTS.ELEVATION_COOLING_EXPONENT) * DEFAULTS.ELEVATION_COOLING_C

        jitter_c = self.temperature_noise.sample(
            nx, ny, nz, nw, frequency=self.config.temperature_scale
        ) * DEFAULTS.TEMPERATURE_NOISE_AMPLITUDE_C

        return latitude_temp_c - altitude_drop_c + jitter_c

    def get_moisture(self, points: tuple, y_coords: np.ndarray, elevation: np.ndarray) -> np.ndarray:
        """
        Raw (pre-advection) moisture in [0, 1]: noise, plus a wet equatorial
        band and a dry subtropical band, minus drying with altitude.
        """
        nx, ny, nz, nw = points
        latitude = coordinates.latitude_factor(y_coords, self.config.world_size)

        base = (self.moisture_noise.sample(nx, ny, nz, nw, frequency=self.config.moisture_scale) + 1.0) / 2.0

        equator_wet = np.exp(-DEFAULTS.EQUATOR_WET_FALLOFF * latitude)
        subtropical_dry = np.exp(
            -((latitude - DEFAULTS.SUBTROPICAL_DRY_LATITUDE) ** 2) / DEFAULTS.SUBTROPICAL_DRY_WIDTH
        )
        latitude_term = equator_wet - DEFAULTS.SUBTROPICAL_DRY_STRENGTH * subtropical_dry

        elevation_term = -(elevation / DEFAULTS.MAX_ELEVATION) * DEFAULTS.ELEVATION_DRYING

        return np.clip(base + latitude_term + elevation_term, 0.0, 1.0)

    def get_primary_fields(self, x_coords: np.ndarray, y_coords: np.ndarray) -> tuple:
        """
        Computes (elevation, temperature, raw moisture) for integer grid
        coordinates. Every cell is independent of every other cell.
        """
        points = self.get_torus_points(x_coords, y_coords)
        y_wrapped = coordinates.wrap(np.asarray(y_coords, dtype=np.int64), self.config.world_size)

        elevation = self.get_elevation(points)
        temperature = self.get_temperature(points, y_wrapped, elevation)
        moisture = self.get_moisture(points, y_wrapped, elevation)

        return (
            elevation.astype(np.float32),
            temperature.astype(np.float32),
            moisture.astype(np.float32),
        )

    # ------------------------------------------------------------------
    # Moisture advection & classification
    # ------------------------------------------------------------------
    @staticmethod
    def apply_moisture_advection(elevation: np.ndarray, moisture: np.ndarray) -> np.ndarray:
        """
        Single rain-shadow pass. Wind blows from +x to -x: each cell takes its
        upwind (x + 1) neighbor's moisture, minus a loss proportional to how
        far the air has to climb to reach it. Rows wrap, so the last column's
        upwind neighbor is column 0. Every cell reads the pre-pass moisture,
        so rows are independent and the result does not depend on order.
        """
        elevation = np.asarray(elevation, dtype=np.float32)
        moisture = np.asarray(moisture, dtype=np.float32)

        upwind_elevation = np.roll(elevation, -1, axis=-1)
        upwind_moisture = np.roll(moisture, -1, axis=-1)

        height_diff = (elevation - upwind_elevation) / np.float32(DEFAULTS.MAX_ELEVATION)
        climbed = upwind_moisture - height_diff * np.float32(DEFAULTS.RAIN_LOSS)
        advected = np.where(height_diff > 0, climbed, upwind_moisture)

        return np.clip(advected, 0.0, 1.0).astype(np.float32)

    @staticmethod
    def calculate_biomes(elevation: np.ndarray, temperature: np.ndarray, moisture: np.ndarray) -> np.ndarray:
        return calculate_biome_map(temperature, moisture, elevation, DEFAULTS.MAX_ELEVATION)

    def finalize_grid(self, elevation: np.ndarray, temperature: np.ndarray, raw_moisture: np.ndarray) -> Grid:
        """Runs advection and classification over complete world rows."""
        moisture = self.apply_moisture_advection(elevation, raw_moisture)
        biome = self.calculate_biomes(elevation, temperature, moisture)
        return Grid(elevation, temperature, moisture, biome)

    # ------------------------------------------------------------------
    # Whole-world and chunk generation (single process)
    # ------------------------------------------------------------------
    def get_chunk_bounds(self, chunk_x: int, chunk_y: int) -> tuple:
        """Returns (start_x, start_y) of a chunk, validating its coordinates."""
        per_side = self.config.chunks_per_side
        if not (0 <= chunk_x < per_side and 0 <= chunk_y < per_side):
            raise ValueError(
                f"Chunk ({chunk_x}, {chunk_y}) is outside the {per_side}x{per_side} chunk world."
            )
        size = self.config.chunk_size
        return chunk_x * size, chunk_y * size

    def generate_chunk(self, chunk_x: int, chunk_y: int) -> ChunkBuffer:
        """
        Generates one chunk using the "overlap-and-crop" method: the halo
        columns to the chunk's right are computed directly from the noise,
        like any other cell, so the chunk needs nothing from its neighbors
        and matches a whole-world generation exactly.
        """
        start_x, start_y = self.get_chunk_bounds(chunk_x, chunk_y)
        size = self.config.chunk_size
        halo = self.config.halo
        self.logger.debug(f"Generating chunk ({chunk_x}, {chunk_y}) with halo {halo}.")

        x_grid, y_grid = coordinates.get_coordinate_grid(
            start_x, start_y, size + halo, size, self.config.world_size
        )
        elevation, temperature, raw_moisture = self.get_primary_fields(x_grid, y_grid)

        # The roll inside the pass wraps the last halo column onto column 0;
        # only the visible columns are kept from the advected result.
        moisture = raw_moisture.copy()
        moisture[:, :size] = self.apply_moisture_advection(elevation, raw_moisture)[:, :size]
        biome = self.calculate_biomes(elevation, temperature, moisture)

        return ChunkBuffer(
            chunk_x=chunk_x,
            chunk_y=chunk_y,
            chunk_size=size,
            halo=halo,
            elevation=elevation,
            temperature=temperature,
            moisture=moisture,
            biome=biome,
        )

    def generate_chunk_primary(self, chunk_x: int, chunk_y: int) -> tuple:
        """
        Primary fields for a chunk's visible cells only, plus the slices
        where they belong in a world-sized array.
        """
        start_x, start_y = self.get_chunk_bounds(chunk_x, chunk_y)
        size = self.config.chunk_size
        x_grid, y_grid = coordinates.get_coordinate_grid(start_x, start_y, size, size, self.config.world_size)
        rows = slice(start_y, start_y + size)
        cols = slice(start_x, start_x + size)
        return rows, cols, self.get_primary_fields(x_grid, y_grid)
