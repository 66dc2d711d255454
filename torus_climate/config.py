# torus_climate/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the world
generator. These values are used if they are not explicitly provided by the
caller's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC WORLD.
Instead, pass a configuration dictionary to WorldGenerationConfig.from_dict.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 42
# Each noise field is seeded from the master seed plus a small fixed offset,
# so the four fields are independent but reproducible.
TERRAIN_SEED_OFFSET = 0
CONTINENTAL_SEED_OFFSET = 1
TEMPERATURE_SEED_OFFSET = 2
MOISTURE_SEED_OFFSET = 3
# Seeds are unsigned 32-bit integers.
MAX_SEED = 2**32 - 1

# --- Feature Scales (spatial frequencies on the torus) ---
# A smaller number means a larger feature.
DEFAULT_TERRAIN_SCALE = 0.005
DEFAULT_CONTINENTAL_SCALE = 0.0005
DEFAULT_TEMPERATURE_SCALE = 0.0005
DEFAULT_MOISTURE_SCALE = 0.0008
DEFAULT_OCTAVE_COUNT = 4
# Each terrain octave doubles the frequency and halves the amplitude.
TERRAIN_PERSISTENCE = 0.5
TERRAIN_LACUNARITY = 2.0

# Radius of the 4D torus embedding. Larger values "zoom out" the noise.
DEFAULT_SCALING_FACTOR = 100.0

# Informational only. The ocean decision uses SEA_LEVEL below.
DEFAULT_SEA_THRESHOLD = 0.48

# --- World Layout ---
DEFAULT_WORLD_SIZE = 4096  # Cells along each side of the (square) torus.
DEFAULT_CHUNK_SIZE = 256   # Must divide DEFAULT_WORLD_SIZE evenly.
DEFAULT_HALO = 1           # Extra columns computed to the right of a chunk.

# --- Elevation ---
MAX_ELEVATION = 100.0
# Shifts the land/sea balance toward more ocean.
SEA_BIAS = 0.075
# Fraction of MAX_ELEVATION below which a cell is ocean.
SEA_LEVEL = 0.48

# Land strength by continental noise band, as (upper bound, weight) pairs.
# Bands are half-open on the left: (previous bound, upper bound].
# A continental value of exactly -1.0, or anything outside [-1, 1], gets 0.0.
LAND_STRENGTH_BANDS = (
    (-0.5, 0.1),
    (0.0, 0.5),
    (0.5, 0.8),
    (1.0, 1.0),
)

# --- Temperature (degrees Celsius) ---
EQUATOR_TEMP_C = 30.0
# Total drop from the equator to the poles.
POLAR_TEMPERATURE_DROP_C = 40.0
# Drop at MAX_ELEVATION. Applied as (elevation / MAX_ELEVATION) ** exponent.
ELEVATION_COOLING_C = 15.0
ELEVATION_COOLING_EXPONENT = 1.5
TEMPERATURE_NOISE_AMPLITUDE_C = 5.0

# --- Moisture (normalized 0.0 to 1.0) ---
EQUATOR_WET_FALLOFF = 3.0
SUBTROPICAL_DRY_STRENGTH = 0.4
SUBTROPICAL_DRY_LATITUDE = 0.3
SUBTROPICAL_DRY_WIDTH = 0.02
ELEVATION_DRYING = 0.25

# --- Rain Shadow ---
# Moisture lost per unit of normalized climb from the upwind neighbor.
# Wind always blows from +x toward -x.
RAIN_LOSS = 0.4

# --- Biome Thresholds ---
BIOME_THRESHOLDS = {
    # Overrides, checked in order after the ocean test.
    "ice_max_temp": -10.0,
    "snow_min_elevation": 0.75,   # Fraction of MAX_ELEVATION.
    "snow_max_temp": 0.0,
    "alpine_min_elevation": 0.6,  # Fraction of MAX_ELEVATION.
    "alpine_max_temp": 2.0,

    # Temperature bands (upper bounds, exclusive).
    "polar_max_temp": -5.0,
    "boreal_max_temp": 5.0,
    "temperate_max_temp": 18.0,
    "subtropical_max_temp": 25.0,
    # tropical is anything at or above subtropical_max_temp

    # Moisture bands within each temperature band (upper bounds, exclusive).
    "polar_dry_max_moisture": 0.4,
    "boreal_dry_max_moisture": 0.3,
    "temperate_desert_max_moisture": 0.2,
    "temperate_grassland_max_moisture": 0.5,
    "temperate_forest_max_moisture": 0.75,
    "subtropical_desert_max_moisture": 0.2,
    "subtropical_savanna_max_moisture": 0.5,
    "tropical_desert_max_moisture": 0.2,
    "tropical_savanna_max_moisture": 0.45,
}
