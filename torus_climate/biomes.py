# torus_climate/biomes.py

"""
================================================================================
BIOME CLASSIFICATION
================================================================================
Maps a cell's (temperature, moisture, elevation) to exactly one Biome, using
a simplified Whittaker-style decision table. Two equivalent forms are
provided:

- classify_biome: scalar, for single lookups and for readability.
- calculate_biome_map: vectorized with np.select over whole arrays. It must
  agree with classify_biome cell for cell.

The module also holds the closed lookup tables a renderer needs (labels and
colors). It has no dependency on any rendering library.
================================================================================
"""

from enum import IntEnum

import numpy as np

from . import config as DEFAULTS


class Biome(IntEnum):
    OCEAN = 0
    ICE = 1
    SNOW = 2
    ALPINE = 3
    TUNDRA = 4
    BOREAL_FOREST = 5
    TAIGA = 6
    COLD_DESERT = 7
    GRASSLAND = 8
    TEMPERATE_FOREST = 9
    TEMPERATE_RAINFOREST = 10
    HOT_DESERT = 11
    SAVANNA = 12
    SUBTROPICAL_FOREST = 13
    TROPICAL_RAINFOREST = 14


BIOME_COLORS = {
    Biome.OCEAN: (0, 0, 128),
    Biome.ICE: (173, 217, 230),
    Biome.SNOW: (242, 242, 255),
    Biome.ALPINE: (179, 179, 179),
    Biome.TUNDRA: (204, 179, 153),
    Biome.BOREAL_FOREST: (51, 102, 51),
    Biome.TAIGA: (77, 128, 77),
    Biome.COLD_DESERT: (204, 179, 128),
    Biome.GRASSLAND: (51, 204, 51),
    Biome.TEMPERATE_FOREST: (38, 153, 38),
    Biome.TEMPERATE_RAINFOREST: (26, 179, 51),
    Biome.HOT_DESERT: (255, 217, 77),
    Biome.SAVANNA: (204, 204, 51),
    Biome.SUBTROPICAL_FOREST: (51, 179, 77),
    Biome.TROPICAL_RAINFOREST: (0, 153, 26),
}


def biome_label(biome: Biome) -> str:
    """Human-readable name, e.g. 'Temperate Rainforest'."""
    return Biome(biome).name.replace('_', ' ').title()


def create_biome_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the Biome value and the value is the RGB color."""
    return np.array([BIOME_COLORS[b] for b in Biome], dtype=np.uint8)


def classify_biome(temperature: float, moisture: float, elevation: float,
                   max_elevation: float = DEFAULTS.MAX_ELEVATION,
                   thresholds: dict = None) -> Biome:
    """
    Classifies one cell. Total over all inputs: the last band catches
    everything, including NaN temperatures.
    """
    t = thresholds or DEFAULTS.BIOME_THRESHOLDS

    if elevation < max_elevation * DEFAULTS.SEA_LEVEL:
        return Biome.OCEAN
    if temperature < t["ice_max_temp"]:
        return Biome.ICE
    if elevation > t["snow_min_elevation"] * max_elevation and temperature <= t["snow_max_temp"]:
        return Biome.SNOW
    if elevation > t["alpine_min_elevation"] * max_elevation and temperature <= t["alpine_max_temp"]:
        return Biome.ALPINE

    if temperature < t["polar_max_temp"]:
        return Biome.TUNDRA if moisture < t["polar_dry_max_moisture"] else Biome.BOREAL_FOREST

    if temperature < t["boreal_max_temp"]:
        return Biome.TUNDRA if moisture < t["boreal_dry_max_moisture"] else Biome.TAIGA

    if temperature < t["temperate_max_temp"]:
        if moisture < t["temperate_desert_max_moisture"]:
            return Biome.COLD_DESERT
        if moisture < t["temperate_grassland_max_moisture"]:
            return Biome.GRASSLAND
        if moisture < t["temperate_forest_max_moisture"]:
            return Biome.TEMPERATE_FOREST
        return Biome.TEMPERATE_RAINFOREST

    if temperature < t["subtropical_max_temp"]:
        if moisture < t["subtropical_desert_max_moisture"]:
            return Biome.HOT_DESERT
        if moisture < t["subtropical_savanna_max_moisture"]:
            return Biome.SAVANNA
        return Biome.SUBTROPICAL_FOREST

    if moisture < t["tropical_desert_max_moisture"]:
        return Biome.HOT_DESERT
    if moisture < t["tropical_savanna_max_moisture"]:
        return Biome.SAVANNA
    return Biome.TROPICAL_RAINFOREST


def calculate_biome_map(temperature_values: np.ndarray, moisture_values: np.ndarray,
                        elevation_values: np.ndarray,
                        max_elevation: float = DEFAULTS.MAX_ELEVATION,
                        thresholds: dict = None) -> np.ndarray:
    """
    Performs the biome classification over whole arrays and returns a uint8
    array of Biome values. np.select takes the first matching condition, so
    the condition list mirrors the order of classify_biome.
    """
    t = thresholds or DEFAULTS.BIOME_THRESHOLDS
    # Compare in float64 so float32 layers classify exactly as classify_biome does.
    temp = np.asarray(temperature_values, dtype=np.float64)
    moist = np.asarray(moisture_values, dtype=np.float64)
    elev = np.asarray(elevation_values, dtype=np.float64)

    # --- 1. Overrides ---
    ocean = elev < max_elevation * DEFAULTS.SEA_LEVEL
    ice = temp < t["ice_max_temp"]
    snow = (elev > t["snow_min_elevation"] * max_elevation) & (temp <= t["snow_max_temp"])
    alpine = (elev > t["alpine_min_elevation"] * max_elevation) & (temp <= t["alpine_max_temp"])

    # --- 2. Temperature bands ---
    polar = temp < t["polar_max_temp"]
    boreal = temp < t["boreal_max_temp"]
    temperate = temp < t["temperate_max_temp"]
    subtropical = temp < t["subtropical_max_temp"]

    conditions = [
        ocean,
        ice,
        snow,
        alpine,
        polar & (moist < t["polar_dry_max_moisture"]),
        polar,
        boreal & (moist < t["boreal_dry_max_moisture"]),
        boreal,
        temperate & (moist < t["temperate_desert_max_moisture"]),
        temperate & (moist < t["temperate_grassland_max_moisture"]),
        temperate & (moist < t["temperate_forest_max_moisture"]),
        temperate,
        subtropical & (moist < t["subtropical_desert_max_moisture"]),
        subtropical & (moist < t["subtropical_savanna_max_moisture"]),
        subtropical,
        moist < t["tropical_desert_max_moisture"],
        moist < t["tropical_savanna_max_moisture"],
    ]
    choices = [
        Biome.OCEAN,
        Biome.ICE,
        Biome.SNOW,
        Biome.ALPINE,
        Biome.TUNDRA,
        Biome.BOREAL_FOREST,
        Biome.TUNDRA,
        Biome.TAIGA,
        Biome.COLD_DESERT,
        Biome.GRASSLAND,
        Biome.TEMPERATE_FOREST,
        Biome.TEMPERATE_RAINFOREST,
        Biome.HOT_DESERT,
        Biome.SAVANNA,
        Biome.SUBTROPICAL_FOREST,
        Biome.HOT_DESERT,
        Biome.SAVANNA,
    ]
    biome_map = np.select(conditions, [int(c) for c in choices], default=int(Biome.TROPICAL_RAINFOREST))
    return biome_map.astype(np.uint8)
