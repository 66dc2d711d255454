# torus_climate/generation_config.py

"""
================================================================================
WORLD GENERATION CONFIGURATION
================================================================================
This module defines the immutable configuration value that drives one
generation request, along with the two ways of building it:

- from_dict: merges a parameter dictionary (e.g. loaded from JSON) over the
  internal defaults. Invalid values are programming errors and fail fast.
- parse_config_fields: parses raw, user-entered text fields. Bad input never
  raises here; it is replaced by a documented default (or, for the seed, a
  freshly drawn random seed) and a warning is logged.

Data Contract:
---------------
- Inputs: a dictionary of overrides, or a dictionary of strings.
- Outputs: a validated, frozen WorldGenerationConfig.
- Side Effects: Logs substitutions using the provided logger.
- Invariants: Two equal configs always produce bit-identical worlds.
================================================================================
"""

import logging
import math
from dataclasses import dataclass, asdict, fields

import numpy as np

from . import config as DEFAULTS


@dataclass(frozen=True)
class WorldGenerationConfig:
    """All parameters of a single world generation request."""
    seed: int = DEFAULTS.DEFAULT_SEED
    terrain_scale: float = DEFAULTS.DEFAULT_TERRAIN_SCALE
    continental_scale: float = DEFAULTS.DEFAULT_CONTINENTAL_SCALE
    octave_count: int = DEFAULTS.DEFAULT_OCTAVE_COUNT
    sea_threshold: float = DEFAULTS.DEFAULT_SEA_THRESHOLD
    temperature_scale: float = DEFAULTS.DEFAULT_TEMPERATURE_SCALE
    moisture_scale: float = DEFAULTS.DEFAULT_MOISTURE_SCALE
    scaling_factor: float = DEFAULTS.DEFAULT_SCALING_FACTOR
    world_size: int = DEFAULTS.DEFAULT_WORLD_SIZE
    chunk_size: int = DEFAULTS.DEFAULT_CHUNK_SIZE
    halo: int = DEFAULTS.DEFAULT_HALO

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raises ValueError if any generation precondition is violated."""
        if not 0 <= self.seed <= DEFAULTS.MAX_SEED:
            raise ValueError(f"seed must be an unsigned 32-bit integer, got {self.seed}")
        for name in _POSITIVE_FLOAT_FIELDS:
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise ValueError(f"{name} must be a positive finite number, got {value}")
        if self.octave_count < 1:
            raise ValueError(f"octave_count must be at least 1, got {self.octave_count}")
        if not 0.0 <= self.sea_threshold <= 1.0:
            raise ValueError(f"sea_threshold must be within [0, 1], got {self.sea_threshold}")
        if self.world_size <= 0 or self.chunk_size <= 0:
            raise ValueError(
                f"world_size and chunk_size must be positive, got {self.world_size} and {self.chunk_size}"
            )
        if self.world_size % self.chunk_size != 0:
            raise ValueError(
                f"chunk_size ({self.chunk_size}) must evenly divide world_size ({self.world_size})"
            )
        if self.halo < 1:
            raise ValueError(f"halo must be at least 1, got {self.halo}")

    @property
    def chunks_per_side(self) -> int:
        return self.world_size // self.chunk_size

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, params: dict, logger: logging.Logger = None) -> "WorldGenerationConfig":
        """
        Builds a config from a parameter dictionary, filling missing keys
        from the internal defaults. Unknown keys are ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown and logger is not None:
            logger.warning(f"Ignoring unknown world generation parameters: {', '.join(unknown)}")

        defaults = cls.defaults()
        merged = {name: params.get(name, defaults[name]) for name in known}
        # Coerce JSON numbers to the declared types so equal configs compare equal.
        for name in _INT_FIELDS:
            merged[name] = int(merged[name])
        for name in _FLOAT_FIELDS:
            merged[name] = float(merged[name])
        return cls(**merged)

    @staticmethod
    def defaults() -> dict:
        return {
            'seed': DEFAULTS.DEFAULT_SEED,
            'terrain_scale': DEFAULTS.DEFAULT_TERRAIN_SCALE,
            'continental_scale': DEFAULTS.DEFAULT_CONTINENTAL_SCALE,
            'octave_count': DEFAULTS.DEFAULT_OCTAVE_COUNT,
            'sea_threshold': DEFAULTS.DEFAULT_SEA_THRESHOLD,
            'temperature_scale': DEFAULTS.DEFAULT_TEMPERATURE_SCALE,
            'moisture_scale': DEFAULTS.DEFAULT_MOISTURE_SCALE,
            'scaling_factor': DEFAULTS.DEFAULT_SCALING_FACTOR,
            'world_size': DEFAULTS.DEFAULT_WORLD_SIZE,
            'chunk_size': DEFAULTS.DEFAULT_CHUNK_SIZE,
            'halo': DEFAULTS.DEFAULT_HALO,
        }


_INT_FIELDS = ('seed', 'octave_count', 'world_size', 'chunk_size', 'halo')
_FLOAT_FIELDS = (
    'terrain_scale', 'continental_scale', 'sea_threshold',
    'temperature_scale', 'moisture_scale', 'scaling_factor',
)
_POSITIVE_FLOAT_FIELDS = (
    'terrain_scale', 'continental_scale', 'temperature_scale',
    'moisture_scale', 'scaling_factor',
)


def draw_random_seed(rng: np.random.Generator = None) -> int:
    """Draws a fresh unsigned 32-bit seed."""
    rng = rng if rng is not None else np.random.default_rng()
    return int(rng.integers(0, DEFAULTS.MAX_SEED, endpoint=True))


def _parse_int(text):
    try:
        return int(str(text).strip())
    except ValueError:
        return None


def _parse_float(text):
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_config_fields(fields_text: dict, logger: logging.Logger, rng: np.random.Generator = None) -> WorldGenerationConfig:
    """
    Parses user-entered text fields into a config, substituting fallbacks.

    Args:
        fields_text (dict): Field name -> raw string. Missing fields use defaults.
        logger (logging.Logger): Receives a warning for every substitution.
        rng (np.random.Generator, optional): Source for a replacement seed.

    Returns:
        WorldGenerationConfig: Always valid.
    """
    defaults = WorldGenerationConfig.defaults()
    values = dict(defaults)

    # 1. Seed: a bad seed is replaced by a random one, not the default.
    if 'seed' in fields_text:
        seed = _parse_int(fields_text['seed'])
        if seed is None or not 0 <= seed <= DEFAULTS.MAX_SEED:
            seed = draw_random_seed(rng)
            logger.warning(f"Invalid seed '{fields_text['seed']}', using random seed {seed}.")
        values['seed'] = seed

    # 2. Positive scales.
    for name in _POSITIVE_FLOAT_FIELDS:
        if name not in fields_text:
            continue
        value = _parse_float(fields_text[name])
        if value is None or value <= 0:
            logger.warning(f"Invalid {name} '{fields_text[name]}', using default {defaults[name]}.")
            value = defaults[name]
        values[name] = value

    # 3. Sea threshold is a fraction.
    if 'sea_threshold' in fields_text:
        value = _parse_float(fields_text['sea_threshold'])
        if value is None or not 0.0 <= value <= 1.0:
            logger.warning(
                f"Invalid sea_threshold '{fields_text['sea_threshold']}', "
                f"using default {defaults['sea_threshold']}."
            )
            value = defaults['sea_threshold']
        values['sea_threshold'] = value

    # 4. Integer counts with lower bounds.
    for name, minimum in (('octave_count', 1), ('world_size', 1), ('halo', 1)):
        if name not in fields_text:
            continue
        value = _parse_int(fields_text[name])
        if value is None or value < minimum:
            logger.warning(f"Invalid {name} '{fields_text[name]}', using default {defaults[name]}.")
            value = defaults[name]
        values[name] = value

    # 5. Chunk size must divide the (already resolved) world size.
    chunk_size = values['chunk_size']
    if 'chunk_size' in fields_text:
        parsed = _parse_int(fields_text['chunk_size'])
        if parsed is None or parsed < 1:
            logger.warning(f"Invalid chunk_size '{fields_text['chunk_size']}', using default {defaults['chunk_size']}.")
        else:
            chunk_size = parsed
    if values['world_size'] % chunk_size != 0:
        logger.warning(
            f"chunk_size {chunk_size} does not divide world_size {values['world_size']}, "
            f"using a single chunk."
        )
        chunk_size = values['world_size']
    values['chunk_size'] = chunk_size

    return WorldGenerationConfig(**values)
