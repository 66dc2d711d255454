"""Tests for WorldGenerationConfig and the forgiving text-field parser."""

import logging

import numpy as np
import pytest

from torus_climate.generation_config import WorldGenerationConfig, draw_random_seed, parse_config_fields


class TestWorldGenerationConfig:

    def test_defaults(self):
        config = WorldGenerationConfig()
        assert config.seed == 42
        assert config.terrain_scale == 0.005
        assert config.continental_scale == 0.0005
        assert config.octave_count == 4
        assert config.sea_threshold == 0.48
        assert config.temperature_scale == 0.0005
        assert config.moisture_scale == 0.0008
        assert config.scaling_factor == 100.0
        assert (config.world_size, config.chunk_size, config.halo) == (4096, 256, 1)
        assert config.chunks_per_side == 16

    @pytest.mark.parametrize("overrides", [
        {'seed': -1},
        {'seed': 2 ** 32},
        {'terrain_scale': 0.0},
        {'moisture_scale': -0.1},
        {'scaling_factor': float('nan')},
        {'octave_count': 0},
        {'sea_threshold': 1.5},
        {'world_size': 0},
        {'world_size': 100, 'chunk_size': 30},
        {'halo': 0},
    ])
    def test_rejects_invalid(self, overrides):
        with pytest.raises(ValueError):
            WorldGenerationConfig(**overrides)

    def test_is_frozen(self):
        config = WorldGenerationConfig()
        with pytest.raises(AttributeError):
            config.seed = 7

    def test_from_dict_merges_and_coerces(self, caplog):
        logger = logging.getLogger("config-test")
        with caplog.at_level(logging.WARNING):
            config = WorldGenerationConfig.from_dict(
                {'seed': 7.0, 'scaling_factor': 50, 'world_size': 64, 'chunk_size': 16, 'colour': 'blue'},
                logger,
            )
        assert config == WorldGenerationConfig(seed=7, scaling_factor=50.0, world_size=64, chunk_size=16)
        assert isinstance(config.seed, int)
        assert isinstance(config.scaling_factor, float)
        assert "colour" in caplog.text

    def test_round_trips_through_dict(self):
        config = WorldGenerationConfig(seed=9, world_size=64, chunk_size=32)
        assert WorldGenerationConfig(**config.to_dict()) == config


class TestParseConfigFields:

    @pytest.fixture
    def logger(self):
        return logging.getLogger("config-fields-test")

    def test_valid_fields(self, logger):
        config = parse_config_fields(
            {'seed': ' 1234 ', 'terrain_scale': '0.01', 'world_size': '64', 'chunk_size': '16'},
            logger,
        )
        assert config.seed == 1234
        assert config.terrain_scale == 0.01
        assert config.chunks_per_side == 4

    def test_invalid_seed_is_replaced_with_random_seed(self, logger, caplog):
        expected = draw_random_seed(np.random.default_rng(3))
        with caplog.at_level(logging.WARNING):
            config = parse_config_fields({'seed': 'abc'}, logger, rng=np.random.default_rng(3))
        assert config.seed == expected
        assert "Invalid seed" in caplog.text

    def test_out_of_range_seed(self, logger):
        config = parse_config_fields({'seed': '-5'}, logger, rng=np.random.default_rng(0))
        assert 0 <= config.seed <= 2 ** 32 - 1

    @pytest.mark.parametrize("name, text", [
        ('terrain_scale', 'fast'),
        ('continental_scale', '0'),
        ('temperature_scale', '-1'),
        ('moisture_scale', 'inf'),
        ('scaling_factor', ''),
        ('sea_threshold', '2'),
        ('octave_count', 'many'),
    ])
    def test_invalid_field_falls_back_to_default(self, logger, name, text):
        config = parse_config_fields({name: text}, logger)
        assert getattr(config, name) == WorldGenerationConfig.defaults()[name]

    def test_chunk_size_must_divide_world(self, logger, caplog):
        with caplog.at_level(logging.WARNING):
            config = parse_config_fields({'world_size': '100', 'chunk_size': '30'}, logger)
        assert config.chunk_size == 100
        assert config.chunks_per_side == 1
        assert "does not divide" in caplog.text

    def test_never_raises(self, logger):
        config = parse_config_fields({key: 'garbage' for key in WorldGenerationConfig.defaults()}, logger)
        assert isinstance(config, WorldGenerationConfig)
