"""Tests for the 4D noise field."""

import numpy as np
import pytest

from torus_climate.noise import NoiseField, make_permutation_table, total_amplitude


@pytest.fixture
def random_points():
    rng = np.random.default_rng(7)
    return tuple(rng.uniform(-50.0, 50.0, 2000) for _ in range(4))


class TestPermutationTable:

    def test_doubled_permutation(self):
        p = make_permutation_table(3)
        assert p.shape == (512,)
        np.testing.assert_array_equal(p[:256], p[256:])
        np.testing.assert_array_equal(np.sort(p[:256]), np.arange(256))

    def test_seeded(self):
        np.testing.assert_array_equal(make_permutation_table(3), make_permutation_table(3))
        assert not np.array_equal(make_permutation_table(3), make_permutation_table(4))


class TestNoiseField:

    def test_deterministic(self, random_points):
        a = NoiseField(11).sample(*random_points)
        b = NoiseField(11).sample(*random_points)
        np.testing.assert_array_equal(a, b)

    def test_seed_changes_output(self, random_points):
        a = NoiseField(11).sample(*random_points)
        b = NoiseField(12).sample(*random_points)
        assert not np.array_equal(a, b)

    def test_range(self, random_points):
        values = NoiseField(5).sample(*random_points)
        assert values.min() >= -1.0
        assert values.max() <= 1.0
        # Non-degenerate: the field actually varies.
        assert values.std() > 0.01

    def test_zero_on_lattice_points(self):
        lattice = np.array([0.0, 1.0, -3.0, 17.0])
        values = NoiseField(9).sample(lattice, lattice, -lattice, lattice + 2)
        np.testing.assert_array_equal(values, 0.0)

    def test_domain_offset_is_seeded_and_fractional(self):
        field = NoiseField(9, offset_domain=True)
        np.testing.assert_array_equal(field.domain_offset, NoiseField(9, offset_domain=True).domain_offset)
        assert not np.array_equal(field.domain_offset, NoiseField(10, offset_domain=True).domain_offset)
        assert np.all(field.domain_offset % 1.0 != 0.0)
        np.testing.assert_array_equal(NoiseField(9).domain_offset, 0.0)

    def test_offset_domain_leaves_the_origin_vertex(self):
        origin = np.zeros(1)
        centred = [NoiseField(seed).sample(origin, origin, origin, origin)[0] for seed in range(50)]
        shifted = [NoiseField(seed, offset_domain=True).sample(origin, origin, origin, origin)[0] for seed in range(50)]
        assert centred == [0.0] * 50
        assert max(abs(v) for v in shifted) > 0.05
        assert len(set(shifted)) == 50

    def test_offset_domain_keeps_shape_of_field(self, random_points):
        field = NoiseField(5, offset_domain=True)
        x, y, z, w = random_points
        ox, oy, oz, ow = field.domain_offset
        np.testing.assert_allclose(field.sample(x, y, z, w), NoiseField(5).sample(x + ox, y + oy, z + oz, w + ow))

    def test_continuity(self, random_points):
        field = NoiseField(5)
        x, y, z, w = random_points
        base = field.sample(x, y, z, w)
        nudged = field.sample(x + 1e-6, y, z, w - 1e-6)
        assert np.max(np.abs(base - nudged)) < 1e-4

    def test_frequency_scales_coordinates(self, random_points):
        field = NoiseField(5)
        x, y, z, w = random_points
        np.testing.assert_allclose(field.sample(x, y, z, w, frequency=0.5),
                                   field.sample(x * 0.5, y * 0.5, z * 0.5, w * 0.5))

    def test_single_octave_fractal_matches_sample(self, random_points):
        field = NoiseField(5)
        np.testing.assert_array_equal(field.fractal(*random_points, octaves=1), field.sample(*random_points))

    def test_fractal_is_bounded_by_total_amplitude(self, random_points):
        values = NoiseField(5).fractal(*random_points, octaves=4)
        assert np.all(np.abs(values) <= total_amplitude(4))

    def test_preserves_shape(self):
        grid = np.linspace(0.0, 3.0, 12).reshape(3, 4)
        assert NoiseField(1).sample(grid, grid, grid, grid).shape == (3, 4)

    def test_picklable(self, random_points):
        import pickle
        field = NoiseField(21)
        clone = pickle.loads(pickle.dumps(field))
        np.testing.assert_array_equal(field.sample(*random_points), clone.sample(*random_points))


def test_total_amplitude():
    assert total_amplitude(1) == 1.0
    assert total_amplitude(4) == 1.875
