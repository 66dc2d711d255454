# torus_climate/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides 4D gradient (Perlin) noise, both as pure JIT-compiled
kernels and as a small seeded NoiseField value that wraps them.

4D is required because the world is a torus: every grid cell is embedded as a
point in 4D space (see coordinates.py), and a continuous 4D field sampled on
that embedding has no seams.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array of length 512).
    - offset: A 4-vector added to every scaled coordinate (all zeros for a
      field centred on the origin).
    - x, y, z, w: 1D float64 NumPy arrays of coordinates.
    - octaves, persistence, lacunarity: Standard fractal noise parameters.
- Outputs:
    - A NumPy array of noise values. A single octave is in [-1, 1].
- Side Effects: None.
- Invariants: The output depends only on p, the offset and the coordinates, so a
  NoiseField can be copied to any number of workers and evaluated in any
  order with identical results.
================================================================================
"""

import numpy as np
from numba import njit

# The 32 edge midpoints of the 4D hypercube: three components of +/-1, one 0.
_GRADIENT_VECTORS_4D = np.array([
    [0, 1, 1, 1], [0, 1, 1, -1], [0, 1, -1, 1], [0, 1, -1, -1],
    [0, -1, 1, 1], [0, -1, 1, -1], [0, -1, -1, 1], [0, -1, -1, -1],
    [1, 0, 1, 1], [1, 0, 1, -1], [1, 0, -1, 1], [1, 0, -1, -1],
    [-1, 0, 1, 1], [-1, 0, 1, -1], [-1, 0, -1, 1], [-1, 0, -1, -1],
    [1, 1, 0, 1], [1, 1, 0, -1], [1, -1, 0, 1], [1, -1, 0, -1],
    [-1, 1, 0, 1], [-1, 1, 0, -1], [-1, -1, 0, 1], [-1, -1, 0, -1],
    [1, 1, 1, 0], [1, 1, -1, 0], [1, -1, 1, 0], [1, -1, -1, 0],
    [-1, 1, 1, 0], [-1, 1, -1, 0], [-1, -1, 1, 0], [-1, -1, -1, 0],
], dtype=np.float64)

# Raw 4D output is bounded by |g| * sqrt(4) / 2 = sqrt(3).
_OUTPUT_NORMALIZATION = 1.0 / np.sqrt(3.0)

PERMUTATION_SIZE = 256


def make_noise_tables(seed: int) -> tuple:
    """
    Builds the doubled (length 512) permutation table for a seed, plus a
    fractional 4D domain offset drawn from the same generator.
    """
    p = np.arange(PERMUTATION_SIZE, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    offset = rng.uniform(0.0, PERMUTATION_SIZE, 4)
    return np.stack([p, p]).flatten(), offset


def make_permutation_table(seed: int) -> np.ndarray:
    return make_noise_tables(seed)[0]


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _corner(p, xi, yi, zi, wi, xf, yf, zf, wf):
    """Dot product of a lattice corner's gradient with the offset to it."""
    h = p[p[p[p[xi] + yi] + zi] + wi]
    g = _GRADIENT_VECTORS_4D[h % 32]
    return g[0] * xf + g[1] * yf + g[2] * zf + g[3] * wf


@njit
def _perlin_point_4d(p, x, y, z, w):
    xf0 = np.floor(x)
    yf0 = np.floor(y)
    zf0 = np.floor(z)
    wf0 = np.floor(w)

    xf = x - xf0
    yf = y - yf0
    zf = z - zf0
    wf = w - wf0

    x0 = int(xf0) % 256
    y0 = int(yf0) % 256
    z0 = int(zf0) % 256
    w0 = int(wf0) % 256
    x1 = (x0 + 1) % 256
    y1 = (y0 + 1) % 256
    z1 = (z0 + 1) % 256
    w1 = (w0 + 1) % 256

    u = _fade(xf)
    v = _fade(yf)
    s = _fade(zf)
    t = _fade(wf)

    # Interpolate along x, then y, then z, then w.
    a00 = _lerp(_corner(p, x0, y0, z0, w0, xf, yf, zf, wf), _corner(p, x1, y0, z0, w0, xf - 1, yf, zf, wf), u)
    a10 = _lerp(_corner(p, x0, y1, z0, w0, xf, yf - 1, zf, wf), _corner(p, x1, y1, z0, w0, xf - 1, yf - 1, zf, wf), u)
    a01 = _lerp(_corner(p, x0, y0, z1, w0, xf, yf, zf - 1, wf), _corner(p, x1, y0, z1, w0, xf - 1, yf, zf - 1, wf), u)
    a11 = _lerp(_corner(p, x0, y1, z1, w0, xf, yf - 1, zf - 1, wf), _corner(p, x1, y1, z1, w0, xf - 1, yf - 1, zf - 1, wf), u)
    b00 = _lerp(_corner(p, x0, y0, z0, w1, xf, yf, zf, wf - 1), _corner(p, x1, y0, z0, w1, xf - 1, yf, zf, wf - 1), u)
    b10 = _lerp(_corner(p, x0, y1, z0, w1, xf, yf - 1, zf, wf - 1), _corner(p, x1, y1, z0, w1, xf - 1, yf - 1, zf, wf - 1), u)
    b01 = _lerp(_corner(p, x0, y0, z1, w1, xf, yf, zf - 1, wf - 1), _corner(p, x1, y0, z1, w1, xf - 1, yf, zf - 1, wf - 1), u)
    b11 = _lerp(_corner(p, x0, y1, z1, w1, xf, yf - 1, zf - 1, wf - 1), _corner(p, x1, y1, z1, w1, xf - 1, yf - 1, zf - 1, wf - 1), u)

    a0 = _lerp(a00, a10, v)
    a1 = _lerp(a01, a11, v)
    b0 = _lerp(b00, b10, v)
    b1 = _lerp(b01, b11, v)

    value = _lerp(_lerp(a0, a1, s), _lerp(b0, b1, s), t) * _OUTPUT_NORMALIZATION
    return min(1.0, max(-1.0, value))


@njit
def perlin_noise_4d(p, offset, x, y, z, w, frequency=1.0, octaves=1, persistence=0.5, lacunarity=2.0):
    """
    Generate fractal 4D Perlin noise using a pre-computed permutation table.
    Octave k is sampled at (x, y, z, w) * frequency * lacunarity**k + offset
    with amplitude persistence**k. The sum is returned un-normalized, so callers that want
    [-1, 1] must divide by the total amplitude (see total_amplitude).
    This function is JIT-compiled with Numba for maximum performance.
    """
    n = x.shape[0]
    total_noise = np.zeros(n)

    for i in range(n):
        noise_val = 0.0
        amplitude = 1.0
        freq = frequency

        for _ in range(octaves):
            noise_val += _perlin_point_4d(
                p,
                x[i] * freq + offset[0],
                y[i] * freq + offset[1],
                z[i] * freq + offset[2],
                w[i] * freq + offset[3],
            ) * amplitude
            amplitude *= persistence
            freq *= lacunarity

        total_noise[i] = noise_val

    return total_noise


def total_amplitude(octaves: int, persistence: float = 0.5) -> float:
    """Sum of the amplitudes of all octaves, i.e. the largest possible |sum|."""
    total = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        total += amplitude
        amplitude *= persistence
    return total


class NoiseField:
    """
    A deterministic, read-only 4D noise field instantiated from a seed.
    Instances are cheap to copy and pickle, so each worker can own one.

    Gradient noise is zero on every lattice vertex, the origin included. A
    field sampled at low frequency around the origin therefore stays near
    zero; offset_domain=True moves its domain to a seeded, fractional
    position instead.
    """
    def __init__(self, seed: int, offset_domain: bool = False):
        self.seed = seed
        self.offset_domain = offset_domain
        self.permutation_table, offset = make_noise_tables(seed)
        self.domain_offset = offset if offset_domain else np.zeros(4)

    def __repr__(self):
        return f"NoiseField(seed={self.seed}, offset_domain={self.offset_domain})"

    def sample(self, x, y, z, w, frequency: float = 1.0) -> np.ndarray:
        """Single-octave noise in [-1, 1] at (x, y, z, w) * frequency + domain_offset."""
        return self.fractal(x, y, z, w, frequency=frequency, octaves=1)

    def fractal(self, x, y, z, w, frequency: float = 1.0, octaves: int = 1,
                persistence: float = 0.5, lacunarity: float = 2.0) -> np.ndarray:
        """Un-normalized octave sum. Accepts arrays of any (common) shape."""
        x = np.asarray(x, dtype=np.float64)
        shape = x.shape
        flat = [np.ascontiguousarray(np.asarray(c, dtype=np.float64).ravel()) for c in (x, y, z, w)]
        values = perlin_noise_4d(
            self.permutation_table, self.domain_offset, flat[0], flat[1], flat[2], flat[3],
            frequency, octaves, persistence, lacunarity
        )
        return values.reshape(shape)
