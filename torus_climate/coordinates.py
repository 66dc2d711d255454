# torus_climate/coordinates.py

"""
================================================================================
TOROIDAL COORDINATE UTILITIES
================================================================================
This module maps integer grid positions on a wraparound world onto points of
a torus embedded in 4D space, and resolves any (possibly out-of-range) grid
coordinate to a cell index.

A 2D grid that wraps in both x and y is a torus. Sampling a continuous 4D
noise field along the embedding

    (cos(2*pi*x/W), sin(2*pi*x/W), cos(2*pi*y/W), sin(2*pi*y/W)) * r

gives values that match exactly at x = 0 and x = W (and likewise for y), so
the world has no seams and needs no blending.

Data Contract:
---------------
- Inputs: integer grid coordinates (scalars or NumPy arrays), world size,
  and the embedding radius (scaling factor).
- Outputs: NumPy arrays (or floats) of the same shape as the inputs.
- Side Effects: None.
================================================================================
"""

import numpy as np


def torus_point(x, y, world_size: int, scaling_factor: float):
    """
    Embeds grid position(s) (x, y) as a 4D torus point (nx, ny, nz, nw).
    Positions are wrapped first, so x and x + world_size map to the same
    point bit for bit.
    """
    theta_x = 2.0 * np.pi * wrap(np.asarray(x, dtype=np.float64), world_size) / world_size
    theta_y = 2.0 * np.pi * wrap(np.asarray(y, dtype=np.float64), world_size) / world_size
    return (
        np.cos(theta_x) * scaling_factor,
        np.sin(theta_x) * scaling_factor,
        np.cos(theta_y) * scaling_factor,
        np.sin(theta_y) * scaling_factor,
    )


def latitude_factor(y, world_size: int):
    """
    Normalized distance of grid row(s) y from the world's vertical center:
    0.0 at the equator, 1.0 at the poles. Uses the un-embedded row index.
    """
    half = world_size / 2.0
    return np.abs(np.asarray(y, dtype=np.float64) - half) / half


def wrap(value, size: int):
    """Non-negative modulo. Works for scalars and integer arrays."""
    return value % size


def index_toroidal(x, y, world_size: int):
    """Row-major cell index for (x, y) on a square torus of side world_size."""
    return wrap(y, world_size) * world_size + wrap(x, world_size)


def get_coordinate_grid(start_x: int, start_y: int, width: int, height: int, world_size: int):
    """
    Generates the integer grid coordinates of a rectangle, wrapped onto the
    world. Returns (x_grid, y_grid), each of shape (height, width).
    This is the single authoritative method for coordinate generation.
    """
    xs = wrap(np.arange(start_x, start_x + width, dtype=np.int64), world_size)
    ys = wrap(np.arange(start_y, start_y + height, dtype=np.int64), world_size)
    return np.meshgrid(xs, ys)
