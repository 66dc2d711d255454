# torus_climate/builder.py

"""
================================================================================
PARALLEL WORLD BUILDER
================================================================================
Builds whole worlds (or single chunks) from a WorldGenerationConfig.

The primary stage (elevation, temperature, raw moisture) is embarrassingly
parallel, so it is fanned out as one task per chunk over a process pool. The
results are written into pre-allocated world arrays by chunk position (fan
in), which makes the output independent of completion order and worker
count. Only then, with every row complete, does the advection pass run.
================================================================================
"""

import logging
import multiprocessing
import os
import time

import numpy as np
from tqdm import tqdm

from .generation_config import WorldGenerationConfig
from .generator import WorldGenerator
from .grid import ChunkBuffer, Grid

# --- Global variables for worker processes ---
worker_generator = None


def init_worker(config_dict: dict):
    """Initializes the global state for each worker process."""
    global worker_generator

    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    config = WorldGenerationConfig(**config_dict)
    worker_generator = WorldGenerator(config=config, logger=worker_logger)


def process_chunk(coords: tuple) -> dict:
    """
    Computes the primary fields of a single chunk. A top-level, pickle-able
    function designed to be run in a worker process.
    """
    cx, cy = coords
    rows, cols, (elevation, temperature, moisture) = worker_generator.generate_chunk_primary(cx, cy)
    return {
        'cx': cx,
        'cy': cy,
        'rows': rows,
        'cols': cols,
        'elevation': elevation,
        'temperature': temperature,
        'moisture': moisture,
    }


def default_worker_count() -> int:
    return max(1, multiprocessing.cpu_count() - 1)


def generate_world(config: WorldGenerationConfig, logger: logging.Logger,
                   workers: int = None, show_progress: bool = False) -> Grid:
    """
    Generates every cell of the world.

    Args:
        config (WorldGenerationConfig): The generation parameters.
        logger (logging.Logger): The logger for progress and timing.
        workers (int, optional): Number of worker processes. 1 runs in this
            process. Defaults to one less than the number of CPUs.
        show_progress (bool): Show a tqdm progress bar over chunks.

    Returns:
        Grid: world_size x world_size classified cells.
    """
    workers = default_worker_count() if workers is None else workers
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    start_time = time.perf_counter()
    main_generator = WorldGenerator(config=config, logger=logger)

    per_side = config.chunks_per_side
    tasks = [(cx, cy) for cy in range(per_side) for cx in range(per_side)]
    total_chunks = len(tasks)
    workers = min(workers, total_chunks)
    logger.info(f"Starting generation of {total_chunks} chunks using {workers} worker(s)...")

    world_size = config.world_size
    elevation = np.empty((world_size, world_size), dtype=np.float32)
    temperature = np.empty_like(elevation)
    raw_moisture = np.empty_like(elevation)

    def store(result):
        rows, cols = result['rows'], result['cols']
        elevation[rows, cols] = result['elevation']
        temperature[rows, cols] = result['temperature']
        raw_moisture[rows, cols] = result['moisture']

    # --- Fan out: primary fields per chunk ---
    if workers == 1:
        for cx, cy in tqdm(tasks, total=total_chunks, desc="Generating Chunks", disable=not show_progress):
            rows, cols, (e, t, m) = main_generator.generate_chunk_primary(cx, cy)
            store({'rows': rows, 'cols': cols, 'elevation': e, 'temperature': t, 'moisture': m})
    else:
        with multiprocessing.Pool(processes=workers, initializer=init_worker, initargs=(config.to_dict(),)) as pool:
            results_iterator = pool.imap_unordered(process_chunk, tasks)
            for result in tqdm(results_iterator, total=total_chunks, desc="Generating Chunks", disable=not show_progress):
                store(result)

    primary_time = time.perf_counter()
    logger.info(f"Primary fields complete in {primary_time - start_time:.2f} seconds.")

    # --- Fan in: advection needs complete rows ---
    grid = main_generator.finalize_grid(elevation, temperature, raw_moisture)

    end_time = time.perf_counter()
    logger.info(f"World generation complete! Total time: {end_time - start_time:.2f} seconds.")
    return grid


def generate_chunk(chunk_x: int, chunk_y: int, config: WorldGenerationConfig, logger: logging.Logger) -> ChunkBuffer:
    """Generates a single self-sufficient chunk in this process."""
    return WorldGenerator(config=config, logger=logger).generate_chunk(chunk_x, chunk_y)
