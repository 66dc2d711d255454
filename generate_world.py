# generate_world.py

"""
================================================================================
WORLD GENERATION COMMAND-LINE TOOL
================================================================================
This script generates a toroidal climate world from a configuration and
reports on it: the biome distribution, layer ranges, and optionally the cell
found at any world coordinate (coordinates wrap, so negative or oversized
values are fine).

Usage:
    python generate_world.py --config configs/default_world.json
    python generate_world.py --field seed=1234 --field world_size=512 --probe -1 0
    python generate_world.py --config configs/default_world.json --chunk 3 5
================================================================================
"""
import argparse
import json
import logging
import sys

from torus_climate import builder
from torus_climate.biomes import biome_label
from torus_climate.generation_config import WorldGenerationConfig, parse_config_fields
from torus_climate.grid import Grid


def load_config(args, logger: logging.Logger) -> WorldGenerationConfig:
    """
    Builds the config from the JSON file and/or raw --field overrides.
    Raw fields go through the forgiving text parser; a JSON-only config is
    validated strictly.
    """
    params = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        with open(args.config, 'r') as f:
            params = json.load(f).get('world_generation_parameters', {})

    if not args.field:
        return WorldGenerationConfig.from_dict(params, logger)

    fields_text = {key: str(value) for key, value in params.items()}
    for item in args.field:
        key, sep, value = item.partition('=')
        if not sep:
            logger.warning(f"Ignoring malformed field '{item}', expected key=value.")
            continue
        fields_text[key.strip()] = value
    return parse_config_fields(fields_text, logger)


def log_summary(grid: Grid, logger: logging.Logger):
    total = len(grid)
    logger.info(f"--- World Summary ({grid.width}x{grid.height}, {total} cells) ---")
    logger.info(f"  Elevation:   {grid.elevation.min():.2f} .. {grid.elevation.max():.2f}")
    logger.info(f"  Temperature: {grid.temperature.min():.2f} .. {grid.temperature.max():.2f} C")
    logger.info(f"  Moisture:    {grid.moisture.min():.3f} .. {grid.moisture.max():.3f}")
    for biome, count in grid.biome_counts().most_common():
        logger.info(f"  - {biome_label(biome)}: {count} ({(count / total) * 100:.2f}%)")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Toroidal climate world generator.")
    parser.add_argument("--config", type=str, help="Path to a JSON file with a 'world_generation_parameters' object.")
    parser.add_argument("--field", action="append", default=[], metavar="KEY=VALUE",
                        help="Raw text override for one parameter. Invalid values fall back to defaults.")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes (default: CPU count - 1).")
    parser.add_argument("--chunk", type=int, nargs=2, metavar=("CX", "CY"),
                        help="Generate only this chunk instead of the whole world.")
    parser.add_argument("--probe", type=int, nargs=2, action="append", default=[], metavar=("X", "Y"),
                        help="Report the cell at this world coordinate. May be repeated.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    args = parser.parse_args(argv)

    # 1. --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("WorldGen")

    # 2. --- Load Configuration ---
    try:
        config = load_config(args, logger)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 1
    except ValueError as e:
        logger.critical(f"Invalid world generation parameters: {e}")
        return 1

    # 3. --- Generate ---
    try:
        if args.chunk:
            chunk = builder.generate_chunk(args.chunk[0], args.chunk[1], config, logger)
            grid = chunk.visible()
            logger.info(f"Generated chunk {tuple(args.chunk)} at world origin {chunk.origin}.")
        else:
            grid = builder.generate_world(config, logger, workers=args.workers, show_progress=not args.no_progress)
    except ValueError as e:
        logger.critical(f"Generation could not start: {e}")
        return 1

    log_summary(grid, logger)

    # 4. --- Probes ---
    if args.probe and args.chunk:
        logger.warning("Probes need the whole world; ignoring --probe for a single chunk.")
    elif args.probe:
        for x, y in args.probe:
            cell = grid.cell_at(x, y)
            logger.info(
                f"Cell ({x}, {y}): {biome_label(cell.biome)}, elevation={cell.elevation:.2f}, "
                f"temperature={cell.temperature:.2f} C, moisture={cell.moisture:.3f}"
            )
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
