#!/usr/bin/env python3
"""
rtin command-line application.

Commands load a heightfield (terrain-RGB image, .npy array or a synthetic
pattern), build the triangle index and error field once, and extract meshes
at one or more error thresholds.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import typer
from rich.panel import Panel
from rich.table import Table

from rtin import __version__
from rtin.config import MeshConfig, load_config
from rtin.core import Tile, build_index, validate_grid_size
from rtin.exceptions import RTINException
from rtin.io import load_heightfield, save_mesh, terrain_from_array
from rtin.utils.sample import SAMPLE_PATTERNS, create_sample_terrain
from rtin.cli.ui import console, print_error, print_stats_table, print_success

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="RTIN command line interface - adaptive meshes from square heightmaps",
    add_completion=False
)

# Exceptions reported as a clean error message instead of a traceback
HANDLED_ERRORS = (RTINException, ValueError, OSError)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )


def _resolve_config(config_file: Optional[Path], max_error: Optional[float] = None) -> MeshConfig:
    config = load_config(str(config_file)) if config_file else MeshConfig()
    if max_error is not None:
        config.max_error = max_error
    config.validate()
    return config


def _load_input(
    input_path: Optional[Path],
    sample: Optional[str],
    grid_size: int,
    seed: Optional[int],
    config: MeshConfig
) -> Tuple[np.ndarray, int]:
    """Load or generate the heightfield and enforce the configured size bound."""
    if input_path is None and sample is None:
        raise ValueError("Provide an input heightmap or --sample PATTERN")

    if input_path is not None:
        terrain, size = load_heightfield(input_path)
    else:
        validate_grid_size(grid_size)
        config.check_grid_size(grid_size)
        terrain, size = terrain_from_array(create_sample_terrain(grid_size, sample, seed=seed))

    config.check_grid_size(size)
    return terrain, size


def _create_tile(terrain: np.ndarray, grid_size: int) -> Tile:
    with console.status(f"Computing error field for grid size {grid_size}..."):
        return build_index(grid_size).create_tile(terrain)


INPUT_ARGUMENT = typer.Argument(None, help="Terrain-RGB image or .npy heightmap")
SAMPLE_OPTION = typer.Option(None, "--sample", help=f"Synthetic pattern instead of an input: {', '.join(SAMPLE_PATTERNS)}")
GRID_SIZE_OPTION = typer.Option(65, "--grid-size", help="Grid size of a synthetic pattern (2^n+1)")
SEED_OPTION = typer.Option(None, "--seed", help="Random seed for the 'random' pattern")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="JSON configuration file", exists=True)


@app.command("mesh")
def mesh_command(
    input_path: Optional[Path] = INPUT_ARGUMENT,
    max_error: Optional[float] = typer.Option(None, "--max-error", "-e", help="Maximum vertical error"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output mesh file (.npz or .json)"),
    fmt: Optional[str] = typer.Option(None, "--format", help="Output format: npz or json"),
    sample: Optional[str] = SAMPLE_OPTION,
    grid_size: int = GRID_SIZE_OPTION,
    seed: Optional[int] = SEED_OPTION,
    config_file: Optional[Path] = CONFIG_OPTION,
):
    """Extract a mesh at one error threshold."""
    try:
        config = _resolve_config(config_file, max_error)
        terrain, size = _load_input(input_path, sample, grid_size, seed, config)

        tile = _create_tile(terrain, size)
        mesh = tile.get_mesh(config.max_error)
        print_stats_table(tile.statistics(mesh, config.max_error))

        if output is not None:
            if fmt is None and not output.suffix:
                fmt = config.output_format
            written = save_mesh(mesh, output, fmt)
            print_success(f"Mesh written to [path]{written}[/path]")
    except HANDLED_ERRORS as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("sweep")
def sweep_command(
    input_path: Optional[Path] = INPUT_ARGUMENT,
    max_error: List[float] = typer.Option(..., "--max-error", "-e", help="Threshold to extract at, repeatable"),
    sample: Optional[str] = SAMPLE_OPTION,
    grid_size: int = GRID_SIZE_OPTION,
    seed: Optional[int] = SEED_OPTION,
    config_file: Optional[Path] = CONFIG_OPTION,
):
    """Extract meshes at several thresholds from one error field."""
    try:
        config = _resolve_config(config_file)
        for value in max_error:
            if not value >= 0:
                raise ValueError(f"max_error must be non-negative, got {value}")
        terrain, size = _load_input(input_path, sample, grid_size, seed, config)
        tile = _create_tile(terrain, size)

        table = Table(title=f"Threshold Sweep (grid size {size})")
        table.add_column("Max Error", style="key", justify="right")
        table.add_column("Vertices", style="value", justify="right")
        table.add_column("Triangles", style="value", justify="right")
        table.add_column("Vertex Ratio", justify="right")

        for value in sorted(max_error):
            stats = tile.statistics(tile.get_mesh(value), value)
            table.add_row(
                f"{value:g}",
                str(stats["vertices"]),
                str(stats["triangles"]),
                f"{stats['vertex_ratio']:.2%}"
            )
        console.print(table)
    except HANDLED_ERRORS as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("info")
def info_command(
    input_path: Optional[Path] = INPUT_ARGUMENT,
    sample: Optional[str] = SAMPLE_OPTION,
    grid_size: int = GRID_SIZE_OPTION,
    seed: Optional[int] = SEED_OPTION,
    config_file: Optional[Path] = CONFIG_OPTION,
):
    """Show grid and hierarchy information for a heightmap."""
    try:
        config = _resolve_config(config_file)
        terrain, size = _load_input(input_path, sample, grid_size, seed, config)
        index = build_index(size)

        print_stats_table({
            "grid_size": size,
            "tile_size": index.tile_size,
            "num_triangles": index.num_triangles,
            "num_parent_triangles": index.num_parent_triangles,
            "levels": index.depth,
            "min_elevation": float(np.min(terrain)),
            "max_elevation": float(np.max(terrain)),
        }, title="Heightmap Information")
    except HANDLED_ERRORS as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("plot")
def plot_command(
    input_path: Optional[Path] = INPUT_ARGUMENT,
    output: Path = typer.Option(..., "--output", "-o", help="Output image file"),
    max_error: Optional[float] = typer.Option(None, "--max-error", "-e", help="Maximum vertical error"),
    show_terrain: bool = typer.Option(True, "--terrain/--no-terrain", help="Draw the heightfield underneath"),
    sample: Optional[str] = SAMPLE_OPTION,
    grid_size: int = GRID_SIZE_OPTION,
    seed: Optional[int] = SEED_OPTION,
    config_file: Optional[Path] = CONFIG_OPTION,
):
    """Render the mesh wireframe to an image."""
    try:
        from rtin.plotters.matplotlib import plot_mesh

        config = _resolve_config(config_file, max_error)
        terrain, size = _load_input(input_path, sample, grid_size, seed, config)
        tile = _create_tile(terrain, size)
        mesh = tile.get_mesh(config.max_error)

        written = plot_mesh(mesh, output, terrain=tile.terrain if show_terrain else None)
        print_success(f"Plot written to [path]{written}[/path]")
    except HANDLED_ERRORS as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("version")
def version_command():
    """Display version information."""
    console.print(Panel.fit(
        f"[bold]RTIN Command-Line Interface[/bold]\n\n"
        f"Version: {__version__}\n"
        f"NumPy: {np.__version__}\n"
    ))


def main():
    """Entry point for the rtin command."""
    app()


if __name__ == "__main__":
    main()
