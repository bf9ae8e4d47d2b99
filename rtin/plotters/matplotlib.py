#!/usr/bin/env python3
"""
Matplotlib plotter for RTIN meshes.

Draws the triangles of an extracted mesh in grid space, optionally over the
heightfield it was extracted from. Intended for inspecting how triangle
density follows the terrain.
"""

import os
import logging
from typing import Any, Optional, Union

import numpy as np

from rtin.core.extract import Mesh

# Set up logger
logger = logging.getLogger(__name__)

COLORBAR_LABEL = "Elevation"


class MatplotlibMeshPlotter:
    """Matplotlib wireframe plotter for meshes in grid space."""

    NAME = "matplotlib"
    DEFAULT_COLORMAP = "terrain"

    def __init__(self) -> None:
        """Initialize the plotter."""
        import matplotlib.pyplot as plt
        self.plt = plt

    def plot(self, mesh: Mesh, terrain: Optional[np.ndarray] = None, **kwargs) -> Any:
        """
        Plot the triangles of a mesh.

        Args:
            mesh: Mesh to draw
            terrain: Optional flat or 2D heightfield drawn underneath
            **kwargs: title, colormap, linewidth, figsize

        Returns:
            Matplotlib figure
        """
        fig, ax = self.plt.subplots(figsize=kwargs.get("figsize", (8, 8)))

        if terrain is not None:
            terrain = np.asarray(terrain, dtype=np.float64)
            side = int(round(np.sqrt(terrain.size)))
            image = ax.imshow(
                terrain.reshape(side, side),
                cmap=kwargs.get("colormap", self.DEFAULT_COLORMAP),
                origin="upper",
            )
            fig.colorbar(image, ax=ax, label=COLORBAR_LABEL)

        if mesh.triangle_count:
            ax.triplot(
                mesh.vertices[:, 0].astype(np.float64),
                mesh.vertices[:, 1].astype(np.float64),
                mesh.triangles.astype(np.int64),
                color="black",
                linewidth=kwargs.get("linewidth", 0.5),
            )

        ax.set_aspect("equal")
        if terrain is None:
            ax.invert_yaxis()
        ax.set_title(kwargs.get(
            "title", f"{mesh.vertex_count} vertices, {mesh.triangle_count} triangles"
        ))
        return fig

    def save(self, fig: Any, filename: Union[str, os.PathLike], dpi: int = 150) -> str:
        """
        Save a figure and close it.

        Args:
            fig: Figure returned by :meth:`plot`
            filename: Output image path
            dpi: Resolution

        Returns:
            Path of the written image
        """
        filename = str(filename)
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            fig.savefig(filename, dpi=dpi, bbox_inches="tight")
        finally:
            self.plt.close(fig)
        logger.info(f"Saved mesh plot to {filename}")
        return filename


def plot_mesh(mesh: Mesh, filename: Union[str, os.PathLike],
              terrain: Optional[np.ndarray] = None, **kwargs) -> str:
    """
    Plot a mesh and write it to an image file.

    Args:
        mesh: Mesh to draw
        filename: Output image path
        terrain: Optional heightfield drawn underneath

    Returns:
        Path of the written image
    """
    plotter = MatplotlibMeshPlotter()
    fig = plotter.plot(mesh, terrain, **kwargs)
    return plotter.save(fig, filename, dpi=kwargs.get("dpi", 150))
