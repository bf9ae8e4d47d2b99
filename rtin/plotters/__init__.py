"""Plotting helpers for extracted meshes."""

from .matplotlib import MatplotlibMeshPlotter, plot_mesh

__all__ = ['MatplotlibMeshPlotter', 'plot_mesh']
