"""
Height sources and mesh output.

Turns images and arrays into the flat row-major heightfields the core
expects, and writes extracted meshes to disk.
"""

from .heightmap import decode_terrain_rgb, load_terrain_rgb, terrain_from_array, load_heightfield
from .mesh import save_mesh, load_mesh

__all__ = [
    'decode_terrain_rgb',
    'load_terrain_rgb',
    'terrain_from_array',
    'load_heightfield',
    'save_mesh',
    'load_mesh'
]
