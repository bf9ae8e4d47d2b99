"""Mesh output in npz and JSON form."""

import os
import json
import logging
import numpy as np
from typing import Union

from ..core.extract import Mesh

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("npz", "json")


def _resolve_format(path: str, fmt: str = None) -> str:
    if fmt is None:
        fmt = os.path.splitext(path)[1].lstrip(".").lower() or "npz"
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported mesh format '{fmt}', expected one of {SUPPORTED_FORMATS}")
    return fmt


def save_mesh(mesh: Mesh, path: Union[str, os.PathLike], fmt: str = None) -> str:
    """
    Write a mesh to disk.

    Args:
        mesh: Mesh to write
        path: Output path
        fmt: 'npz' or 'json'; taken from the file extension when omitted

    Returns:
        Path of the written file
    """
    path = str(path)
    fmt = _resolve_format(path, fmt)

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    if fmt == "npz":
        # np.savez appends .npz when it is missing
        if not path.endswith(".npz"):
            path += ".npz"
        np.savez(path, vertices=mesh.vertices, triangles=mesh.triangles)
    else:
        with open(path, "w") as f:
            json.dump(mesh.as_dict(), f)

    logger.info(f"Saved mesh with {mesh.vertex_count} vertices and {mesh.triangle_count} triangles to {path}")
    return path


def load_mesh(path: Union[str, os.PathLike]) -> Mesh:
    """
    Read a mesh written by :func:`save_mesh`.

    Args:
        path: Path to a .npz or .json mesh file

    Returns:
        Mesh
    """
    path = str(path)
    fmt = _resolve_format(path)

    if fmt == "npz":
        with np.load(path) as data:
            return Mesh(data["vertices"], data["triangles"])

    with open(path, "r") as f:
        data = json.load(f)
    vertices = np.array(data["vertices"], dtype=np.uint32).reshape(-1, 2)
    triangles = np.array(data["triangles"], dtype=np.uint32).reshape(-1, 3)
    return Mesh(vertices, triangles)
