"""
Input/Output Manager (HDF5)
Handles saving and loading built track meshes to .h5 files.
"""
from __future__ import annotations

import logging
from importlib.metadata import version, PackageNotFoundError

import h5py
import numpy as np

from coastertrack.config import BUFFER_DTYPE
from coastertrack.model.mesh import TrackMesh

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("coastertrack")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

MESH_GROUP = "track_mesh"
BUFFER_NAMES = ("positions", "normals", "colors")


class IOManager:

    @staticmethod
    def save_mesh(mesh: TrackMesh, filepath: str) -> None:
        logger.info(f"Saving track mesh to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION

                grp = f.create_group(MESH_GROUP)
                grp.attrs["divisions"] = mesh.divisions
                grp.attrs["style"] = mesh.style
                grp.attrs["frame_strategy"] = mesh.frame_strategy
                grp.attrs["num_cross_ties"] = mesh.num_cross_ties

                # Flat buffers are stored as (V, 3) for readability in HDF viewers
                for name, arr in zip(BUFFER_NAMES, mesh.as_vertex_arrays()):
                    grp.create_dataset(name, data=np.asarray(arr), compression="gzip")

            logger.info(f"Track mesh saved to: {filepath}")

        except Exception as e:
            logger.exception(f"Failed to save track mesh: {e}")
            raise e

    @staticmethod
    def load_mesh(filepath: str) -> TrackMesh:
        logger.info(f"Loading track mesh from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        try:
            with h5py.File(filepath, "r") as f:
                if MESH_GROUP not in f:
                    raise ValueError(f"File '{filepath}' contains no '{MESH_GROUP}' group.")
                grp = f[MESH_GROUP]
                file_version = f.attrs.get("version", "unknown")
                if file_version != APP_VERSION:
                    logger.debug(f"Mesh written by version {file_version}, running {APP_VERSION}.")

                buffers = {
                    name: np.array(grp[name], dtype=BUFFER_DTYPE).reshape(-1)
                    for name in BUFFER_NAMES
                }
                mesh = TrackMesh(
                    positions=buffers["positions"],
                    normals=buffers["normals"],
                    colors=buffers["colors"],
                    divisions=int(grp.attrs["divisions"]),
                    style=str(grp.attrs["style"]),
                    frame_strategy=str(grp.attrs["frame_strategy"]),
                    num_cross_ties=int(grp.attrs.get("num_cross_ties", 0)),
                )
        except Exception as e:
            logger.exception(f"Failed to load track mesh: {e}")
            raise e

        logger.info(f"Loaded track mesh with {mesh.triangle_count} triangles.")
        return mesh
