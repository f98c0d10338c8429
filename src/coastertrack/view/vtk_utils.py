"""
VTK and Geometry Utilities
Wraps TrackMesh buffers into PyVista objects for display and file export.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import pyvista as pv

if TYPE_CHECKING:
    from coastertrack.model.mesh import TrackMesh

logger = logging.getLogger(__name__)


class VtkUtils:
    @staticmethod
    def triangle_faces(vertex_count: int) -> npt.NDArray[np.int_]:
        """
        VTK face array for a non-indexed triangle soup:
        [3, 0, 1, 2, 3, 3, 4, 5, ...].
        """
        if vertex_count % 3 != 0:
            raise ValueError(f"Vertex count must be a multiple of 3, got {vertex_count}.")
        ids = np.arange(vertex_count, dtype=np.int_).reshape(-1, 3)
        sizes = np.full((ids.shape[0], 1), 3, dtype=np.int_)
        return np.hstack([sizes, ids]).reshape(-1)

    @staticmethod
    def colors_to_rgb(colors: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
        """Convert (N, 3) float colors in [0, 1] to uint8 RGB."""
        clipped = np.clip(np.asarray(colors, dtype=np.float64), 0.0, 1.0)
        return np.rint(clipped * 255.0).astype(np.uint8)

    def to_polydata(self, mesh: TrackMesh) -> pv.PolyData:
        """
        Convert a TrackMesh to PolyData with point arrays 'Normals' and 'RGB'.
        Vertices are not merged; each triangle keeps its own three points.
        """
        positions, normals, colors = mesh.as_vertex_arrays()
        if mesh.vertex_count == 0:
            return pv.PolyData()

        pd = pv.PolyData(np.asarray(positions, dtype=np.float64), faces=self.triangle_faces(mesh.vertex_count))
        pd.point_data["Normals"] = np.asarray(normals, dtype=np.float32)
        pd.point_data["RGB"] = self.colors_to_rgb(colors)
        return pd


def to_polydata(mesh: TrackMesh) -> pv.PolyData:
    return VtkUtils().to_polydata(mesh)


def export_mesh(mesh: TrackMesh, filepath: str) -> None:
    """
    Save the mesh to any format PyVista can write (.vtp, .ply, .stl, .obj, ...).
    """
    logger.info(f"Exporting track mesh to: {filepath}")
    directory = os.path.dirname(os.path.abspath(filepath))
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Output directory does not exist: {directory}")

    pd = to_polydata(mesh)
    try:
        if filepath.lower().endswith(".ply"):
            pd.save(filepath, texture="RGB")
        else:
            pd.save(filepath)
    except Exception as e:
        logger.exception(f"Failed to export mesh: {e}")
        raise e
    logger.info(f"Track mesh exported ({mesh.triangle_count} triangles).")


def plot_track(
    mesh: TrackMesh,
    show_edges: bool = False,
    screenshot: Optional[str] = None,
) -> None:
    """Open an interactive PyVista window showing the colored track."""
    pd = to_polydata(mesh)

    plotter = pv.Plotter(off_screen=screenshot is not None)
    plotter.add_mesh(
        pd,
        scalars="RGB",
        rgb=True,
        smooth_shading=True,
        show_edges=show_edges,
        edge_color='grey',
    )
    plotter.add_axes()
    plotter.show(screenshot=screenshot)
