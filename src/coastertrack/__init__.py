"""
coastertrack: roller-coaster track meshes from 3D curves.

Typical use::

    from coastertrack import HelixCurve, build_track_mesh

    mesh = build_track_mesh(HelixCurve(), divisions=300, style="B&M")
    mesh.positions, mesh.normals, mesh.colors
"""
from coastertrack.controller.frames import FrameStrategy, build_frames
from coastertrack.controller.mesher import TrackMesher, build_track_mesh
from coastertrack.exceptions import CoasterTrackError, DegenerateCurveError, InvalidDivisionsError
from coastertrack.model.banking import (
    BankKeyframe, BankProfile, ControlPointBank, FunctionBank, KeyframeBank, as_bank_profile
)
from coastertrack.model.curves import CatmullRomCurve, Curve, HelixCurve, LineCurve
from coastertrack.model.geometry_primitives import Frame, Polygon, PolygonRole, transform_by_basis
from coastertrack.model.mesh import MeshStats, TrackMesh
from coastertrack.model.options import TrackOptions
from coastertrack.model.profiles import CrossSection, TrackStyle, resolve

__all__ = [
    "BankKeyframe", "BankProfile", "CatmullRomCurve", "CoasterTrackError", "ControlPointBank",
    "CrossSection", "Curve", "DegenerateCurveError", "Frame", "FrameStrategy", "FunctionBank",
    "HelixCurve", "InvalidDivisionsError", "KeyframeBank", "LineCurve", "MeshStats", "Polygon",
    "PolygonRole", "TrackMesh", "TrackMesher", "TrackOptions", "TrackStyle", "as_bank_profile",
    "build_frames", "build_track_mesh", "resolve", "transform_by_basis",
]
