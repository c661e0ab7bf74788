"""
Local 2D coordinate frame on a fitted plane.
"""

from __future__ import annotations

import numpy as np

from .geometry import Plane, PlaneFrame, _as_vec3, normalize_vector

# Max |normal . world_x| for building the frame from world X; above it world Y is used.
AXIS_ALIGNMENT_LIMIT = 0.8

_UNIT_X = np.array([1.0, 0.0, 0.0], dtype=np.float64)
_UNIT_Y = np.array([0.0, 1.0, 0.0], dtype=np.float64)


def _in_plane_direction(plane: Plane, origin: np.ndarray, world_axis: np.ndarray) -> np.ndarray:
    direction = normalize_vector(plane.projection(origin + world_axis) - origin)
    if direction is None:
        # Unreachable while the alignment limit holds.
        raise ValueError("World axis is parallel to the plane normal")
    return direction


def compute_local_plane_frame(plane: Plane, centroid: np.ndarray | list[float] | tuple[float, ...]) -> PlaneFrame:
    """
    Build a right-handed frame whose Z axis is the plane normal.

    The origin is the centroid projected onto the plane. The in-plane X (or Y)
    axis follows world X, or world Y when the normal is too close to world X.
    """
    origin = plane.projection(_as_vec3(centroid))
    z_axis = plane.normal

    if abs(float(np.dot(z_axis, _UNIT_X))) < AXIS_ALIGNMENT_LIMIT:
        x_axis = _in_plane_direction(plane, origin, _UNIT_X)
        y_axis = np.cross(z_axis, x_axis)
        y_axis /= np.linalg.norm(y_axis)
    else:
        y_axis = _in_plane_direction(plane, origin, _UNIT_Y)
        x_axis = np.cross(y_axis, z_axis)
        x_axis /= np.linalg.norm(x_axis)

    rotation = np.column_stack([x_axis, y_axis, z_axis])
    return PlaneFrame(rotation=rotation, translation=origin)
