"""
Boundary loop -> 2D polygon in the plane frame.
"""

from __future__ import annotations

import numpy as np

from .errors import ProjectionResidualExceededError
from .geometry import Plane, PlaneFrame
from .mesh_topology import MeshTopology

DEFAULT_RESIDUAL_EPSILON = 0.001


def project_boundary_loop(
    loop: np.ndarray,
    topology: MeshTopology,
    points: np.ndarray,
    plane: Plane,
    frame: PlaneFrame,
    *,
    epsilon: float = DEFAULT_RESIDUAL_EPSILON,
) -> np.ndarray:
    """
    Project the origin vertex of every loop half-edge onto the plane and express
    it in frame coordinates.

    Returns:
        (L, 2) local XY in loop order

    Raises:
        ProjectionResidualExceededError: a projected point is not at local z == 0,
            i.e. plane and frame disagree
    """
    mesh = topology.mesh
    he_list = np.asarray(loop, dtype=np.int64).reshape(-1)
    point_idx = topology.point_indices(mesh.origin(int(he)) for he in he_list)

    world = np.asarray(points, dtype=np.float64).reshape(-1, 3)[point_idx]
    local = frame.to_local(plane.projection(world))

    residual = np.abs(local[:, 2])
    if residual.size:
        worst = int(np.argmax(residual))
        if not float(residual[worst]) < float(epsilon):
            raise ProjectionResidualExceededError(float(residual[worst]), float(epsilon), position=worst)

    return np.ascontiguousarray(local[:, :2])
