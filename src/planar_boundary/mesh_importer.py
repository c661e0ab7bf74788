"""
Planar mesh -> 2D boundary polygons.

Pipeline: plane fit -> local plane frame -> half-edge topology -> boundary
loops -> projection into the frame. The outer boundary of a mesh with
counter-clockwise faces comes out counter-clockwise, holes clockwise.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .boundary_extractor import extract_boundary_loops
from .errors import EmptyInputError
from .geometry import Plane, PlaneFrame, polygon_signed_area
from .local_frame import compute_local_plane_frame
from .mesh_loader import PolygonMesh
from .mesh_topology import MeshTopology, build_mesh_topology
from .plane_estimator import RandomSource, estimate_plane
from .projector import project_boundary_loop
from .settings import DEFAULTS, BoundaryConfig

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundarySet:
    """
    Boundary calculation result.

    Attributes:
        plane: fitted plane, normal oriented like the input normals
        plane_frame: local frame -> world transform used for the boundaries
        boundaries: (L_i, 2) polygons in frame coordinates, in loop order
    """

    plane: Plane
    plane_frame: PlaneFrame
    boundaries: Tuple[np.ndarray, ...]

    def __len__(self) -> int:
        return len(self.boundaries)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.boundaries)

    def signed_areas(self) -> np.ndarray:
        """Shoelace area per boundary; positive = counter-clockwise."""
        return np.asarray([polygon_signed_area(b) for b in self.boundaries], dtype=np.float64)

    def boundary_to_world(self, index: int) -> np.ndarray:
        """(L, 3) world positions of boundary `index` (on the plane)."""
        return self.plane_frame.to_world(self.boundaries[index])


def _check_point_indices(mesh: PolygonMesh) -> None:
    n_points = mesh.n_points
    for face_index, polygon in enumerate(mesh.polygons):
        for point_index in polygon:
            if point_index < 0 or point_index >= n_points:
                raise ValueError(
                    f"Face {face_index} references point {point_index}, cloud has {n_points} points"
                )


class MeshImporter:
    """
    Boundary calculator for roughly planar triangle meshes.

    Holds configuration only; every call builds its own intermediate data, so
    one instance can serve concurrent calls.
    """

    def __init__(self, config: Optional[BoundaryConfig] = None, *, verbose: Optional[bool] = None):
        cfg = config or DEFAULTS
        if verbose is not None and bool(verbose) != cfg.verbose:
            cfg = replace(cfg, verbose=bool(verbose))
        self.config = cfg

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    def _log(self, msg: str, *args) -> None:
        _LOGGER.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    def _log_topology(self, topology: MeshTopology) -> None:
        if not _LOGGER.isEnabledFor(logging.INFO if self.verbose else logging.DEBUG):
            return
        n_components, _labels = topology.connected_components()
        self._log(
            "Topology: %d vertices, %d faces (%d rejected), %d component(s), Euler characteristic %d",
            topology.mesh.n_vertices,
            topology.mesh.n_faces,
            len(topology.rejected_faces),
            n_components,
            topology.euler_characteristic,
        )

    def calculate_boundary_data(self, mesh: PolygonMesh, rng: RandomSource = None) -> BoundarySet:
        """
        Compute the plane frame and the boundary polygons of `mesh`.

        Args:
            mesh: planar triangle mesh with per-point normals
            rng: plane-fit randomness (Generator or seed); defaults to config.random_seed

        Raises:
            EmptyInputError, NonTriangularFaceError, InsufficientFitError,
            NormalMismatchError, IncompleteMeshError, ProjectionResidualExceededError
        """
        if mesh.n_points == 0:
            raise EmptyInputError("point cloud")
        if mesh.n_polygons == 0:
            raise EmptyInputError("face list")
        _check_point_indices(mesh)

        cfg = self.config
        points = mesh.points

        # Plane and local frame
        plane = estimate_plane(points, mesh.normals, cfg, rng=rng)
        frame = compute_local_plane_frame(plane, points.mean(axis=0))
        self._log(
            "Plane frame: origin %s, rotation %s",
            np.array2string(frame.translation, precision=6),
            np.array2string(frame.rotation, precision=6).replace("\n", ""),
        )

        # Topology and boundary loops
        topology = build_mesh_topology(mesh.polygons)
        self._log_topology(topology)
        loops = extract_boundary_loops(topology.mesh)

        boundaries: List[np.ndarray] = []
        for i, loop in enumerate(loops):
            polygon = project_boundary_loop(
                loop,
                topology,
                points,
                plane,
                frame,
                epsilon=cfg.projection_residual_epsilon,
            )
            self._log("Boundary %d: %d points, signed area %.6g", i, len(polygon), polygon_signed_area(polygon))
            boundaries.append(polygon)

        return BoundarySet(plane=plane, plane_frame=frame, boundaries=tuple(boundaries))


def calculate_boundary_data(
    mesh: PolygonMesh,
    config: Optional[BoundaryConfig] = None,
    rng: RandomSource = None,
) -> BoundarySet:
    """Module-level shortcut for MeshImporter(config).calculate_boundary_data(mesh)."""
    return MeshImporter(config).calculate_boundary_data(mesh, rng=rng)
