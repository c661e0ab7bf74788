"""
Triangle soup -> half-edge mesh topology.

Faces reference point-cloud indices. Each distinct index becomes one mesh
vertex; the bidirectional map between the two numbering schemes is kept so
boundary vertices can be resolved back to their positions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, List, Sequence

import numpy as np
from scipy import sparse
from scipy.sparse import csgraph

from .errors import NonTriangularFaceError
from .halfedge_mesh import HalfEdgeMesh

_LOGGER = logging.getLogger(__name__)


class VertexIndexMap:
    """Point-cloud index <-> mesh vertex handle."""

    def __init__(self):
        self._vertex_of: dict[int, int] = {}
        self._point_of: List[int] = []

    def __len__(self) -> int:
        return len(self._point_of)

    def __contains__(self, point_index: object) -> bool:
        return point_index in self._vertex_of

    def insert(self, point_index: int, vertex: int) -> None:
        point_index = int(point_index)
        if point_index in self._vertex_of:
            raise KeyError(f"Point index {point_index} is already mapped")
        if vertex != len(self._point_of):
            raise ValueError("Vertex handles must be inserted in creation order")
        self._vertex_of[point_index] = int(vertex)
        self._point_of.append(point_index)

    def vertex_of(self, point_index: int) -> int:
        return self._vertex_of[int(point_index)]

    def point_of(self, vertex: int) -> int:
        return self._point_of[int(vertex)]

    def point_indices(self) -> np.ndarray:
        """(V,) point index of every vertex handle."""
        return np.asarray(self._point_of, dtype=np.int64)


@dataclass
class MeshTopology:
    """
    Attributes:
        mesh: half-edge mesh over deduplicated vertices
        index_map: point-cloud index <-> vertex handle
        rejected_faces: input face indices the half-edge layer refused
    """

    mesh: HalfEdgeMesh
    index_map: VertexIndexMap
    rejected_faces: List[int] = field(default_factory=list)

    @property
    def euler_characteristic(self) -> int:
        return self.mesh.n_vertices - self.mesh.n_edges + self.mesh.n_faces

    def point_indices(self, vertices: Iterable[int]) -> np.ndarray:
        lookup = self.index_map.point_indices()
        return lookup[np.asarray(list(vertices), dtype=np.int64)]

    def connected_components(self) -> tuple[int, np.ndarray]:
        """
        Vertex connectivity along mesh edges.

        Returns:
            (n_components, labels) with labels (V,) indexed by vertex handle.
        """
        n_vertices = self.mesh.n_vertices
        if n_vertices == 0:
            return 0, np.zeros((0,), dtype=np.int32)

        edges = self.mesh.edges()
        rows = np.concatenate([edges[:, 0], edges[:, 1]])
        cols = np.concatenate([edges[:, 1], edges[:, 0]])
        data = np.ones((rows.size,), dtype=np.uint8)
        graph = sparse.csr_matrix((data, (rows, cols)), shape=(n_vertices, n_vertices))
        n_components, labels = csgraph.connected_components(graph, directed=False)
        return int(n_components), labels.astype(np.int32, copy=False)


def build_mesh_topology(polygons: Sequence[Sequence[int]]) -> MeshTopology:
    """
    Build the half-edge topology of a triangle list.

    Args:
        polygons: faces as sequences of point-cloud indices

    Raises:
        NonTriangularFaceError: a face does not have exactly three indices
    """
    # Validate everything first so no partial topology is ever built.
    for face_index, polygon in enumerate(polygons):
        if len(polygon) != 3:
            _LOGGER.error(
                "Found polygon with %d sides, only triangle mesh supported!", len(polygon)
            )
            raise NonTriangularFaceError(face_index, len(polygon))

    mesh = HalfEdgeMesh()
    index_map = VertexIndexMap()
    rejected: List[int] = []

    for face_index, polygon in enumerate(polygons):
        handles = []
        for point_index in polygon:
            if point_index not in index_map:
                index_map.insert(int(point_index), mesh.add_vertex())
            handles.append(index_map.vertex_of(point_index))
        if mesh.add_face(*handles) is None:
            rejected.append(face_index)

    if rejected:
        _LOGGER.warning(
            "%d of %d faces rejected by mesh topology (first: face %d)",
            len(rejected),
            len(polygons),
            rejected[0],
        )

    return MeshTopology(mesh=mesh, index_map=index_map, rejected_faces=rejected)
