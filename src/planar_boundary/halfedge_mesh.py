"""
Minimal half-edge triangle mesh.

Half-edges, faces and vertices are integer handles into flat arrays (an
arena); adjacency is stored as indices, never as object references. Only the
half-edges owned by faces are stored: a half-edge whose opposite is missing
lies on the mesh boundary.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import numpy as np

_LOGGER = logging.getLogger(__name__)

INVALID = -1


class HalfEdgeMesh:
    """Triangle mesh with explicit half-edge adjacency."""

    def __init__(self):
        self._n_vertices = 0
        self._he_origin: List[int] = []
        self._he_next: List[int] = []
        self._he_face: List[int] = []
        self._he_opposite: List[int] = []
        self._face_half_edge: List[int] = []
        # (origin, target) -> half-edge
        self._directed: dict[tuple[int, int], int] = {}

    @property
    def n_vertices(self) -> int:
        return self._n_vertices

    @property
    def n_faces(self) -> int:
        return len(self._face_half_edge)

    @property
    def n_half_edges(self) -> int:
        return len(self._he_origin)

    @property
    def n_edges(self) -> int:
        """Undirected edge count (paired half-edges count once)."""
        paired = sum(1 for he in self._he_opposite if he != INVALID)
        return self.n_half_edges - paired // 2

    def add_vertex(self) -> int:
        self._n_vertices += 1
        return self._n_vertices - 1

    def add_face(self, a: int, b: int, c: int) -> Optional[int]:
        """
        Add triangle (a, b, c) in that winding order.

        Returns the face handle, or None when the face would break the mesh
        invariants (unknown or repeated vertex, or a directed edge that
        already belongs to another face). Rejected faces leave the mesh unchanged.
        """
        verts = (int(a), int(b), int(c))
        if any(v < 0 or v >= self._n_vertices for v in verts):
            _LOGGER.debug("Rejected face %s: unknown vertex", verts)
            return None
        if len(set(verts)) != 3:
            _LOGGER.debug("Rejected face %s: degenerate triangle", verts)
            return None

        directed = [(verts[i], verts[(i + 1) % 3]) for i in range(3)]
        if any(key in self._directed for key in directed):
            _LOGGER.debug("Rejected face %s: half-edge already in use", verts)
            return None

        face = self.n_faces
        first = self.n_half_edges
        for i, (origin, target) in enumerate(directed):
            he = first + i
            self._he_origin.append(origin)
            self._he_next.append(first + (i + 1) % 3)
            self._he_face.append(face)
            opposite = self._directed.get((target, origin), INVALID)
            self._he_opposite.append(opposite)
            if opposite != INVALID:
                self._he_opposite[opposite] = he
            self._directed[(origin, target)] = he

        self._face_half_edge.append(first)
        return face

    def origin(self, he: int) -> int:
        return self._he_origin[he]

    def target(self, he: int) -> int:
        return self._he_origin[self._he_next[he]]

    def next_half_edge(self, he: int) -> int:
        return self._he_next[he]

    def face(self, he: int) -> int:
        return self._he_face[he]

    def opposite(self, he: int) -> Optional[int]:
        opp = self._he_opposite[he]
        return None if opp == INVALID else opp

    def is_boundary(self, he: int) -> bool:
        return self._he_opposite[he] == INVALID

    def half_edges(self) -> range:
        return range(self.n_half_edges)

    def boundary_half_edges(self) -> Iterator[int]:
        return (he for he, opp in enumerate(self._he_opposite) if opp == INVALID)

    def face_half_edges(self, face: int) -> tuple[int, int, int]:
        first = self._face_half_edge[face]
        second = self._he_next[first]
        return first, second, self._he_next[second]

    def face_vertices(self, face: int) -> tuple[int, int, int]:
        a, b, c = self.face_half_edges(face)
        return self._he_origin[a], self._he_origin[b], self._he_origin[c]

    def edges(self) -> np.ndarray:
        """(E, 2) undirected edges, one row per edge, vertices sorted per row."""
        rows = [
            (self._he_origin[he], self.target(he))
            for he in self.half_edges()
            if self._he_opposite[he] == INVALID or he < self._he_opposite[he]
        ]
        if not rows:
            return np.zeros((0, 2), dtype=np.int32)
        out = np.asarray(rows, dtype=np.int32)
        out.sort(axis=1)
        return out
