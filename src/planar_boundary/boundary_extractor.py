"""
Boundary loop extraction from a half-edge mesh.

A boundary half-edge is a face half-edge without an opposite. Loops follow the
face winding, so with counter-clockwise faces the outer contour runs
counter-clockwise and holes run clockwise. Loops are not re-oriented here.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from .errors import IncompleteMeshError
from .halfedge_mesh import HalfEdgeMesh

_LOGGER = logging.getLogger(__name__)


def extract_boundary_loops(mesh: HalfEdgeMesh) -> List[np.ndarray]:
    """
    Group boundary half-edges into closed walks.

    Returns:
        list of (L,) int32 arrays of half-edge handles in walk order. Empty for
        a closed mesh.

    Raises:
        IncompleteMeshError: a vertex has several outgoing boundary half-edges
            or a walk can't be closed
    """
    # origin vertex -> the boundary half-edge leaving it
    outgoing: dict[int, int] = {}
    for he in mesh.boundary_half_edges():
        origin = mesh.origin(he)
        if origin in outgoing:
            raise IncompleteMeshError(
                f"Boundary vertex {origin} has more than one outgoing boundary half-edge "
                f"({outgoing[origin]}, {he})",
                vertex=origin,
                half_edge=he,
            )
        outgoing[origin] = he

    n_boundary = len(outgoing)
    visited: set[int] = set()
    loops: List[np.ndarray] = []

    for start in outgoing.values():
        if start in visited:
            continue

        loop = [start]
        visited.add(start)
        current = start
        # HalfEdgeMesh.add_face keeps directed edges unique, so each boundary vertex
        # has one incoming and one outgoing boundary half-edge; the dead-end and
        # non-closing checks below only guard against a corrupted mesh.
        while True:
            vertex = mesh.target(current)
            nxt = outgoing.get(vertex)
            if nxt is None:
                raise IncompleteMeshError(
                    f"Boundary walk from half-edge {start} stops at vertex {vertex}",
                    vertex=vertex,
                    half_edge=current,
                )
            if nxt == start:
                break
            if nxt in visited or len(loop) > n_boundary:
                raise IncompleteMeshError(
                    f"Boundary walk from half-edge {start} does not close",
                    vertex=vertex,
                    half_edge=nxt,
                )
            loop.append(nxt)
            visited.add(nxt)
            current = nxt

        loops.append(np.asarray(loop, dtype=np.int32))

    _LOGGER.debug("Extracted %d boundary loop(s) from %d boundary half-edges", len(loops), n_boundary)
    return loops
