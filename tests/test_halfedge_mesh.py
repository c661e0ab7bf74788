import unittest

import numpy as np

from src.planar_boundary.halfedge_mesh import HalfEdgeMesh


def _make_mesh(n_vertices, faces):
    mesh = HalfEdgeMesh()
    for _ in range(n_vertices):
        mesh.add_vertex()
    handles = [mesh.add_face(*f) for f in faces]
    return mesh, handles


class TestHalfEdgeMesh(unittest.TestCase):
    def test_shared_edge_pairs_opposite_half_edges(self):
        # Two triangles sharing edge (0, 2).
        mesh, handles = _make_mesh(4, [(0, 1, 2), (0, 2, 3)])

        self.assertEqual(handles, [0, 1])
        self.assertEqual(mesh.n_half_edges, 6)
        self.assertEqual(mesh.n_edges, 5)

        he_20 = next(he for he in mesh.half_edges() if (mesh.origin(he), mesh.target(he)) == (2, 0))
        he_02 = mesh.opposite(he_20)
        self.assertIsNotNone(he_02)
        self.assertEqual((mesh.origin(he_02), mesh.target(he_02)), (0, 2))
        self.assertEqual(mesh.opposite(he_02), he_20)
        self.assertNotEqual(mesh.face(he_20), mesh.face(he_02))

        boundary = list(mesh.boundary_half_edges())
        self.assertEqual(len(boundary), 4)
        self.assertTrue(all(mesh.is_boundary(he) for he in boundary))

    def test_face_traversal_keeps_winding(self):
        mesh, _ = _make_mesh(3, [(2, 0, 1)])
        self.assertEqual(mesh.face_vertices(0), (2, 0, 1))
        a, b, c = mesh.face_half_edges(0)
        self.assertEqual(mesh.next_half_edge(c), a)
        self.assertEqual(mesh.target(a), mesh.origin(b))

    def test_rejects_faces_breaking_invariants(self):
        mesh, handles = _make_mesh(
            4,
            [
                (0, 1, 2),
                (0, 0, 3),  # repeated vertex
                (0, 1, 3),  # 0 -> 1 is already owned by face 0
                (0, 1, 7),  # unknown vertex
            ],
        )
        self.assertEqual(handles, [0, None, None, None])
        self.assertEqual(mesh.n_faces, 1)
        self.assertEqual(mesh.n_half_edges, 3)

    def test_edges_are_unique_and_sorted(self):
        mesh, _ = _make_mesh(4, [(0, 1, 2), (0, 2, 3)])
        edges = mesh.edges()
        self.assertEqual(edges.shape, (5, 2))
        self.assertTrue(np.all(edges[:, 0] < edges[:, 1]))
        rows = {tuple(map(int, row)) for row in edges.tolist()}
        self.assertEqual(rows, {(0, 1), (1, 2), (0, 2), (2, 3), (0, 3)})


if __name__ == "__main__":
    unittest.main()
