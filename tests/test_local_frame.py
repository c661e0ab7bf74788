import unittest

import numpy as np

from src.planar_boundary.geometry import Plane, PlaneFrame, polygon_signed_area
from src.planar_boundary.local_frame import compute_local_plane_frame


def _assert_rigid(testcase: unittest.TestCase, frame: PlaneFrame, normal: np.ndarray) -> None:
    rot = frame.rotation
    np.testing.assert_allclose(rot.T @ rot, np.eye(3), atol=1e-10, rtol=0.0)
    testcase.assertAlmostEqual(float(np.linalg.det(rot)), 1.0, places=10)
    np.testing.assert_allclose(frame.z_axis, normal, atol=1e-12, rtol=0.0)


class TestLocalPlaneFrame(unittest.TestCase):
    def test_horizontal_plane_uses_world_axes(self):
        plane = Plane(normal=np.array([0.0, 0.0, 1.0]), offset=-2.0)  # z = 2
        frame = compute_local_plane_frame(plane, [1.0, 2.0, 5.0])

        np.testing.assert_allclose(frame.rotation, np.eye(3), atol=1e-12, rtol=0.0)
        np.testing.assert_allclose(frame.translation, [1.0, 2.0, 2.0], atol=1e-12, rtol=0.0)

    def test_normal_along_world_x_uses_world_y(self):
        plane = Plane(normal=np.array([1.0, 0.0, 0.0]), offset=-3.0)  # x = 3
        frame = compute_local_plane_frame(plane, [0.0, 4.0, -1.0])

        _assert_rigid(self, frame, plane.normal)
        np.testing.assert_allclose(frame.y_axis, [0.0, 1.0, 0.0], atol=1e-12, rtol=0.0)
        np.testing.assert_allclose(frame.x_axis, [0.0, 0.0, -1.0], atol=1e-12, rtol=0.0)
        np.testing.assert_allclose(frame.translation, [3.0, 4.0, -1.0], atol=1e-12, rtol=0.0)

    def test_tilted_plane_far_from_origin(self):
        normal = np.array([0.3, 0.4, 0.8], dtype=np.float64)
        normal /= np.linalg.norm(normal)
        plane = Plane.from_point_normal([50.0, -20.0, 7.0], normal)
        centroid = np.array([48.0, -19.0, 9.0], dtype=np.float64)

        frame = compute_local_plane_frame(plane, centroid)

        _assert_rigid(self, frame, normal)
        np.testing.assert_allclose(frame.translation, plane.projection(centroid), atol=1e-9, rtol=0.0)
        self.assertAlmostEqual(float(plane.signed_distance(frame.translation)), 0.0, places=9)
        # X is world X with its normal component removed.
        expected_x = np.array([1.0, 0.0, 0.0]) - normal[0] * normal
        expected_x /= np.linalg.norm(expected_x)
        np.testing.assert_allclose(frame.x_axis, expected_x, atol=1e-9, rtol=0.0)

    def test_threshold_branches_both_stay_right_handed(self):
        for nx in (0.79, 0.81, 0.99, -0.95):
            normal = np.array([nx, np.sqrt(1.0 - nx * nx), 0.0], dtype=np.float64)
            frame = compute_local_plane_frame(Plane(normal=normal, offset=1.0), [1.0, 1.0, 1.0])
            _assert_rigid(self, frame, normal)
            np.testing.assert_allclose(np.cross(frame.x_axis, frame.y_axis), frame.z_axis, atol=1e-10)


class TestPlaneFrameTransforms(unittest.TestCase):
    def test_local_world_round_trip(self):
        normal = np.array([0.0, -0.6, 0.8], dtype=np.float64)
        plane = Plane.from_point_normal([1.0, 2.0, 3.0], normal)
        frame = compute_local_plane_frame(plane, [0.0, 0.0, 0.0])

        pts = np.array([[0.5, 1.5, 2.0], [4.0, -2.0, 1.0]], dtype=np.float64)
        local = frame.to_local(pts)
        np.testing.assert_allclose(frame.to_world(local), pts, atol=1e-10, rtol=0.0)
        np.testing.assert_allclose(frame.inverse().matrix @ frame.matrix, np.eye(4), atol=1e-10, rtol=0.0)

        # 2D input is lifted onto the plane.
        on_plane = frame.to_world(local[:, :2])
        np.testing.assert_allclose(plane.signed_distance(on_plane), [0.0, 0.0], atol=1e-10, rtol=0.0)
        np.testing.assert_allclose(on_plane, plane.projection(pts), atol=1e-10, rtol=0.0)

    def test_polygon_signed_area(self):
        square = np.array([[0.0, 0.0], [2.0, 0.0], [2.0, 1.0], [0.0, 1.0]])
        self.assertAlmostEqual(polygon_signed_area(square), 2.0)
        self.assertAlmostEqual(polygon_signed_area(square[::-1]), -2.0)
        self.assertEqual(polygon_signed_area(square[:2]), 0.0)

    def test_plane_normalizes_coefficients(self):
        plane = Plane(normal=np.array([0.0, 0.0, 2.0]), offset=-4.0)
        np.testing.assert_allclose(plane.coefficients, [0.0, 0.0, 1.0, -2.0])
        with self.assertRaises(ValueError):
            Plane(normal=np.zeros(3), offset=0.0)


if __name__ == "__main__":
    unittest.main()
