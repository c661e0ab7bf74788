"""
Plane and plane-frame primitives shared by the boundary pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def _as_vec3(value: np.ndarray | list[float] | tuple[float, ...]) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.size < 3:
        raise ValueError("Expected at least 3 values for a 3D vector.")
    return arr[:3]


def _as_points(value: np.ndarray | list, *, dims: int = 3) -> tuple[np.ndarray, bool]:
    """Return (points (N, dims), was_single_point)."""
    arr = np.asarray(value, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, dims), dtype=np.float64), False
    if arr.ndim not in (1, 2) or arr.shape[-1] != dims:
        raise ValueError(f"Expected points with {dims} coordinates, got shape {arr.shape}.")
    return arr.reshape(-1, dims), arr.ndim == 1


def normalize_vector(
    value: np.ndarray | list[float] | tuple[float, ...],
    *,
    eps: float = 1e-12,
) -> np.ndarray | None:
    """Return normalized 3D vector or None when magnitude is near zero."""
    vec = _as_vec3(value)
    nrm = float(np.linalg.norm(vec))
    if (not np.isfinite(nrm)) or nrm <= float(eps):
        return None
    return vec / nrm


@dataclass(frozen=True)
class Plane:
    """
    Plane n . x + d = 0 with unit normal n.

    Attributes:
        normal: (3,) unit normal
        offset: d
    """

    normal: np.ndarray
    offset: float

    def __post_init__(self):
        raw = _as_vec3(self.normal)
        nrm = float(np.linalg.norm(raw))
        if (not np.isfinite(nrm)) or nrm <= 1e-12:
            raise ValueError("Plane normal must be a non-zero vector.")
        # Scale the offset together with the normal so the plane stays the same.
        object.__setattr__(self, "normal", raw / nrm)
        object.__setattr__(self, "offset", float(self.offset) / nrm)

    @classmethod
    def from_point_normal(cls, point, normal) -> "Plane":
        n = normalize_vector(normal)
        if n is None:
            raise ValueError("Plane normal must be a non-zero vector.")
        return cls(normal=n, offset=-float(np.dot(n, _as_vec3(point))))

    @property
    def coefficients(self) -> np.ndarray:
        """[nx, ny, nz, d]"""
        return np.append(self.normal, self.offset)

    def flipped(self) -> "Plane":
        return Plane(normal=-self.normal, offset=-self.offset)

    def signed_distance(self, points) -> np.ndarray | float:
        pts, single = _as_points(points)
        dist = pts @ self.normal + self.offset
        return float(dist[0]) if single else dist

    def projection(self, points) -> np.ndarray:
        """Orthogonal projection of a point (3,) or points (N, 3) onto the plane."""
        pts, single = _as_points(points)
        dist = pts @ self.normal + self.offset
        out = pts - dist[:, None] * self.normal[None, :]
        return out[0] if single else out


@dataclass(frozen=True)
class PlaneFrame:
    """
    Rigid transform from plane-local coordinates (z = 0 on the plane) to world.

    Attributes:
        rotation: (3, 3) orthonormal matrix, columns are the local X/Y/Z axes in world
        translation: (3,) frame origin in world
    """

    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self):
        rot = np.asarray(self.rotation, dtype=np.float64).reshape(3, 3)
        object.__setattr__(self, "rotation", rot)
        object.__setattr__(self, "translation", _as_vec3(self.translation).copy())

    @classmethod
    def identity(cls) -> "PlaneFrame":
        return cls(rotation=np.eye(3, dtype=np.float64), translation=np.zeros(3, dtype=np.float64))

    @property
    def x_axis(self) -> np.ndarray:
        return self.rotation[:, 0]

    @property
    def y_axis(self) -> np.ndarray:
        return self.rotation[:, 1]

    @property
    def z_axis(self) -> np.ndarray:
        return self.rotation[:, 2]

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix."""
        m = np.eye(4, dtype=np.float64)
        m[:3, :3] = self.rotation
        m[:3, 3] = self.translation
        return m

    def inverse(self) -> "PlaneFrame":
        rot_t = self.rotation.T
        return PlaneFrame(rotation=rot_t, translation=-(rot_t @ self.translation))

    def to_local(self, points) -> np.ndarray:
        """World points (3,) or (N, 3) -> frame coordinates."""
        pts, single = _as_points(points)
        out = (pts - self.translation[None, :]) @ self.rotation
        return out[0] if single else out

    def to_world(self, points) -> np.ndarray:
        """Frame points -> world. 2D input is lifted onto the plane (z = 0)."""
        arr = np.asarray(points, dtype=np.float64)
        dims = 2 if arr.shape[-1:] == (2,) else 3
        pts, single = _as_points(arr, dims=dims)
        if dims == 2:
            pts = np.column_stack([pts, np.zeros(len(pts), dtype=np.float64)])
        out = pts @ self.rotation.T + self.translation[None, :]
        return out[0] if single else out


def polygon_signed_area(points_2d: np.ndarray) -> float:
    """
    Shoelace area of a closed polygon given without a repeated end point.

    Positive for counter-clockwise order.
    """
    pts = np.asarray(points_2d, dtype=np.float64).reshape(-1, 2)
    if pts.shape[0] < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))
