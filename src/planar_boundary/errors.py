"""
Error taxonomy for boundary calculation.

Every error aborts the whole calculation; none of them is fatal to the host
process. Each exception keeps the measured values that triggered it so the
caller can log or display a useful diagnosis.
"""

from __future__ import annotations


class BoundaryError(RuntimeError):
    """Base class for all boundary-calculation failures."""


class EmptyInputError(BoundaryError):
    def __init__(self, what: str):
        self.what = str(what)
        super().__init__(f"Input {self.what} is empty")


class NonTriangularFaceError(BoundaryError):
    def __init__(self, face_index: int, n_sides: int):
        self.face_index = int(face_index)
        self.n_sides = int(n_sides)
        super().__init__(
            f"Found polygon with {self.n_sides} sides at face {self.face_index}, "
            "only triangle meshes are supported"
        )


class InsufficientFitError(BoundaryError):
    def __init__(self, inlier_fraction: float, min_inlier_fraction: float):
        self.inlier_fraction = float(inlier_fraction)
        self.min_inlier_fraction = float(min_inlier_fraction)
        super().__init__(
            f"Only {self.inlier_fraction:.1%} of points fit the plane "
            f"(required: {self.min_inlier_fraction:.1%})"
        )


class NormalMismatchError(BoundaryError):
    def __init__(self, cosine: float, min_cosine: float):
        self.cosine = float(cosine)
        self.min_cosine = float(min_cosine)
        super().__init__(
            f"Plane normal out of tolerance (cosine {self.cosine:.6f} < {self.min_cosine:.6f})"
        )


class IncompleteMeshError(BoundaryError):
    def __init__(self, message: str, *, vertex: int | None = None, half_edge: int | None = None):
        self.vertex = vertex
        self.half_edge = half_edge
        super().__init__(message)


class ProjectionResidualExceededError(BoundaryError):
    def __init__(self, residual: float, epsilon: float, *, position: int = -1):
        self.residual = float(residual)
        self.epsilon = float(epsilon)
        self.position = int(position)
        super().__init__(
            f"Projected boundary point {self.position} lies {self.residual:.6g} off the plane frame "
            f"(epsilon: {self.epsilon:.6g})"
        )
