"""
Boundary extraction for planar triangle meshes
"""

from .errors import (
    BoundaryError,
    EmptyInputError,
    NonTriangularFaceError,
    InsufficientFitError,
    NormalMismatchError,
    IncompleteMeshError,
    ProjectionResidualExceededError,
)
from .geometry import Plane, PlaneFrame, polygon_signed_area
from .settings import BoundaryConfig, load_boundary_config
from .mesh_loader import MeshLoader, PolygonMesh
from .mesh_importer import BoundarySet, MeshImporter, calculate_boundary_data
from .boundary_file import load_boundary_set, save_boundary_set

__all__ = [
    # Errors
    'BoundaryError',
    'EmptyInputError',
    'NonTriangularFaceError',
    'InsufficientFitError',
    'NormalMismatchError',
    'IncompleteMeshError',
    'ProjectionResidualExceededError',
    # Geometry
    'Plane',
    'PlaneFrame',
    'polygon_signed_area',
    # Configuration
    'BoundaryConfig',
    'load_boundary_config',
    # Input
    'MeshLoader',
    'PolygonMesh',
    # Boundary calculation
    'BoundarySet',
    'MeshImporter',
    'calculate_boundary_data',
    # Boundary files
    'load_boundary_set',
    'save_boundary_set',
]
