"""
Mesh Loader Module

Turns mesh files into the in-memory input of the boundary pipeline: a point
cloud with per-point normals plus a face list of point indices.

Supports: OBJ, PLY, STL, OFF, GLTF/GLB formats
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import trimesh


def compute_vertex_normals(points: np.ndarray, polygons: Sequence[Sequence[int]]) -> np.ndarray:
    """
    Area-weighted vertex normals from the triangles in `polygons`.

    Non-triangular faces are ignored; points without a triangle get a zero normal.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    normals = np.zeros_like(pts)
    tris = np.asarray([p for p in polygons if len(p) == 3], dtype=np.int64).reshape(-1, 3)
    if tris.size == 0:
        return normals

    v0 = pts[tris[:, 0]]
    v1 = pts[tris[:, 1]]
    v2 = pts[tris[:, 2]]
    cross = np.cross(v1 - v0, v2 - v0)
    np.add.at(normals, tris[:, 0], cross)
    np.add.at(normals, tris[:, 1], cross)
    np.add.at(normals, tris[:, 2], cross)

    norms = np.linalg.norm(normals, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return normals / norms


@dataclass
class PolygonMesh:
    """
    Boundary pipeline input.

    Attributes:
        points: (N, 3) point positions
        normals: (N, 3) unit normals, one per point
        polygons: faces as tuples of point indices (triangles expected)
        filepath: source file, if any
    """

    points: np.ndarray
    normals: np.ndarray
    polygons: List[Tuple[int, ...]]
    filepath: Optional[Path] = None

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=np.float64).reshape(-1, 3)
        self.normals = np.asarray(self.normals, dtype=np.float64).reshape(-1, 3)
        self.polygons = [tuple(int(i) for i in poly) for poly in self.polygons]
        if self.normals.shape != self.points.shape:
            raise ValueError(
                f"normals shape {self.normals.shape} does not match points shape {self.points.shape}"
            )

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def n_polygons(self) -> int:
        return len(self.polygons)

    @property
    def centroid(self) -> np.ndarray:
        return self.points.mean(axis=0)

    @classmethod
    def from_arrays(
        cls,
        points: np.ndarray,
        polygons: Sequence[Sequence[int]],
        normals: Optional[np.ndarray] = None,
    ) -> "PolygonMesh":
        """Build a mesh, computing normals from the triangles when none are given."""
        if normals is None:
            normals = compute_vertex_normals(points, polygons)
        return cls(points=points, normals=normals, polygons=list(polygons))

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, filepath: Optional[Path] = None) -> "PolygonMesh":
        return cls(
            points=np.asarray(mesh.vertices, dtype=np.float64),
            normals=np.asarray(mesh.vertex_normals, dtype=np.float64),
            polygons=[tuple(face) for face in np.asarray(mesh.faces, dtype=np.int64).tolist()],
            filepath=filepath,
        )


def _load_trimesh(filepath: Path) -> trimesh.Trimesh:
    mesh = trimesh.load(str(filepath), force='mesh', process=False, maintain_order=True)

    # Scenes are merged into a single mesh
    if isinstance(mesh, trimesh.Scene):
        meshes = [g for g in mesh.geometry.values() if isinstance(g, trimesh.Trimesh)]
        if len(meshes) == 0:
            raise ValueError(f"No valid mesh found in: {filepath}")
        mesh = trimesh.util.concatenate(meshes)

    if not isinstance(mesh, trimesh.Trimesh):
        raise TypeError(f"Expected trimesh.Trimesh, got {type(mesh).__name__}")
    return mesh


class MeshLoader:
    """
    Mesh file loader for the boundary pipeline.

    Supported formats:
        - OBJ (Wavefront)
        - PLY (Polygon File Format)
        - STL (Stereolithography)
        - OFF (Object File Format)
        - GLTF/GLB (GL Transmission Format)
    """

    SUPPORTED_FORMATS = {
        '.obj': 'Wavefront OBJ',
        '.ply': 'Polygon File Format',
        '.stl': 'Stereolithography',
        '.off': 'Object File Format',
        '.gltf': 'GL Transmission Format',
        '.glb': 'GL Transmission Format (Binary)',
    }

    def __init__(self, merge_vertices: bool = True):
        """
        Args:
            merge_vertices: weld vertices with identical positions. STL files
                store every triangle separately; without welding each triangle
                would be its own boundary loop.
        """
        self.merge_vertices = merge_vertices

    @classmethod
    def get_supported_formats(cls) -> dict:
        return cls.SUPPORTED_FORMATS.copy()

    def _check_path(self, filepath: Union[str, Path]) -> Path:
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        ext = filepath.suffix.lower()
        if ext not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {ext}\n"
                f"Supported formats: {list(self.SUPPORTED_FORMATS.keys())}"
            )
        return filepath

    def load(self, filepath: Union[str, Path]) -> PolygonMesh:
        """
        Load a mesh file.

        Raises:
            FileNotFoundError: file does not exist
            ValueError: unsupported format or no mesh in the file
        """
        filepath = self._check_path(filepath)
        mesh = _load_trimesh(filepath)
        if self.merge_vertices:
            mesh.merge_vertices(merge_tex=True, merge_norm=True)
        return PolygonMesh.from_trimesh(mesh, filepath=filepath)

    def get_file_info(self, filepath: Union[str, Path]) -> dict:
        """File summary: name, format, size and vertex/face counts."""
        filepath = self._check_path(filepath)
        info = {
            'filename': filepath.name,
            'format': self.SUPPORTED_FORMATS[filepath.suffix.lower()],
            'file_size_mb': round(filepath.stat().st_size / (1024 * 1024), 2),
        }

        mesh = _load_trimesh(filepath)
        info['n_vertices'] = int(mesh.vertices.shape[0])
        info['n_faces'] = int(mesh.faces.shape[0])
        info['is_watertight'] = bool(mesh.is_watertight)
        return info
