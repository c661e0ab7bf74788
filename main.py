"""
PlanarBoundary - boundary polygons of planar triangle meshes

Main entry point
"""

import sys
import os
import logging
from pathlib import Path

# Ensure repository root is on sys.path so "src" is importable.
ROOT_DIR = Path(__file__).resolve().parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.planar_boundary.errors import BoundaryError
from src.planar_boundary.logging_utils import format_exception_message
from src.planar_boundary.output_paths import boundary_output_path
from src.planar_boundary.settings import DEFAULTS

_LOGGER = logging.getLogger(__name__)
_LOG_PATH = None


def run_cli():
    """Run the command line interface."""
    global _LOG_PATH
    try:
        from src.planar_boundary.logging_utils import attach_console_handler, setup_logging

        _LOG_PATH = setup_logging()
        if DEFAULTS.verbose:
            attach_console_handler("INFO")
    except Exception as e:
        _LOGGER.debug("Failed to initialize logging: %s", e, exc_info=True)

    if len(sys.argv) < 2:
        print_help()
        return

    cmd = sys.argv[1]

    if cmd == '--help' or cmd == '-h':
        print_help()
        return

    if cmd == '--info' and len(sys.argv) > 2:
        show_file_info(sys.argv[2])
        return

    if cmd == '--export' and len(sys.argv) > 2:
        export_boundaries(sys.argv[2], sys.argv[3] if len(sys.argv) > 3 else None)
        return

    # Default: compute and print boundaries
    if os.path.exists(cmd):
        process_mesh(cmd)
    else:
        print(f"Error: Unknown command or file not found: {cmd}")
        print("Use --help for usage information")


def print_help():
    """Print usage."""
    from src.planar_boundary.mesh_loader import MeshLoader

    print("=" * 60)
    print("PlanarBoundary - boundary polygons of planar triangle meshes")
    print("=" * 60)
    print()
    print("Usage:")
    print("  python main.py <mesh_file>                    # Compute and print boundaries")
    print("  python main.py --info <mesh_file>             # Show file info")
    print("  python main.py --export <mesh_file> [output]  # Save boundaries as JSON")
    print()
    print(f"Supported formats: {list(MeshLoader.SUPPORTED_FORMATS.keys())}")
    print()
    print("Settings are read from PLANAR_BOUNDARY_* environment variables, e.g.")
    print("  PLANAR_BOUNDARY_INLIER_DISTANCE=0.005 PLANAR_BOUNDARY_VERBOSE=1 python main.py plate.ply")


def show_file_info(filepath: str):
    """Show file info."""
    from src.planar_boundary.mesh_loader import MeshLoader

    print(f"\nFile Info: {filepath}")
    print("-" * 40)

    try:
        info = MeshLoader().get_file_info(filepath)
        for key, value in info.items():
            print(f"  {key}: {value}")
    except Exception as e:
        print(f"  Error: {e}")


def _calculate(filepath: str):
    from src.planar_boundary.mesh_loader import MeshLoader
    from src.planar_boundary.mesh_importer import MeshImporter

    mesh = MeshLoader().load(filepath)
    print(f"  Loaded: {mesh.n_points:,} points, {mesh.n_polygons:,} faces")

    result = MeshImporter(DEFAULTS).calculate_boundary_data(mesh)
    normal = result.plane.normal
    origin = result.plane_frame.translation
    print(f"  Plane normal: ({normal[0]:.4f}, {normal[1]:.4f}, {normal[2]:.4f})")
    print(f"  Frame origin: ({origin[0]:.4f}, {origin[1]:.4f}, {origin[2]:.4f})")
    for i, (boundary, area) in enumerate(zip(result.boundaries, result.signed_areas())):
        kind = "outer" if area > 0 else "hole"
        print(f"  Boundary {i}: {len(boundary)} points, area {abs(area):.4f} ({kind})")
    return mesh, result


def process_mesh(filepath: str):
    """Compute boundaries and print a summary."""
    print(f"\nBoundaries: {filepath}")
    print("-" * 40)

    try:
        _calculate(filepath)
    except BoundaryError as e:
        _LOGGER.debug("Boundary calculation failed for %s", filepath, exc_info=True)
        print(format_exception_message("Error: boundary calculation failed", str(e), log_path=_LOG_PATH))
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()


def export_boundaries(filepath: str, output_path: str | None = None):
    """Compute boundaries and save them as JSON."""
    from src.planar_boundary.boundary_file import save_boundary_set

    print(f"\nExporting boundaries: {filepath}")
    print("-" * 40)

    try:
        mesh, result = _calculate(filepath)
        save_path = boundary_output_path(filepath, output_path)
        save_boundary_set(save_path, result, meta={"source": str(mesh.filepath or filepath)})
        print(f"  Saved: {save_path}")
    except BoundaryError as e:
        _LOGGER.debug("Boundary calculation failed for %s", filepath, exc_info=True)
        print(format_exception_message("Error: boundary calculation failed", str(e), log_path=_LOG_PATH))
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()


if __name__ == '__main__':
    run_cli()
