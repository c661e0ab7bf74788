"""
Output path helpers for boundary exports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]

BOUNDARY_SUFFIX = ".boundary.json"


def boundary_output_path(input_path: PathLike, output_path: Optional[PathLike] = None) -> Path:
    """`output_path` when given, otherwise the input mesh path with `.boundary.json`."""
    if output_path:
        return Path(output_path)
    return Path(input_path).with_suffix(BOUNDARY_SUFFIX)
