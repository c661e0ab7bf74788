"""
Boundary calculation settings.

Values can be overridden via environment variables so host processes can tune
the plane fit without touching code.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os


ENV_VERBOSE = "PLANAR_BOUNDARY_VERBOSE"
ENV_INLIER_DISTANCE = "PLANAR_BOUNDARY_INLIER_DISTANCE"
ENV_ANGULAR_TOLERANCE = "PLANAR_BOUNDARY_ANGULAR_TOLERANCE"
ENV_MIN_INLIER_FRACTION = "PLANAR_BOUNDARY_MIN_INLIER_FRACTION"
ENV_RESIDUAL_EPSILON = "PLANAR_BOUNDARY_RESIDUAL_EPSILON"
ENV_RANSAC_MAX_ITERATIONS = "PLANAR_BOUNDARY_RANSAC_MAX_ITERATIONS"
ENV_RANDOM_SEED = "PLANAR_BOUNDARY_RANDOM_SEED"


@dataclass(frozen=True)
class BoundaryConfig:
    """
    Attributes:
        verbose: log intermediate values at INFO level (no behavior change)
        inlier_distance_threshold: max point-to-plane distance for plane inliers
        angular_tolerance: allowed angle (rad) between fitted and seed normal
        min_inlier_fraction: required share of points that fit the plane
        projection_residual_epsilon: allowed out-of-plane residual of projected boundary points
        ransac_max_iterations: upper bound on consensus sampling iterations
        ransac_probability: desired probability of drawing an outlier-free sample
        random_seed: sampler seed; None draws fresh entropy per call
    """

    verbose: bool = False
    inlier_distance_threshold: float = 0.01
    angular_tolerance: float = 0.5
    min_inlier_fraction: float = 0.9
    projection_residual_epsilon: float = 0.001
    ransac_max_iterations: int = 1000
    ransac_probability: float = 0.99
    random_seed: int | None = None


def _read_int_env(
    env_name: str,
    default: int | None,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int | None:
    raw = os.environ.get(env_name)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default

    if min_value is not None and value < min_value:
        return default
    if max_value is not None and value > max_value:
        return default
    return value


def _read_float_env(
    env_name: str,
    default: float,
    *,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    raw = os.environ.get(env_name)
    if raw is None:
        return default
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return default

    if not math.isfinite(value):
        return default
    if min_value is not None and value < min_value:
        return default
    if max_value is not None and value > max_value:
        return default
    return value


def _read_bool_env(env_name: str, default: bool) -> bool:
    raw = os.environ.get(env_name)
    if raw is None:
        return default
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def load_boundary_config() -> BoundaryConfig:
    base = BoundaryConfig()
    return BoundaryConfig(
        verbose=_read_bool_env(ENV_VERBOSE, base.verbose),
        inlier_distance_threshold=_read_float_env(
            ENV_INLIER_DISTANCE, base.inlier_distance_threshold, min_value=1e-9
        ),
        angular_tolerance=_read_float_env(
            ENV_ANGULAR_TOLERANCE, base.angular_tolerance, min_value=0.0, max_value=math.pi / 2.0
        ),
        min_inlier_fraction=_read_float_env(
            ENV_MIN_INLIER_FRACTION, base.min_inlier_fraction, min_value=0.0, max_value=1.0
        ),
        projection_residual_epsilon=_read_float_env(
            ENV_RESIDUAL_EPSILON, base.projection_residual_epsilon, min_value=1e-12
        ),
        ransac_max_iterations=int(
            _read_int_env(ENV_RANSAC_MAX_ITERATIONS, base.ransac_max_iterations, min_value=1, max_value=1_000_000)
            or base.ransac_max_iterations
        ),
        ransac_probability=base.ransac_probability,
        random_seed=_read_int_env(ENV_RANDOM_SEED, base.random_seed, min_value=0),
    )


DEFAULTS = load_boundary_config()
