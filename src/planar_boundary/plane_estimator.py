"""
Robust plane estimation for roughly planar point clouds.

The fit is a consensus-sampling (RANSAC) search restricted to a cone around an
expected normal, followed by a least-squares refinement over the inliers.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import NoReturn, Optional, Union

import numpy as np

from .errors import EmptyInputError, InsufficientFitError, NormalMismatchError
from .geometry import Plane, normalize_vector
from .settings import DEFAULTS, BoundaryConfig

_LOGGER = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


def as_generator(rng: RandomSource) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


@dataclass(frozen=True)
class PlaneFit:
    """
    Consensus fit result.

    Attributes:
        plane: fitted plane (sign of the normal is arbitrary)
        inliers: (K,) indices of points within the distance threshold
        iterations: number of evaluated (non-skipped) samples
    """

    plane: Plane
    inliers: np.ndarray
    iterations: int

    @property
    def n_inliers(self) -> int:
        return int(self.inliers.size)


def _refine_plane(
    points: np.ndarray,
    inliers: np.ndarray,
    reference_normal: np.ndarray,
    *,
    eps: float = 1e-10,
) -> Optional[Plane]:
    work = points[inliers]
    if work.shape[0] < 3:
        return None

    centroid = np.mean(work, axis=0)
    _u, s, vh = np.linalg.svd(work - centroid, full_matrices=False)
    if s.size < 3 or float(s[1]) <= eps:
        # Collinear inliers: keep the sampled model.
        return None

    normal = normalize_vector(vh[2, :], eps=eps)
    if normal is None:
        return None
    if float(np.dot(normal, reference_normal)) < 0.0:
        normal = -normal
    return Plane.from_point_normal(centroid, normal)


def fit_plane_ransac(
    points: np.ndarray,
    *,
    axis: np.ndarray | list[float] | tuple[float, ...],
    eps_angle: float,
    distance_threshold: float,
    max_iterations: int = 1000,
    probability: float = 0.99,
    rng: RandomSource = None,
    optimize: bool = True,
) -> Optional[PlaneFit]:
    """
    Fit a plane whose normal lies within `eps_angle` of `axis` (either sign).

    Args:
        points: (N, 3) point positions
        axis: expected normal direction
        eps_angle: half-angle (rad) of the admissible normal cone
        distance_threshold: inlier distance
        max_iterations: cap on evaluated samples (skipped samples are capped at 10x)
        probability: desired chance of drawing at least one outlier-free sample
        rng: numpy Generator, seed or None
        optimize: refine the best model by least squares over its inliers

    Returns:
        PlaneFit, or None when no admissible sample was found.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    n_pts = int(pts.shape[0])
    if n_pts < 3:
        return None

    axis_n = normalize_vector(axis)
    if axis_n is None:
        raise ValueError("axis must be a non-zero vector")

    min_cos = math.cos(float(eps_angle))
    threshold = float(distance_threshold)
    max_iterations = max(1, int(max_iterations))
    max_skip = 10 * max_iterations
    log_fail = math.log(max(1.0 - float(probability), 1e-12))
    tiny = float(np.finfo(np.float64).eps)
    gen = as_generator(rng)

    best_count = 0
    best_normal: Optional[np.ndarray] = None
    best_point: Optional[np.ndarray] = None
    needed = float(max_iterations)
    iterations = 0
    skipped = 0

    while iterations < needed and iterations < max_iterations and skipped < max_skip:
        i, j, k = gen.choice(n_pts, size=3, replace=False).tolist()
        a = pts[i]
        cand = normalize_vector(np.cross(pts[j] - a, pts[k] - a))
        if cand is None or abs(float(np.dot(cand, axis_n))) < min_cos:
            skipped += 1
            continue

        iterations += 1
        count = int(np.count_nonzero(np.abs((pts - a) @ cand) <= threshold))
        if count > best_count:
            best_count = count
            best_normal = cand
            best_point = a

            # Adaptive stopping: samples needed to hit an all-inlier triplet.
            p_outlier_sample = 1.0 - (count / n_pts) ** 3
            p_outlier_sample = min(max(p_outlier_sample, tiny), 1.0 - tiny)
            needed = log_fail / math.log(p_outlier_sample)

    if best_normal is None or best_point is None:
        _LOGGER.debug("Plane fit found no admissible sample (%d skipped)", skipped)
        return None

    plane = Plane.from_point_normal(best_point, best_normal)
    inliers = np.flatnonzero(np.abs(plane.signed_distance(pts)) <= threshold)

    if optimize:
        refined = _refine_plane(pts, inliers, plane.normal)
        if refined is not None:
            plane = refined
            inliers = np.flatnonzero(np.abs(plane.signed_distance(pts)) <= threshold)

    _LOGGER.debug(
        "Plane fit: %d/%d inliers after %d iterations (%d skipped)",
        int(inliers.size),
        n_pts,
        iterations,
        skipped,
    )
    return PlaneFit(plane=plane, inliers=inliers.astype(np.int32, copy=False), iterations=iterations)


def orient_plane_to_seed(
    plane: Plane,
    seed_normal: np.ndarray | list[float] | tuple[float, ...],
    angular_tolerance: float,
) -> Plane:
    """
    Flip `plane` to agree with `seed_normal` and check the angle between them.

    Raises:
        NormalMismatchError: seed is degenerate or the angle exceeds the tolerance
    """
    min_cos = math.cos(float(angular_tolerance))
    seed = normalize_vector(seed_normal)
    if seed is None:
        raise NormalMismatchError(float("nan"), min_cos)

    cosine = float(np.dot(plane.normal, seed))
    if cosine < 0.0:
        _LOGGER.debug("Flipping plane normal")
        plane = plane.flipped()
        cosine = -cosine

    if cosine < min_cos:
        _LOGGER.warning("Plane normal out of tolerance! cosines: %f / %f", cosine, min_cos)
        raise NormalMismatchError(cosine, min_cos)
    return plane


def _raise_for_missing_fit(pts: np.ndarray, seed: np.ndarray, cfg: BoundaryConfig, fit_kwargs: dict) -> NoReturn:
    """
    No plane inside the normal cone. Refit without the cone to tell a tilted
    plane (NormalMismatchError) from a cloud that is not planar at all.
    """
    _LOGGER.warning("Could not compute plane coefficients within the normal cone")
    free_fit = fit_plane_ransac(pts, axis=seed, eps_angle=math.pi / 2.0, **fit_kwargs)
    fraction = 0.0 if free_fit is None else free_fit.n_inliers / float(pts.shape[0])
    if free_fit is None or fraction < cfg.min_inlier_fraction:
        raise InsufficientFitError(fraction, cfg.min_inlier_fraction)

    min_cos = math.cos(cfg.angular_tolerance)
    cosine = abs(float(np.dot(free_fit.plane.normal, seed)))
    _LOGGER.warning("Plane normal out of tolerance! cosines: %f / %f", cosine, min_cos)
    raise NormalMismatchError(cosine, min_cos)


def estimate_plane(
    points: np.ndarray,
    normals: np.ndarray,
    config: Optional[BoundaryConfig] = None,
    rng: RandomSource = None,
) -> Plane:
    """
    Fit the supporting plane of a point cloud, oriented like the first point's normal.

    Args:
        points: (N, 3) positions
        normals: (N, 3) per-point normals; only the first one seeds the fit
        config: thresholds (defaults to DEFAULTS)
        rng: sampler randomness; falls back to config.random_seed

    Raises:
        EmptyInputError, InsufficientFitError, NormalMismatchError
    """
    cfg = config or DEFAULTS
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if pts.shape[0] == 0:
        raise EmptyInputError("point cloud")

    nrm = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
    if nrm.shape[0] != pts.shape[0]:
        raise ValueError(f"Expected {pts.shape[0]} normals, got {nrm.shape[0]}")

    seed = normalize_vector(nrm[0])
    if seed is None:
        raise NormalMismatchError(float("nan"), math.cos(cfg.angular_tolerance))

    gen = as_generator(rng if rng is not None else cfg.random_seed)
    fit_kwargs = dict(
        distance_threshold=cfg.inlier_distance_threshold,
        max_iterations=cfg.ransac_max_iterations,
        probability=cfg.ransac_probability,
        rng=gen,
    )
    fit = fit_plane_ransac(pts, axis=seed, eps_angle=cfg.angular_tolerance, **fit_kwargs)
    if fit is None:
        _raise_for_missing_fit(pts, seed, cfg, fit_kwargs)

    fraction = fit.n_inliers / float(pts.shape[0])
    if fraction < cfg.min_inlier_fraction:
        _LOGGER.warning(
            "Less than %.0f%% of points included in plane fit (%.1f%%)",
            100.0 * cfg.min_inlier_fraction,
            100.0 * fraction,
        )
        raise InsufficientFitError(fraction, cfg.min_inlier_fraction)

    plane = orient_plane_to_seed(fit.plane, seed, cfg.angular_tolerance)
    _LOGGER.log(
        logging.INFO if cfg.verbose else logging.DEBUG,
        "Normal: %s (inliers: %.1f%%)",
        np.array2string(plane.coefficients, precision=6),
        100.0 * fraction,
    )
    return plane
