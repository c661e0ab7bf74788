import math

from src.planar_boundary.settings import (
    ENV_ANGULAR_TOLERANCE,
    ENV_INLIER_DISTANCE,
    ENV_MIN_INLIER_FRACTION,
    ENV_RANDOM_SEED,
    ENV_RANSAC_MAX_ITERATIONS,
    ENV_RESIDUAL_EPSILON,
    ENV_VERBOSE,
    load_boundary_config,
)


def _clear_boundary_env(monkeypatch):
    for key in (
        ENV_VERBOSE,
        ENV_INLIER_DISTANCE,
        ENV_ANGULAR_TOLERANCE,
        ENV_MIN_INLIER_FRACTION,
        ENV_RESIDUAL_EPSILON,
        ENV_RANSAC_MAX_ITERATIONS,
        ENV_RANDOM_SEED,
    ):
        monkeypatch.delenv(key, raising=False)


def test_boundary_config_without_env(monkeypatch):
    _clear_boundary_env(monkeypatch)
    config = load_boundary_config()

    assert config.verbose is False
    assert config.inlier_distance_threshold == 0.01
    assert config.angular_tolerance == 0.5
    assert config.min_inlier_fraction == 0.9
    assert config.projection_residual_epsilon == 0.001
    assert config.ransac_max_iterations == 1000
    assert config.random_seed is None


def test_boundary_config_with_valid_env(monkeypatch):
    _clear_boundary_env(monkeypatch)
    monkeypatch.setenv(ENV_VERBOSE, "yes")
    monkeypatch.setenv(ENV_INLIER_DISTANCE, "0.05")
    monkeypatch.setenv(ENV_ANGULAR_TOLERANCE, "0.25")
    monkeypatch.setenv(ENV_MIN_INLIER_FRACTION, "0.75")
    monkeypatch.setenv(ENV_RESIDUAL_EPSILON, "1e-4")
    monkeypatch.setenv(ENV_RANSAC_MAX_ITERATIONS, "250")
    monkeypatch.setenv(ENV_RANDOM_SEED, "42")

    config = load_boundary_config()

    assert config.verbose is True
    assert config.inlier_distance_threshold == 0.05
    assert config.angular_tolerance == 0.25
    assert config.min_inlier_fraction == 0.75
    assert config.projection_residual_epsilon == 1e-4
    assert config.ransac_max_iterations == 250
    assert config.random_seed == 42


def test_boundary_config_invalid_values_fallback(monkeypatch):
    _clear_boundary_env(monkeypatch)
    monkeypatch.setenv(ENV_VERBOSE, "maybe")
    monkeypatch.setenv(ENV_INLIER_DISTANCE, "abc")
    monkeypatch.setenv(ENV_ANGULAR_TOLERANCE, str(math.pi))
    monkeypatch.setenv(ENV_MIN_INLIER_FRACTION, "1.5")
    monkeypatch.setenv(ENV_RESIDUAL_EPSILON, "nan")
    monkeypatch.setenv(ENV_RANSAC_MAX_ITERATIONS, "0")
    monkeypatch.setenv(ENV_RANDOM_SEED, "-1")

    config = load_boundary_config()

    assert config.verbose is False
    assert config.inlier_distance_threshold == 0.01
    assert config.angular_tolerance == 0.5
    assert config.min_inlier_fraction == 0.9
    assert config.projection_residual_epsilon == 0.001
    assert config.ransac_max_iterations == 1000
    assert config.random_seed is None
