"""
Logging helpers.

Boundary calculation runs inside host processes and batch scripts. The full
diagnostic trail (plane coefficients, frame, topology summary) goes to a
per-user log file; the CLI can mirror it to stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

ENV_LOG_LEVEL = "PLANAR_BOUNDARY_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def default_log_dir() -> Path:
    """Per-user state directory for the log file."""
    if os.name == "nt":
        local = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA") or str(Path.home())
        return Path(local) / "PlanarBoundary" / "logs"

    state_home = os.environ.get("XDG_STATE_HOME")
    if not state_home:
        state_home = str(Path.home() / ".local" / "state")
    return Path(state_home) / "planarboundary" / "logs"


def _parse_log_level(level: str | int) -> int:
    if isinstance(level, int):
        return int(level)
    name = str(level).strip().upper()
    resolved = getattr(logging, name, None) if name else None
    return int(resolved) if isinstance(resolved, int) else logging.INFO


def _open_file_handler(log_path: Path, level: int) -> Optional[logging.FileHandler]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_path), encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def setup_logging(
    *,
    log_level: str | int = "INFO",
    log_dir: Optional[str | Path] = None,
    filename: str = "planarboundary.log",
) -> Optional[Path]:
    """
    Send root logging to a UTF-8 file.

    Idempotent: when the root logger already has a FileHandler its path is
    returned and nothing is added. `PLANAR_BOUNDARY_LOG_LEVEL` overrides
    `log_level`. Returns None when the log file can't be opened.
    """
    root = logging.getLogger()
    existing = next((h for h in root.handlers if isinstance(h, logging.FileHandler)), None)
    if existing is not None:
        return Path(existing.baseFilename)

    level = _parse_log_level(os.environ.get(ENV_LOG_LEVEL) or log_level)
    log_path = (Path(log_dir) if log_dir is not None else default_log_dir()) / filename
    handler = _open_file_handler(log_path, level)
    if handler is None:
        return None

    root.setLevel(level)
    root.addHandler(handler)
    logging.captureWarnings(True)
    root.info("Logging initialized: %s (level=%s)", log_path, logging.getLevelName(level))
    return log_path


def attach_console_handler(level: str | int = "WARNING", stream: Optional[TextIO] = None) -> logging.Handler:
    """Mirror package log records to stderr (or `stream`) with a short format."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(_parse_log_level(level))
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    package_logger = logging.getLogger(__name__.rpartition(".")[0])
    package_logger.addHandler(handler)
    if package_logger.getEffectiveLevel() > handler.level:
        package_logger.setLevel(handler.level)
    return handler


def format_exception_message(prefix: str, message: str, *, log_path: Optional[Path]) -> str:
    """User-facing error text, pointing at the log file when there is one."""
    text = f"{prefix}\n\n{message}"
    if log_path is not None:
        text += f"\n\n(log file: {log_path})"
    return text
