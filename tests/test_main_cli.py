import json
import logging

import numpy as np
import trimesh

import main
from tests.test_boundary_extractor import _make_grid_with_hole


def _grid_ply(tmp_path):
    points, faces = _make_grid_with_hole()
    path = tmp_path / "grid.ply"
    trimesh.Trimesh(vertices=points, faces=np.asarray(faces), process=False).export(str(path))
    return path


def _run(monkeypatch, tmp_path, *args):
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setattr("sys.argv", ["main.py", *args])
    root = logging.getLogger()
    old_level = root.level
    try:
        main.run_cli()
    finally:
        for handler in list(root.handlers):
            if isinstance(handler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(old_level)


def test_process_mesh_prints_boundaries(tmp_path, monkeypatch, capsys):
    path = _grid_ply(tmp_path)
    _run(monkeypatch, tmp_path, str(path))

    out = capsys.readouterr().out
    assert "Loaded: 16 points, 17 faces" in out
    assert "Boundary 0:" in out and "Boundary 1:" in out
    assert "(outer)" in out and "(hole)" in out


def test_export_writes_boundary_json(tmp_path, monkeypatch, capsys):
    path = _grid_ply(tmp_path)
    _run(monkeypatch, tmp_path, "--export", str(path))

    saved = tmp_path / "grid.boundary.json"
    assert saved.exists()
    doc = json.loads(saved.read_text(encoding="utf-8"))
    assert len(doc["boundaries"]) == 2
    assert doc["meta"]["source"].endswith("grid.ply")
    assert f"Saved: {saved}" in capsys.readouterr().out


def test_boundary_error_is_reported(tmp_path, monkeypatch, capsys):
    # Two unrelated triangles standing at right angles: no common plane.
    points = np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [5.0, 0.0, 0.0], [5.0, 1.0, 0.0], [5.0, 0.0, 1.0]]
    )
    path = tmp_path / "bent.ply"
    trimesh.Trimesh(vertices=points, faces=[[0, 1, 2], [3, 4, 5]], process=False).export(str(path))

    _run(monkeypatch, tmp_path, str(path))
    out = capsys.readouterr().out
    assert "Error: boundary calculation failed" in out
    assert "log file:" in out


def test_unknown_command(tmp_path, monkeypatch, capsys):
    _run(monkeypatch, tmp_path, str(tmp_path / "missing.ply"))
    assert "Unknown command or file not found" in capsys.readouterr().out
