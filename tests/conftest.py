"""Pytest fixtures for the guild instance API tests."""

import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure project root is in path for instance_api imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


@pytest.fixture
def project_root() -> Path:
    return _project_root


@pytest.fixture
def instances_dir(tmp_path: Path) -> Path:
    """Empty instance store; write records with write_instance."""
    d = tmp_path / "instances"
    d.mkdir()
    return d


@pytest.fixture
def write_instance(instances_dir: Path):
    """write_instance(guild_id, data) -> path. data may be a dict (dumped as JSON) or raw text."""

    def _write(guild_id: str, data) -> Path:
        path = instances_dir / f"{guild_id}.json"
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_time_facet():
    """make_time_facet(with_capabilities=True, **fields): fake live time facet. with_capabilities adds is_day() / time_till_change()."""

    def _make(with_capabilities: bool = True, **fields) -> SimpleNamespace:
        values = {
            "time": 13.5,
            "sunrise": 7.25,
            "sunset": 19.75,
            "day_length_minutes": 60,
            "time_scale": 1.5,
        }
        values.update(fields)
        facet = SimpleNamespace(**values)
        if with_capabilities:
            facet.is_day = lambda: values["sunrise"] <= values["time"] < values["sunset"]
            facet.time_till_change = lambda: 6.25
        return facet

    return _make


@pytest.fixture
def make_connection():
    """make_connection(time=<facet or None>) -> fake live connection."""

    def _make(time=None) -> SimpleNamespace:
        return SimpleNamespace(time=time)

    return _make
