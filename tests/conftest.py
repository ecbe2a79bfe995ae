"""Shared fixtures: an in-memory session host with ffmpeg patched out."""

from pathlib import Path
from unittest.mock import patch

import pytest

from va_importer.host.session import Clip, Session, SessionHost, Take


@pytest.fixture
def project(tmp_path) -> Path:
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def host(project) -> SessionHost:
    return SessionHost(Session(), project_dir=project, render_dir=project / "glued")


@pytest.fixture
def fake_duration():
    with patch("va_importer.host.session.get_duration", return_value=1.5) as mock:
        yield mock


@pytest.fixture
def fake_render():
    with patch("va_importer.host.session.render_glue") as mock:
        yield mock


@pytest.fixture
def make_va_tree(project):
    """Factory creating importva/<folder>/<file> under the project."""

    def _make(layout: dict[str, list[str]]) -> Path:
        va = project / "importva"
        va.mkdir()
        for folder, files in layout.items():
            (va / folder).mkdir()
            for name in files:
                (va / folder / name).write_bytes(b"RIFF")
        return va

    return _make


@pytest.fixture
def add_track(host):
    """Factory adding a track of (position, length, source_name) clips backed by real files."""

    def _add(name: str, clips: list[tuple[float, float, str]]):
        track = host.create_track(name)
        for position, length, source_name in clips:
            source = host.project_dir / source_name
            source.write_bytes(b"RIFF")
            track.clips.append(
                Clip(position=position, length=length, take=Take(source, source_name))
            )
        return track

    return _add
