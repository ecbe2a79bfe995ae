"""Standalone host: an in-memory DAW session persisted as a JSON file.

File format:

    {
      "edit_cursor": 0.0,
      "tracks": [
        {"name": "Alice", "selected": true,
         "clips": [{"position": 0.0, "length": 1.5, "selected": false,
                    "take": {"source": "/abs/line1.wav", "name": "line1.wav"}}]}
      ],
      "markers": [{"start": 0.0, "end": 1.5, "name": "line1.wav"}],
      "undo_history": ["SKYW: Import audio files"]
    }
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from operator import attrgetter
from pathlib import Path
from typing import Any

from loguru import logger

from ..errors import HostOperationFailure, SessionFileError
from ..ffmpeg import get_duration, normalization_gain, render_glue
from ..models import Marker
from ..sanitize import sanitize_filename

log = logger.bind(stage="session")


@dataclass
class Take:
    source: Path
    name: str = ""


@dataclass(eq=False)
class Clip:
    position: float
    length: float
    take: Take
    selected: bool = False

    @property
    def end(self) -> float:
        return self.position + self.length


@dataclass(eq=False)
class Track:
    name: str
    clips: list[Clip] = field(default_factory=list)
    selected: bool = False


@dataclass
class Session:
    """Tracks, markers, edit cursor and undo labels of one project."""

    tracks: list[Track] = field(default_factory=list)
    markers: list[Marker] = field(default_factory=list)
    edit_cursor: float = 0.0
    undo_history: list[str] = field(default_factory=list)

    # -- Serialization --

    def to_dict(self) -> dict[str, Any]:
        return {
            "edit_cursor": self.edit_cursor,
            "tracks": [
                {
                    "name": track.name,
                    "selected": track.selected,
                    "clips": [
                        {
                            "position": clip.position,
                            "length": clip.length,
                            "selected": clip.selected,
                            "take": {
                                "source": str(clip.take.source),
                                "name": clip.take.name,
                            },
                        }
                        for clip in track.clips
                    ],
                }
                for track in self.tracks
            ],
            "markers": [
                {"start": m.start, "end": m.end, "name": m.name}
                for m in self.markers
            ],
            "undo_history": list(self.undo_history),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        tracks = [
            Track(
                name=t["name"],
                selected=t.get("selected", False),
                clips=[
                    Clip(
                        position=float(c["position"]),
                        length=float(c["length"]),
                        selected=c.get("selected", False),
                        take=Take(
                            source=Path(c["take"]["source"]),
                            name=c["take"].get("name", ""),
                        ),
                    )
                    for c in t.get("clips", [])
                ],
            )
            for t in data.get("tracks", [])
        ]
        markers = [
            Marker(float(m["start"]), float(m["end"]), m.get("name", ""))
            for m in data.get("markers", [])
        ]
        return cls(
            tracks=tracks,
            markers=markers,
            edit_cursor=float(data.get("edit_cursor", 0.0)),
            undo_history=list(data.get("undo_history", [])),
        )

    @classmethod
    def load(cls, path: Path) -> Session:
        """Read a session file. A missing file is an empty session."""
        if not path.exists():
            log.debug(f"No session file at {path}, starting empty")
            return cls()
        try:
            return cls.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError) as exc:
            log.error(f"Failed to read session {path}: {exc}")
            raise SessionFileError(f"Failed to read session {path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Atomically write the session file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_path, path)
            log.debug(f"Wrote session {path}")
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError as cleanup_err:
                log.warning(f"Failed to cleanup temp file {tmp_path}: {cleanup_err}")
            raise


class SessionHost:
    """Host implementation over a Session, the local filesystem and ffmpeg."""

    def __init__(
        self,
        session: Session,
        project_dir: Path,
        render_dir: Path,
        ffmpeg_bin: str = "ffmpeg",
        ffprobe_bin: str = "ffprobe",
    ) -> None:
        self.session = session
        self.project_dir = project_dir
        self.render_dir = render_dir
        self.ffmpeg_bin = ffmpeg_bin
        self.ffprobe_bin = ffprobe_bin

    # -- Filesystem --

    def project_path(self) -> Path:
        return self.project_dir

    def _scan(self, path: Path, want_dirs: bool) -> Iterator[str]:
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    if entry.is_dir() == want_dirs:
                        yield entry.name
        except FileNotFoundError:
            return
        except OSError as exc:
            raise HostOperationFailure(f"Cannot list {path}: {exc}") from exc

    def list_subdirectories(self, path: Path) -> Iterator[str]:
        return self._scan(path, want_dirs=True)

    def list_files(self, path: Path) -> Iterator[str]:
        return self._scan(path, want_dirs=False)

    # -- Tracks --

    def set_edit_cursor(self, seconds: float) -> None:
        self.session.edit_cursor = seconds

    def create_track(self, name: str) -> Track:
        track = Track(name=name)
        self.session.tracks.append(track)
        log.debug(f"Created track '{name}'")
        return track

    def select_only_track(self, track: Track) -> None:
        for t in self.session.tracks:
            t.selected = t is track

    def insert_media(self, track: Track, path: Path) -> Clip:
        try:
            length = get_duration(path, self.ffprobe_bin)
        except (ValueError, OSError) as exc:
            raise HostOperationFailure(f"Cannot insert {path}: {exc}") from exc
        clip = Clip(
            position=self.session.edit_cursor,
            length=length,
            take=Take(source=path.resolve(), name=path.name),
        )
        track.clips.append(clip)
        self.session.edit_cursor = clip.end
        log.debug(f"Inserted {path.name} on '{track.name}' at {clip.position:.3f}s")
        return clip

    def tracks(self) -> list[Track]:
        return list(self.session.tracks)

    def clips(self, track: Track) -> Iterator[Clip]:
        return iter(sorted(track.clips, key=attrgetter("position")))

    # -- Clips --

    def clip_position(self, clip: Clip) -> float:
        return clip.position

    def set_clip_position(self, clip: Clip, seconds: float) -> None:
        clip.position = seconds
        # A moved clip sorts after clips already at the same position
        for track in self.session.tracks:
            if any(c is clip for c in track.clips):
                track.clips = [c for c in track.clips if c is not clip]
                index = max(
                    (i + 1 for i, c in enumerate(track.clips) if c.position <= seconds),
                    default=0,
                )
                track.clips.insert(index, clip)
                return

    def clip_length(self, clip: Clip) -> float:
        return clip.length

    def take_name(self, clip: Clip) -> str:
        return clip.take.name or ""

    def measure(self, clip: Clip) -> float:
        source = clip.take.source
        if not source.is_file():
            raise HostOperationFailure(f"Missing audio source: {source}")
        try:
            return normalization_gain(source, self.ffmpeg_bin)
        except (ValueError, OSError) as exc:
            raise HostOperationFailure(f"Cannot measure {source}: {exc}") from exc

    # -- Selection, glue, markers --

    def selected_clips(self) -> list[Clip]:
        return [c for t in self.session.tracks for c in self.clips(t) if c.selected]

    def select_all_clips(self) -> None:
        for track in self.session.tracks:
            for clip in track.clips:
                clip.selected = True

    def _next_render_path(self, track_name: str) -> Path:
        stem = sanitize_filename(track_name)
        n = 1
        while (self.render_dir / f"{stem}-glued-{n:03d}.wav").exists():
            n += 1
        return self.render_dir / f"{stem}-glued-{n:03d}.wav"

    def glue(self, selection: list[Clip]) -> None:
        """Replace the selected clips of each track with one rendered clip."""
        chosen = {id(c) for c in selection}
        for track in self.session.tracks:
            parts = [c for c in track.clips if id(c) in chosen]
            if not parts:
                continue
            start = min(c.position for c in parts)
            end = max(c.end for c in parts)
            output = self._next_render_path(track.name)
            try:
                render_glue(
                    [(c.take.source, c.position - start) for c in parts],
                    output,
                    duration=end - start,
                    ffmpeg_bin=self.ffmpeg_bin,
                )
            except OSError as exc:
                raise HostOperationFailure(f"Cannot render {output}: {exc}") from exc
            merged = Clip(
                position=start,
                length=end - start,
                take=Take(source=output.resolve(), name=output.name),
                selected=True,
            )
            kept = [c for c in track.clips if id(c) not in chosen]
            track.clips = sorted(kept + [merged], key=lambda c: c.position)
            log.info(f"Glued {len(parts)} clips on '{track.name}' -> {output.name}")

    def add_marker(self, start: float, end: float, name: str) -> None:
        self.session.markers.append(Marker(start, end, name))

    @contextmanager
    def undo_block(self, label: str) -> Iterator[None]:
        log.debug(f"Undo block open: {label}")
        try:
            yield
        finally:
            self.session.undo_history.append(label)
            log.debug(f"Undo block closed: {label}")
