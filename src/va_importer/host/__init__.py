"""Host backends -- the DAW session the stages read and mutate.

Submodules:
    session -- SessionHost: in-memory session persisted as JSON in the project
               directory. Enumerates the filesystem with os.scandir (unsorted),
               measures loudness and renders glued audio with ffmpeg.
    reaper  -- ReaperHost and ReaperPrompter: adapters over the ReaScript API
               (python-reapy's reascript_api), calling the same primitives as
               the REAPER action (InsertMedia, CalculateNormalization, glue
               command 40362, AddProjectMarker, Undo_BeginBlock/EndBlock).

Stages only talk to the Host protocol below; track and clip handles are
opaque to them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


def iter_indexed(fetch: Callable[[int], T | None]) -> Iterator[T]:
    """Yield fetch(0), fetch(1), ... until fetch returns a falsy value.

    Wraps the host's indexed enumeration calls. Finite and not restartable:
    each step consumes one host-side index.
    """
    index = 0
    while True:
        value = fetch(index)
        if not value:
            return
        yield value
        index += 1


class Host(Protocol):
    """Operations the pipeline needs from the DAW session."""

    # -- Filesystem --
    def project_path(self) -> Path: ...

    def list_subdirectories(self, path: Path) -> Iterator[str]: ...

    def list_files(self, path: Path) -> Iterator[str]: ...

    # -- Tracks --
    def set_edit_cursor(self, seconds: float) -> None: ...

    def create_track(self, name: str) -> Any: ...

    def select_only_track(self, track: Any) -> None: ...

    def insert_media(self, track: Any, path: Path) -> Any:
        """Insert `path` as a new clip on `track` at the edit cursor.

        Post-condition: the edit cursor sits at the end of the new clip.
        """
        ...

    def tracks(self) -> list[Any]: ...

    def clips(self, track: Any) -> Iterator[Any]: ...

    # -- Clips --
    def clip_position(self, clip: Any) -> float: ...

    def set_clip_position(self, clip: Any, seconds: float) -> None: ...

    def clip_length(self, clip: Any) -> float: ...

    def take_name(self, clip: Any) -> str: ...

    def measure(self, clip: Any) -> float:
        """Normalization gain of the clip's active source.

        Raises HostOperationFailure when the source can't be measured.
        """
        ...

    # -- Selection, glue, markers --
    def selected_clips(self) -> list[Any]: ...

    def select_all_clips(self) -> None: ...

    def glue(self, selection: list[Any]) -> None: ...

    def add_marker(self, start: float, end: float, name: str) -> None: ...

    def undo_block(self, label: str) -> AbstractContextManager[None]: ...
