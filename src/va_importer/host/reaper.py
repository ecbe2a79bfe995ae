"""REAPER host -- adapter over the ReaScript API.

`api` is any object exposing the ReaScript functions without the RPR_
prefix, with ReaScript-Python return conventions (calls with output
buffers return a tuple of all arguments, retval first). python-reapy's
`reapy.reascript_api` is the usual source.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from loguru import logger

from ..errors import HostOperationFailure
from ..models import PROMPT_TITLE, STAGE_ORDER, STAGE_PROMPTS, StageToggles
from . import iter_indexed

log = logger.bind(stage="reaper")

PROJECT = 0  # current project
GLUE_ITEMS_COMMAND = 40362  # Item: Glue items
NORMALIZE_TO_RMS = 1
UNDO_ALL = -1
BUF_SIZE = 4096

_NULL_POINTER = re.compile(r"0x0+$")


def _is_null(pointer: Any) -> bool:
    """ReaScript returns null pointers as e.g. '(MediaItem*)0x0000000000000000'."""
    if not pointer:
        return True
    return isinstance(pointer, str) and bool(_NULL_POINTER.search(pointer))


def load_reascript_api() -> Any:
    """Import python-reapy's ReaScript function table."""
    from reapy import reascript_api

    return reascript_api


class ReaperHost:
    """Host implementation that drives a running REAPER instance."""

    def __init__(self, api: Any) -> None:
        self.api = api

    # -- Filesystem --

    def project_path(self) -> Path:
        path = self.api.GetProjectPath("", BUF_SIZE)[0]
        if not path:
            raise HostOperationFailure("REAPER returned an empty project path")
        return Path(path)

    def list_subdirectories(self, path: Path) -> Iterator[str]:
        return iter_indexed(lambda i: self.api.EnumerateSubdirectories(str(path), i))

    def list_files(self, path: Path) -> Iterator[str]:
        return iter_indexed(lambda i: self.api.EnumerateFiles(str(path), i))

    # -- Tracks --

    def set_edit_cursor(self, seconds: float) -> None:
        self.api.SetEditCurPos(seconds, True, False)

    def create_track(self, name: str) -> Any:
        # New tracks go on top, like inserting at index 0 by hand
        self.api.InsertTrackAtIndex(0, True)
        track = self.api.GetTrack(PROJECT, 0)
        if _is_null(track):
            raise HostOperationFailure(f"Failed to create track '{name}'")
        self.api.GetSetMediaTrackInfo_String(track, "P_NAME", name, True)
        return track

    def select_only_track(self, track: Any) -> None:
        self.api.SetOnlyTrackSelected(track)

    def insert_media(self, track: Any, path: Path) -> Any:
        # InsertMedia mode 0 adds to the selected track and selects the new item
        self.api.InsertMedia(str(path), 0)
        item = self.api.GetSelectedMediaItem(PROJECT, 0)
        if _is_null(item):
            raise HostOperationFailure(f"No item selected after inserting {path}")
        end = self.clip_position(item) + self.clip_length(item)
        self.api.SetEditCurPos(end, False, False)
        return item

    def tracks(self) -> list[Any]:
        count = self.api.CountTracks(PROJECT)
        return [self.api.GetTrack(PROJECT, i) for i in range(count)]

    def clips(self, track: Any) -> Iterator[Any]:
        count = self.api.CountTrackMediaItems(track)
        return iter_indexed(
            lambda i: None if i >= count else self.api.GetTrackMediaItem(track, i)
        )

    # -- Clips --

    def clip_position(self, clip: Any) -> float:
        return self.api.GetMediaItemInfo_Value(clip, "D_POSITION")

    def set_clip_position(self, clip: Any, seconds: float) -> None:
        self.api.SetMediaItemInfo_Value(clip, "D_POSITION", seconds)

    def clip_length(self, clip: Any) -> float:
        return self.api.GetMediaItemInfo_Value(clip, "D_LENGTH")

    def _active_take(self, clip: Any) -> Any:
        take = self.api.GetActiveTake(clip)
        return None if _is_null(take) else take

    def take_name(self, clip: Any) -> str:
        take = self._active_take(clip)
        if take is None:
            return ""
        result = self.api.GetSetMediaItemTakeInfo_String(take, "P_NAME", "", False)
        return result[3] or ""

    def measure(self, clip: Any) -> float:
        take = self._active_take(clip)
        if take is None:
            raise HostOperationFailure(f"Item {clip} has no active take")
        source = self.api.GetMediaItemTake_Source(take)
        if _is_null(source):
            raise HostOperationFailure(f"Item {clip} has no audio source")
        return self.api.CalculateNormalization(source, NORMALIZE_TO_RMS, 0, 0, 0)

    # -- Selection, glue, markers --

    def selected_clips(self) -> list[Any]:
        count = self.api.CountSelectedMediaItems(PROJECT)
        return [self.api.GetSelectedMediaItem(PROJECT, i) for i in range(count)]

    def select_all_clips(self) -> None:
        self.api.SelectAllMediaItems(PROJECT, True)

    def glue(self, selection: list[Any]) -> None:
        self.api.SelectAllMediaItems(PROJECT, False)
        for item in selection:
            self.api.SetMediaItemSelected(item, True)
        self.api.Main_OnCommand(GLUE_ITEMS_COMMAND, 0)

    def add_marker(self, start: float, end: float, name: str) -> None:
        self.api.AddProjectMarker(PROJECT, True, start, end, name, -1)

    @contextmanager
    def undo_block(self, label: str) -> Iterator[None]:
        self.api.Undo_BeginBlock()
        try:
            yield
        finally:
            self.api.Undo_EndBlock(label, UNDO_ALL)
            self.api.UpdateArrange()


class ReaperPrompter:
    """Prompts through REAPER's GetUserInputs/ShowMessageBox dialogs."""

    MB_OK = 0
    MB_OKCANCEL = 1
    IDOK = 1

    def __init__(self, api: Any) -> None:
        self.api = api

    def ask_stages(self, defaults: StageToggles) -> StageToggles | None:
        captions = ",".join(STAGE_PROMPTS[s] for s in STAGE_ORDER)
        result = self.api.GetUserInputs(
            PROMPT_TITLE, len(STAGE_ORDER), captions, defaults.to_responses(), 512
        )
        if not result[0]:
            return None
        return StageToggles.from_responses(result[4])

    def confirm(self, message: str) -> bool:
        return self.api.ShowMessageBox(message, PROMPT_TITLE, self.MB_OKCANCEL) == self.IDOK

    def alert(self, message: str) -> None:
        self.api.ShowMessageBox(message, PROMPT_TITLE, self.MB_OK)
