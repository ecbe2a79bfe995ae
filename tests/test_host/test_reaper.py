"""Tests for the REAPER host adapter (ReaScript API mocked)."""

from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from va_importer.errors import HostOperationFailure
from va_importer.host.reaper import (
    GLUE_ITEMS_COMMAND,
    ReaperHost,
    ReaperPrompter,
    _is_null,
)
from va_importer.models import StageToggles

NULL_ITEM = "(MediaItem*)0x0000000000000000"


@pytest.fixture
def api():
    return MagicMock()


class TestIsNull:
    @pytest.mark.parametrize("value", [None, "", NULL_ITEM, "(MediaTrack*)0x00000000"])
    def test_null(self, value):
        assert _is_null(value)

    def test_valid_pointer(self):
        assert not _is_null("(MediaItem*)0x00007f8a1c02b400")


class TestFilesystem:
    def test_project_path(self, api):
        api.GetProjectPath.return_value = ("/projects/skywind", 4096)
        assert ReaperHost(api).project_path() == Path("/projects/skywind")

    def test_empty_project_path_fails(self, api):
        api.GetProjectPath.return_value = ("", 4096)
        with pytest.raises(HostOperationFailure):
            ReaperHost(api).project_path()

    def test_enumerates_until_empty(self, api):
        names = ["Alice", "Bob", ""]
        api.EnumerateSubdirectories.side_effect = lambda path, i: names[i]
        assert list(ReaperHost(api).list_subdirectories(Path("/va"))) == ["Alice", "Bob"]
        api.EnumerateSubdirectories.assert_has_calls([call("/va", 0), call("/va", 1)])


class TestTracksAndClips:
    def test_create_track_on_top_and_named(self, api):
        api.GetTrack.return_value = "(MediaTrack*)0x1"
        track = ReaperHost(api).create_track("Alice")
        assert track == "(MediaTrack*)0x1"
        api.InsertTrackAtIndex.assert_called_once_with(0, True)
        api.GetSetMediaTrackInfo_String.assert_called_once_with(
            "(MediaTrack*)0x1", "P_NAME", "Alice", True
        )

    def test_insert_media_moves_cursor_to_item_end(self, api):
        api.GetSelectedMediaItem.return_value = "(MediaItem*)0x2"
        api.GetMediaItemInfo_Value.side_effect = lambda item, parm: {
            "D_POSITION": 3.0, "D_LENGTH": 1.25,
        }[parm]
        item = ReaperHost(api).insert_media("(MediaTrack*)0x1", Path("/va/Alice/a.wav"))
        assert item == "(MediaItem*)0x2"
        api.InsertMedia.assert_called_once_with("/va/Alice/a.wav", 0)
        api.SetEditCurPos.assert_called_once_with(4.25, False, False)

    def test_insert_media_without_new_item_fails(self, api):
        api.GetSelectedMediaItem.return_value = NULL_ITEM
        with pytest.raises(HostOperationFailure):
            ReaperHost(api).insert_media("(MediaTrack*)0x1", Path("/va/a.wav"))

    def test_clips_bounded_by_count(self, api):
        api.CountTrackMediaItems.return_value = 2
        api.GetTrackMediaItem.side_effect = lambda track, i: f"(MediaItem*)0x{i + 1}"
        assert list(ReaperHost(api).clips("t")) == ["(MediaItem*)0x1", "(MediaItem*)0x2"]

    def test_tracks_snapshot(self, api):
        api.CountTracks.return_value = 2
        api.GetTrack.side_effect = lambda proj, i: f"(MediaTrack*)0x{i + 1}"
        assert ReaperHost(api).tracks() == ["(MediaTrack*)0x1", "(MediaTrack*)0x2"]


class TestTakeAndMeasure:
    def test_take_name(self, api):
        api.GetActiveTake.return_value = "(MediaItem_Take*)0x3"
        api.GetSetMediaItemTakeInfo_String.return_value = (
            True, "(MediaItem_Take*)0x3", "P_NAME", "line1.wav", False,
        )
        assert ReaperHost(api).take_name("item") == "line1.wav"

    def test_take_name_without_take(self, api):
        api.GetActiveTake.return_value = "(MediaItem_Take*)0x0"
        assert ReaperHost(api).take_name("item") == ""

    def test_measure_uses_rms_normalization(self, api):
        api.GetActiveTake.return_value = "(MediaItem_Take*)0x3"
        api.GetMediaItemTake_Source.return_value = "(PCM_source*)0x4"
        api.CalculateNormalization.return_value = 2.5
        assert ReaperHost(api).measure("item") == 2.5
        api.CalculateNormalization.assert_called_once_with("(PCM_source*)0x4", 1, 0, 0, 0)

    def test_measure_without_source_fails(self, api):
        api.GetActiveTake.return_value = "(MediaItem_Take*)0x3"
        api.GetMediaItemTake_Source.return_value = "(PCM_source*)0x0"
        with pytest.raises(HostOperationFailure):
            ReaperHost(api).measure("item")


class TestGlueMarkersUndo:
    def test_glue_selects_exactly_the_selection(self, api):
        ReaperHost(api).glue(["i1", "i2"])
        api.SelectAllMediaItems.assert_called_once_with(0, False)
        api.SetMediaItemSelected.assert_has_calls([call("i1", True), call("i2", True)])
        api.Main_OnCommand.assert_called_once_with(GLUE_ITEMS_COMMAND, 0)

    def test_add_marker_is_region(self, api):
        ReaperHost(api).add_marker(1.0, 2.0, "line1.wav")
        api.AddProjectMarker.assert_called_once_with(0, True, 1.0, 2.0, "line1.wav", -1)

    def test_undo_block_closes_on_error(self, api):
        with pytest.raises(HostOperationFailure):
            with ReaperHost(api).undo_block("SKYW: Sort items by RMS"):
                raise HostOperationFailure("measure failed")
        api.Undo_BeginBlock.assert_called_once_with()
        api.Undo_EndBlock.assert_called_once_with("SKYW: Sort items by RMS", -1)


class TestReaperPrompter:
    def test_ask_stages_parses_answers(self, api):
        api.GetUserInputs.return_value = (True, "title", 3, "captions", "y,n,y", 512)
        toggles = ReaperPrompter(api).ask_stages(StageToggles())
        assert toggles == StageToggles(do_import=True, do_sort=False, do_glue=True)
        args = api.GetUserInputs.call_args.args
        assert args[0] == "Skywind VA Importer"
        assert args[1] == 3
        assert args[3] == "y,y,y"

    def test_ask_stages_cancelled(self, api):
        api.GetUserInputs.return_value = (False, "title", 3, "captions", "", 512)
        assert ReaperPrompter(api).ask_stages(StageToggles()) is None

    def test_confirm_ok(self, api):
        api.ShowMessageBox.return_value = 1
        assert ReaperPrompter(api).confirm("Import 2 audio files?") is True
        api.ShowMessageBox.assert_called_once_with(
            "Import 2 audio files?", "Skywind VA Importer", 1
        )

    def test_confirm_cancel(self, api):
        api.ShowMessageBox.return_value = 2
        assert ReaperPrompter(api).confirm("Import?") is False
