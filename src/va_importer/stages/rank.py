"""Stage 02: Sort -- reorder each track's clips from quietest to loudest."""

from __future__ import annotations

from operator import attrgetter
from typing import TYPE_CHECKING, Any

from loguru import logger

from ..models import LoudnessEntry

if TYPE_CHECKING:
    from ..host import Host

log = logger.bind(stage="sort")


def loudness_score(gain: float) -> float:
    """Invert a normalization gain so that quieter clips score lower."""
    return -gain


def rank_track(host: Host, track: Any) -> list[LoudnessEntry]:
    """Measure every clip on `track` and return them quietest first.

    The sort is stable: clips with equal scores keep their track order.
    Measurement failures propagate.
    """
    entries = [
        LoudnessEntry(clip=clip, score=loudness_score(host.measure(clip)))
        for clip in host.clips(track)
    ]
    return sorted(entries, key=attrgetter("score"))


def reposition(host: Host, entries: list[LoudnessEntry], start: float) -> None:
    """Lay clips end to end in `entries` order, beginning at `start`."""
    cursor = start
    for entry in entries:
        host.set_clip_position(entry.clip, cursor)
        cursor += host.clip_length(entry.clip)


def run(host: Host) -> int:
    """Rank and reposition the clips of every track in the session.

    Returns the number of tracks that had clips.
    """
    sorted_tracks = 0
    for track in host.tracks():
        first = next(host.clips(track), None)
        if first is None:
            continue
        start = host.clip_position(first)

        entries = rank_track(host, track)
        reposition(host, entries, start)
        sorted_tracks += 1
        log.debug(f"Sorted {len(entries)} clips from {start:.3f}s")

    log.info(f"Sorted clips on {sorted_tracks} tracks")
    return sorted_tracks
