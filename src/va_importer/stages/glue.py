"""Stage 03: Glue -- merge the selected clips and mark their old bounds.

Boundaries and names are captured before the glue; the glue replaces the
clip objects, so markers are written only from the captured records.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from ..models import BoundaryRecord

if TYPE_CHECKING:
    from ..host import Host

log = logger.bind(stage="glue")


def capture_boundaries(host: Host, selection: list[Any]) -> list[BoundaryRecord]:
    """Snapshot (start, end, take name) for each clip, in selection order."""
    records = []
    for clip in selection:
        start = host.clip_position(clip)
        end = start + host.clip_length(clip)
        records.append(BoundaryRecord(start=start, end=end, name=host.take_name(clip) or ""))
    return records


def run(host: Host, selection: list[Any]) -> list[BoundaryRecord]:
    """Glue `selection` once and add one region marker per original clip.

    Returns the captured records, one per marker written.
    """
    if not selection:
        log.warning("No clips selected, nothing to glue")
        return []

    records = capture_boundaries(host, selection)
    host.glue(selection)

    for record in records:
        host.add_marker(record.start, record.end, record.name)

    log.info(f"Glued {len(records)} clips, placed {len(records)} markers")
    return records
