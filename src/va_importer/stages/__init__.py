"""Stage registry -- maps Stage enum values to run functions.

Pipeline order: import -> sort -> glue

Stages:
    import -- Find the "importva" folder among the project path's immediate
              subdirectories (NotFoundError if absent). Move the edit cursor
              to 0, then for each subfolder (host enumeration order, not
              sorted) create a track named after it, select it, and insert
              every .wav file (case-insensitive) at the edit cursor. Other
              files are skipped. Supports dry_run, which only counts.
    sort -- For every track, measure each clip's normalization gain, negate
            it into a loudness score, stable-sort ascending, and lay the clips
            end to end from the original first clip's position.
    glue -- Capture (start, end, take name) of every selected clip, glue the
            selection once, then add one named region per captured record in
            selection order.
"""

from ..models import Stage


def get_stage_runner(stage: Stage):
    """Return the run function for a given stage."""
    if stage == Stage.IMPORT:
        from .importer import run as import_run

        return import_run

    if stage == Stage.SORT:
        from .rank import run as sort_run

        return sort_run

    if stage == Stage.GLUE:
        from .glue import run as glue_run

        return glue_run

    raise NotImplementedError(f"Stage '{stage}' is not implemented.")
