"""Core enums, constants, and record types for the VA importer.

Enums:
    Stage -- Individual pipeline stage (import, sort, glue).

Records:
    StageToggles   -- Which stages a run should execute.
    LoudnessEntry  -- A clip paired with its loudness score during ranking.
    BoundaryRecord -- (start, end, name) of a clip, captured before a glue.
    Marker         -- A named region stored in the session.
    RunSummary     -- What a pipeline run did, for reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Stage(StrEnum):
    IMPORT = "import"
    SORT = "sort"
    GLUE = "glue"


STAGE_ORDER: list[Stage] = [Stage.IMPORT, Stage.SORT, Stage.GLUE]

# One undo step per stage
UNDO_LABELS: dict[Stage, str] = {
    Stage.IMPORT: "SKYW: Import audio files",
    Stage.SORT: "SKYW: Sort items by RMS",
    Stage.GLUE: "SKYW: Glue items and place markers",
}

# Prompt captions, in STAGE_ORDER
STAGE_PROMPTS: dict[Stage, str] = {
    Stage.IMPORT: "Import audio files? y/n",
    Stage.SORT: "Sort items by RMS? y/n",
    Stage.GLUE: "Glue items? y/n",
}

WAVE_EXTENSIONS: frozenset[str] = frozenset({".wav"})

PROMPT_TITLE = "Skywind VA Importer"


@dataclass
class StageToggles:
    """Per-stage on/off switches, built once per run."""

    do_import: bool = True
    do_sort: bool = True
    do_glue: bool = True

    def enabled(self, stage: Stage) -> bool:
        if stage == Stage.IMPORT:
            return self.do_import
        if stage == Stage.SORT:
            return self.do_sort
        return self.do_glue

    def to_responses(self) -> str:
        """Render as the comma-separated y/n answers the prompt expects."""
        return ",".join("y" if self.enabled(s) else "n" for s in STAGE_ORDER)

    @classmethod
    def from_responses(cls, csv: str) -> StageToggles:
        """Parse comma-separated y/n answers.

        A field counts as yes only when it reads "y" or "yes" (any case).
        Missing trailing fields are treated as no.
        """
        answers = [part.strip().lower() for part in csv.split(",")]
        answers += [""] * (len(STAGE_ORDER) - len(answers))
        flags = [answer in ("y", "yes") for answer in answers[: len(STAGE_ORDER)]]
        return cls(do_import=flags[0], do_sort=flags[1], do_glue=flags[2])


@dataclass
class LoudnessEntry:
    """A clip and its score. Lower score means quieter."""

    clip: Any
    score: float


@dataclass(frozen=True)
class BoundaryRecord:
    start: float
    end: float
    name: str


@dataclass(frozen=True)
class Marker:
    start: float
    end: float
    name: str


@dataclass
class RunSummary:
    """Result summary from one pipeline run."""

    imported: int = 0
    tracks_sorted: int = 0
    markers: int = 0
    skipped: list[Stage] = field(default_factory=list)
    aborted: bool = False
