"""Pipeline runner -- gates and sequences the import, sort and glue stages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from loguru import logger

from .errors import NotFoundError
from .models import STAGE_ORDER, UNDO_LABELS, RunSummary, Stage, StageToggles
from .stages import get_stage_runner
from .stages.importer import find_va_path

if TYPE_CHECKING:
    from .config import PipelineConfig
    from .host import Host
    from .prompt import Prompter

log = logger.bind(stage="runner")


class PipelineRunner:
    """Runs the enabled stages, in order, against one host session.

    Each stage is wrapped in its own undo block. Host failures are not
    caught: they abort the rest of the run, and undo blocks that already
    closed stay in the history.
    """

    def __init__(
        self,
        config: PipelineConfig,
        host: Host,
        prompter: Prompter,
    ) -> None:
        self.config = config
        self.host = host
        self.prompter = prompter

    def run(self, toggles: StageToggles | None = None) -> RunSummary | None:
        """Run the pipeline. Returns None if the stage prompt was cancelled."""
        if toggles is None:
            toggles = self.prompter.ask_stages(self.config.toggles())
            if toggles is None:
                log.info("Stage prompt cancelled")
                return None

        summary = RunSummary()
        for stage in STAGE_ORDER:
            if not toggles.enabled(stage):
                log.debug(f"Stage {stage} disabled")
                summary.skipped.append(stage)
                continue

            if stage == Stage.IMPORT:
                if not self._run_import(summary):
                    return summary
            elif self.config.dry_run:
                click.echo(f"  [DRY-RUN] Would run {stage}")
            elif stage == Stage.SORT:
                self._run_sort(summary)
            elif stage == Stage.GLUE:
                self._run_glue(summary)

        return summary

    def _run_import(self, summary: RunSummary) -> bool:
        """Preview, confirm, then import. Returns False to stop the run."""
        try:
            va_path = find_va_path(self.host, self.config.va_dir_name)
        except NotFoundError as exc:
            log.error(str(exc))
            self.prompter.alert(str(exc))
            summary.aborted = True
            return False

        import_run = get_stage_runner(Stage.IMPORT)
        count = import_run(self.host, va_path, dry_run=True)

        if self.config.dry_run:
            click.echo(f"  [DRY-RUN] Would import {count} audio files from {va_path}")
            return True

        message = f'Import {count} audio files from folder "{self.config.va_dir_name}"?'
        if not (self.config.assume_yes or self.prompter.confirm(message)):
            log.info("Import declined")
            summary.skipped.append(Stage.IMPORT)
            return True

        with self.host.undo_block(UNDO_LABELS[Stage.IMPORT]):
            summary.imported = import_run(self.host, va_path)
        click.echo(f"  IMPORT: {summary.imported} audio files")
        return True

    def _run_sort(self, summary: RunSummary) -> None:
        sort_run = get_stage_runner(Stage.SORT)
        with self.host.undo_block(UNDO_LABELS[Stage.SORT]):
            summary.tracks_sorted = sort_run(self.host)
        click.echo(f"  SORT: {summary.tracks_sorted} tracks ordered by RMS")

    def _run_glue(self, summary: RunSummary) -> None:
        glue_run = get_stage_runner(Stage.GLUE)
        with self.host.undo_block(UNDO_LABELS[Stage.GLUE]):
            if self.config.select_all_before_glue:
                self.host.select_all_clips()
            records = glue_run(self.host, self.host.selected_clips())
        summary.markers = len(records)
        click.echo(f"  GLUE: {summary.markers} markers placed")
