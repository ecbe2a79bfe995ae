"""CLI entry point for the VA importer."""

import os
from pathlib import Path

import click
from loguru import logger

from .config import PipelineConfig
from .errors import ConfigError, HostOperationFailure, SessionFileError
from .host.session import Session, SessionHost
from .prompt import ClickPrompter
from .runner import PipelineRunner

log = logger.bind(stage="cli")


def _find_config_file(project_dir: Path) -> Path | None:
    """Look for .env in the project directory or in cwd."""
    for candidate in [project_dir / ".env", Path.cwd() / ".env"]:
        if candidate.is_file():
            return candidate
    return None


def _load_env_file(env_file: Path) -> None:
    """Load a shell-style .env file into os.environ (without overriding)."""
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        # Don't override existing env vars (CLI > env > file)
        if key not in os.environ:
            os.environ[key] = value


@click.command()
@click.argument(
    "project_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option("--import/--no-import", "do_import", default=True, help="Import audio files.")
@click.option("--sort/--no-sort", "do_sort", default=True, help="Sort items by RMS.")
@click.option("--glue/--no-glue", "do_glue", default=True, help="Glue items and place markers.")
@click.option(
    "--select-all/--no-select-all",
    default=True,
    help="Select every clip before gluing (otherwise glue the saved selection).",
)
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Don't ask before importing.")
@click.option(
    "--dry-run", is_flag=True, help="Count the files to import without changing anything."
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to .env file.",
)
def main(
    project_dir: Path,
    do_import: bool,
    do_sort: bool,
    do_glue: bool,
    select_all: bool,
    assume_yes: bool,
    dry_run: bool,
    verbose: bool,
    config_file: Path | None,
) -> None:
    """Import VA recordings into per-character tracks, sort them by RMS, and glue them."""
    project_dir = project_dir.resolve()

    env_file = config_file or _find_config_file(project_dir)
    if env_file:
        _load_env_file(env_file)
        log.debug(f"Loaded env from {env_file}")

    # Pass CLI flags as kwargs to avoid env pollution
    config_kwargs: dict[str, object] = {
        "project_dir": project_dir,
        "do_import": do_import,
        "do_sort": do_sort,
        "do_glue": do_glue,
        "select_all_before_glue": select_all,
        "assume_yes": assume_yes,
        "dry_run": dry_run,
        "verbose": verbose,
    }

    try:
        config = PipelineConfig(**config_kwargs)  # type: ignore[arg-type]
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    config.setup_logging()

    try:
        session = Session.load(config.session_path)
    except SessionFileError as exc:
        raise click.ClickException(str(exc)) from exc
    host = SessionHost(
        session,
        project_dir=config.project_dir,
        render_dir=config.render_dir,
        ffmpeg_bin=config.ffmpeg_bin,
        ffprobe_bin=config.ffprobe_bin,
    )
    runner = PipelineRunner(config=config, host=host, prompter=ClickPrompter())

    log.info(f"Starting pipeline: project={project_dir} dry_run={dry_run}")
    try:
        summary = runner.run()
    except HostOperationFailure as exc:
        log.error(f"Pipeline aborted: {exc}")
        # Partial work stays in the session, as it would in the DAW
        if not dry_run:
            session.save(config.session_path)
        raise click.ClickException(str(exc)) from exc

    # An aborted run performed no mutation, so nothing is saved
    if summary is None or summary.aborted:
        raise SystemExit(1)

    if not dry_run:
        session.save(config.session_path)

    click.echo(
        f"Done: {summary.imported} imported, {summary.tracks_sorted} tracks sorted, "
        f"{summary.markers} markers"
    )
