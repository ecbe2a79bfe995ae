"""Stage 01: Import -- one track per VA subfolder, one clip per WAV file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..errors import NotFoundError
from ..models import WAVE_EXTENSIONS

if TYPE_CHECKING:
    from ..host import Host

log = logger.bind(stage="import")


def is_wave(filename: str) -> bool:
    return Path(filename).suffix.lower() in WAVE_EXTENSIONS


def find_va_path(host: Host, dir_name: str) -> Path:
    """Locate `dir_name` among the project path's immediate subdirectories.

    Raises NotFoundError if it isn't there.
    """
    root = host.project_path()
    for subdir in host.list_subdirectories(root):
        if subdir == dir_name:
            log.debug(f"Found VA folder {root / subdir}")
            return root / subdir
    raise NotFoundError(dir_name, root)


def run(host: Host, va_path: Path, dry_run: bool = False) -> int:
    """Import every WAV under each subfolder of `va_path`.

    Subfolders and files are taken in host enumeration order. With
    dry_run, only counts the files that would be imported.
    Returns the number of qualifying files.
    """
    host.set_edit_cursor(0.0)

    count = 0
    for subdir in host.list_subdirectories(va_path):
        track = None
        if not dry_run:
            track = host.create_track(subdir)
            host.select_only_track(track)

        subdir_path = va_path / subdir
        for filename in host.list_files(subdir_path):
            if not is_wave(filename):
                log.debug(f"Skipping non-wave file {subdir}/{filename}")
                continue
            count += 1
            if not dry_run:
                host.insert_media(track, subdir_path / filename)

    prefix = "Would import" if dry_run else "Imported"
    log.info(f"{prefix} {count} files from {va_path}")
    return count
