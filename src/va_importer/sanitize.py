"""Filename sanitization for rendered audio."""

import re
from pathlib import Path

from loguru import logger

log = logger.bind(stage="sanitize")


def sanitize_filename(filename: str) -> str:
    """Sanitize a filename component (not a full path).

    Replaces unsafe chars with underscores, removes leading and trailing
    dots, collapses repeated underscores, truncates to 255 bytes preserving
    the extension. Falls back to "track" when nothing usable is left.
    """
    log.debug(f"sanitize_filename(filename='{filename}')")

    sanitized = re.sub(r'[/\\:"*?<>|;]+', '_', filename)
    sanitized = re.sub(r'^[._]+', '', sanitized)
    sanitized = re.sub(r'[._]+$', '', sanitized)
    sanitized = re.sub(r'__+', '_', sanitized)

    if len(sanitized.encode('utf-8')) > 255:
        p = Path(sanitized)
        ext = p.suffix
        stem = p.stem if ext else sanitized
        while len((stem + ext).encode('utf-8')) > 255 and stem:
            stem = stem[:-1]
        sanitized = stem + ext

    return sanitized or "track"
