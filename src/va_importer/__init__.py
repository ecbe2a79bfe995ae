"""VA Importer -- import voice-line recordings into a DAW session, sort them
by loudness, and glue each track while keeping the original clip bounds as
named regions.

Core modules:
    config   -- Pipeline configuration via pydantic-settings (VA_* env vars),
                loguru setup.
    cli      -- Click CLI entry point for the standalone JSON-session host.
    runner   -- Stage gating, import preview/confirmation, undo blocks.
    models   -- Stage enum, undo labels, and the ranking/glue record types.
    ffmpeg   -- ffprobe/ffmpeg wrappers: duration, RMS volume, glue render.
    prompt   -- Prompter protocol and the click-based terminal prompter.
    sanitize -- Filename sanitization for rendered audio.

Subpackages:
    host   -- Host protocol and backends (JSON session, REAPER).
    stages -- Pipeline stages (import, sort, glue).
"""
