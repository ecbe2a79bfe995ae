"""FFmpeg/ffprobe subprocess wrappers for clip inspection and glue rendering."""

import math
import re
import subprocess
from pathlib import Path

from loguru import logger

from .errors import ExternalToolError

log = logger.bind(stage="ffmpeg")

_MEAN_VOLUME_RE = re.compile(r"mean_volume:\s*(-?inf|-?\d+(?:\.\d+)?)\s*dB")


def _run_ffprobe(args: list[str], ffprobe_bin: str = "ffprobe") -> subprocess.CompletedProcess:
    """Run ffprobe with common flags."""
    return subprocess.run(
        [ffprobe_bin, "-v", "error"] + args,
        capture_output=True,
        text=True,
    )


def _run_ffmpeg(args: list[str], ffmpeg_bin: str = "ffmpeg") -> subprocess.CompletedProcess:
    """Run ffmpeg quietly, raising ExternalToolError on failure."""
    result = subprocess.run(
        [ffmpeg_bin, "-hide_banner", "-nostats"] + args,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise ExternalToolError(
            tool=ffmpeg_bin,
            exit_code=result.returncode,
            stderr=result.stderr[-500:],
        )
    return result


def get_duration(file: Path, ffprobe_bin: str = "ffprobe") -> float:
    """Get duration in seconds."""
    result = _run_ffprobe([
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(file),
    ], ffprobe_bin)
    output = result.stdout.strip()
    if not output:
        raise ValueError(f"ffprobe returned empty duration for {file}")
    return float(output)


def get_mean_volume(file: Path, ffmpeg_bin: str = "ffmpeg") -> float:
    """Get the mean (RMS) volume in dBFS via the volumedetect filter.

    Returns -inf for digital silence.
    """
    result = _run_ffmpeg([
        "-i", str(file),
        "-af", "volumedetect",
        "-vn", "-sn", "-dn",
        "-f", "null", "-",
    ], ffmpeg_bin)
    match = _MEAN_VOLUME_RE.search(result.stderr)
    if not match:
        raise ValueError(f"ffmpeg reported no mean_volume for {file}")
    return float(match.group(1))


def normalization_gain(file: Path, ffmpeg_bin: str = "ffmpeg") -> float:
    """Linear gain that would bring the file's RMS to 0 dBFS."""
    mean_volume = get_mean_volume(file, ffmpeg_bin)
    if math.isinf(mean_volume):
        return math.inf
    gain = 10 ** (-mean_volume / 20)
    log.debug(f"{file.name}: mean_volume={mean_volume} dB gain={gain:.4f}")
    return gain


def render_glue(
    parts: list[tuple[Path, float]],
    output: Path,
    duration: float,
    ffmpeg_bin: str = "ffmpeg",
) -> Path:
    """Mix (path, offset_seconds) parts into a single WAV of `duration` seconds.

    Each part is delayed to its offset and the results are summed, so gaps
    between parts come out as silence.
    """
    if not parts:
        raise ValueError("render_glue needs at least one part")

    args: list[str] = ["-y"]
    for path, _ in parts:
        args += ["-i", str(path)]

    filters = []
    labels = ""
    for i, (_, offset) in enumerate(parts):
        delay_ms = max(0, round(offset * 1000))
        filters.append(f"[{i}:a]adelay={delay_ms}:all=1[d{i}]")
        labels += f"[d{i}]"
    filters.append(
        f"{labels}amix=inputs={len(parts)}:normalize=0:duration=longest[out]"
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    args += [
        "-filter_complex", ";".join(filters),
        "-map", "[out]",
        "-t", f"{duration:.6f}",
        str(output),
    ]
    log.info(f"Rendering {len(parts)} clips -> {output.name}")
    _run_ffmpeg(args, ffmpeg_bin)
    return output
