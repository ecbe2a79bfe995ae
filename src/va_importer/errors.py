"""Exception hierarchy for the VA importer."""

from pathlib import Path


class PipelineError(Exception):
    """Base exception for all pipeline errors."""


class ConfigError(PipelineError):
    """Invalid or missing configuration."""


class NotFoundError(PipelineError):
    """The VA folder is missing under the project path."""

    def __init__(self, folder: str, search_path: Path | str) -> None:
        super().__init__(f'Could not find folder "{folder}" in path "{search_path}"')
        self.folder = folder
        self.search_path = search_path


class HostOperationFailure(PipelineError):
    """A host primitive failed or returned an unusable value."""


class SessionFileError(HostOperationFailure):
    """Session file read/write error."""


class ExternalToolError(HostOperationFailure):
    """An external subprocess (ffmpeg, ffprobe) failed."""

    def __init__(self, tool: str, exit_code: int, stderr: str) -> None:
        super().__init__(f"{tool} exited with code {exit_code}: {stderr}")
        self.tool = tool
        self.exit_code = exit_code
        self.stderr = stderr
