"""Pipeline configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .models import StageToggles


class PipelineConfig(BaseSettings):
    """All pipeline configuration with layered resolution:
    .env file < environment variables < constructor kwargs.

    Built once at the entry point and passed down explicitly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="VA_",
        extra="ignore",
    )

    # -- Project layout --
    project_dir: Path = Path(".")
    va_dir_name: str = "importva"
    session_file: str = "session.json"
    render_dir_name: str = "glued"

    # -- Stages --
    do_import: bool = True
    do_sort: bool = True
    do_glue: bool = True
    select_all_before_glue: bool = True

    # -- Behavior --
    assume_yes: bool = False
    dry_run: bool = False
    verbose: bool = False

    # -- External tools --
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"

    # -- Logging --
    log_dir: Path = Path.home() / ".va-importer" / "logs"
    log_level: str = "INFO"

    @field_validator("va_dir_name")
    @classmethod
    def check_va_dir_name(cls, value: str) -> str:
        # Only immediate children of the project are searched
        if not value or value in (".", "..") or "/" in value or "\\" in value:
            raise ConfigError(f"va_dir_name must be a single folder name, got {value!r}")
        return value

    @property
    def session_path(self) -> Path:
        """Path to the JSON session file."""
        return self.project_dir / self.session_file

    @property
    def render_dir(self) -> Path:
        """Directory glued audio is rendered into."""
        return self.project_dir / self.render_dir_name

    def toggles(self) -> StageToggles:
        return StageToggles(
            do_import=self.do_import,
            do_sort=self.do_sort,
            do_glue=self.do_glue,
        )

    def setup_logging(self) -> None:
        """Configure loguru for the pipeline."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<8} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level="DEBUG" if self.verbose else self.log_level.upper(),
            filter=_default_extra,
        )

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "va-importer.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )
