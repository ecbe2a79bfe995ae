"""REAPER entry point -- prompts for stages and runs them on the open project.

Run it as a Python ReaScript action, or from a shell with python-reapy
connected to a running REAPER (`va-importer-reaper`).
"""

from typing import Any

from loguru import logger

from .config import PipelineConfig
from .host.reaper import ReaperHost, ReaperPrompter, load_reascript_api
from .models import RunSummary
from .runner import PipelineRunner

log = logger.bind(stage="reaper")


def main(api: Any = None) -> RunSummary | None:
    if api is None:
        api = load_reascript_api()
    host = ReaperHost(api)

    # Glue acts on whatever the user has selected in REAPER
    config = PipelineConfig(
        project_dir=host.project_path(),
        select_all_before_glue=False,
    )
    config.setup_logging()

    log.info(f"Starting pipeline in REAPER project {config.project_dir}")
    runner = PipelineRunner(config=config, host=host, prompter=ReaperPrompter(api))
    return runner.run()


if __name__ == "__main__":
    main()
