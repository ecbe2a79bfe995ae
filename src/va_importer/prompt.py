"""User interaction -- stage toggles, import confirmation, alerts."""

from __future__ import annotations

from typing import Protocol

import click

from .models import StageToggles


class Prompter(Protocol):
    def ask_stages(self, defaults: StageToggles) -> StageToggles | None:
        """Return the stages to run, or None if the user cancelled."""
        ...

    def confirm(self, message: str) -> bool: ...

    def alert(self, message: str) -> None: ...


class ClickPrompter:
    """Terminal prompter. Stage toggles come from CLI flags, not a prompt."""

    def ask_stages(self, defaults: StageToggles) -> StageToggles | None:
        return defaults

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=True)

    def alert(self, message: str) -> None:
        click.echo(f"ERROR: {message}", err=True)
