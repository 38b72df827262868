"""Command runner for coordinating CLI execution.

Manages logging configuration, Api lifecycle and error handling for command
execution.
"""

from __future__ import annotations

from typing import Callable

import click

from DocQuery.api import Api
from DocQuery.cli.factories import create_api
from DocQuery.config import AppConfig
from DocQuery.core.errors import DocQueryError
from DocQuery.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run(self, action: str, build: Callable[[Api], object]) -> None:
        """Configure logging, build the Api and run one command.

        Args:
            action: The CLI command name (e.g., 'search').
            build: Callable turning the Api into a command with ``execute()``.

        Raises:
            click.Abort: When the command fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        cache = None
        try:
            with create_api(self.config) as api:
                cache = api.cache
                build(api).execute()  # type: ignore[attr-defined]
        except DocQueryError as e:
            log.error("%s failed: %s", action, e)
            if e.body is not None:
                log.debug("Error payload: %s", e.body)
            raise click.Abort from e
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action, e)
            raise click.Abort from e
        finally:
            close = getattr(cache, "close", None)
            if callable(close):
                close()
