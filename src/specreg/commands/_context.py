"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Workspace initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from specreg.domain.errors import SpecregError
from specreg.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from specreg.config.settings import SpecregSettings
    from specreg.infrastructure.workspace import Workspace
    from specreg.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The workspace is lazily
    initialized on first use so ``--help`` and ``--examples`` never scan
    the search path.
    """

    def __init__(self, settings: SpecregSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from specreg.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            trace_loads=settings.trace_loads,
        )

    @property
    def workspace(self) -> Workspace:
        """The workspace (created lazily on first access).

        A workspace that cannot be built (a missing or unparseable
        default typekit) is reported like any other failed operation.
        """
        if self._workspace is None:
            from specreg.infrastructure.workspace import Workspace
            from specreg.services.base import BaseService

            try:
                self._workspace = Workspace(self.settings)
            except SpecregError as exc:
                self.emit(BaseService._failure("workspace", exc))
        assert self._workspace is not None
        return self._workspace

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
