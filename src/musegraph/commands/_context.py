"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the graph lazily, so ``--help``,
``--version`` and ``health`` never read the data files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from musegraph.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from musegraph.config.settings import MuseSettings
    from musegraph.infrastructure.datasource import GraphDataSource
    from musegraph.services.query import QueryService
    from musegraph.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: MuseSettings) -> None:
        self.settings = settings
        self._source: GraphDataSource | None = None

        from musegraph.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            data_dir=settings.data_dir or settings.project_root / settings.data.dir,
        )

        if settings.verbose:
            from musegraph.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def source(self) -> GraphDataSource:
        """The data source (created lazily, not yet built)."""
        if self._source is None:
            from musegraph.infrastructure.datasource import GraphDataSource

            self._source = GraphDataSource.from_settings(self.settings)
        return self._source

    def query(self) -> QueryService:
        """A QueryService over the built graph.

        A fatal build failure is emitted as an ``initialize`` error
        (exit code 1).
        """
        from musegraph.infrastructure.datasource import DataSourceError
        from musegraph.services.query import QueryService
        from musegraph.services.result import ServiceResult

        try:
            return QueryService(self.source)
        except DataSourceError as exc:
            self.emit(ServiceResult.failure("initialize", "INIT_FAILED", str(exc)))
            raise  # emit() exits; unreachable

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, exit normally. Warnings go to stderr so piped
          output stays clean.
        * Failure: stderr, exit code 1.
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
