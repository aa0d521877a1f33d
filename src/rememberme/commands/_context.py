"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Owns the lazily opened contact store and routes
results to stdout/stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rememberme.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rememberme.config.settings import RememberSettings
    from rememberme.infrastructure.store import ContactStore
    from rememberme.services.result import ServiceResult


class AppContext:
    """Per-invocation state. ``--help`` and ``--version`` never touch the snapshot."""

    def __init__(self, settings: RememberSettings) -> None:
        self.settings = settings
        self._store: ContactStore | None = None

        from rememberme.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from rememberme.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> ContactStore:
        """The contact snapshot (opened lazily on first access)."""
        if self._store is None:
            from rememberme.infrastructure.store import ContactStore

            self._store = ContactStore(self.settings.contacts_path)
        return self._store

    def emit(self, result: ServiceResult) -> None:
        """Print a ServiceResult; exit 1 on failure.

        Success goes to stdout with warnings on stderr so piped output stays
        clean. Failures go to stderr.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
