"""CLI entry points - Thin Controller using Typer."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import typer

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.constants import TOOL_NAME
from rspec_conventions.domain.entities import Severity
from rspec_conventions.domain.exceptions import InvocationError
from rspec_conventions.domain.protocols import FileSystemProtocol, TelemetryPort
from rspec_conventions.domain.rules.registry import DEFAULT_RULES, RuleSet
from rspec_conventions.infrastructure.reporters import ReporterFactory
from rspec_conventions.use_cases.check_tree import CheckTreeUseCase

EXIT_INVALID_INVOCATION: int = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    load_config: Callable[[], ConfigurationLoader]
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    configure_logging: Callable[[bool], None] = lambda verbose: None


class CLIAppFactory:
    """Creates the Typer app. No top-level functions."""

    @staticmethod
    def fail(message: str) -> typer.Exit:
        """Report an invocation error on stderr and return the exit to raise."""
        typer.echo(f"Error: {message}", err=True)
        return typer.Exit(EXIT_INVALID_INVOCATION)

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name=TOOL_NAME,
            help="Check RSpec suites against naming and structure conventions.",
            add_completion=False,
        )

        @app.command()
        def check(
            specs_root: Path = typer.Argument(..., help="Directory (or file) holding *_spec files"),  # noqa: B008
            source_root: Path | None = typer.Argument(  # noqa: B008
                None, help="Source directory the spec tree mirrors (default: config source_root)"
            ),
            rule: str | None = typer.Option(None, "--rule", help="Run only this rule"),
            output_format: str = typer.Option(
                "text", "--format", help=f"Output format: {' or '.join(ReporterFactory.formats())}"
            ),
            fail_on: str | None = typer.Option(
                None, "--fail-on", help="Minimum severity that fails the run: error or warning"
            ),
            jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Worker threads"),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
        ) -> None:
            """Check a spec tree; exit 0 when clean, 1 on violations, 2 on bad invocation."""
            deps.configure_logging(verbose)
            deps.telemetry.handshake()
            try:
                config = deps.load_config()
                reporter = ReporterFactory.for_format(output_format)
                threshold = Severity.parse(fail_on) if fail_on is not None else config.fail_on
                rule_set = RuleSet.select(only=rule, disabled=config.disabled_rules)
            except KeyError as exc:
                raise CLIAppFactory.fail(
                    f"unknown rule {exc} (known rules: {', '.join(RuleSet.names())})"
                ) from None
            except (InvocationError, ValueError) as exc:
                raise CLIAppFactory.fail(str(exc)) from None

            source = str(source_root) if source_root is not None else config.source_root
            use_case = CheckTreeUseCase(
                filesystem=deps.filesystem,
                telemetry=deps.telemetry,
                config_loader=config,
                rule_set=rule_set,
            )
            try:
                report = use_case.execute(str(specs_root), source, jobs=jobs or config.jobs)
            except InvocationError as exc:
                raise CLIAppFactory.fail(str(exc)) from None

            text, exit_code = reporter.render(report, fail_on=threshold)
            typer.echo(text, nl=False)
            raise typer.Exit(exit_code)

        @app.command("rules")
        def list_rules() -> None:
            """List the available rules with their default severity."""
            width = max(len(r.name) for r in DEFAULT_RULES)
            for r in DEFAULT_RULES:
                typer.echo(f"{r.name:<{width}}  {r.default_severity.value:<7}  {r.description}")

        return app
