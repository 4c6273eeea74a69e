"""Unit tests for the Typer-based CLI interface."""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest
from typer.testing import CliRunner

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.exceptions import ConfigurationError
from rspec_conventions.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from rspec_conventions.interface.cli import CLIAppFactory, CLIDependencies

runner = CliRunner()


def _make_deps(config: dict[str, object] | None = None, **overrides) -> CLIDependencies:
    """CLIDependencies with a real filesystem and mock telemetry."""
    defaults: dict = {
        "load_config": lambda: ConfigurationLoader(config),
        "telemetry": Mock(),
        "filesystem": FileSystemGateway(),
        "configure_logging": Mock(),
    }
    defaults.update(overrides)
    return CLIDependencies(**defaults)


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    (tmp_path / "app" / "models").mkdir(parents=True)
    (tmp_path / "app" / "models" / "article.rb").write_text("class Article; end\n")
    (tmp_path / "spec" / "models").mkdir(parents=True)
    (tmp_path / "spec" / "models" / "article_spec.rb").write_text(
        "describe Article do\n"
        "  context 'admin' do\n"
        "    it 'publishes' do\n"
        "      expect(1).to eq 1\n"
        "    end\n"
        "  end\n"
        "end\n"
    )
    return tmp_path


class TestCheckCommand:
    def test_clean_tree_exits_zero(self, tree: Path) -> None:
        spec = tree / "spec" / "models" / "article_spec.rb"
        spec.write_text(spec.read_text().replace("'admin'", "'when admin'"))
        app = CLIAppFactory.create_app(_make_deps())

        result = runner.invoke(app, ["check", str(tree / "spec"), str(tree / "app")])

        assert result.exit_code == 0
        assert result.stdout == ""

    def test_warnings_fail_by_default(self, tree: Path) -> None:
        deps = _make_deps()
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(app, ["check", str(tree / "spec"), str(tree / "app")])

        assert result.exit_code == 1
        assert "article_spec.rb:2: [context-naming] context 'admin'" in result.stdout
        assert len(result.stdout.splitlines()) == 1
        assert "violation(s)" not in result.stdout
        deps.telemetry.step.assert_any_call("Aggregated 1 violation(s) across 1 file(s).")

    def test_fail_on_error_ignores_warnings(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), "--fail-on", "error"])
        assert result.exit_code == 0
        assert "[context-naming]" in result.stdout

    def test_fail_on_from_configuration(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps({"fail_on": "error"}))
        result = runner.invoke(app, ["check", str(tree / "spec")])
        assert result.exit_code == 0

    def test_source_root_from_configuration(self, tree: Path) -> None:
        (tree / "app" / "models" / "article.rb").unlink()
        app = CLIAppFactory.create_app(_make_deps({"source_root": str(tree / "app")}))

        result = runner.invoke(app, ["check", str(tree / "spec"), "--rule", "mirrored-directory-naming"])

        assert result.exit_code == 1
        assert "[mirrored-directory-naming]" in result.stdout

    def test_json_output(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())

        result = runner.invoke(app, ["check", str(tree / "spec"), "--format", "json"])

        data = json.loads(result.stdout)
        assert [(v["rule"], v["line"], v["severity"]) for v in data] == [
            ("context-naming", 2, "warning")
        ]

    def test_rule_option_restricts_rules(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), "--rule", "one-expectation-per-example"])
        assert result.exit_code == 0

    def test_disabled_rules_from_configuration(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps({"disable": ["context-naming"]}))
        result = runner.invoke(app, ["check", str(tree / "spec")])
        assert result.exit_code == 0

    def test_output_is_identical_across_runs_and_jobs(self, tree: Path) -> None:
        (tree / "spec" / "models" / "comment_spec.rb").write_text("describe Comment do\n  context 'x' do\n  end\nend\n")
        app = CLIAppFactory.create_app(_make_deps())
        args = ["check", str(tree / "spec"), str(tree / "app")]

        first = runner.invoke(app, args)
        second = runner.invoke(app, args)
        threaded = runner.invoke(app, [*args, "--jobs", "4"])

        assert first.stdout == second.stdout == threaded.stdout
        assert first.exit_code == second.exit_code == threaded.exit_code == 1

    def test_verbose_configures_logging(self, tree: Path) -> None:
        deps = _make_deps()
        app = CLIAppFactory.create_app(deps)
        runner.invoke(app, ["check", str(tree / "spec"), "--verbose"])
        deps.configure_logging.assert_called_once_with(True)
        deps.telemetry.handshake.assert_called_once()


class TestInvalidInvocation:
    """Every invocation error exits 2 with an 'Error:' line."""

    def test_missing_specs_root(self, tmp_path: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tmp_path / "missing")])
        assert result.exit_code == 2
        assert "Error: specs root" in result.output

    def test_unknown_rule(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), "--rule", "nope"])
        assert result.exit_code == 2
        assert "Error: unknown rule 'nope'" in result.output

    def test_unknown_format(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), "--format", "xml"])
        assert result.exit_code == 2
        assert "Error: unknown format 'xml'" in result.output

    def test_unknown_fail_on(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), "--fail-on", "fatal"])
        assert result.exit_code == 2
        assert "Error: unknown severity 'fatal'" in result.output

    def test_invalid_configuration(self, tree: Path) -> None:
        def broken() -> ConfigurationLoader:
            raise ConfigurationError("unknown configuration key(s): colour")

        app = CLIAppFactory.create_app(_make_deps(load_config=broken))
        result = runner.invoke(app, ["check", str(tree / "spec")])
        assert result.exit_code == 2
        assert "Error: unknown configuration key(s): colour" in result.output

    def test_source_root_not_a_directory(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), str(tree / "nope")])
        assert result.exit_code == 2

    def test_unreadable_specs_root(self) -> None:
        filesystem = Mock()
        filesystem.exists.return_value = True
        filesystem.is_directory.return_value = True
        filesystem.is_readable_directory.return_value = False
        app = CLIAppFactory.create_app(_make_deps(filesystem=filesystem))

        result = runner.invoke(app, ["check", "spec"])

        assert result.exit_code == 2
        assert "Error: specs root 'spec' is not readable" in result.output

    def test_jobs_must_be_positive(self, tree: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(tree / "spec"), "--jobs", "0"])
        assert result.exit_code == 2

    def test_missing_argument(self) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 2


def test_format_help_lists_reporter_formats() -> None:
    app = CLIAppFactory.create_app(_make_deps())
    result = runner.invoke(app, ["check", "--help"])
    assert result.exit_code == 0
    assert "json" in result.stdout


def test_rules_command_lists_every_rule() -> None:
    app = CLIAppFactory.create_app(_make_deps())
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    assert "one-expectation-per-example" in result.stdout
    line = next(ln for ln in result.stdout.splitlines() if ln.startswith("example-description-no-should"))
    assert line.split()[1] == "warning"
