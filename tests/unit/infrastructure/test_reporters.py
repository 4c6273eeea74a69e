"""Unit tests for text and JSON reporters."""

import json

import pytest

from rspec_conventions.domain.entities import FileReport, Report, Severity, Violation
from rspec_conventions.infrastructure.reporters import (
    ExitCodePolicy,
    JsonReporter,
    ReporterFactory,
    TextReporter,
)


@pytest.fixture
def report() -> Report:
    return Report.merge(
        [
            FileReport(
                path="spec/models/article_spec.rb",
                violations=(
                    Violation(
                        rule="method-describe-naming",
                        path="spec/models/article_spec.rb",
                        line=2,
                        message="describe 'title' names a method",
                    ),
                    Violation(
                        rule="context-naming",
                        path="spec/models/article_spec.rb",
                        line=7,
                        message="context 'admin' should start with one of: when",
                        severity=Severity.WARNING,
                    ),
                ),
            ),
            FileReport(path="spec/models/comment_spec.rb"),
        ]
    )


class TestTextReporter:
    def test_one_line_per_violation(self, report: Report) -> None:
        text, code = TextReporter().render(report)

        assert text == (
            "spec/models/article_spec.rb:2: [method-describe-naming] describe 'title' names a method\n"
            "spec/models/article_spec.rb:7: [context-naming] context 'admin' should start with one of: when\n"
        )
        assert code == 1

    def test_clean_report_renders_nothing(self) -> None:
        text, code = TextReporter().render(Report.merge([FileReport(path="a_spec.rb")]))
        assert text == ""
        assert code == 0


class TestJsonReporter:
    def test_structure(self, report: Report) -> None:
        text, _ = JsonReporter().render(report)
        data = json.loads(text)

        assert isinstance(data, list)
        assert [(v["line"], v["rule"]) for v in data] == [(2, "method-describe-naming"), (7, "context-naming")]
        assert data[1] == {
            "path": "spec/models/article_spec.rb",
            "line": 7,
            "rule": "context-naming",
            "severity": "warning",
            "message": "context 'admin' should start with one of: when",
        }

    def test_clean_report_is_empty_list(self) -> None:
        text, code = JsonReporter().render(Report())
        assert json.loads(text) == []
        assert code == 0


class TestExitCodePolicy:
    def test_fail_on_threshold(self, report: Report) -> None:
        assert ExitCodePolicy.exit_code(report, Severity.WARNING) == 1
        assert ExitCodePolicy.exit_code(report, Severity.ERROR) == 1

    def test_warnings_only_pass_with_fail_on_error(self) -> None:
        warning_only = Report.merge(
            [
                FileReport(
                    path="a",
                    violations=(Violation("context-naming", "a", 1, "m", Severity.WARNING),),
                )
            ]
        )
        assert ExitCodePolicy.exit_code(warning_only, Severity.ERROR) == 0
        assert TextReporter().render(warning_only, fail_on=Severity.ERROR)[1] == 0


class TestReporterFactory:
    def test_known_formats(self) -> None:
        assert ReporterFactory.formats() == ["text", "json"]
        assert isinstance(ReporterFactory.for_format("JSON"), JsonReporter)

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="unknown format 'xml'"):
            ReporterFactory.for_format("xml")
