"""Report renderers: plain text (default) and JSON. Pure: text in, no printing."""

import json

from rspec_conventions.domain.entities import Report, Severity
from rspec_conventions.domain.protocols import ReporterProtocol


class ExitCodePolicy:
    """0 when nothing at or above fail_on was found, else 1."""

    @staticmethod
    def exit_code(report: Report, fail_on: Severity) -> int:
        return 1 if report.count_at_or_above(fail_on) else 0


class TextReporter(ReporterProtocol):
    """`path:line: [rule] message` per violation; empty when clean."""

    def render(self, report: Report, fail_on: Severity = Severity.WARNING) -> tuple[str, int]:
        text = "".join(f"{v.format()}\n" for v in report.violations)
        return text, ExitCodePolicy.exit_code(report, fail_on)


class JsonReporter(ReporterProtocol):
    """Top-level ordered list of `{path, line, rule, severity, message}` records."""

    def render(self, report: Report, fail_on: Severity = Severity.WARNING) -> tuple[str, int]:
        text = json.dumps(report.to_records(), indent=2)
        return text + "\n", ExitCodePolicy.exit_code(report, fail_on)


class ReporterFactory:
    """Maps --format values to reporters."""

    _REPORTERS: dict[str, type[ReporterProtocol]] = {
        "text": TextReporter,
        "json": JsonReporter,
    }

    @classmethod
    def formats(cls) -> list[str]:
        return list(cls._REPORTERS)

    @classmethod
    def for_format(cls, fmt: str) -> ReporterProtocol:
        """Raises ValueError for unknown formats."""
        try:
            return cls._REPORTERS[fmt.strip().lower()]()
        except KeyError:
            raise ValueError(
                f"unknown format '{fmt}' (expected one of: {', '.join(cls._REPORTERS)})"
            ) from None
