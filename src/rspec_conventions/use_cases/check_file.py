"""Use Case: check one spec file against the rule set."""

import logging
from collections.abc import Callable

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.constants import INTERNAL_RULE_ERROR, PARSE_WARNING
from rspec_conventions.domain.entities import (
    FileReport,
    ParseResult,
    Severity,
    SpecFile,
    Violation,
)
from rspec_conventions.domain.exceptions import RuleEvaluationError
from rspec_conventions.domain.parser import SpecParser
from rspec_conventions.domain.rules import Rule, RuleContext
from rspec_conventions.domain.rules.registry import RuleSet

logger = logging.getLogger(__name__)


class SpecFileChecker:
    """
    Parse a spec file and evaluate every selected rule on it.

    Never raises for bad input: parse problems become `parse-warning`
    violations and a failing rule becomes one `internal-rule-error` violation
    for that file, so one malformed file never hides the results for the rest.
    """

    def __init__(
        self,
        config: ConfigurationLoader,
        rule_set: RuleSet,
        source_index: frozenset[str] | None = None,
        source_root: str | None = None,
    ) -> None:
        self.config = config
        self.rule_set = rule_set
        self.source_index = source_index
        self.source_root = source_root
        self.parser = SpecParser(assertion_keywords=config.assertion_keywords)

    def check(self, spec_file: SpecFile) -> FileReport:
        """
        Return the file's violations ordered by line, then rule declaration
        order. Parse warnings lead their line; remaining ties keep block
        pre-order.
        """
        parse_result = self.parser.parse(spec_file.text)
        ranks = {rule.name: index for index, rule in enumerate(self.rule_set.rules)}
        found: list[tuple[int, Violation]] = [
            (-1, v) for v in self._parse_warnings(spec_file, parse_result)
        ]
        context = RuleContext.create(
            spec_file=spec_file,
            parse_result=parse_result,
            config=self.config,
            source_index=self.source_index,
            source_root=self.source_root,
        )
        failed: set[str] = set()
        for block in parse_result.walk():
            for rule in self.rule_set.block_rules:
                found.extend(
                    (ranks[rule.name], v)
                    for v in self._evaluate(rule, context, failed, lambda r=rule, b=block: r.check(b, context))
                )
        for file_rule in self.rule_set.file_rules:
            found.extend(
                (ranks[file_rule.name], v)
                for v in self._evaluate(file_rule, context, failed, lambda r=file_rule: r.check(context))
            )
        # Stable: equal (line, rank) keep generation order.
        found.sort(key=lambda pair: (pair[1].line, pair[0]))
        return FileReport(path=spec_file.path, violations=tuple(v for _, v in found))

    def _parse_warnings(self, spec_file: SpecFile, parse_result: ParseResult) -> list[Violation]:
        return [
            Violation(
                rule=PARSE_WARNING,
                path=spec_file.path,
                line=min(max(1, d.line), spec_file.line_count),
                message=d.message,
                severity=self.config.severity_for(PARSE_WARNING, Severity.WARNING),
            )
            for d in parse_result.diagnostics
        ]

    def _evaluate(
        self,
        rule: Rule,
        context: RuleContext,
        failed: set[str],
        run: Callable[[], list[Violation]],
    ) -> list[Violation]:
        if rule.name in failed:
            return []
        try:
            return list(run())
        except Exception as exc:  # noqa: BLE001 - isolated per rule and reported
            failed.add(rule.name)
            error = RuleEvaluationError(rule.name, exc)
            logger.warning("%s in %s", error, context.spec_file.path, exc_info=True)
            return [
                Violation(
                    rule=INTERNAL_RULE_ERROR,
                    path=context.spec_file.path,
                    line=1,
                    message=str(error),
                    severity=Severity.ERROR,
                )
            ]
