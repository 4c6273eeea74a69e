"""Unit tests for SpecFileChecker."""

import unittest

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.entities import Block, Severity, SpecFile, Violation
from rspec_conventions.domain.rules import RuleContext, RuleScope
from rspec_conventions.domain.rules.registry import RuleSet
from rspec_conventions.use_cases.check_file import SpecFileChecker


class ExplodingRule:
    """Block rule that fails on every block."""

    name = "exploding"
    description = "always fails"
    default_severity = Severity.ERROR
    scope = RuleScope.BLOCK

    def __init__(self) -> None:
        self.calls = 0

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        self.calls += 1
        raise RuntimeError("boom")


def _checker(rule_set: RuleSet | None = None, config: dict[str, object] | None = None) -> SpecFileChecker:
    return SpecFileChecker(config=ConfigurationLoader(config), rule_set=rule_set or RuleSet())


class TestSpecFileChecker(unittest.TestCase):
    def test_clean_file(self) -> None:
        text = 'describe Article { describe "#summary" { it "does X" { should eq 1 } } }\n'
        report = _checker().check(SpecFile(path="spec/article_spec.rb", text=text, relative_path="article_spec.rb"))

        self.assertEqual(report.path, "spec/article_spec.rb")
        self.assertEqual(report.violations, ())

    def test_violations_sorted_by_line_then_generation_order(self) -> None:
        text = """\
describe Article do
  describe 'summary' do
    it 'should work' do
      expect(1).to eq 1
      expect(2).to eq 2
    end
  end
  context 'admin' do
  end
end
"""
        report = _checker().check(SpecFile(path="a_spec.rb", text=text))

        self.assertEqual(
            [(v.line, v.rule) for v in report.violations],
            [
                (2, "method-describe-naming"),
                (3, "one-expectation-per-example"),
                (3, "example-description-no-should"),
                (8, "context-naming"),
            ],
        )

    def test_same_line_follows_rule_declaration_order(self) -> None:
        """A file rule declared before a block rule reports first on a shared line."""
        text = "describe Article do\n  it { allow(Article).to receive(:x); is_expected.to validate_presence_of(:name) }\nend\n"
        report = _checker().check(
            SpecFile(path="spec/models/article_spec.rb", text=text, relative_path="models/article_spec.rb")
        )

        self.assertEqual(
            [v.rule for v in report.violations if v.line == 2],
            ["model-no-self-mock", "validation-describe-per-attribute"],
        )

    def test_parse_problems_become_parse_warnings(self) -> None:
        text = "describe Article do\n  it 'x' do\n    expect(1).to eq 1\n"
        report = _checker().check(SpecFile(path="a_spec.rb", text=text))

        self.assertEqual([(v.rule, v.line, v.severity) for v in report.violations],
                         [("parse-warning", 1, Severity.WARNING)])

    def test_failing_rule_reports_once_per_file(self) -> None:
        rule = ExplodingRule()
        checker = _checker(RuleSet(rules=(rule,)))
        text = "describe A do\n  it 'a' do\n  end\n  it 'b' do\n  end\nend\n"

        with self.assertLogs("rspec_conventions.use_cases.check_file", level="WARNING"):
            report = checker.check(SpecFile(path="a_spec.rb", text=text))

        self.assertEqual(rule.calls, 1)
        self.assertEqual(len(report.violations), 1)
        v = report.violations[0]
        self.assertEqual((v.rule, v.line, v.severity), ("internal-rule-error", 1, Severity.ERROR))
        self.assertEqual(v.message, "rule 'exploding' failed: RuntimeError: boom")

    def test_failing_rule_does_not_stop_other_rules(self) -> None:
        rules = (ExplodingRule(), *RuleSet.select(only="context-naming").rules)
        text = "context 'admin' do\nend\n"
        with self.assertLogs("rspec_conventions.use_cases.check_file", level="WARNING"):
            report = _checker(RuleSet(rules=rules)).check(SpecFile(path="a_spec.rb", text=text))
        self.assertEqual([v.rule for v in report.violations], ["internal-rule-error", "context-naming"])

    def test_configured_assertion_keywords(self) -> None:
        text = "it 'x' do\n  assert_equal 1, a\n  assert_equal 2, b\nend\n"
        checker = _checker(RuleSet.select(only="one-expectation-per-example"), {"assertion_keywords": ["assert_equal"]})
        report = checker.check(SpecFile(path="a_spec.rb", text=text))
        self.assertEqual([v.line for v in report.violations], [1])
