"""One expectation per example."""

from rspec_conventions.domain.constants import RULE_ONE_EXPECTATION
from rspec_conventions.domain.entities import Block, Severity, Violation
from rspec_conventions.domain.rules import BlockRule, RuleContext, RuleScope


class OneExpectationPerExampleRule(BlockRule):
    """Flags it/its examples whose body makes more than one expectation."""

    name: str = RULE_ONE_EXPECTATION
    description: str = "Each example should make a single expectation."
    default_severity: Severity = Severity.ERROR
    scope: RuleScope = RuleScope.BLOCK

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        if not block.is_example or block.assertion_count <= 1:
            return []
        lines = ", ".join(str(n) for n in block.assertion_lines)
        return [
            context.violation_at_block(
                self,
                block,
                f"example makes {block.assertion_count} expectations (lines {lines}); "
                "split it into one example per expectation",
            )
        ]
