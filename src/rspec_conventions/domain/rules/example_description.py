"""Example descriptions do not start with 'should'."""

import re

from rspec_conventions.domain.constants import RULE_EXAMPLE_NO_SHOULD
from rspec_conventions.domain.entities import Block, BlockKind, LabelKind, Severity, Violation
from rspec_conventions.domain.rules import BlockRule, RuleContext, RuleScope

_SHOULD_RE = re.compile(r"^\s*should(n't|\b)", re.IGNORECASE)


class ExampleDescriptionNoShouldRule(BlockRule):
    """Flags `it "should ..."`; descriptions read in the third person present."""

    name: str = RULE_EXAMPLE_NO_SHOULD
    description: str = "Write example descriptions without 'should'."
    default_severity: Severity = Severity.WARNING
    scope: RuleScope = RuleScope.BLOCK

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        if block.kind is not BlockKind.IT or block.label_kind is not LabelKind.STRING:
            return []
        if not _SHOULD_RE.match(block.label):
            return []
        return [
            context.violation_at_block(
                self,
                block,
                f"example '{block.label}' starts with 'should'; "
                "use the third person present tense (e.g. 'returns ...')",
            )
        ]
