"""Context descriptions start with 'when', 'with' or 'without'."""

from rspec_conventions.domain.constants import RULE_CONTEXT_NAMING
from rspec_conventions.domain.entities import Block, BlockKind, LabelKind, Severity, Violation
from rspec_conventions.domain.rules import BlockRule, RuleContext, RuleScope


class ContextNamingRule(BlockRule):
    """Flags context blocks whose description does not open with a condition word."""

    name: str = RULE_CONTEXT_NAMING
    description: str = "Start context descriptions with 'when', 'with' or 'without'."
    default_severity: Severity = Severity.WARNING
    scope: RuleScope = RuleScope.BLOCK

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        if block.kind is not BlockKind.CONTEXT or block.label_kind is not LabelKind.STRING:
            return []
        words = block.label.split()
        if not words:
            return []
        prefixes = context.config.context_prefixes
        if words[0].lower() in prefixes:
            return []
        return [
            context.violation_at_block(
                self,
                block,
                f"context '{block.label}' should start with one of: {', '.join(prefixes)}",
            )
        ]
