"""Method-level describe blocks are named '#method' or '.method'."""

import re

from rspec_conventions.domain.constants import RULE_METHOD_DESCRIBE
from rspec_conventions.domain.entities import Block, BlockKind, LabelKind, Severity, Violation
from rspec_conventions.domain.rules import BlockRule, RuleContext, RuleScope

_METHOD_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*[?!=]?$")


class MethodDescribeNamingRule(BlockRule):
    """
    Describe blocks directly under a class-level describe that name a method
    must use '#name' (instance method) or '.name' (class method).

    A label names something callable when it is a symbol, or a bare identifier
    or string holding a snake_case name that is not a configured grouping word
    such as 'validations'.
    """

    name: str = RULE_METHOD_DESCRIBE
    description: str = "Describe methods as '#instance_method' or '.class_method'."
    default_severity: Severity = Severity.ERROR
    scope: RuleScope = RuleScope.BLOCK

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        if block.kind is not BlockKind.DESCRIBE:
            return []
        parent = context.parent_of(block)
        if not self._is_class_level(parent):
            return []
        method = self._callable_name(block, context)
        if method is None:
            return []
        return [
            context.violation_at_block(
                self,
                block,
                f"describe '{block.label}' names a method; "
                f"use '#{method}' for an instance method or '.{method}' for a class method",
            )
        ]

    @staticmethod
    def _is_class_level(parent: Block | None) -> bool:
        return (
            parent is not None
            and parent.depth == 0
            and parent.kind is BlockKind.DESCRIBE
            and parent.label_kind is LabelKind.CONSTANT
        )

    @staticmethod
    def _callable_name(block: Block, context: RuleContext) -> str | None:
        label = block.label
        if label.startswith(("#", ".")):
            return None
        if block.label_kind is LabelKind.SYMBOL:
            return label.lstrip(":")
        if block.label_kind not in (LabelKind.STRING, LabelKind.IDENTIFIER):
            return None
        if not _METHOD_NAME_RE.match(label) or label in context.config.grouping_labels:
            return None
        return label
