"""Each validated attribute gets its own describe block."""

import re

from rspec_conventions.domain.constants import RULE_VALIDATION_DESCRIBE, VALIDATION_MATCHERS
from rspec_conventions.domain.entities import Block, BlockKind, Severity, Violation
from rspec_conventions.domain.rules import BlockRule, RuleContext, RuleScope
from rspec_conventions.domain.rules.model_spec import ModelSpec

_MATCHER_RE = re.compile(
    r"\b(?:" + "|".join(m for m in VALIDATION_MATCHERS if m != "allow_value") + r")\s*\(?\s*:(\w+[?]?)"
)
_ALLOW_VALUE_RE = re.compile(r"\ballow_value\(.*?\)\s*\.\s*for\(\s*:(\w+[?]?)")


class ValidationDescribePerAttributeRule(BlockRule):
    """
    In a model spec, a validation matcher for attribute `name` must sit inside
    a describe/context labelled after it ('name', ':name' or '#name').

    Evaluated on root describe blocks; reports each attribute once, at the
    first validation found outside such a block.
    """

    name: str = RULE_VALIDATION_DESCRIBE
    description: str = "Group validation examples under a describe per attribute."
    default_severity: Severity = Severity.ERROR
    scope: RuleScope = RuleScope.BLOCK

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        if block.depth != 0 or block.kind is not BlockKind.DESCRIBE:
            return []
        if not ModelSpec.is_model_spec(context):
            return []
        offending: dict[str, int] = {}
        for number, text in ModelSpec.code_lines(context):
            if not block.contains_line(number):
                continue
            for attribute in self._validated_attributes(text):
                if attribute in offending:
                    continue
                chain = context.parse_result.enclosing_blocks(number)
                if not any(b.is_group and self._names(b, attribute) for b in chain[1:]):
                    offending[attribute] = number
        return [
            context.violation(
                self,
                line,
                f"validation of '{attribute}' is not inside a describe named after it "
                f"(e.g. describe '#{attribute}')",
            )
            for attribute, line in offending.items()
        ]

    @staticmethod
    def _validated_attributes(text: str) -> list[str]:
        found = _MATCHER_RE.findall(text) + _ALLOW_VALUE_RE.findall(text)
        return list(dict.fromkeys(found))

    @staticmethod
    def _names(block: Block, attribute: str) -> bool:
        label = block.label.strip().lstrip(":#.")
        return label == attribute
