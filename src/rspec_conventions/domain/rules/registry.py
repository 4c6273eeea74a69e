"""The process-wide rule set, in declaration order."""

from dataclasses import dataclass

from rspec_conventions.domain.rules import BlockRule, FileRule, Rule, RuleScope
from rspec_conventions.domain.rules.context_naming import ContextNamingRule
from rspec_conventions.domain.rules.example_description import ExampleDescriptionNoShouldRule
from rspec_conventions.domain.rules.method_describe_naming import MethodDescribeNamingRule
from rspec_conventions.domain.rules.mirrored_directory import MirroredDirectoryNamingRule
from rspec_conventions.domain.rules.model_self_mock import ModelNoSelfMockRule
from rspec_conventions.domain.rules.one_expectation import OneExpectationPerExampleRule
from rspec_conventions.domain.rules.validation_describe import ValidationDescribePerAttributeRule

# Declaration order is the report tie-break order.
DEFAULT_RULES: tuple[Rule, ...] = (
    OneExpectationPerExampleRule(),
    MethodDescribeNamingRule(),
    MirroredDirectoryNamingRule(),
    ModelNoSelfMockRule(),
    ValidationDescribePerAttributeRule(),
    ContextNamingRule(),
    ExampleDescriptionNoShouldRule(),
)


@dataclass(frozen=True)
class RuleSet:
    """An immutable, ordered selection of rules."""

    rules: tuple[Rule, ...] = DEFAULT_RULES

    @classmethod
    def select(
        cls,
        only: str | None = None,
        disabled: frozenset[str] = frozenset(),
        rules: tuple[Rule, ...] = DEFAULT_RULES,
    ) -> "RuleSet":
        """
        Restrict to one rule, or drop disabled ones. An explicitly requested rule
        runs even when configuration disables it. Raises KeyError for unknown names.
        """
        known = {r.name for r in rules}
        for name in ([only] if only else []) + sorted(disabled):
            if name not in known:
                raise KeyError(name)
        if only is not None:
            chosen = tuple(r for r in rules if r.name == only)
        else:
            chosen = tuple(r for r in rules if r.name not in disabled)
        return cls(rules=chosen)

    @staticmethod
    def names(rules: tuple[Rule, ...] = DEFAULT_RULES) -> list[str]:
        return [r.name for r in rules]

    @property
    def block_rules(self) -> list[BlockRule]:
        return [r for r in self.rules if r.scope is RuleScope.BLOCK]  # type: ignore[misc]

    @property
    def file_rules(self) -> list[FileRule]:
        return [r for r in self.rules if r.scope is RuleScope.FILE]  # type: ignore[misc]
