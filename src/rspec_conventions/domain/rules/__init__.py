"""Domain models for rules: protocols and the evaluation context."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.entities import (
    Block,
    ParseResult,
    Severity,
    SpecFile,
    Violation,
)

__all__ = [
    "BlockRule",
    "FileRule",
    "Rule",
    "RuleContext",
    "RuleScope",
]


class RuleScope(Enum):
    """What a rule is evaluated against."""

    BLOCK = "block"
    FILE = "file"


@dataclass(frozen=True)
class RuleContext:
    """
    Everything a rule may look at for one file. Rules do no I/O.

    source_index holds POSIX paths relative to source_root; it is None when
    no source root was given, and rules that need it must then do nothing.
    """

    spec_file: SpecFile
    parse_result: ParseResult
    config: ConfigurationLoader
    source_index: frozenset[str] | None = None
    source_root: str | None = None
    _parents: dict[int, Block] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        spec_file: SpecFile,
        parse_result: ParseResult,
        config: ConfigurationLoader,
        source_index: frozenset[str] | None = None,
        source_root: str | None = None,
    ) -> "RuleContext":
        parents: dict[int, Block] = {}
        for block in parse_result.walk():
            for child in block.children:
                parents[id(child)] = block
        return cls(
            spec_file=spec_file,
            parse_result=parse_result,
            config=config,
            source_index=source_index,
            source_root=source_root,
            _parents=parents,
        )

    def parent_of(self, block: Block) -> Block | None:
        return self._parents.get(id(block))

    def violation(self, rule: "Rule", line: int, message: str) -> Violation:
        """Build a Violation for this file with the rule's configured severity."""
        line = min(max(1, line), self.spec_file.line_count)
        return Violation(
            rule=rule.name,
            path=self.spec_file.path,
            line=line,
            message=message,
            severity=self.config.severity_for(rule.name, rule.default_severity),
        )

    def violation_at_block(self, rule: "Rule", block: Block, message: str) -> Violation:
        return self.violation(rule, block.line, message)


class Rule(Protocol):
    """A named convention with a default severity."""

    name: str
    description: str
    default_severity: Severity
    scope: RuleScope


class BlockRule(Rule, Protocol):
    """Evaluated once per block, in pre-order. Returns [] when not applicable."""

    def check(self, block: Block, context: RuleContext) -> list[Violation]:
        """Interrogate one block for a convention breach."""
        ...


class FileRule(Rule, Protocol):
    """Evaluated once per file (path- or text-level conventions)."""

    def check(self, context: RuleContext) -> list[Violation]:
        """Interrogate the whole file for a convention breach."""
        ...
