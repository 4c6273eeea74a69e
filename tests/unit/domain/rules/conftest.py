"""Shared fixtures for rule tests: parse text and build a RuleContext."""

from collections.abc import Callable

import pytest

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.entities import SpecFile, Violation
from rspec_conventions.domain.parser import SpecParser
from rspec_conventions.domain.rules import RuleContext, RuleScope

ContextFactory = Callable[..., RuleContext]


@pytest.fixture
def make_context() -> ContextFactory:
    """make_context(text, relative_path=..., config=..., source_index=..., source_root=...)."""

    def _make(
        text: str,
        relative_path: str = "article_spec.rb",
        config: dict[str, object] | None = None,
        source_index: frozenset[str] | None = None,
        source_root: str | None = None,
    ) -> RuleContext:
        loader = ConfigurationLoader(config)
        return RuleContext.create(
            spec_file=SpecFile(path=f"spec/{relative_path}", text=text, relative_path=relative_path),
            parse_result=SpecParser(loader.assertion_keywords).parse(text),
            config=loader,
            source_index=source_index,
            source_root=source_root,
        )

    return _make


@pytest.fixture
def run_rule() -> Callable[[object, RuleContext], list[Violation]]:
    """Evaluate a rule the way the checker does: per block in pre-order, or once per file."""

    def _run(rule: object, context: RuleContext) -> list[Violation]:
        if rule.scope is RuleScope.FILE:  # type: ignore[attr-defined]
            return rule.check(context)  # type: ignore[attr-defined]
        found: list[Violation] = []
        for block in context.parse_result.walk():
            found.extend(rule.check(block, context))  # type: ignore[attr-defined]
        return found

    return _run
