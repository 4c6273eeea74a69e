"""Model specs never mock or stub the model under test."""

import re

from rspec_conventions.domain.constants import RULE_MODEL_SELF_MOCK
from rspec_conventions.domain.entities import Severity, Violation
from rspec_conventions.domain.rules import FileRule, RuleContext, RuleScope
from rspec_conventions.domain.rules.model_spec import ModelSpec

_DOUBLES = r"(?:double|instance_double|class_double|object_double|mock_model|stub_model|spy|instance_spy|class_spy)"
_ALLOWS = r"(?:allow|allow_any_instance_of|expect_any_instance_of)"
_STUB_CALLS = r"(?:stub!?|stubs|expects|any_instance|should_receive|should_not_receive|unstub)"


class ModelNoSelfMockRule(FileRule):
    """Flags lines in a model spec that double or stub the model being specified."""

    name: str = RULE_MODEL_SELF_MOCK
    description: str = "Do not mock the model under test in its own spec."
    default_severity: Severity = Severity.ERROR
    scope: RuleScope = RuleScope.FILE

    def check(self, context: RuleContext) -> list[Violation]:
        if not ModelSpec.is_model_spec(context):
            return []
        models = [b.label for b in ModelSpec.model_roots(context)]
        if not models:
            return []
        patterns = self._patterns(models)
        violations: list[Violation] = []
        for number, text in ModelSpec.code_lines(context):
            for pattern in patterns:
                match = pattern.search(text)
                if match:
                    violations.append(
                        context.violation(
                            self,
                            number,
                            f"'{match.group(0).strip()}' mocks the model under test; "
                            "exercise the real model instead",
                        )
                    )
                    break
        return violations

    @staticmethod
    def _patterns(models: list[str]) -> list[re.Pattern[str]]:
        constants: set[str] = {"described_class"}
        instances: set[str] = {"subject"}
        for model in models:
            constants.add(model)
            constants.add(model.split("::")[-1])
            name = ModelSpec.instance_name(model)
            instances.update({name, f"@{name}"})
        const_alt = "|".join(re.escape(c) for c in sorted(constants, key=len, reverse=True))
        quoted_alt = "|".join(
            f"[\"']{re.escape(c)}[\"']" for c in sorted(constants - {"described_class"}, key=len, reverse=True)
        )
        target_alt = "|".join(
            re.escape(t) for t in sorted(constants | instances, key=len, reverse=True)
        )
        end = r"(?![\w:])"
        return [
            re.compile(rf"\b{_DOUBLES}\(\s*(?:{const_alt}|{quoted_alt}){end}"),
            re.compile(rf"\b{_ALLOWS}\(\s*(?:{target_alt})\s*\)"),
            re.compile(rf"\bexpect\(\s*(?:{target_alt})\s*\)\s*\.\s*(?:to|not_to|to_not)\s+(?:receive|have_received)\b"),
            re.compile(rf"(?<![\w.:@])(?:{target_alt})\s*\.\s*{_STUB_CALLS}\b"),
        ]
