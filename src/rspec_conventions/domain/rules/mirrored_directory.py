"""Spec files mirror the source tree: app/models/a.rb <-> spec/models/a_spec.rb."""

from pathlib import PurePosixPath

from rspec_conventions.domain.constants import RULE_MIRRORED_DIRECTORY
from rspec_conventions.domain.entities import Severity, Violation
from rspec_conventions.domain.rules import FileRule, RuleContext, RuleScope


class MirroredDirectoryNamingRule(FileRule):
    """
    A spec at <specs_root>/<dir>/<name>_spec<ext> needs <source_root>/<dir>/<name><ext>.

    Skipped when no source index is available and for files under exempt
    directories (support code, feature and request specs have no single
    source counterpart).
    """

    name: str = RULE_MIRRORED_DIRECTORY
    description: str = "Spec paths mirror source paths with a '_spec' suffix."
    default_severity: Severity = Severity.ERROR
    scope: RuleScope = RuleScope.FILE

    def check(self, context: RuleContext) -> list[Violation]:
        if context.source_index is None:
            return []
        config = context.config
        relative = PurePosixPath(context.spec_file.relative_path or PurePosixPath(context.spec_file.path).name)
        if set(relative.parts[:-1]) & set(config.mirror_exempt_dirs):
            return []
        ext = next((e for e in config.extensions if relative.name.endswith(e)), relative.suffix)
        stem = relative.name[: len(relative.name) - len(ext)] if ext else relative.name
        suffix = config.spec_suffix
        if not stem.endswith(suffix):
            return [
                context.violation(
                    self, 1, f"spec file name '{relative.name}' does not end with '{suffix}{ext}'"
                )
            ]
        expected = (relative.parent / f"{stem[: -len(suffix)]}{ext}").as_posix()
        if expected in context.source_index:
            return []
        shown = (PurePosixPath(context.source_root) / expected).as_posix() if context.source_root else expected
        return [context.violation(self, 1, f"no source file '{shown}' mirrors this spec")]
