"""Helpers shared by the model-spec rules."""

import re
from pathlib import PurePosixPath

from rspec_conventions.domain.constants import MODELS_DIR
from rspec_conventions.domain.entities import Block, BlockKind, LabelKind
from rspec_conventions.domain.rules import RuleContext

_MODEL_TYPE_RE = re.compile(r"(?:\btype:\s*|:type\s*=>\s*):model\b")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class ModelSpec:
    """Recognises model specs and the models they describe. No top-level functions."""

    @staticmethod
    def is_model_spec(context: RuleContext) -> bool:
        """Spec lives under a models directory or declares `type: :model`."""
        directories = PurePosixPath(context.spec_file.relative_path or context.spec_file.path).parts[:-1]
        if MODELS_DIR in directories:
            return True
        return any(_MODEL_TYPE_RE.search(b.arguments) for b in context.parse_result.blocks)

    @staticmethod
    def model_roots(context: RuleContext) -> list[Block]:
        """Root describe blocks labelled with a constant (`describe Article`)."""
        return [
            b
            for b in context.parse_result.blocks
            if b.kind is BlockKind.DESCRIBE and b.label_kind is LabelKind.CONSTANT
        ]

    @staticmethod
    def instance_name(constant: str) -> str:
        """`Admin::BlogPost` -> `blog_post`."""
        last = constant.split("::")[-1]
        return _CAMEL_BOUNDARY_RE.sub("_", last).lower()

    @staticmethod
    def code_lines(context: RuleContext) -> list[tuple[int, str]]:
        """(line number, text) pairs skipping blank and comment-only lines."""
        return [
            (number, text)
            for number, text in enumerate(context.spec_file.lines, start=1)
            if text.strip() and not text.lstrip().startswith("#")
        ]
