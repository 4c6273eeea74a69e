"""Shared constants: block keywords, rule names, default convention settings."""

from rspec_conventions.domain.entities import BlockKind

TOOL_NAME: str = "rspec-conventions"
CONFIG_SECTION: str = "rspec-conventions"

# Keyword -> kind. Focused (f*) and skipped (x*) variants are the same block.
BLOCK_KEYWORDS: dict[str, BlockKind] = {
    "describe": BlockKind.DESCRIBE,
    "fdescribe": BlockKind.DESCRIBE,
    "xdescribe": BlockKind.DESCRIBE,
    "context": BlockKind.CONTEXT,
    "fcontext": BlockKind.CONTEXT,
    "xcontext": BlockKind.CONTEXT,
    "it": BlockKind.IT,
    "fit": BlockKind.IT,
    "xit": BlockKind.IT,
    "specify": BlockKind.IT,
    "fspecify": BlockKind.IT,
    "xspecify": BlockKind.IT,
    "example": BlockKind.IT,
    "fexample": BlockKind.IT,
    "xexample": BlockKind.IT,
    "its": BlockKind.ITS,
    "shared_examples": BlockKind.SHARED_EXAMPLES,
    "shared_examples_for": BlockKind.SHARED_EXAMPLES,
}

# Receivers allowed in front of a block keyword (RSpec.describe).
BLOCK_RECEIVERS: frozenset[str] = frozenset({"RSpec"})

# Ruby keywords that open a frame closed by `end` when they start an expression.
END_KEYWORDS: frozenset[str] = frozenset(
    {"if", "unless", "while", "until", "case", "def", "class", "module", "begin", "for"}
)
# Loop keywords that may carry an optional `do` on the same line.
LOOP_KEYWORDS: frozenset[str] = frozenset({"while", "until", "for"})

DEFAULT_ASSERTION_KEYWORDS: tuple[str, ...] = ("should", "should_not", "expect", "is_expected")

DEFAULT_SPEC_SUFFIX: str = "_spec"
DEFAULT_EXTENSIONS: tuple[str, ...] = (".rb",)

# Spec directories with no counterpart under the source root.
DEFAULT_MIRROR_EXEMPT_DIRS: tuple[str, ...] = (
    "support",
    "factories",
    "features",
    "requests",
    "system",
    "integration",
    "fixtures",
    "shared_examples",
)

# Bare describe labels that group examples rather than name a method.
DEFAULT_GROUPING_LABELS: tuple[str, ...] = (
    "associations",
    "attributes",
    "callbacks",
    "class_methods",
    "constants",
    "delegations",
    "instance_methods",
    "relationships",
    "scopes",
    "validations",
)

DEFAULT_CONTEXT_PREFIXES: tuple[str, ...] = (
    "when",
    "with",
    "without",
    "if",
    "unless",
    "for",
    "given",
)

MODELS_DIR: str = "models"

# shoulda-matchers validation matchers; the first symbol argument is the attribute.
VALIDATION_MATCHERS: tuple[str, ...] = (
    "validate_presence_of",
    "validate_uniqueness_of",
    "validate_length_of",
    "validate_numericality_of",
    "validate_inclusion_of",
    "validate_exclusion_of",
    "validate_acceptance_of",
    "validate_confirmation_of",
    "validate_absence_of",
    "validate_comparison_of",
    "allow_value",
)

# Rule names. Declaration order of the default rule set lives in rules/registry.py.
RULE_ONE_EXPECTATION: str = "one-expectation-per-example"
RULE_METHOD_DESCRIBE: str = "method-describe-naming"
RULE_MIRRORED_DIRECTORY: str = "mirrored-directory-naming"
RULE_MODEL_SELF_MOCK: str = "model-no-self-mock"
RULE_VALIDATION_DESCRIBE: str = "validation-describe-per-attribute"
RULE_CONTEXT_NAMING: str = "context-naming"
RULE_EXAMPLE_NO_SHOULD: str = "example-description-no-should"

PARSE_WARNING: str = "parse-warning"
INTERNAL_RULE_ERROR: str = "internal-rule-error"
