"""Exception hierarchy. Only invocation and configuration errors end a run."""


class RSpecConventionsError(Exception):
    """Base class for all checker errors."""


class InvocationError(RSpecConventionsError):
    """Bad command-line arguments or unreadable root paths (exit code 2)."""


class ConfigurationError(InvocationError):
    """Invalid [tool.rspec-conventions] settings."""


class RuleEvaluationError(RSpecConventionsError):
    """A rule predicate failed on unexpected input."""

    def __init__(self, rule: str, cause: BaseException) -> None:
        super().__init__(f"rule '{rule}' failed: {type(cause).__name__}: {cause}")
        self.rule = rule
        self.cause = cause
