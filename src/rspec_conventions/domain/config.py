"""Configuration for the checker. Immutable value object created by Infrastructure."""

from __future__ import annotations

from rspec_conventions.domain.constants import (
    DEFAULT_ASSERTION_KEYWORDS,
    DEFAULT_CONTEXT_PREFIXES,
    DEFAULT_EXTENSIONS,
    DEFAULT_GROUPING_LABELS,
    DEFAULT_MIRROR_EXEMPT_DIRS,
    DEFAULT_SPEC_SUFFIX,
)
from rspec_conventions.domain.entities import Severity
from rspec_conventions.domain.exceptions import ConfigurationError

_KNOWN_KEYS: frozenset[str] = frozenset(
    {
        "source_root",
        "spec_suffix",
        "extensions",
        "assertion_keywords",
        "mirror_exempt_dirs",
        "grouping_labels",
        "context_prefixes",
        "disable",
        "severity",
        "fail_on",
        "jobs",
    }
)


class ConfigurationLoader:
    """
    Immutable settings for a checking run.

    Created by Infrastructure from the `[tool.rspec-conventions]` table. Domain
    does not read the filesystem; ConfigFileLoader.load_config_from_fs() reads
    pyproject.toml and the composition root constructs ConfigurationLoader(config).
    Every list-valued default can be replaced from configuration.
    """

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        """Validate and freeze config. Raises ConfigurationError for invalid values."""
        self._config: dict[str, object] = dict(config_dict or {})
        self.validate_config(self._config)
        self._severity_overrides = self._parse_severities(self._config.get("severity", {}))

    @staticmethod
    def validate_config(config: dict[str, object]) -> None:
        """Reject unknown keys and wrongly typed values."""
        unknown = sorted(set(config) - _KNOWN_KEYS)
        if unknown:
            raise ConfigurationError(f"unknown configuration key(s): {', '.join(unknown)}")
        for key in ("source_root", "spec_suffix", "fail_on"):
            if key in config and not isinstance(config[key], str):
                raise ConfigurationError(f"'{key}' must be a string")
        for key in (
            "extensions",
            "assertion_keywords",
            "mirror_exempt_dirs",
            "grouping_labels",
            "context_prefixes",
            "disable",
        ):
            value = config.get(key)
            if value is not None and (
                not isinstance(value, list) or not all(isinstance(x, str) for x in value)
            ):
                raise ConfigurationError(f"'{key}' must be a list of strings")
        if "severity" in config and not isinstance(config["severity"], dict):
            raise ConfigurationError("'severity' must be a table of rule = \"error\"|\"warning\"")
        jobs = config.get("jobs")
        if jobs is not None and (not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 1):
            raise ConfigurationError("'jobs' must be a positive integer")
        if "fail_on" in config:
            ConfigurationLoader._severity(str(config["fail_on"]), "fail_on")

    @staticmethod
    def _severity(value: str, where: str) -> Severity:
        try:
            return Severity.parse(value)
        except ValueError as exc:
            raise ConfigurationError(f"{where}: {exc}") from exc

    @staticmethod
    def _parse_severities(raw: object) -> dict[str, Severity]:
        if not isinstance(raw, dict):
            return {}
        return {
            str(rule): ConfigurationLoader._severity(str(value), f"severity.{rule}")
            for rule, value in raw.items()
        }

    def _str_tuple(self, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
        raw = self._config.get(key)
        if isinstance(raw, list):
            return tuple(str(x) for x in raw)
        return default

    @property
    def source_root(self) -> str | None:
        raw = self._config.get("source_root")
        return raw if isinstance(raw, str) and raw else None

    @property
    def spec_suffix(self) -> str:
        raw = self._config.get("spec_suffix")
        return raw if isinstance(raw, str) and raw else DEFAULT_SPEC_SUFFIX

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(
            ext if ext.startswith(".") else f".{ext}"
            for ext in self._str_tuple("extensions", DEFAULT_EXTENSIONS)
        )

    @property
    def assertion_keywords(self) -> tuple[str, ...]:
        return self._str_tuple("assertion_keywords", DEFAULT_ASSERTION_KEYWORDS)

    @property
    def mirror_exempt_dirs(self) -> tuple[str, ...]:
        return self._str_tuple("mirror_exempt_dirs", DEFAULT_MIRROR_EXEMPT_DIRS)

    @property
    def grouping_labels(self) -> tuple[str, ...]:
        return self._str_tuple("grouping_labels", DEFAULT_GROUPING_LABELS)

    @property
    def context_prefixes(self) -> tuple[str, ...]:
        return self._str_tuple("context_prefixes", DEFAULT_CONTEXT_PREFIXES)

    @property
    def disabled_rules(self) -> frozenset[str]:
        return frozenset(self._str_tuple("disable", ()))

    @property
    def fail_on(self) -> Severity:
        raw = self._config.get("fail_on")
        return Severity.parse(raw) if isinstance(raw, str) else Severity.WARNING

    @property
    def jobs(self) -> int:
        raw = self._config.get("jobs")
        return raw if isinstance(raw, int) and not isinstance(raw, bool) else 1

    def severity_for(self, rule: str, default: Severity) -> Severity:
        """Configured severity for a rule, else the rule's default."""
        return self._severity_overrides.get(rule, default)

    def is_spec_file_name(self, name: str) -> bool:
        """True if a file name follows the `<stem><suffix><ext>` convention."""
        return any(name.endswith(f"{self.spec_suffix}{ext}") for ext in self.extensions)
