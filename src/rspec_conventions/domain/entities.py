"""Domain entities: spec files, parsed blocks, violations and reports."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TypedDict


class BlockKind(Enum):
    """Kinds of RSpec grouping and example blocks."""

    DESCRIBE = "describe"
    CONTEXT = "context"
    IT = "it"
    ITS = "its"
    SHARED_EXAMPLES = "shared_examples"


class LabelKind(Enum):
    """Syntactic shape of a block's first argument."""

    STRING = "string"
    SYMBOL = "symbol"
    CONSTANT = "constant"
    IDENTIFIER = "identifier"
    NONE = "none"


class Severity(Enum):
    """Violation severity. Ordered: warning < error."""

    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return 0 if self is Severity.WARNING else 1

    def at_least(self, other: "Severity") -> bool:
        """True if this severity is >= other."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a severity name; raises ValueError for unknown names."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(f"unknown severity '{value}' (expected one of: {names})") from None


@dataclass(frozen=True)
class SpecFile:
    """One spec source unit. Immutable once loaded."""

    path: str
    text: str
    relative_path: str = ""

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()

    @property
    def line_count(self) -> int:
        """Number of lines; an empty file still has line 1."""
        return max(1, len(self.lines))


@dataclass(frozen=True)
class Block:
    """
    A node of the parsed block forest.

    Children keep source order. For example blocks (it/its) assertion_count is
    the number of statements in the body, outside nested blocks, that contain
    an assertion keyword.
    """

    kind: BlockKind
    keyword: str
    label: str
    label_kind: LabelKind
    depth: int
    line: int
    end_line: int
    children: tuple["Block", ...] = ()
    arguments: str = ""
    assertion_count: int = 0
    assertion_lines: tuple[int, ...] = ()

    @property
    def is_example(self) -> bool:
        return self.kind in (BlockKind.IT, BlockKind.ITS)

    @property
    def is_group(self) -> bool:
        return self.kind in (BlockKind.DESCRIBE, BlockKind.CONTEXT)

    def contains_line(self, line: int) -> bool:
        return self.line <= line <= self.end_line

    def walk(self) -> Iterator["Block"]:
        """Yield this block and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class ParseDiagnostic:
    """A structural problem the parser recovered from."""

    line: int
    message: str


@dataclass(frozen=True)
class ParseResult:
    """Root block forest plus diagnostics for one file."""

    blocks: tuple[Block, ...] = ()
    diagnostics: tuple[ParseDiagnostic, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)

    def walk(self) -> Iterator[Block]:
        """All blocks in pre-order."""
        for root in self.blocks:
            yield from root.walk()

    def parent_of(self, block: Block) -> Block | None:
        """Parent block, or None for roots."""
        for candidate in self.walk():
            if any(child is block for child in candidate.children):
                return candidate
        return None

    def enclosing_blocks(self, line: int) -> list[Block]:
        """Blocks containing the line, outermost first."""
        chain: list[Block] = []
        level: tuple[Block, ...] = self.blocks
        while True:
            found = next((b for b in level if b.contains_line(line)), None)
            if found is None:
                return chain
            chain.append(found)
            level = found.children


class ViolationDict(TypedDict):
    """Serialization shape of a Violation."""

    path: str
    line: int
    rule: str
    severity: str
    message: str


@dataclass(frozen=True)
class Violation:
    """A single convention breach tied to a file and line."""

    rule: str
    path: str
    line: int
    message: str
    severity: Severity = Severity.ERROR

    def format(self) -> str:
        return f"{self.path}:{self.line}: [{self.rule}] {self.message}"

    def to_dict(self) -> ViolationDict:
        return {
            "path": self.path,
            "line": self.line,
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class FileReport:
    """Violations for one checked file, in file order."""

    path: str
    violations: tuple[Violation, ...] = ()


@dataclass(frozen=True)
class Report:
    """Result of a checking run. Files are kept in lexical path order."""

    files: tuple[FileReport, ...] = field(default_factory=tuple)

    @classmethod
    def merge(cls, fragments: list[FileReport]) -> "Report":
        """Merge per-file fragments into a deterministic report."""
        return cls(files=tuple(sorted(fragments, key=lambda f: f.path)))

    @property
    def files_checked(self) -> int:
        return len(self.files)

    @property
    def violations(self) -> list[Violation]:
        return [v for f in self.files for v in f.violations]

    def count_at_or_above(self, severity: Severity) -> int:
        """Number of violations whose severity is >= the given one."""
        return sum(1 for v in self.violations if v.severity.at_least(severity))

    def to_records(self) -> list[ViolationDict]:
        """Violations as an ordered list of plain records."""
        return [v.to_dict() for v in self.violations]
