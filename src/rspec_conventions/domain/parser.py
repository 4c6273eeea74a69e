"""Best-effort structural parser for RSpec files.

The parser never executes Ruby and never needs a complete grammar. It runs a
finite-state scan over lexer tokens, keeping a stack of open frames (`do`,
`{`, and `end`-terminated keywords) so that `end`/`}` can be matched. Frames
opened by a recognised block keyword carry a builder that becomes a Block.
Unbalanced input is recovered from and reported as diagnostics.
"""

import logging
from dataclasses import dataclass, field

from rspec_conventions.domain.constants import (
    BLOCK_KEYWORDS,
    BLOCK_RECEIVERS,
    DEFAULT_ASSERTION_KEYWORDS,
    END_KEYWORDS,
    LOOP_KEYWORDS,
)
from rspec_conventions.domain.entities import (
    Block,
    BlockKind,
    LabelKind,
    ParseDiagnostic,
    ParseResult,
)
from rspec_conventions.domain.lexer import SpecLexer, Token, TokenKind

logger = logging.getLogger(__name__)

_FRAME_DO = "do"
_FRAME_BRACE = "brace"
_FRAME_KEYWORD = "keyword"

# Keywords after which a new expression starts.
_EXPR_START_WORDS: frozenset[str] = frozenset({"do", "then", "else", "begin", "ensure"})
# Tokens that end an operand; `{` after them opens a block, not a hash.
_BLOCK_BRACE_AFTER = (TokenKind.WORD, TokenKind.CONSTANT, TokenKind.STRING, TokenKind.SYMBOL)
# Tokens that may follow a block keyword when it really is a block call.
_LABEL_STARTERS = (TokenKind.STRING, TokenKind.SYMBOL, TokenKind.CONSTANT, TokenKind.WORD)
# A trailing token that continues a statement onto the next line.
_CONTINUATION_VALUES: frozenset[str] = frozenset({",", "(", "[", "=>", "\\", "&&", "||", "."})


@dataclass
class _BlockBuilder:
    kind: BlockKind
    keyword: str
    label: str
    label_kind: LabelKind
    depth: int
    line: int
    arguments: str = ""
    end_line: int = 0
    children: list["_BlockBuilder"] = field(default_factory=list)
    assertion_statements: set[int] = field(default_factory=set)
    assertion_lines: set[int] = field(default_factory=set)

    def build(self) -> Block:
        is_example = self.kind in (BlockKind.IT, BlockKind.ITS)
        return Block(
            kind=self.kind,
            keyword=self.keyword,
            label=self.label,
            label_kind=self.label_kind,
            depth=self.depth,
            line=self.line,
            end_line=max(self.end_line, self.line),
            children=tuple(child.build() for child in self.children),
            arguments=self.arguments,
            assertion_count=len(self.assertion_statements) if is_example else 0,
            assertion_lines=tuple(sorted(self.assertion_lines)) if is_example else (),
        )


@dataclass
class _Frame:
    kind: str
    line: int
    builder: _BlockBuilder | None = None


@dataclass
class _PendingBlock:
    """A block keyword seen, waiting for its `do` or `{`."""

    kind: BlockKind
    keyword: str
    label: str
    label_kind: LabelKind
    line: int
    paren_depth: int
    stack_depth: int
    args_from: int


class SpecParser:
    """Parses spec text into a block forest. Stateless between calls."""

    def __init__(self, assertion_keywords: tuple[str, ...] = DEFAULT_ASSERTION_KEYWORDS) -> None:
        self.assertion_keywords = frozenset(assertion_keywords)

    def parse(self, text: str) -> ParseResult:
        """Recover structure from text. Never raises on malformed input."""
        return _ParseRun(SpecLexer.tokenize(text), self.assertion_keywords, text).run()


class _ParseRun:
    """State for one parse; discarded afterwards."""

    def __init__(self, tokens: list[Token], assertion_keywords: frozenset[str], text: str) -> None:
        self.tokens = tokens
        self.assertion_keywords = assertion_keywords
        self.last_line = max(1, len(text.splitlines()))
        self.stack: list[_Frame] = []
        self.roots: list[_BlockBuilder] = []
        self.diagnostics: list[ParseDiagnostic] = []
        self.pending: _PendingBlock | None = None
        self.paren_depth = 0
        self.statement = 0
        self.expr_start = True
        self.expr_start_index = 0
        self.loop_awaiting_do = False

    def run(self) -> ParseResult:
        for i, tok in enumerate(self.tokens):
            starts_expr = self.expr_start
            if starts_expr:
                self.expr_start_index = i
            self.expr_start = False
            if tok.kind is TokenKind.NEWLINE:
                self._end_statement(i)
            elif tok.kind is TokenKind.PUNCT:
                self._on_punct(i, tok, starts_expr)
            elif tok.kind is TokenKind.WORD:
                self._on_word(i, tok, starts_expr)
            elif tok.kind is TokenKind.LABEL:
                self.expr_start = True
        self._finish()
        return ParseResult(
            blocks=tuple(b.build() for b in self.roots),
            diagnostics=tuple(self.diagnostics),
        )

    # -- token handlers ---------------------------------------------------

    def _end_statement(self, i: int) -> None:
        self.expr_start = True
        self.loop_awaiting_do = False
        if self._statement_continues(i):
            return
        if self.pending is not None:
            logger.debug("'%s' at line %d has no block body", self.pending.keyword, self.pending.line)
            self.pending = None
        self.statement += 1

    def _statement_continues(self, i: int) -> bool:
        if self.pending is not None and self.paren_depth > self.pending.paren_depth:
            return True
        prev = self._previous_significant(i)
        if prev is None:
            return False
        return prev.kind is TokenKind.LABEL or (prev.kind is TokenKind.PUNCT and prev.value in _CONTINUATION_VALUES)

    def _on_punct(self, i: int, tok: Token, starts_expr: bool) -> None:
        value = tok.value
        if value == ";":
            self.pending = None
            self.loop_awaiting_do = False
            self.statement += 1
            self.expr_start = True
        elif value in ("(", "["):
            self.paren_depth += 1
            self.expr_start = True
        elif value in (")", "]"):
            self.paren_depth = max(0, self.paren_depth - 1)
        elif value == "{":
            prev = self.tokens[i - 1] if i > 0 else None
            is_block = prev is not None and (
                prev.kind in _BLOCK_BRACE_AFTER or (prev.kind is TokenKind.PUNCT and prev.value == ")")
            )
            self._open(_FRAME_BRACE, tok, attach=is_block)
            self.expr_start = True
        elif value == "}":
            self._close(_FRAME_BRACE, tok)
        elif value in (".", "&."):
            pass
        elif value == "::":
            # A leading `::` (::RSpec.describe) keeps the expression start.
            self.expr_start = starts_expr
        else:
            self.expr_start = True

    def _on_word(self, i: int, tok: Token, starts_expr: bool) -> None:
        word = tok.value
        after_dot = self._after_dot(i)
        if word in self.assertion_keywords:
            self._record_assertion(tok)
        if after_dot and not self._receiver_call(i):
            return
        if word == "end":
            self._close(_FRAME_DO, tok)
            return
        if word == "do":
            if self.loop_awaiting_do:
                self.loop_awaiting_do = False
            else:
                self._open(_FRAME_DO, tok, attach=True)
            self.expr_start = True
            return
        if word in END_KEYWORDS and starts_expr:
            if word == "def" and self._is_endless_def(i):
                return
            self._open(_FRAME_KEYWORD, tok, attach=False)
            if word in LOOP_KEYWORDS:
                self.loop_awaiting_do = True
            self.expr_start = word != "def"
            return
        if word in BLOCK_KEYWORDS and (starts_expr or self._receiver_call(i)):
            self._start_pending(i, tok)
            return
        if word in _EXPR_START_WORDS:
            self.expr_start = True

    # -- blocks -----------------------------------------------------------

    def _start_pending(self, i: int, tok: Token) -> None:
        nxt = self._token_at(i + 1)
        j = i + 1
        if nxt is not None and nxt.kind is TokenKind.PUNCT and nxt.value == "(":
            j += 1
            nxt = self._token_at(j)
        if nxt is None:
            return
        is_opener = nxt.kind is TokenKind.PUNCT and nxt.value == "{"
        is_do = nxt.kind is TokenKind.WORD and nxt.value == "do"
        if not (is_opener or is_do or nxt.kind in _LABEL_STARTERS or nxt.kind is TokenKind.LABEL):
            return
        label, label_kind, args_from = self._read_label(j)
        self.pending = _PendingBlock(
            kind=BLOCK_KEYWORDS[tok.value],
            keyword=tok.value,
            label=label,
            label_kind=label_kind,
            line=tok.line,
            paren_depth=self.paren_depth,
            stack_depth=len(self.stack),
            args_from=args_from,
        )

    def _read_label(self, j: int) -> tuple[str, LabelKind, int]:
        tok = self._token_at(j)
        if tok is None or tok.kind is TokenKind.NEWLINE:
            return "", LabelKind.NONE, j
        if tok.kind is TokenKind.WORD and tok.value == "do":
            return "", LabelKind.NONE, j
        if tok.kind is TokenKind.STRING:
            return tok.value, LabelKind.STRING, j + 1
        if tok.kind is TokenKind.SYMBOL:
            return tok.value, LabelKind.SYMBOL, j + 1
        if tok.kind is TokenKind.CONSTANT:
            parts = [tok.value]
            k = j + 1
            while True:
                sep, name = self._token_at(k), self._token_at(k + 1)
                if sep is None or name is None or sep.value != "::" or name.kind is not TokenKind.CONSTANT:
                    break
                parts.append(name.value)
                k += 2
            return "::".join(parts), LabelKind.CONSTANT, k
        if tok.kind is TokenKind.WORD:
            return tok.value, LabelKind.IDENTIFIER, j + 1
        return "", LabelKind.NONE, j

    def _open(self, kind: str, tok: Token, *, attach: bool) -> None:
        frame = _Frame(kind=kind, line=tok.line)
        pending = self.pending
        if attach and pending is not None and self.paren_depth == pending.paren_depth:
            parent = self._current_builder()
            builder = _BlockBuilder(
                kind=pending.kind,
                keyword=pending.keyword,
                label=pending.label,
                label_kind=pending.label_kind,
                depth=0 if parent is None else parent.depth + 1,
                line=pending.line,
                arguments=self._arguments(pending.args_from, tok),
            )
            (self.roots if parent is None else parent.children).append(builder)
            frame.builder = builder
            self.pending = None
        self.stack.append(frame)

    def _close(self, kind: str, tok: Token) -> None:
        closer = "end" if kind == _FRAME_DO else "}"
        matches = (_FRAME_DO, _FRAME_KEYWORD) if kind == _FRAME_DO else (_FRAME_BRACE,)
        index = next(
            (k for k in range(len(self.stack) - 1, -1, -1) if self.stack[k].kind in matches),
            None,
        )
        if index is None:
            self.diagnostics.append(ParseDiagnostic(line=tok.line, message=f"unmatched '{closer}'"))
            return
        skipped = self.stack[index + 1:]
        if skipped:
            self.diagnostics.append(
                ParseDiagnostic(
                    line=tok.line,
                    message=(
                        f"'{closer}' closes a block opened at line {self.stack[index].line} "
                        f"while {len(skipped)} inner block(s) remain open "
                        f"(innermost opened at line {skipped[-1].line})"
                    ),
                )
            )
        for frame in reversed(self.stack[index:]):
            if frame.builder is not None:
                frame.builder.end_line = tok.line
        del self.stack[index:]
        # Closing past the frame the keyword appeared in ends its statement.
        if self.pending is not None and index < self.pending.stack_depth:
            self.pending = None

    def _finish(self) -> None:
        if not self.stack:
            return
        outermost = self.stack[0]
        self.diagnostics.append(
            ParseDiagnostic(
                line=outermost.line,
                message=(
                    f"{len(self.stack)} block(s) not closed at end of file "
                    f"(outermost opened at line {outermost.line})"
                ),
            )
        )
        for frame in self.stack:
            if frame.builder is not None:
                frame.builder.end_line = self.last_line
        self.stack.clear()

    def _record_assertion(self, tok: Token) -> None:
        builder = self._current_builder()
        if builder is None or builder.kind not in (BlockKind.IT, BlockKind.ITS):
            return
        builder.assertion_statements.add(self.statement)
        builder.assertion_lines.add(tok.line)

    # -- helpers ----------------------------------------------------------

    def _current_builder(self) -> _BlockBuilder | None:
        for frame in reversed(self.stack):
            if frame.builder is not None:
                return frame.builder
        return None

    def _token_at(self, i: int) -> Token | None:
        return self.tokens[i] if 0 <= i < len(self.tokens) else None

    def _previous_significant(self, i: int) -> Token | None:
        for k in range(i - 1, -1, -1):
            if self.tokens[k].kind is not TokenKind.NEWLINE:
                return self.tokens[k]
        return None

    def _after_dot(self, i: int) -> bool:
        prev = self._token_at(i - 1)
        return prev is not None and prev.kind is TokenKind.PUNCT and prev.value in (".", "&.", "::")

    def _receiver_call(self, i: int) -> bool:
        """True for `RSpec.describe` where `RSpec` starts the expression."""
        dot, receiver = self._token_at(i - 1), self._token_at(i - 2)
        return (
            dot is not None
            and receiver is not None
            and dot.value in (".", "::")
            and receiver.kind is TokenKind.CONSTANT
            and receiver.value in BLOCK_RECEIVERS
            and self.expr_start_index == i - 2
        )

    def _is_endless_def(self, i: int) -> bool:
        """`def name(args) = expr` opens no frame; setters (`def name=(v)`) do."""
        depth = 0
        for k in range(i + 1, len(self.tokens)):
            tok = self.tokens[k]
            if tok.kind is TokenKind.NEWLINE or tok.value == ";":
                return False
            if tok.kind is not TokenKind.PUNCT:
                continue
            if tok.value in ("(", "["):
                depth += 1
            elif tok.value in (")", "]"):
                depth -= 1
            elif tok.value == "=" and depth == 0 and tok.spaced:
                return True
        return False

    def _arguments(self, args_from: int, opener: Token) -> str:
        """Source text between the label and the opener, without separators."""
        texts: list[str] = []
        for tok in self.tokens[args_from:]:
            if tok is opener:
                break
            if tok.kind is TokenKind.NEWLINE:
                continue
            texts.append(tok.text)
        joined = " ".join(texts).strip()
        if joined.endswith(")"):
            joined = joined[:-1].rstrip()
        return joined.lstrip(",").strip()
