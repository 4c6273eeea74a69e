"""Ruby-subset tokenizer for spec files.

Only what block-structure recovery needs is modelled: comments, string-like
literals (so braces and keywords inside them are ignored), symbols, hash
labels, identifiers and punctuation. Everything else degrades to PUNCT.
"""

import re
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    WORD = "word"
    CONSTANT = "constant"
    STRING = "string"
    SYMBOL = "symbol"
    LABEL = "label"
    PUNCT = "punct"
    NEWLINE = "newline"


@dataclass(frozen=True)
class Token:
    """One lexical token. `text` is the exact source slice."""

    kind: TokenKind
    value: str
    line: int
    text: str = ""
    spaced: bool = False


# Longest first.
_OPERATORS: tuple[str, ...] = (
    "**=", "...", "<=>", "===", "||=", "&&=", "<<=", ">>=",
    "::", "=>", "->", "&.", "..", "==", "!=", ">=", "<=", "&&", "||",
    "<<", ">>", "+=", "-=", "*=", "/=", "%=", "|=", "&=", "=~", "!~", "**",
)

_HEREDOC_RE = re.compile(r"<<([~-]?)([\"'`]?)([A-Za-z_][A-Za-z0-9_]*)\2")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SYMBOL_OPERATOR_RE = re.compile(r"(\[\]=?|<=>|===?|=~|!=|!~|\*\*|[+\-*/%<>!~^&|]|<<|>>|<=|>=)")
_NUMBER_RE = re.compile(r"[0-9][0-9A-Za-z_]*(\.[0-9][0-9A-Za-z_]*)?")

_PAIRS: dict[str, str] = {"(": ")", "[": "]", "{": "}", "<": ">"}

# Tokens after which `/` and a bare `%(` start a literal rather than an operator.
_VALUE_KINDS = (TokenKind.WORD, TokenKind.CONSTANT, TokenKind.STRING, TokenKind.SYMBOL)


class SpecLexer:
    """Turns spec text into a flat token list with line numbers."""

    def __init__(self, text: str) -> None:
        self._src = text
        self._pos = 0
        self._line = 1
        self._tokens: list[Token] = []
        self._heredocs: list[tuple[str, bool]] = []
        self._spaced = False

    @classmethod
    def tokenize(cls, text: str) -> list[Token]:
        return cls(text).run()

    def run(self) -> list[Token]:
        src = self._src
        n = len(src)
        while self._pos < n:
            ch = src[self._pos]
            if self._at_line_start() and src.startswith("=begin", self._pos):
                self._skip_block_comment()
                continue
            if ch == "\n":
                self._emit(TokenKind.NEWLINE, "\n", "\n")
                self._pos += 1
                self._line += 1
                self._consume_heredoc_bodies()
                self._spaced = False
                continue
            if ch == "\\" and src.startswith("\n", self._pos + 1):
                self._pos += 2
                self._line += 1
                self._spaced = True
                continue
            if ch in " \t\r\f\v":
                self._pos += 1
                self._spaced = True
                continue
            if ch == "#":
                end = src.find("\n", self._pos)
                self._pos = n if end == -1 else end
                continue
            if ch in "\"'`":
                self._read_quoted(ch)
            elif ch == "%" and self._read_percent_literal():
                pass
            elif ch == "/" and not self._follows_value():
                self._read_delimited(self._pos, "/", "/", interpolate=True, flags=True)
            elif ch == "<" and self._read_heredoc_start():
                pass
            elif ch == ":":
                self._read_colon()
            elif ch in "@$":
                self._read_variable()
            elif ch.isalpha() or ch == "_" or ord(ch) > 127:
                self._read_identifier()
            elif ch.isdigit():
                match = _NUMBER_RE.match(src, self._pos)
                text = match.group(0) if match else ch
                self._push(TokenKind.WORD, text, text)
            else:
                self._read_punct()
            self._spaced = False
        return self._tokens

    # -- emission ---------------------------------------------------------

    def _emit(self, kind: TokenKind, value: str, text: str, line: int | None = None) -> None:
        self._tokens.append(
            Token(kind=kind, value=value, line=self._line if line is None else line, text=text, spaced=self._spaced)
        )

    def _push(self, kind: TokenKind, value: str, text: str) -> None:
        self._emit(kind, value, text)
        self._pos += len(text)

    def _last(self) -> Token | None:
        return self._tokens[-1] if self._tokens else None

    def _follows_value(self) -> bool:
        """True when the previous token ends an operand (so `/`, `%` are operators)."""
        last = self._last()
        if last is None or last.kind is TokenKind.NEWLINE:
            return False
        if last.kind in _VALUE_KINDS:
            # `expect /x/` style calls: a spaced slash followed by a non-space starts a regex.
            if last.kind is TokenKind.WORD and self._spaced:
                nxt = self._src[self._pos + 1:self._pos + 2]
                return nxt in (" ", "=", "")
            return True
        return last.value in (")", "]", "}")

    def _at_line_start(self) -> bool:
        return self._pos == 0 or self._src[self._pos - 1] == "\n"

    # -- comments and heredocs -------------------------------------------

    def _skip_block_comment(self) -> None:
        src = self._src
        while self._pos < len(src):
            end = src.find("\n", self._pos)
            line_text = src[self._pos:] if end == -1 else src[self._pos:end]
            self._pos = len(src) if end == -1 else end + 1
            if end != -1:
                self._line += 1
            if line_text.startswith("=end"):
                return

    def _read_heredoc_start(self) -> bool:
        match = _HEREDOC_RE.match(self._src, self._pos)
        if match is None:
            return False
        indented = bool(match.group(1))
        if not indented and self._follows_value():
            return False
        self._heredocs.append((match.group(3), indented))
        self._push(TokenKind.STRING, "", match.group(0))
        return True

    def _consume_heredoc_bodies(self) -> None:
        src = self._src
        while self._heredocs:
            terminator, indented = self._heredocs.pop(0)
            while self._pos < len(src):
                end = src.find("\n", self._pos)
                line_text = src[self._pos:] if end == -1 else src[self._pos:end]
                self._pos = len(src) if end == -1 else end + 1
                if end != -1:
                    self._line += 1
                candidate = line_text.strip() if indented else line_text.rstrip("\r")
                if candidate == terminator:
                    break

    # -- literals ---------------------------------------------------------

    def _read_quoted(self, quote: str) -> None:
        self._read_delimited(self._pos, quote, quote, interpolate=quote != "'")

    def _read_delimited(
        self,
        start: int,
        open_ch: str,
        close_ch: str,
        *,
        interpolate: bool,
        flags: bool = False,
        body_start: int | None = None,
        kind: TokenKind = TokenKind.STRING,
    ) -> None:
        """Read a literal whose body starts after `open_ch`; emits one token."""
        src = self._src
        line = self._line
        i = (start + 1) if body_start is None else body_start
        nesting = 0
        body: list[str] = []
        while i < len(src):
            c = src[i]
            if c == "\\" and i + 1 < len(src):
                body.append(src[i:i + 2])
                if src[i + 1] == "\n":
                    self._line += 1
                i += 2
                continue
            if interpolate and c == "#" and src.startswith("{", i + 1):
                j = self._skip_interpolation(i + 2)
                body.append(src[i:j])
                i = j
                continue
            if c == "\n":
                self._line += 1
            if open_ch != close_ch and c == open_ch:
                nesting += 1
            elif c == close_ch:
                if nesting == 0:
                    i += 1
                    break
                nesting -= 1
            body.append(c)
            i += 1
        if flags:
            while i < len(src) and src[i].isalpha():
                i += 1
        text = src[start:i]
        value = "".join(body)
        self._tokens.append(Token(kind=kind, value=value, line=line, text=text, spaced=self._spaced))
        self._pos = i

    def _skip_interpolation(self, i: int) -> int:
        """Return the index just past the `}` closing an interpolation."""
        src = self._src
        depth = 1
        while i < len(src) and depth:
            c = src[i]
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
            elif c == "\n":
                self._line += 1
            i += 1
        return i

    def _read_percent_literal(self) -> bool:
        src = self._src
        i = self._pos + 1
        letter = ""
        if i < len(src) and src[i] in "qQwWiIrsx":
            letter = src[i]
            i += 1
        if i >= len(src):
            return False
        delim = src[i]
        if delim.isalnum() or delim.isspace():
            return False
        if not letter and (delim == "=" or self._follows_value()):
            return False
        close = _PAIRS.get(delim, delim)
        kind = TokenKind.SYMBOL if letter == "s" else TokenKind.STRING
        self._read_delimited(
            self._pos,
            delim,
            close,
            interpolate=letter in ("", "Q", "W", "I", "r", "x"),
            flags=letter == "r",
            body_start=i + 1,
            kind=kind,
        )
        return True

    def _read_colon(self) -> None:
        src = self._src
        nxt = src[self._pos + 1:self._pos + 2]
        if nxt == ":":
            self._push(TokenKind.PUNCT, "::", "::")
            return
        if nxt in ("\"", "'"):
            start = self._pos
            self._read_delimited(self._pos + 1, nxt, nxt, interpolate=nxt == "\"")
            last = self._tokens.pop()
            text = src[start:self._pos]
            self._tokens.append(Token(TokenKind.SYMBOL, ":" + last.value, last.line, text, self._spaced))
            return
        match = _IDENT_RE.match(src, self._pos + 1)
        if match:
            end = match.end()
            if end < len(src) and src[end] in "?!=" and not src.startswith(("==", "=>", "=~"), end):
                end += 1
            text = src[self._pos:end]
            self._push(TokenKind.SYMBOL, text, text)
            return
        if not self._follows_value() or self._spaced:
            match = _SYMBOL_OPERATOR_RE.match(src, self._pos + 1)
            if match and nxt != " ":
                text = ":" + match.group(0)
                self._push(TokenKind.SYMBOL, text, text)
                return
        self._push(TokenKind.PUNCT, ":", ":")

    def _read_variable(self) -> None:
        src = self._src
        start = self._pos
        i = start + 1
        if src.startswith("@", i):
            i += 1
        match = _IDENT_RE.match(src, i)
        end = match.end() if match else min(i + 1, len(src))
        text = src[start:end]
        self._push(TokenKind.WORD, text, text)

    def _read_identifier(self) -> None:
        src = self._src
        start = self._pos
        i = start
        while i < len(src) and (src[i].isalnum() or src[i] == "_" or ord(src[i]) > 127):
            i += 1
        if i < len(src) and src[i] in "?!" and not src.startswith("=", i + 1):
            i += 1
        name = src[start:i]
        if src.startswith(":", i) and not src.startswith("::", i):
            text = src[start:i + 1]
            self._push(TokenKind.LABEL, name, text)
            return
        kind = TokenKind.CONSTANT if name[0].isupper() else TokenKind.WORD
        self._push(kind, name, name)

    def _read_punct(self) -> None:
        src = self._src
        for op in _OPERATORS:
            if src.startswith(op, self._pos):
                self._push(TokenKind.PUNCT, op, op)
                return
        ch = src[self._pos]
        self._push(TokenKind.PUNCT, ch, ch)
