"""
  Ember reader: text to runtime values

Tokens come from a single regular expression; `TokenStream` turns them into
values lazily, one top-level form at a time. Code is data, so the reader
builds the same values scripts manipulate:

    - nil            -> Nil
    - #t / #f        -> True / False (also #true / #false)
    - ( ... )        -> Pair chain ending in Nil
    - (a b . c)      -> Pair chain ending in c
    - #( ... )       -> Vector
    - "text"         -> str (backslash escapes)
    - 12, -3.5, 1e3  -> int / float; #x1F, #o17, #b101 radix integers
    - 'x `x ,x ,@x   -> (quote x) (quasiquote x) (unquote x) (unquote-splicing x)
    - anything else  -> interned Symbol

`;` starts a line comment; `#| ... |#` block comments nest.
"""

from __future__ import annotations

import ast
import re
from collections import deque
from typing import Iterator, Optional

from ember import SExpression
from ember.errors import EmberSyntaxError
from ember.types.nil import Nil
from ember.types.pair import Pair, list_from
from ember.types.symbol import Symbol
from ember.types.vector import Vector

Token = tuple[str, str]
EOF: tuple[None, None] = (None, None)

TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"
    r"|(?P<ml_start>#\|)"
    r"|(?P<quote>['`])"
    r"|(?P<unquote>,@|,)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r'|(?P<string>"(?:\\.|[^\\"])*")'
    r"|(?P<vector>#\()"
    r"|(?P<radix>#b[01]+|#o[0-7]+|#x[0-9A-Fa-f]+)"
    r'|(?P<symbol>[^\s()\'",;`]+)',
    re.DOTALL,
)

QUOTE_FORMS: dict[str, Symbol] = {
    "'": Symbol("quote"),
    "`": Symbol("quasiquote"),
    ",": Symbol("unquote"),
    ",@": Symbol("unquote-splicing"),
}

BOOLEANS: dict[str, bool] = {"#t": True, "#true": True, "#f": False, "#false": False}

RADIX_BASES = {"b": 2, "o": 8, "x": 16}

INT_RE = re.compile(r"[+-]?\d+")
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")


def _block_comment_end(source: str, pos: int) -> int:
    """Index just past the `|#` closing the block comment opened before `pos`."""
    depth = 1
    while depth:
        opener = source.find("#|", pos)
        closer = source.find("|#", pos)
        if closer < 0:
            raise EmberSyntaxError("Unterminated multi-line comment")
        if 0 <= opener < closer:
            depth += 1
            pos = opener + 2
        else:
            depth -= 1
            pos = closer + 2
    return pos


def lex(source: str) -> Iterator[Token]:
    """Yield (token_type, text) pairs; comments and whitespace are dropped."""
    pos, n = 0, len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if m is None:
            if source[pos] == '"':
                raise EmberSyntaxError(f"Unterminated string at {pos}")
            raise EmberSyntaxError(f"Unexpected char at {pos}: {source[pos]!r}")
        kind = m.lastgroup
        pos = m.end()
        if kind == "comment":
            continue
        if kind == "ml_start":
            pos = _block_comment_end(source, pos)
            continue
        yield kind, m.group(kind)


def parse_atom(text: str) -> SExpression:
    """A bare token as nil, a boolean, a number or a symbol."""
    if text.lower() == "nil":
        return Nil
    if text in BOOLEANS:
        return BOOLEANS[text]
    if INT_RE.fullmatch(text):
        return int(text)
    if FLOAT_RE.fullmatch(text):
        return float(text)
    return Symbol(text)


def parse_radix(text: str) -> int:
    return int(text[2:], RADIX_BASES[text[1]])


def parse_string(text: str) -> str:
    try:
        return ast.literal_eval(text)
    except (SyntaxError, ValueError) as e:
        raise EmberSyntaxError(f"Bad string literal {text}: {e}") from e


class TokenStream:
    """Lazy parser over a token iterator with one token of lookahead."""

    def __init__(self, token_iter: Iterator[Token]):
        self.tokens = iter(token_iter)
        self.buffer: deque[Token] = deque()

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            token = next(self.tokens, None)
            if token is None:
                return EOF
            self.buffer.append(token)
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.popleft()
        return next(self.tokens, EOF)

    def parse_expr(self) -> SExpression:
        """Parse one expression; None when the stream is exhausted."""
        tok_type, tok_val = self.advance()
        match tok_type:
            case None:
                return None
            case "symbol":
                return parse_atom(tok_val)
            case "string":
                return parse_string(tok_val)
            case "radix":
                return parse_radix(tok_val)
            case "quote" | "unquote":
                return Pair(QUOTE_FORMS[tok_val], Pair(self._required(f"after {tok_val}"), Nil))
            case "lparen":
                return self._parse_list()
            case "vector":
                return Vector(self._parse_items("while reading vector"))
            case "rparen":
                raise EmberSyntaxError("Unexpected ')'")
        raise EmberSyntaxError(f"Unknown token: {tok_type} {tok_val}")

    def _required(self, where: str) -> SExpression:
        expr = self.parse_expr()
        if expr is None:
            raise EmberSyntaxError(f"Unexpected EOF {where}")
        return expr

    def _parse_items(self, where: str) -> list[SExpression]:
        """Expressions up to and including the closing paren."""
        items = []
        while (tok_type := self.peek()[0]) != "rparen":
            if tok_type is None:
                raise EmberSyntaxError(f"Unexpected EOF {where}")
            items.append(self.parse_expr())
        self.advance()
        return items

    def _parse_list(self) -> SExpression:
        items: list[SExpression] = []
        tail: SExpression = Nil
        while True:
            tok_type, tok_val = self.peek()
            if tok_type == "rparen":
                self.advance()
                break
            if tok_type is None:
                raise EmberSyntaxError("Unmatched '('")
            if tok_type == "symbol" and tok_val == ".":
                if not items:
                    raise EmberSyntaxError("Dotted list needs an element before '.'")
                self.advance()
                tail = self._required("after '.'")
                if self.advance()[0] != "rparen":
                    raise EmberSyntaxError("Expected ')' after dotted cdr")
                break
            items.append(self.parse_expr())
        return list_from(items, tail)

    def parse_all(self) -> Iterator[SExpression]:
        while self.peek()[0] is not None:
            yield self.parse_expr()


def read_all(source: str) -> list[SExpression]:
    """Every expression in `source`, in order."""
    return list(TokenStream(lex(source)).parse_all())


def read(source: str) -> SExpression:
    """The first expression in `source`."""
    exprs = read_all(source)
    if not exprs:
        raise EmberSyntaxError("No expression to read")
    return exprs[0]
