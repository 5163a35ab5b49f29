"""
  pscript lexer

- Streaming: yields one classified Token at a time, then a final EOI token
- Classification only; literal values are parsed by the evaluator

   number      42  -7  3.5  .5  1e10
   radix       16#FF  2#1010
   key         /name
   ident       add  dup  anything-else
   block_open  {
   block_close }
   array_open  [
   array_close ]
   %           comment to end of line (dropped)
"""

from __future__ import annotations

import re
from typing import Iterator, NamedTuple

from pscript.errors import PSSyntaxError


NUMBER = "number"
RADIX = "radix"
KEY = "key"
IDENT = "ident"
BLOCK_OPEN = "block_open"
BLOCK_CLOSE = "block_close"
ARRAY_OPEN = "array_open"
ARRAY_CLOSE = "array_close"
EOI = "eoi"

_DELIM = r"\s{}\[\]/%"
_END = rf"(?=[{_DELIM}]|$)"

TOKEN_RE = re.compile(
    r"(?P<comment>%[^\n]*)"  # comment to end of line
    r"|(?P<block_open>\{)"  # {
    r"|(?P<block_close>\})"  # }
    r"|(?P<array_open>\[)"  # [
    r"|(?P<array_close>\])"  # ]
    rf"|(?P<key>/[^{_DELIM}]*)"  # /name
    rf"|(?P<radix>[0-9]+#[+-]?[0-9A-Za-z]+){_END}"  # base#digits
    rf"|(?P<number>[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?){_END}"  # int / float
    rf"|(?P<ident>[^{_DELIM}]+)"  # fallback: identifiers
)


class Token(NamedTuple):
    kind: str
    text: str
    offset: int = 0


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Tokens, ending with a single EOI token."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise PSSyntaxError(detail=f"unexpected character {source[pos]!r} at {pos}")
        kind = m.lastgroup
        start, pos = pos, m.end()
        if kind == "comment":
            continue
        yield Token(kind, m.group(kind), start)
    yield Token(EOI, "", n)
