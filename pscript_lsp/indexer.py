from __future__ import annotations

"""
Lightweight indexer for pscript files without evaluating code.

We lex the buffer with the interpreter's own lexer (which never fails on
partial input) and build an index for:
- definitions: /name { ... } def  (procedures) and /name value def (vars)
- identifier references, so names that are neither builtins nor defined in
  the document can be flagged
- brace and bracket balance, with the position of the first stray closer
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple

from pscript.builtin.operators import operators
from pscript.reader import lexer
from pscript.reader.lexer import Token, lex


@dataclass
class SymbolDef:
    name: str
    kind: str  # "procedure" | "var"
    line: int
    col: int


@dataclass
class NameRef:
    name: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    references: List[NameRef] = field(default_factory=list)
    brace_balance: int = 0
    bracket_balance: int = 0
    stray_closer: Optional[Tuple[int, int]] = None  # (line, col) of first unmatched } or ]

    def undefined_references(self) -> List[NameRef]:
        return [
            ref for ref in self.references
            if ref.name not in self.symbols and ref.name not in BUILTIN_SIGNATURES
        ]


def _position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


_OPENERS = {lexer.BLOCK_OPEN: lexer.BLOCK_CLOSE, lexer.ARRAY_OPEN: lexer.ARRAY_CLOSE}
_SCALARS = (lexer.NUMBER, lexer.RADIX, lexer.KEY, lexer.IDENT)


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens: List[Token] = [t for t in lex(text) if t.kind != lexer.EOI]

    # index of closer -> index of its opener
    opener_of: Dict[int, int] = {}
    open_stack: List[int] = []

    for i, tok in enumerate(tokens):
        if tok.kind in _OPENERS:
            open_stack.append(i)
            if tok.kind == lexer.BLOCK_OPEN:
                idx.brace_balance += 1
            else:
                idx.bracket_balance += 1
        elif tok.kind in (lexer.BLOCK_CLOSE, lexer.ARRAY_CLOSE):
            if tok.kind == lexer.BLOCK_CLOSE:
                idx.brace_balance -= 1
            else:
                idx.bracket_balance -= 1
            if open_stack and _OPENERS[tokens[open_stack[-1]].kind] == tok.kind:
                opener_of[i] = open_stack.pop()
            elif idx.stray_closer is None:
                idx.stray_closer = _position_from_offset(text, tok.offset)
        elif tok.kind == lexer.IDENT:
            if tok.text == "def":
                _index_definition(text, tokens, i, opener_of, idx)
            else:
                line, col = _position_from_offset(text, tok.offset)
                idx.references.append(NameRef(name=tok.text, line=line, col=col))

    return idx


def _index_definition(text: str, tokens: List[Token], i: int, opener_of: Dict[int, int], idx: DocumentIndex) -> None:
    """Record `/name value def` ending at token i, if the shape matches."""
    if i < 2:
        return
    value_end = i - 1
    value_tok = tokens[value_end]
    if value_end in opener_of:
        # { ... } or [ ... ]
        value_start = opener_of[value_end]
        kind = "procedure" if value_tok.kind == lexer.BLOCK_CLOSE else "var"
    elif value_tok.kind in _SCALARS:
        value_start = value_end
        kind = "var"
    else:
        return
    key_pos = value_start - 1
    if key_pos < 0 or tokens[key_pos].kind != lexer.KEY:
        return
    key_tok = tokens[key_pos]
    name = key_tok.text[1:]
    if not name:
        return
    line, col = _position_from_offset(text, key_tok.offset)
    idx.symbols[name] = SymbolDef(name=name, kind=kind, line=line, col=col)


# Builtin signatures for quick hover without eval
BUILTIN_SIGNATURES: Dict[str, str] = {
    name: op.signature for name, op in operators().items()
}
