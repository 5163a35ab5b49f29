from __future__ import annotations

"""
A minimal pygls-based Language Server for pscript.

Features:
- Text synchronization and document store
- Diagnostics: unbalanced braces/brackets, stray closers, unknown names
- Hover: builtin signatures and locally defined names
- Completion: builtins and names defined with /name ... def
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from typing import Dict, Optional, List
from dataclasses import dataclass

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
    TextDocumentSyncKind,
)

from pscript.config import get_log_level
from pscript_lsp.indexer import build_index, BUILTIN_SIGNATURES, DocumentIndex

logger = logging.getLogger(__name__)

_WORD_BREAKS = " \t\r\n{}[]%"


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class PScriptLanguageServer(LanguageServer):
    CMD_NAME = "pscript-ls"

    def __init__(self):
        # full sync: every didChange carries the whole buffer
        super().__init__(self.CMD_NAME, "v0.1", text_document_sync_kind=TextDocumentSyncKind.Full)
        self.documents: Dict[str, DocumentState] = {}


ls = PScriptLanguageServer()


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    text = params.text_document.text or ""
    ls.documents[uri] = DocumentState(text=text, index=build_index(text))
    _publish_diagnostics(uri)


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents.get(uri, DocumentState("", build_index(""))).text
    ls.documents[uri] = DocumentState(text=text, index=build_index(text))
    _publish_diagnostics(uri)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def collect_diagnostics(idx: DocumentIndex) -> List[Diagnostic]:
    diags: List[Diagnostic] = []

    if idx.stray_closer is not None:
        line, col = idx.stray_closer
        diags.append(
            Diagnostic(
                range=_mk_range(line, col),
                message="Closing brace or bracket with no matching opener",
                severity=DiagnosticSeverity.Error,
                source="pscript-ls",
            )
        )
    if idx.brace_balance > 0:
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message="Unterminated block: missing '}'",
                severity=DiagnosticSeverity.Warning,
                source="pscript-ls",
            )
        )
    if idx.bracket_balance > 0:
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message="Unterminated array: missing ']'",
                severity=DiagnosticSeverity.Warning,
                source="pscript-ls",
            )
        )
    for ref in idx.undefined_references():
        diags.append(
            Diagnostic(
                range=_mk_range(ref.line, ref.col, len(ref.name)),
                message=f"'{ref.name}' is not a builtin and is not defined in this document",
                severity=DiagnosticSeverity.Information,
                source="pscript-ls",
            )
        )
    return diags


def _publish_diagnostics(uri: str):
    diags = collect_diagnostics(ls.documents[uri].index)
    logger.debug("%s: %d diagnostics", uri, len(diags))
    ls.publish_diagnostics(uri, diags)


# --- Hover ---
@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    word = _extract_word_at(state.text, params.position)
    if not word:
        return None
    name = word[1:] if word.startswith("/") else word

    if name in BUILTIN_SIGNATURES:
        contents = BUILTIN_SIGNATURES[name]
    elif name in state.index.symbols:
        sdef = state.index.symbols[name]
        contents = f"{name}: {sdef.kind} (defined at {sdef.line+1}:{sdef.col+1})"
    else:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["/"]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    items: List[CompletionItem] = []
    if not state:
        return CompletionList(is_incomplete=False, items=items)

    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    for name, sdef in state.index.symbols.items():
        kind = CompletionItemKind.Function if sdef.kind == "procedure" else CompletionItemKind.Variable
        items.append(CompletionItem(label=name, kind=kind))

    return CompletionList(is_incomplete=False, items=items)


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        # +1 for the leading '/'
        rng = _mk_range(sdef.line, sdef.col, len(name) + 1)
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Function if sdef.kind == "procedure" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---

def _extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = end = min(pos.character, len(line))
    while start > 0 and line[start - 1] not in _WORD_BREAKS:
        start -= 1
    while end < len(line) and line[end] not in _WORD_BREAKS:
        end += 1
    return line[start:end] or None


def main():
    logging.basicConfig(level=get_log_level())
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
