"""Minimal LSP server for minicalc: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from minicalc import __version__
from minicalc.errors import EvalError, ScriptError
from minicalc.interpreter import interpret
from minicalc.tokens import position_at

server = LanguageServer(
    "minicalc-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _diagnostic(source: str, err: ScriptError) -> Diagnostic:
    pos = position_at(source, err.offset)
    line = pos.line - 1
    col = pos.column - 1
    # Warnings for type/domain problems, errors for anything lexical or syntactic
    severity = DiagnosticSeverity.Warning if isinstance(err, EvalError) else DiagnosticSeverity.Error
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 1),
        ),
        message=err.message,
        severity=severity,
        source="minicalc",
        code=err.rule,
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Interpret the document and publish one diagnostic per collected error."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    result = interpret(source)
    diagnostics = [_diagnostic(source, err) for err in result.errors]

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
