"""Surface server-declared file and chunk errors."""
from __future__ import annotations

from dataclasses import replace

from chunkmap.diagnostics import DiagnosticKind, Diagnostics, ensure_sink
from chunkmap.manifest.model import FileGroupRecord, FileGroupsManifest


def report_server_errors(manifest: FileGroupsManifest, diagnostics: Diagnostics | None = None) -> None:
    """Emit one diagnostic per server-reported error. Nothing is filtered."""

    sink = ensure_sink(diagnostics)
    for error in manifest.file_errors:
        sink.emit(DiagnosticKind.SERVER_FILE_ERROR, file_signature=error.file_signature, message=error.message)
    for error in manifest.chunk_errors:
        sink.emit(DiagnosticKind.SERVER_CHUNK_ERROR, file_signature=error.file_signature, message=error.message)


def signatures_with_server_errors(manifest: FileGroupsManifest) -> set[bytes]:
    errors = (*manifest.file_errors, *manifest.chunk_errors)
    return {error.file_signature for error in errors if error.file_signature is not None}


def exclude_errored_files(
    record: FileGroupRecord,
    excluded: set[bytes],
    diagnostics: Diagnostics | None = None,
) -> FileGroupRecord:
    """Drop per-file entries whose signature the server flagged. Containers are kept as-is."""

    if not excluded:
        return record

    sink = ensure_sink(diagnostics)
    kept = []
    for entry in record.file_chunk_references:
        if entry.file_signature is not None and entry.file_signature in excluded:
            sink.emit(DiagnosticKind.EXCLUDED_BY_SERVER_ERROR, file_signature=entry.file_signature)
            continue
        kept.append(entry)
    return replace(record, file_chunk_references=tuple(kept))


__all__ = ["exclude_errored_files", "report_server_errors", "signatures_with_server_errors"]
