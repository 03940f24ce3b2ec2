"""Build file group aggregates from raw manifest records."""
from __future__ import annotations

from typing import Iterable, Sequence

from chunkmap.diagnostics import DiagnosticKind, Diagnostics, ensure_sink
from chunkmap.manifest.model import (
    ChunkReference,
    Container,
    FileChunkReferences,
    FileGroup,
    FileGroupRecord,
    FileGroupsManifest,
)
from chunkmap.manifest.options import ReconstructOptions, resolve_options
from chunkmap.manifest.reporter import (
    exclude_errored_files,
    report_server_errors,
    signatures_with_server_errors,
)


def index_containers(containers: Sequence[Container]) -> dict[int, Container]:
    """Key containers by their position in the manifest."""

    return dict(enumerate(containers))


def index_chunk_references(
    records: Iterable[FileChunkReferences],
    diagnostics: Diagnostics | None = None,
) -> dict[bytes, tuple[ChunkReference, ...]]:
    """Map file signature to its chunk references, merging records that share a signature."""

    sink = ensure_sink(diagnostics)
    by_signature: dict[bytes, list[ChunkReference]] = {}
    first_seen: dict[bytes, FileChunkReferences] = {}
    for record in records:
        signature = record.file_signature
        if signature is None:
            sink.emit(DiagnosticKind.MISSING_SIGNATURE, record=record)
            continue
        if signature in by_signature:
            sink.emit(
                DiagnosticKind.SIGNATURE_COLLISION,
                file_signature=signature,
                first=first_seen[signature],
                second=record,
            )
            by_signature[signature].extend(record.chunk_references)
            continue
        first_seen[signature] = record
        by_signature[signature] = list(record.chunk_references)
    return {signature: tuple(references) for signature, references in by_signature.items()}


def aggregate(record: FileGroupRecord, diagnostics: Diagnostics | None = None) -> FileGroup:
    """Compose the container index and the signature index into a :class:`FileGroup`."""

    return FileGroup(
        containers=index_containers(record.containers),
        chunk_references=index_chunk_references(record.file_chunk_references, diagnostics),
    )


def reconstruct(
    manifest: FileGroupsManifest,
    options: ReconstructOptions | None = None,
    diagnostics: Diagnostics | None = None,
) -> list[FileGroup]:
    """Report server errors, then aggregate every file group in manifest order."""

    sink = ensure_sink(diagnostics)
    resolved = resolve_options(base=options)
    report_server_errors(manifest, sink)

    excluded: set[bytes] = set()
    if resolved.server_errors == "exclude":
        excluded = signatures_with_server_errors(manifest)

    return [
        aggregate(exclude_errored_files(record, excluded, sink), sink)
        for record in manifest.file_groups
    ]


__all__ = ["aggregate", "index_chunk_references", "index_containers", "reconstruct"]
