"""Validate chunk references against the container index and group them by container."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Mapping

from chunkmap.diagnostics import DiagnosticKind, Diagnostics, ensure_sink

if TYPE_CHECKING:
    from chunkmap.manifest.model import ChunkReference, Container


def resolve_references(
    references: Iterable[ChunkReference],
    containers: Mapping[int, Container],
    diagnostics: Diagnostics | None = None,
) -> dict[int, set[int]]:
    """Group the valid chunk positions of ``references`` by container index.

    References naming an unknown container or an out-of-range chunk are
    dropped with a diagnostic. Container keys keep first-seen order and
    repeated positions collapse.
    """

    sink = ensure_sink(diagnostics)
    grouped: dict[int, set[int]] = {}
    for reference in references:
        container = containers.get(reference.container_index)
        if container is None:
            sink.emit(
                DiagnosticKind.BAD_CONTAINER_INDEX,
                container_index=reference.container_index,
                chunk_index=reference.chunk_index,
            )
            continue
        if not 0 <= reference.chunk_index < len(container):
            sink.emit(
                DiagnosticKind.BAD_CHUNK_INDEX,
                container_index=reference.container_index,
                chunk_index=reference.chunk_index,
                chunk_count=len(container),
            )
            continue
        grouped.setdefault(reference.container_index, set()).add(reference.chunk_index)
    return grouped


__all__ = ["resolve_references"]
