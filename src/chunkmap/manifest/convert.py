"""Substitute unwrapped chunk encryption keys into a file group.

Containers live in an arena keyed by container index. Each write replaces a
whole immutable :class:`Container` at one index, and file signatures are
visited in the key table's iteration order. When two files share a chunk,
both unwrap the same slot in turn and the later file's result is kept.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Mapping, Optional, Union

from chunkmap.crypto.unwrap import FunctionUnwrapper, KeyUnwrapper
from chunkmap.diagnostics import DiagnosticKind, Diagnostics, ensure_sink
from chunkmap.manifest.model import ChunkInfo, Container, FileGroup
from chunkmap.manifest.resolver import resolve_references

UnwrapFunc = Callable[[bytes, bytes], Optional[bytes]]


def _as_unwrapper(unwrapper: Union[KeyUnwrapper, UnwrapFunc]) -> KeyUnwrapper:
    if isinstance(unwrapper, KeyUnwrapper):
        return unwrapper
    return FunctionUnwrapper(unwrapper)


def unwrap_chunk_key(
    chunk: ChunkInfo,
    unwrapper: KeyUnwrapper,
    key_encryption_key: bytes,
    diagnostics: Diagnostics,
) -> ChunkInfo:
    key = unwrapper.unwrap(chunk.encryption_key, key_encryption_key)
    if key is None:
        diagnostics.emit(DiagnosticKind.UNWRAP_FAILED, checksum=chunk.checksum)
        return replace(chunk, encryption_key=b"")
    return replace(chunk, encryption_key=bytes(key))


def unwrap_container_keys(
    container: Container,
    positions: set[int],
    unwrapper: KeyUnwrapper,
    key_encryption_key: bytes,
    diagnostics: Diagnostics,
) -> Container:
    """Return ``container`` with the chunks at ``positions`` unwrapped, in ascending order."""

    chunk_infos = list(container.chunk_infos)
    for position in sorted(positions):
        chunk_infos[position] = unwrap_chunk_key(chunk_infos[position], unwrapper, key_encryption_key, diagnostics)
    return replace(container, chunk_infos=tuple(chunk_infos))


def convert_chunk_encryption_keys(
    group: FileGroup,
    unwrapper: Union[KeyUnwrapper, UnwrapFunc],
    key_encryption_keys: Mapping[bytes, bytes],
    diagnostics: Diagnostics | None = None,
) -> FileGroup:
    """Return a new :class:`FileGroup` with chunk keys unwrapped for every keyed file.

    Only signatures present in both ``key_encryption_keys`` and ``group`` are
    processed. An unwrap failure clears that chunk's key and processing
    continues. ``group`` itself is left untouched.
    """

    sink = ensure_sink(diagnostics)
    backend = _as_unwrapper(unwrapper)
    arena: dict[int, Container] = dict(group.containers)

    for signature, key_encryption_key in key_encryption_keys.items():
        references = group.chunk_references_for(signature)
        if references is None:
            continue
        grouped = resolve_references(references, arena, sink)
        for index, positions in grouped.items():
            arena[index] = unwrap_container_keys(arena[index], positions, backend, key_encryption_key, sink)

    return FileGroup(containers=arena, chunk_references=group.chunk_references)


__all__ = ["UnwrapFunc", "convert_chunk_encryption_keys", "unwrap_chunk_key", "unwrap_container_keys"]
