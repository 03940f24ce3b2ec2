"""Immutable manifest records and the reconstructed file group aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping

from chunkmap.diagnostics import Diagnostics
from chunkmap.manifest.resolver import resolve_references


@dataclass(frozen=True)
class ChunkReference:
    container_index: int
    chunk_index: int


@dataclass(frozen=True)
class ChunkInfo:
    checksum: bytes
    # Wrapped key until converted, unwrapped key afterwards, b"" when absent or unresolved.
    encryption_key: bytes = b""
    length: int | None = None


@dataclass(frozen=True)
class Container:
    """Chunk list held at one storage location."""

    chunk_infos: tuple[ChunkInfo, ...] = ()
    host: str | None = None

    def __len__(self) -> int:
        return len(self.chunk_infos)

    def __getitem__(self, position: int) -> ChunkInfo:
        return self.chunk_infos[position]

    def __iter__(self) -> Iterator[ChunkInfo]:
        return iter(self.chunk_infos)


@dataclass(frozen=True)
class FileChunkReferences:
    file_signature: bytes | None
    chunk_references: tuple[ChunkReference, ...] = ()
    file_checksum: bytes | None = None


@dataclass(frozen=True)
class FileGroupRecord:
    file_chunk_references: tuple[FileChunkReferences, ...] = ()
    containers: tuple[Container, ...] = ()


@dataclass(frozen=True)
class ServerError:
    file_signature: bytes | None
    message: str = ""


@dataclass(frozen=True)
class FileGroupsManifest:
    file_groups: tuple[FileGroupRecord, ...] = ()
    file_errors: tuple[ServerError, ...] = ()
    chunk_errors: tuple[ServerError, ...] = ()


@dataclass(frozen=True)
class FileGroup:
    """Reconstructed view of one file group.

    ``containers`` is keyed by positional container index and
    ``chunk_references`` by file signature. Neither mapping is validated
    against the other; that happens in :func:`resolve_references`.
    """

    containers: Mapping[int, Container] = field(default_factory=dict)
    chunk_references: Mapping[bytes, tuple[ChunkReference, ...]] = field(default_factory=dict)

    def contains(self, file_signature: bytes) -> bool:
        return file_signature in self.chunk_references

    def chunk_references_for(self, file_signature: bytes) -> tuple[ChunkReference, ...] | None:
        return self.chunk_references.get(file_signature)

    def file_signatures(self) -> list[bytes]:
        return list(self.chunk_references)

    def locate(
        self,
        file_signature: bytes,
        diagnostics: Diagnostics | None = None,
    ) -> dict[int, list[ChunkInfo]]:
        """Return the chunk infos a downloader needs for ``file_signature``, per container."""

        references = self.chunk_references.get(file_signature)
        if references is None:
            return {}
        grouped = resolve_references(references, self.containers, diagnostics)
        return {
            index: [self.containers[index][position] for position in sorted(positions)]
            for index, positions in grouped.items()
        }


__all__ = [
    "ChunkInfo",
    "ChunkReference",
    "Container",
    "FileChunkReferences",
    "FileGroup",
    "FileGroupRecord",
    "FileGroupsManifest",
    "ServerError",
]
