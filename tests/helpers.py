"""Builders shared by the manifest tests."""
from __future__ import annotations

from chunkmap.manifest.model import ChunkInfo, ChunkReference, Container


def make_container(*keys: bytes, prefix: bytes = b"c") -> Container:
    """Container whose chunk ``i`` has checksum ``prefix + i`` and wrapped key ``keys[i]``."""
    return Container(
        chunk_infos=tuple(ChunkInfo(checksum=prefix + str(i).encode(), encryption_key=key) for i, key in enumerate(keys))
    )


def refs(*pairs: tuple[int, int]) -> tuple[ChunkReference, ...]:
    return tuple(ChunkReference(container_index=c, chunk_index=k) for c, k in pairs)
