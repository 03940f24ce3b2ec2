"""Public manifest API re-exported for external users.

The objects listed in ``__all__`` form the supported public surface.
Everything else in :mod:`chunkmap.manifest` is considered internal and may
change without notice.
"""
from __future__ import annotations

from chunkmap.manifest.builder import aggregate, index_chunk_references, index_containers, reconstruct
from chunkmap.manifest.convert import convert_chunk_encryption_keys
from chunkmap.manifest.loader import load_manifest, manifest_from_dict
from chunkmap.manifest.model import (
    ChunkInfo,
    ChunkReference,
    Container,
    FileChunkReferences,
    FileGroup,
    FileGroupRecord,
    FileGroupsManifest,
    ServerError,
)
from chunkmap.manifest.options import ReconstructOptions, normalize_server_error_policy, resolve_options
from chunkmap.manifest.reporter import report_server_errors
from chunkmap.manifest.resolver import resolve_references

__all__ = [
    "ChunkInfo",
    "ChunkReference",
    "Container",
    "FileChunkReferences",
    "FileGroup",
    "FileGroupRecord",
    "FileGroupsManifest",
    "ReconstructOptions",
    "ServerError",
    "aggregate",
    "convert_chunk_encryption_keys",
    "index_chunk_references",
    "index_containers",
    "load_manifest",
    "manifest_from_dict",
    "normalize_server_error_policy",
    "reconstruct",
    "report_server_errors",
    "resolve_options",
    "resolve_references",
]
