"""Read a manifest from the JSON fixture format used by the CLI and tests.

Byte fields are hex strings. Structural problems raise
:class:`~chunkmap.errors.ManifestFormatError`; semantic problems (missing
signatures, dangling references) are left for the builders to report.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from chunkmap.errors import ManifestFormatError
from chunkmap.manifest.model import (
    ChunkInfo,
    ChunkReference,
    Container,
    FileChunkReferences,
    FileGroupRecord,
    FileGroupsManifest,
    ServerError,
)


def _hex(value: Any, field_name: str, *, optional: bool = False) -> bytes | None:
    if value is None:
        if optional:
            return None
        raise ManifestFormatError(f"{field_name} is required")
    if not isinstance(value, str):
        raise ManifestFormatError(f"{field_name} must be a hex string")
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ManifestFormatError(f"{field_name} is not valid hex") from exc


def _list(value: Any, field_name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestFormatError(f"{field_name} must be a list")
    return value


def _object(value: Any, field_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ManifestFormatError(f"{field_name} must be an object")
    return value


def _chunk_reference(value: Any) -> ChunkReference:
    if not isinstance(value, list) or len(value) != 2 or not all(isinstance(v, int) for v in value):
        raise ManifestFormatError("chunk reference must be [container_index, chunk_index]")
    return ChunkReference(container_index=value[0], chunk_index=value[1])


def _chunk_info(value: Any) -> ChunkInfo:
    data = _object(value, "chunk_info")
    length = data.get("length")
    if length is not None and not isinstance(length, int):
        raise ManifestFormatError("chunk_info.length must be an integer")
    return ChunkInfo(
        checksum=_hex(data.get("checksum"), "chunk_info.checksum") or b"",
        encryption_key=_hex(data.get("encryption_key"), "chunk_info.encryption_key", optional=True) or b"",
        length=length,
    )


def _container(value: Any) -> Container:
    data = _object(value, "container")
    host = data.get("host")
    if host is not None and not isinstance(host, str):
        raise ManifestFormatError("container.host must be a string")
    return Container(
        chunk_infos=tuple(_chunk_info(item) for item in _list(data.get("chunk_infos"), "container.chunk_infos")),
        host=host,
    )


def _file_chunk_references(value: Any) -> FileChunkReferences:
    data = _object(value, "file_chunk_references")
    return FileChunkReferences(
        file_signature=_hex(data.get("file_signature"), "file_signature", optional=True),
        chunk_references=tuple(
            _chunk_reference(item) for item in _list(data.get("chunk_references"), "chunk_references")
        ),
        file_checksum=_hex(data.get("file_checksum"), "file_checksum", optional=True),
    )


def _server_error(value: Any) -> ServerError:
    data = _object(value, "error")
    message = data.get("message", "")
    return ServerError(
        file_signature=_hex(data.get("file_signature"), "error.file_signature", optional=True),
        message=str(message),
    )


def manifest_from_dict(document: Any) -> FileGroupsManifest:
    data = _object(document, "manifest")
    groups = []
    for item in _list(data.get("file_groups"), "file_groups"):
        group = _object(item, "file_group")
        groups.append(
            FileGroupRecord(
                file_chunk_references=tuple(
                    _file_chunk_references(entry)
                    for entry in _list(group.get("file_chunk_references"), "file_chunk_references")
                ),
                containers=tuple(_container(entry) for entry in _list(group.get("containers"), "containers")),
            )
        )
    return FileGroupsManifest(
        file_groups=tuple(groups),
        file_errors=tuple(_server_error(e) for e in _list(data.get("file_errors"), "file_errors")),
        chunk_errors=tuple(_server_error(e) for e in _list(data.get("chunk_errors"), "chunk_errors")),
    )


def load_manifest(path: Path) -> FileGroupsManifest:
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise FileNotFoundError(manifest_path)
    try:
        document = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestFormatError(f"Invalid JSON: {exc}") from exc
    return manifest_from_dict(document)


__all__ = ["load_manifest", "manifest_from_dict"]
