from __future__ import annotations

import chunkmap.manifest as manifest_api
from chunkmap.crypto.unwrap import FunctionUnwrapper
from chunkmap.diagnostics import DiagnosticKind, Diagnostics
from chunkmap.manifest import (
    ChunkInfo,
    ChunkReference,
    Container,
    FileChunkReferences,
    FileGroupRecord,
    FileGroupsManifest,
    convert_chunk_encryption_keys,
    reconstruct,
)


def test_public_names_are_exported() -> None:
    for name in manifest_api.__all__:
        assert hasattr(manifest_api, name), name


def test_public_reconstruct_and_convert() -> None:
    manifest = FileGroupsManifest(
        file_groups=(
            FileGroupRecord(
                file_chunk_references=(
                    FileChunkReferences(file_signature=b"f", chunk_references=(ChunkReference(0, 0),)),
                ),
                containers=(Container(chunk_infos=(ChunkInfo(checksum=b"c", encryption_key=b"w"),)),),
            ),
        ),
    )
    diagnostics = Diagnostics()

    (group,) = reconstruct(manifest, diagnostics=diagnostics)
    converted = convert_chunk_encryption_keys(
        group, FunctionUnwrapper(lambda wrapped, kek: wrapped.upper() + kek), {b"f": b"!"}, diagnostics
    )

    assert converted.locate(b"f")[0][0].encryption_key == b"W!"
    assert DiagnosticKind.UNWRAP_FAILED not in diagnostics.kinds()
