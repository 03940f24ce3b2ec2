"""Tests for the container index, signature index and aggregation."""
from __future__ import annotations

from hypothesis import given, strategies as st

from chunkmap.diagnostics import DiagnosticKind, Diagnostics
from chunkmap.manifest.builder import aggregate, index_chunk_references, index_containers
from chunkmap.manifest.model import ChunkReference, Container, FileChunkReferences, FileGroupRecord

from helpers import make_container, refs

_refs = st.lists(
    st.builds(ChunkReference, container_index=st.integers(0, 8), chunk_index=st.integers(0, 8)),
    max_size=10,
)


@given(count=st.integers(min_value=0, max_value=20))
def test_index_containers_keys_are_positions(count: int) -> None:
    containers = [Container(host=f"host-{i}") for i in range(count)]
    index = index_containers(containers)

    assert len(index) == count
    assert sorted(index) == list(range(count))
    assert all(index[i].host == f"host-{i}" for i in range(count))


@given(first=_refs, second=_refs)
def test_duplicate_signatures_concatenate_references(first: list, second: list) -> None:
    diagnostics = Diagnostics()
    records = [
        FileChunkReferences(file_signature=b"sig", chunk_references=tuple(first)),
        FileChunkReferences(file_signature=b"sig", chunk_references=tuple(second)),
    ]

    index = index_chunk_references(records, diagnostics)

    assert len(index[b"sig"]) == len(first) + len(second)
    assert index[b"sig"] == tuple(first) + tuple(second)
    assert diagnostics.kinds() == [DiagnosticKind.SIGNATURE_COLLISION]


def test_collision_diagnostic_names_both_records() -> None:
    diagnostics = Diagnostics()
    a = FileChunkReferences(file_signature=b"sig", chunk_references=refs((0, 0)))
    b = FileChunkReferences(file_signature=b"sig", chunk_references=refs((1, 2)))

    index_chunk_references([a, b], diagnostics)

    (event,) = diagnostics.of_kind(DiagnosticKind.SIGNATURE_COLLISION)
    assert event.fields["first"] is a
    assert event.fields["second"] is b


def test_missing_signature_records_are_dropped() -> None:
    diagnostics = Diagnostics()
    records = [
        FileChunkReferences(file_signature=None, chunk_references=refs((0, 0))),
        FileChunkReferences(file_signature=b"kept", chunk_references=refs((0, 1))),
    ]

    index = index_chunk_references(records, diagnostics)

    assert list(index) == [b"kept"]
    assert diagnostics.kinds() == [DiagnosticKind.MISSING_SIGNATURE]


def test_aggregate_keeps_invalid_references() -> None:
    record = FileGroupRecord(
        file_chunk_references=(FileChunkReferences(file_signature=b"f", chunk_references=refs((0, 9), (5, 0))),),
        containers=(make_container(b"k0"),),
    )
    diagnostics = Diagnostics()

    group = aggregate(record, diagnostics)

    assert group.chunk_references_for(b"f") == refs((0, 9), (5, 0))
    assert list(group.containers) == [0]
    assert len(diagnostics) == 0


def test_file_group_queries(example_record: FileGroupRecord) -> None:
    group = aggregate(example_record)

    assert group.contains(b"f1")
    assert not group.contains(b"f2")
    assert group.chunk_references_for(b"f2") is None
    assert group.file_signatures() == [b"f1"]

    located = group.locate(b"f1")
    assert [chunk.checksum for chunk in located[0]] == [b"c0", b"c1"]
    assert group.locate(b"f2") == {}
