"""Structured diagnostic events emitted while rebuilding a manifest.

Every recoverable problem found in server data becomes a :class:`Diagnostic`
with a kind and contextual fields, so callers and tests can reason about
kinds rather than log text. Each event is also forwarded to :mod:`logging`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    MISSING_SIGNATURE = "missing-signature"
    SIGNATURE_COLLISION = "signature-collision"
    BAD_CONTAINER_INDEX = "bad-container-index"
    BAD_CHUNK_INDEX = "bad-chunk-index"
    UNWRAP_FAILED = "unwrap-failed"
    SERVER_FILE_ERROR = "server-file-error"
    SERVER_CHUNK_ERROR = "server-chunk-error"
    EXCLUDED_BY_SERVER_ERROR = "excluded-by-server-error"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    fields: Mapping[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        rendered = ", ".join(f"{key}={_render(value)}" for key, value in self.fields.items())
        return f"{self.kind.value}: {rendered}" if rendered else self.kind.value


def _render(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex() or "<empty>"
    return str(value)


class Diagnostics:
    """Collecting sink for :class:`Diagnostic` events."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._events: list[Diagnostic] = []
        self._log = log or logger

    def emit(self, kind: DiagnosticKind, **fields: Any) -> Diagnostic:
        event = Diagnostic(kind=kind, fields=fields)
        self._events.append(event)
        self._log.warning("%s", event.describe())
        return event

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [event for event in self._events if event.kind is kind]

    def kinds(self) -> list[DiagnosticKind]:
        return [event.kind for event in self._events]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)


def ensure_sink(diagnostics: Diagnostics | None) -> Diagnostics:
    """Return ``diagnostics`` or a fresh sink that still logs."""

    return diagnostics if diagnostics is not None else Diagnostics()


__all__ = ["Diagnostic", "DiagnosticKind", "Diagnostics", "ensure_sink"]
