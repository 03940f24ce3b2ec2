"""Configuration for manifest reconstruction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from chunkmap.errors import ConfigurationError

ServerErrorPolicy = Literal["report", "exclude"]

DEFAULT_SERVER_ERROR_POLICY: ServerErrorPolicy = "report"


@dataclass(frozen=True)
class ReconstructOptions:
    # "report" only logs server-declared errors; "exclude" also drops the affected file records.
    server_errors: ServerErrorPolicy = DEFAULT_SERVER_ERROR_POLICY


def normalize_server_error_policy(policy: str | None) -> ServerErrorPolicy:
    """Normalize user-provided server error policy strings."""

    if policy is None:
        return DEFAULT_SERVER_ERROR_POLICY

    normalized = policy.strip().lower()
    if normalized == "report":
        return "report"
    if normalized == "exclude":
        return "exclude"

    raise ConfigurationError(f"Unknown server error policy: {policy}")


def resolve_options(*, server_errors: str | None = None, base: ReconstructOptions | None = None) -> ReconstructOptions:
    """Build validated options using overrides when provided."""

    defaults = base or ReconstructOptions()
    return ReconstructOptions(
        server_errors=normalize_server_error_policy(
            server_errors if server_errors is not None else defaults.server_errors,
        ),
    )


__all__ = [
    "DEFAULT_SERVER_ERROR_POLICY",
    "ReconstructOptions",
    "ServerErrorPolicy",
    "normalize_server_error_policy",
    "resolve_options",
]
