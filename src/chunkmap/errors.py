"""Custom exceptions for chunkmap.

Server data never raises: malformed manifest entries are reported through
:mod:`chunkmap.diagnostics` instead. These exceptions cover the surfaces
around the core (configuration and the JSON fixture loader).
"""


class ChunkMapError(Exception):
    """Base exception for chunkmap."""


class ManifestFormatError(ChunkMapError):
    """Manifest document does not match the expected structure."""


class ConfigurationError(ChunkMapError):
    """Option value is not recognised."""
