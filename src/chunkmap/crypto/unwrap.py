"""Chunk encryption key unwrapping back-ends."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, runtime_checkable

from cryptography.hazmat.primitives.keywrap import InvalidUnwrap, aes_key_unwrap

logger = logging.getLogger(__name__)

CHUNK_KEY_TYPE = 0x01
# RFC 3394 adds one 8-byte integrity block to the wrapped key.
WRAP_OVERHEAD = 8
KEK_LENGTHS = (16, 24, 32)


@runtime_checkable
class KeyUnwrapper(Protocol):
    def unwrap(self, wrapped: bytes, key_encryption_key: bytes) -> Optional[bytes]:
        """Return the unwrapped key, or ``None`` when unwrapping fails."""


class FunctionUnwrapper:
    """Adapt a plain ``(wrapped, kek) -> bytes | None`` callable to :class:`KeyUnwrapper`."""

    def __init__(self, func: Callable[[bytes, bytes], Optional[bytes]]) -> None:
        self._func = func

    def unwrap(self, wrapped: bytes, key_encryption_key: bytes) -> Optional[bytes]:
        return self._func(wrapped, key_encryption_key)


class AesKeyWrapUnwrapper:
    """AES key unwrap (RFC 3394) of chunk encryption keys.

    Wrapped chunk keys carry a leading key-type byte. The marker is checked,
    stripped before unwrapping and restored on the result, so a type
    ``0x01`` key of 25 bytes unwraps to 17 bytes. Pass ``key_type=None``
    for bare RFC 3394 blobs.
    """

    def __init__(self, key_type: int | None = CHUNK_KEY_TYPE) -> None:
        self.key_type = key_type

    def unwrap(self, wrapped: bytes, key_encryption_key: bytes) -> Optional[bytes]:
        if len(key_encryption_key) not in KEK_LENGTHS:
            logger.debug("unsupported key encryption key length: %d", len(key_encryption_key))
            return None

        body = wrapped
        if self.key_type is not None:
            if not wrapped or wrapped[0] != self.key_type:
                logger.debug("unsupported chunk key type: %s", wrapped[:1].hex() or "<empty>")
                return None
            body = wrapped[1:]

        if len(body) < 2 * WRAP_OVERHEAD or len(body) % WRAP_OVERHEAD:
            logger.debug("bad wrapped key length: %d", len(body))
            return None

        try:
            key = aes_key_unwrap(key_encryption_key, body)
        except InvalidUnwrap:
            logger.debug("integrity check failed unwrapping chunk key")
            return None

        if self.key_type is None:
            return key
        return bytes([self.key_type]) + key


__all__ = [
    "AesKeyWrapUnwrapper",
    "CHUNK_KEY_TYPE",
    "FunctionUnwrapper",
    "KEK_LENGTHS",
    "KeyUnwrapper",
    "WRAP_OVERHEAD",
]
