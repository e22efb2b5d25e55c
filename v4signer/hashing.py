"""
SHA-256 and HMAC-SHA256 helpers used by the signing stages.
"""

import hashlib
import hmac
from typing import Any, Union

from .exceptions import BodyReadError

CHUNK_SIZE = 1024 * 1024  # 1 MiB

EMPTY_SHA256 = hashlib.sha256(b'').hexdigest()

Key = Union[str, bytes]


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    return value


def _digest_stream(stream: Any) -> str:
    seekable = getattr(stream, 'seekable', None)
    try:
        can_rewind = seekable is None or seekable()
    except ValueError as exc:
        raise BodyReadError(f'request body stream is unusable: {exc}') from exc
    if not can_rewind:
        raise BodyReadError('request body stream is not seekable')

    digest = hashlib.sha256()
    try:
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            digest.update(_to_bytes(chunk))
        stream.seek(0)
    except (OSError, ValueError) as exc:
        raise BodyReadError(f'failed to read request body: {exc}') from exc
    return digest.hexdigest()


def hexdigest(value: Any) -> str:
    """
    Lowercase hex SHA-256 of a body.

    Accepts bytes, str (UTF-8), None (empty) or a seekable binary stream.
    Streams are read in CHUNK_SIZE pieces and left positioned at the start.
    """
    if value is None:
        return EMPTY_SHA256
    if hasattr(value, 'read'):
        return _digest_stream(value)
    return hashlib.sha256(_to_bytes(value)).hexdigest()


def hmac_digest(key: Key, msg: Key) -> bytes:
    return hmac.new(_to_bytes(key), _to_bytes(msg), hashlib.sha256).digest()


def hexhmac(key: Key, msg: Key) -> str:
    return hmac.new(_to_bytes(key), _to_bytes(msg), hashlib.sha256).hexdigest()
