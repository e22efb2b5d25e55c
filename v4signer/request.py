"""
Credentials and the mutable request the signer operates on.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from .exceptions import SigV4Error

Headers = Dict[str, Any]

_DEFAULT_PORTS = {'http': 80, 'https': 443}


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> 'Credentials':
        """Read the standard AWS_* credential variables."""
        env = os.environ if environ is None else environ
        values = {}
        for name in ('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY'):
            value = env.get(name)
            if not value:
                raise SigV4Error(f'{name} is not set')
            values[name] = value
        return cls(
            values['AWS_ACCESS_KEY_ID'],
            values['AWS_SECRET_ACCESS_KEY'],
            env.get('AWS_SESSION_TOKEN') or None,
        )


def get_header(headers: Headers, name: str) -> Optional[Any]:
    lname = name.lower()
    for key, value in headers.items():
        if key.lower() == lname:
            return value
    return None


def set_header(headers: Headers, name: str, value: Any) -> None:
    """Store ``name`` verbatim, dropping any key that differs only in case."""
    lname = name.lower()
    for key in [k for k in headers if k.lower() == lname]:
        del headers[key]
    headers[name] = value


def host_from_url(url: str) -> str:
    parts = urlsplit(url)
    hostname = parts.hostname or ''
    if ':' in hostname:
        hostname = f'[{hostname}]'
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme):
        return f'{hostname}:{port}'
    return hostname


@dataclass
class Request:
    """
    An outbound HTTP request.

    ``path`` may carry the query string (``/key?versionId=1``); ``body`` is
    bytes, str, None or a seekable binary stream. ``host`` is the resolved
    endpoint host written to the Host header when signing.
    """
    method: str
    path: str
    headers: Headers = field(default_factory=dict)
    body: Any = None
    host: str = ''

    @classmethod
    def from_url(
            cls,
            method: str,
            url: str,
            headers: Optional[Headers] = None,
            body: Any = None
    ) -> 'Request':
        parts = urlsplit(url)
        path = parts.path
        if parts.query:
            path = f'{path}?{parts.query}'
        return cls(method, path, dict(headers or {}), body, host_from_url(url))
