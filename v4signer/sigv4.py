"""
AWS Signature Version 4 header signing.

The signing pipeline is split into stages that each take explicit inputs:

    canonical_request -> string_to_sign -> signing_key -> signature -> authorization

SigV4Signer binds credentials, service and region and runs the stages
against a single timestamp per ``sign`` call.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

import structlog

from .hashing import hexdigest, hexhmac, hmac_digest
from .request import Credentials, Headers, Request, get_header, set_header

logger = structlog.get_logger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
TERMINATOR = 'aws4_request'
TIMESTAMP_FORMAT = '%Y%m%dT%H%M%SZ'
UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'

_QUOTED = re.compile(r'".*"', re.DOTALL)
_WHITESPACE = re.compile(r'\s+')


class Service(str, Enum):
    S3 = 's3'
    DYNAMODB = 'dynamodb'
    LAMBDA = 'lambda'
    IAM = 'iam'
    STS = 'sts'
    EC2 = 'ec2'
    EXECUTE_API = 'execute-api'
    SQS = 'sqs'
    SNS = 'sns'
    ES = 'es'


def canonical_header_value(value: str) -> str:
    if _QUOTED.fullmatch(value):
        return value
    return _WHITESPACE.sub(' ', value).strip()


def _signable(headers: Headers):
    return [(k.lower(), v) for k, v in headers.items() if k.lower() != 'authorization']


def canonical_headers(headers: Headers) -> str:
    entries = sorted(_signable(headers), key=lambda item: item[0])
    return '\n'.join(f'{name}:{canonical_header_value(str(value))}' for name, value in entries)


def signed_headers(headers: Headers) -> str:
    return ';'.join(sorted(name for name, _ in _signable(headers)))


def canonical_request(method: str, path: str, headers: Headers, content_sha256: str) -> str:
    """
    Build the canonical request. The path and query are used exactly as
    given; only the first '?' separates them.
    """
    uri, _, query = (path or '').partition('?')
    return '\n'.join([
        method,
        uri,
        query,
        canonical_headers(headers) + '\n',
        signed_headers(headers),
        content_sha256,
    ])


def credential_scope(timestamp: str, region: str, service: str) -> str:
    return '/'.join([timestamp[:8], region, service, TERMINATOR])


def string_to_sign(timestamp: str, scope: str, canonical: str) -> str:
    return '\n'.join([ALGORITHM, timestamp, scope, hexdigest(canonical.encode('utf-8'))])


def signing_key(secret_access_key: str, date: str, region: str, service: str) -> bytes:
    k_date = hmac_digest('AWS4' + secret_access_key, date)
    k_region = hmac_digest(k_date, region)
    k_service = hmac_digest(k_region, service)
    return hmac_digest(k_service, TERMINATOR)


def signature(key: bytes, to_sign: str) -> str:
    return hexhmac(key, to_sign)


def authorization(access_key_id: str, scope: str, signed: str, sig: str) -> str:
    return ', '.join([
        f'{ALGORITHM} Credential={access_key_id}/{scope}',
        f'SignedHeaders={signed}',
        f'Signature={sig}',
    ])


class SigV4Signer:
    """Signs requests for one (credentials, service, region) triple."""

    def __init__(
            self,
            credentials: Credentials,
            service: Union[str, Service],
            region: str
    ) -> None:
        self._credentials = credentials
        self._service = service.value if isinstance(service, Service) else service
        self._region = region

    @classmethod
    def from_keys(
            cls,
            access_key: str,
            secret_key: str,
            region: str,
            service: Union[str, Service],
            token: Optional[str] = None
    ) -> 'SigV4Signer':
        return cls(Credentials(access_key, secret_key, token), service, region)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def service(self) -> str:
        return self._service

    @property
    def region(self) -> str:
        return self._region

    def sign(self, request: Request) -> Request:
        """
        Add X-Amz-Date, Host, X-Amz-Security-Token (when the credentials
        carry one), X-Amz-Content-Sha256 (unless already set) and
        Authorization to ``request.headers``. Returns the same request.
        """
        timestamp = datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)
        headers = request.headers
        set_header(headers, 'X-Amz-Date', timestamp)
        set_header(headers, 'Host', request.host)
        if self._credentials.session_token:
            set_header(headers, 'X-Amz-Security-Token', self._credentials.session_token)
        if get_header(headers, 'X-Amz-Content-Sha256') is None:
            source = 'stream' if hasattr(request.body, 'read') else 'bytes'
            logger.debug('payload_hashed', source=source)
            set_header(headers, 'X-Amz-Content-Sha256', hexdigest(request.body))
        set_header(headers, 'Authorization', self.authorization(request, timestamp))

        logger.debug(
            'request_signed',
            method=request.method,
            host=request.host,
            signed_headers=signed_headers(headers),
            scope=self.credential_scope(timestamp),
        )
        return request

    def create_headers(
            self,
            method: str,
            url: str,
            headers: Optional[Headers] = None,
            body: Any = None
    ) -> Headers:
        """Sign a request given as a URL and return its headers."""
        return self.sign(Request.from_url(method, url, headers, body)).headers

    def authorization(self, request: Request, timestamp: str) -> str:
        return authorization(
            self._credentials.access_key_id,
            self.credential_scope(timestamp),
            signed_headers(request.headers),
            self.signature(request, timestamp),
        )

    def signature(self, request: Request, timestamp: str) -> str:
        key = signing_key(
            self._credentials.secret_access_key,
            timestamp[:8],
            self._region,
            self._service,
        )
        return signature(key, self.string_to_sign(request, timestamp))

    def string_to_sign(self, request: Request, timestamp: str) -> str:
        return string_to_sign(
            timestamp,
            self.credential_scope(timestamp),
            self.canonical_request(request),
        )

    def credential_scope(self, timestamp: str) -> str:
        return credential_scope(timestamp, self._region, self._service)

    def canonical_request(self, request: Request) -> str:
        return canonical_request(
            request.method,
            request.path,
            request.headers,
            get_header(request.headers, 'X-Amz-Content-Sha256') or '',
        )
