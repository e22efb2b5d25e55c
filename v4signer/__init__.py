"""
AWS Signature Version 4 - Standalone Implementation

This package provides a standalone implementation of AWS Signature Version 4
header signing that doesn't depend on botocore for signing operations.
"""

from .exceptions import BodyReadError, SigV4Error
from .request import Credentials, Headers, Request
from .sigv4 import SigV4Signer, UNSIGNED_PAYLOAD, Service

__version__ = "0.1.0"
__all__ = [
    "SigV4Signer",
    "UNSIGNED_PAYLOAD",
    "Service",
    "Headers",
    "Credentials",
    "Request",
    "SigV4Error",
    "BodyReadError",
]
