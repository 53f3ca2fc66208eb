"""
Request canonicalization and Authorization header signing.
"""
from .models import (
    AuthScheme,
    Credentials,
    KeyMaterial,
    PendingRequest,
    Secret,
    SessionState,
    bind_credentials,
)
from .canonicalizer import canonicalize
from .request_signer import RequestSigner, sign, digest, hmac_b64, identity_key

__all__ = [
    'AuthScheme',
    'Credentials',
    'KeyMaterial',
    'PendingRequest',
    'Secret',
    'SessionState',
    'bind_credentials',
    'canonicalize',
    'RequestSigner',
    'sign',
    'digest',
    'hmac_b64',
    'identity_key',
]
