"""
Python client for the Droplr API.
"""
from .errors import (
    DroplrError,
    ConfigurationError,
    SigningError,
    TransportError,
    BodyParseError,
    DroplrApiError,
)
from .config import Config
from .auth import AuthScheme, Credentials, KeyMaterial, Secret, RequestSigner
from .transport import RequestsTransport, TransportRequest, TransportResponse
from .session import DroplrSession, ApiResponse
from .client import DroplrClient
from .monitoring import get_metrics

__all__ = [
    'DroplrError',
    'ConfigurationError',
    'SigningError',
    'TransportError',
    'BodyParseError',
    'DroplrApiError',
    'Config',
    'AuthScheme',
    'Credentials',
    'KeyMaterial',
    'Secret',
    'RequestSigner',
    'RequestsTransport',
    'TransportRequest',
    'TransportResponse',
    'DroplrSession',
    'ApiResponse',
    'DroplrClient',
    'get_metrics',
]
