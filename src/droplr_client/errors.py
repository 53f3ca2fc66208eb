"""
Exception types raised by the Droplr client.
"""
from typing import Optional


class DroplrError(Exception):
    """Base class for all Droplr client errors."""


class ConfigurationError(DroplrError):
    """A required configuration setting is missing or has the wrong type."""


class SigningError(DroplrError):
    """
    The session reached a scheme the signer does not know.

    Indicates a broken invariant in the client, never bad external input.
    """


class TransportError(DroplrError):
    """The request could not be delivered (socket, TLS, DNS, unsupported protocol)."""


class BodyParseError(DroplrError):
    """
    Response body could not be decoded as JSON.

    Attributes:
        status_code: HTTP status of the response whose body failed to parse
        body: Raw response body
    """

    def __init__(self, message: str, status_code: int, body: bytes = b''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DroplrApiError(DroplrError):
    """
    Error signaled by the server through the droplr-errorcode header.

    Raised regardless of the HTTP status code of the response.

    Attributes:
        status_code: HTTP status code of the response
        code: Value of the droplr-errorcode header (e.g. 'Authentication.UnknownUser')
        details: Value of the droplr-errordetails header, if present
    """

    def __init__(self, status_code: int, code: str, details: Optional[str] = None):
        super().__init__(details or code)
        self.status_code = status_code
        self.code = code
        self.details = details

    @property
    def is_authentication_error(self) -> bool:
        """True for 401 responses carrying an Authentication.* error code."""
        return self.status_code == 401 and self.code.startswith('Authentication.')

    def to_dict(self) -> dict:
        """
        Convert to dictionary for logging.

        Returns:
            Dictionary representation of the error
        """
        return {
            'status_code': self.status_code,
            'code': self.code,
            'details': self.details
        }
