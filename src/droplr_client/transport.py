"""
HTTP transport used by the session to deliver signed requests.
"""
import logging
from typing import Optional, Dict, Protocol
from dataclasses import dataclass, field

import requests
from requests.structures import CaseInsensitiveDict

from droplr_client.errors import TransportError

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ('http', 'https')


@dataclass
class TransportRequest:
    """
    A fully signed request ready to be sent.

    Attributes:
        method: HTTP method
        scheme: 'http' or 'https'
        host: Server hostname
        port: Server port (scheme default if None)
        path: Request path including query string
        headers: Headers to send, Authorization included
        body: Encoded request body
    """
    method: str
    scheme: str
    host: str
    path: str
    port: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b''

    @property
    def url(self) -> str:
        host = f'[{self.host}]' if ':' in self.host else self.host
        netloc = host if self.port is None else f'{host}:{self.port}'
        return f'{self.scheme}://{netloc}{self.path}'


@dataclass
class TransportResponse:
    """
    Raw response returned by a transport.

    Attributes:
        status_code: HTTP status code
        headers: Response headers (case-insensitive lookup)
        body: Raw response body
    """
    status_code: int
    headers: CaseInsensitiveDict
    body: bytes = b''

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})


class Transport(Protocol):
    """Anything able to deliver a TransportRequest."""

    def send(self, request: TransportRequest) -> TransportResponse:
        ...


class RequestsTransport:
    """
    Transport backed by the requests library.

    Sends exactly one HTTP request per call; there are no retries.
    """

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        """
        Initialize the transport.

        Args:
            timeout: Socket timeout in seconds (None waits indefinitely)
            session: Optional requests.Session to send through
        """
        self.timeout = timeout
        self._session = session

    def send(self, request: TransportRequest) -> TransportResponse:
        """
        Deliver a request and return the raw response.

        Args:
            request: Signed request

        Returns:
            TransportResponse

        Raises:
            TransportError: Unsupported protocol or connection failure
        """
        if request.scheme not in SUPPORTED_SCHEMES:
            raise TransportError(f"Unsupported request protocol: {request.scheme}")

        sender = self._session.request if self._session is not None else requests.request

        try:
            response = sender(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
                allow_redirects=False
            )
        except requests.RequestException as e:
            logger.warning("Transport failure", extra={
                'method': request.method,
                'host': request.host,
                'error_type': type(e).__name__
            })
            raise TransportError(str(e)) from e

        return TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content
        )
