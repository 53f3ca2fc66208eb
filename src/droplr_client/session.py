"""
Session: identity and scheme state, request signing and dispatch.
"""
import json
import logging
import threading
from email.utils import formatdate
from typing import Any, Callable, Dict, Optional, Union
from dataclasses import dataclass

from requests.structures import CaseInsensitiveDict

from droplr_client import monitoring
from droplr_client.config import Config, DEFAULT_API_VERSION
from droplr_client.errors import (
    BodyParseError,
    ConfigurationError,
    DroplrApiError,
    TransportError,
)
from droplr_client.auth import (
    Credentials,
    KeyMaterial,
    PendingRequest,
    Secret,
    SessionState,
    bind_credentials,
    canonicalize,
    sign,
)
from droplr_client.auth.canonicalizer import strip_query
from droplr_client.transport import (
    RequestsTransport,
    Transport,
    TransportRequest,
    TransportResponse,
)

logger = logging.getLogger(__name__)

ERROR_CODE_HEADER = 'droplr-errorcode'
ERROR_DETAILS_HEADER = 'droplr-errordetails'

# Keys modify_config may override for a single request
_OVERRIDABLE = {
    'public_key': 'public_key',
    'publicKey': 'public_key',
    'private_key': 'private_key',
    'privateKey': 'private_key',
    'user_agent': 'user_agent',
    'userAgent': 'user_agent',
}


@dataclass
class ApiResponse:
    """
    Successful response from the Droplr API.

    Attributes:
        status_code: HTTP status code
        headers: Response headers (case-insensitive lookup)
        body: Decoded JSON body, or the raw text when parsing was skipped
    """
    status_code: int
    headers: CaseInsensitiveDict
    body: Any


def encode_body(body: Union[dict, list, str, bytes, None]) -> tuple:
    """
    Encode a request body for sending.

    Args:
        body: dict/list (sent as JSON), str (UTF-8 encoded), bytes (as-is) or None

    Returns:
        Tuple of (encoded_body, content_type); content_type is None unless JSON
    """
    if body is None:
        return b'', None
    if isinstance(body, (dict, list)):
        return json.dumps(body).encode('utf-8'), 'application/json'
    if isinstance(body, str):
        return body.encode('utf-8'), None
    return bytes(body), None


class DroplrSession:
    """
    Authenticated connection to a Droplr server.

    Holds the current identity and authentication scheme. Every request is
    stamped with the current Date, signed for the session's scheme, and
    handed to the transport. Responses carrying a droplr-errorcode header
    are raised as DroplrApiError.

    State transitions (use_account) are serialized with signing reads by an
    internal lock, so a session may be shared between threads; still, one
    session per identity is the expected usage.
    """

    def __init__(
        self,
        config: Union[Config, Dict[str, Any]],
        transport: Optional[Transport] = None
    ):
        """
        Initialize the session.

        Args:
            config: Config instance or a settings dictionary (see Config.from_dict)
            transport: Transport used to send requests (RequestsTransport if None)

        Raises:
            ConfigurationError: If a required setting is missing or invalid
        """
        if isinstance(config, dict):
            config = Config.from_dict(config)
        elif not isinstance(config, Config):
            raise ConfigurationError("config must be a Config or a dictionary")

        self.config = config
        self.transport = transport if transport is not None else RequestsTransport()
        self._key_material = config.key_material
        self._state = SessionState.initial(plaintext=config.plaintext)
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        """Snapshot of the current scheme and credentials."""
        with self._lock:
            return self._state

    @property
    def key_material(self) -> KeyMaterial:
        return self._key_material

    def use_account(self, email: str, password: str, is_hashed: bool = False) -> 'DroplrSession':
        """
        Sign subsequent requests as the given user.

        Promotes the anonymous legacy scheme to the authenticated one; the
        versioned scheme is kept. Calling again replaces the credentials.

        Args:
            email: Account email
            password: Plaintext password, or its SHA-1 hex digest if is_hashed
            is_hashed: Whether password is already hashed

        Returns:
            self, for chaining
        """
        credentials = Credentials(email=email, password=Secret(password), is_hashed=is_hashed)
        with self._lock:
            self._state = bind_credentials(self._state, credentials)
            scheme = self._state.scheme

        logger.info("Bound account to session", extra={
            'email': email,
            'scheme': scheme.token
        })
        return self

    def build_request(
        self,
        method: str,
        path: str,
        api_version: str = DEFAULT_API_VERSION,
        headers: Optional[Dict[str, str]] = None,
        body: Union[dict, list, str, bytes, None] = None
    ) -> PendingRequest:
        """
        Build an unsigned request stamped with the current time.

        Args:
            method: HTTP method
            path: Path including query string
            api_version: API version announced in the Accept header
            headers: Extra headers; these override the defaults
            body: Request body (see encode_body)

        Returns:
            PendingRequest
        """
        request_headers = CaseInsensitiveDict({
            'Date': formatdate(usegmt=True),
            'Accept': f'application/json; version={api_version}',
            'User-Agent': self.config.user_agent
        })
        request_headers.update(headers or {})

        encoded, content_type = encode_body(body)
        if content_type:
            request_headers['Content-Type'] = content_type
        request_headers['Content-Length'] = str(len(encoded))

        return PendingRequest(method=method, path=path, headers=request_headers, body=encoded)

    def authorization_for(
        self,
        request: PendingRequest,
        modify_config: Optional[Dict[str, str]] = None,
        state: Optional[SessionState] = None
    ) -> str:
        """
        Compute the Authorization header value for a request.

        Args:
            request: Request to sign
            modify_config: Per-call key overrides (public_key, private_key);
                           the session's stored keys are not changed
            state: State to sign with (current session state if None)

        Returns:
            Authorization header value
        """
        key_material = self._key_material
        if modify_config:
            overrides = self._resolve_overrides(modify_config)
            key_material = key_material.override(
                public_key=overrides.get('public_key'),
                private_key=overrides.get('private_key')
            )

        if state is None:
            state = self.state
        return sign(canonicalize(request), state.scheme, key_material, state.credentials)

    def perform_request(
        self,
        path: str,
        method: str = 'GET',
        api_version: str = DEFAULT_API_VERSION,
        headers: Optional[Dict[str, str]] = None,
        body: Union[dict, list, str, bytes, None] = None,
        skip_parse_response: bool = False,
        modify_request: Optional[Callable[[PendingRequest], PendingRequest]] = None,
        modify_config: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        """
        Sign and send a request, returning the decoded response.

        Args:
            path: Path including query string, without the server URL
            method: HTTP method (default: GET)
            api_version: API version for the Accept header (default: 0.9)
            headers: Additional headers
            body: dict/list sent as JSON; str or bytes sent as-is
            skip_parse_response: Return the raw body text instead of decoding JSON
            modify_request: Function applied to the signed request before sending
            modify_config: Per-call overrides of public_key, private_key, user_agent

        Returns:
            ApiResponse

        Raises:
            DroplrApiError: Server signaled an error through droplr-errorcode
            TransportError: Request could not be delivered
            BodyParseError: Response body is not valid JSON
        """
        overrides = self._resolve_overrides(modify_config) if modify_config else {}
        if 'user_agent' in overrides:
            headers = CaseInsensitiveDict(headers or {})
            headers.setdefault('User-Agent', overrides['user_agent'])

        state = self.state
        request = self.build_request(method, path, api_version, headers, body)
        request.headers['Authorization'] = self.authorization_for(request, overrides, state)

        if modify_request is not None:
            request = modify_request(request)

        log_context = {
            'method': request.method,
            'path': strip_query(request.path),
            'scheme': state.scheme.token
        }
        logger.debug("Sending Droplr request", extra=log_context)

        response = self._send(request)
        return self._handle_response(response, skip_parse_response, log_context)

    def _resolve_overrides(self, modify_config: Dict[str, str]) -> Dict[str, str]:
        overrides = {}
        for key, value in modify_config.items():
            if key not in _OVERRIDABLE:
                raise ConfigurationError(f"Setting cannot be overridden per request: {key}")
            if not isinstance(value, str):
                raise ConfigurationError(f"Override for {key} must be a string")
            overrides[_OVERRIDABLE[key]] = value
        return overrides

    def _send(self, request: PendingRequest) -> TransportResponse:
        transport_request = TransportRequest(
            method=request.method,
            scheme=self.config.scheme,
            host=self.config.host,
            port=self.config.port,
            path=request.path,
            headers=dict(request.headers),
            body=request.body
        )

        with monitoring.track_request(request.method):
            try:
                return self.transport.send(transport_request)
            except TransportError as e:
                monitoring.record_transport_error(e.__cause__ or e)
                raise

    def _handle_response(
        self,
        response: TransportResponse,
        skip_parse_response: bool,
        log_context: dict
    ) -> ApiResponse:
        monitoring.record_response(log_context['method'], response.status_code)

        error_code = response.headers.get(ERROR_CODE_HEADER)
        if error_code is not None:
            monitoring.record_api_error(error_code)
            logger.warning("Droplr API error", extra={
                **log_context,
                'status_code': response.status_code,
                'error_code': error_code
            })
            raise DroplrApiError(
                status_code=response.status_code,
                code=error_code,
                details=response.headers.get(ERROR_DETAILS_HEADER)
            )

        text = response.body.decode('utf-8', errors='replace')
        if skip_parse_response:
            parsed = text
        else:
            try:
                parsed = json.loads(text)
            except ValueError as e:
                logger.warning("Response body is not valid JSON", extra={
                    **log_context,
                    'status_code': response.status_code
                })
                raise BodyParseError(
                    f"Could not decode response body: {e}",
                    status_code=response.status_code,
                    body=response.body
                ) from e

        return ApiResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=parsed
        )
