"""
Authentication data models.
"""
from typing import Optional, Dict
from dataclasses import dataclass, field, replace
from enum import Enum

ANONYMOUS_USER_EMAIL = 'anonymous@droplr.com'
ANONYMOUS_USER_PASSWORD = 'anonymous'

REDACTED = '**********'


class Secret:
    """
    Wrapper for secret-bearing strings (private keys, passwords, derived secrets).

    Printing, formatting or repr() of a Secret yields a redacted placeholder,
    and json.dumps() rejects it. The wrapped value is only reachable through
    reveal().
    """

    __slots__ = ('_value',)

    def __init__(self, value: str):
        if isinstance(value, Secret):
            value = value.reveal()
        if not isinstance(value, str):
            raise TypeError(f"Secret value must be a string, got {type(value).__name__}")
        self._value = value

    def reveal(self) -> str:
        """Return the wrapped value."""
        return self._value

    def __str__(self) -> str:
        return REDACTED

    def __repr__(self) -> str:
        return f"Secret('{REDACTED}')"

    def __eq__(self, other) -> bool:
        if isinstance(other, Secret):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)


class AuthScheme(Enum):
    """
    Authentication schemes understood by the Droplr API.

    Values are the scheme tokens sent literally in the Authorization header.
    ANONYMOUS is the anonymous sibling of LEGACY_PLAINTEXT; the versioned
    scheme has no anonymous variant.
    """
    ANONYMOUS = "droplranon"
    LEGACY_PLAINTEXT = "droplr"
    VERSIONED_HMAC = "droplr2"

    @property
    def token(self) -> str:
        return self.value

    @property
    def is_legacy(self) -> bool:
        return self in (AuthScheme.ANONYMOUS, AuthScheme.LEGACY_PLAINTEXT)


@dataclass(frozen=True)
class Credentials:
    """
    User identity used for signing.

    Attributes:
        email: Account email, embedded in the identity key
        password: Plaintext password, or its SHA-1 hex digest when is_hashed is True
        is_hashed: Whether password is already a digest and must be used verbatim
    """
    email: str
    password: Secret
    is_hashed: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.password, Secret):
            object.__setattr__(self, 'password', Secret(self.password))

    @classmethod
    def anonymous(cls) -> 'Credentials':
        """Placeholder credentials used before an account is bound."""
        return cls(email=ANONYMOUS_USER_EMAIL, password=Secret(ANONYMOUS_USER_PASSWORD))

    @property
    def is_anonymous(self) -> bool:
        return self.email == ANONYMOUS_USER_EMAIL


@dataclass(frozen=True)
class KeyMaterial:
    """
    Application key pair issued by Droplr.

    Attributes:
        public_key: Application public key, embedded in the identity key
        private_key: Application private key used as (part of) the HMAC secret
    """
    public_key: str
    private_key: Secret

    def __post_init__(self) -> None:
        if not isinstance(self.private_key, Secret):
            object.__setattr__(self, 'private_key', Secret(self.private_key))

    def override(self, public_key: Optional[str] = None, private_key: Optional[str] = None) -> 'KeyMaterial':
        """
        Return a copy with the given keys replaced.

        Args:
            public_key: Replacement public key (kept if None)
            private_key: Replacement private key (kept if None)

        Returns:
            New KeyMaterial instance; this instance is left untouched
        """
        return KeyMaterial(
            public_key=public_key if public_key is not None else self.public_key,
            private_key=Secret(private_key) if private_key is not None else self.private_key
        )


@dataclass(frozen=True)
class SessionState:
    """
    Scheme and identity of a session at a point in time.

    Attributes:
        scheme: Authentication scheme used to sign requests
        credentials: Identity whose password feeds the signature
    """
    scheme: AuthScheme
    credentials: Credentials

    @classmethod
    def initial(cls, plaintext: bool = False) -> 'SessionState':
        """
        Build the state of a freshly configured session.

        Args:
            plaintext: Whether the legacy plaintext scheme was requested

        Returns:
            SessionState with anonymous credentials
        """
        scheme = AuthScheme.ANONYMOUS if plaintext else AuthScheme.VERSIONED_HMAC
        return cls(scheme=scheme, credentials=Credentials.anonymous())


def bind_credentials(state: SessionState, credentials: Credentials) -> SessionState:
    """
    Transition a session state to a new identity.

    Replaces the credentials and promotes ANONYMOUS to LEGACY_PLAINTEXT.
    Other schemes are kept, so binding again only swaps the credentials.

    Args:
        state: Current session state
        credentials: Identity to bind

    Returns:
        New SessionState
    """
    scheme = state.scheme
    if scheme is AuthScheme.ANONYMOUS:
        scheme = AuthScheme.LEGACY_PLAINTEXT
    return replace(state, scheme=scheme, credentials=credentials)


@dataclass
class PendingRequest:
    """
    A request about to be signed and sent.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: Request path including any query string
        headers: HTTP headers to send
        body: Encoded request body
    """
    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b''

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Look up a header value by name (case-insensitive).

        Args:
            name: Header name
            default: Value returned when the header is absent

        Returns:
            Header value or default
        """
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return default

    def remove_header(self, name: str) -> None:
        """Remove every header matching name (case-insensitive)."""
        for key in [k for k in self.headers if k.lower() == name.lower()]:
            del self.headers[key]
