"""
Authorization header signing for the Droplr API.
"""
import base64
import hmac
import hashlib
from email.utils import formatdate
from typing import Optional

from droplr_client.errors import SigningError
from .models import AuthScheme, Credentials, KeyMaterial, PendingRequest, Secret
from .canonicalizer import canonicalize


def digest(data: str) -> str:
    """SHA-1 of data, hex-encoded."""
    return hashlib.sha1(data.encode('utf-8')).hexdigest()


def hmac_b64(data: str, key: Secret) -> str:
    """HMAC-SHA1 of data keyed with key, base64-encoded."""
    signature = hmac.new(
        key.reveal().encode('utf-8'),
        data.encode('utf-8'),
        hashlib.sha1
    ).digest()
    return base64.b64encode(signature).decode('ascii')


def identity_key(public_key: str, email: str) -> str:
    """Base64 of '{public_key}:{email}', identifying app and user to the server."""
    return base64.b64encode(f'{public_key}:{email}'.encode('utf-8')).decode('ascii')


def password_term(credentials: Credentials) -> Secret:
    """Password as it enters the signature: digested unless already hashed."""
    password = credentials.password.reveal()
    if credentials.is_hashed:
        return Secret(password)
    return Secret(digest(password))


def sign(
    canonical: str,
    scheme: AuthScheme,
    key_material: KeyMaterial,
    credentials: Credentials,
    identity_email: Optional[str] = None
) -> str:
    """
    Compute the Authorization header value for a canonical string.

    Legacy schemes (droplranon, droplr):
        secret = {private_key}:{password_term}
        header = {token} {identity_key}:{hmac(canonical, secret)}

    Versioned scheme (droplr2):
        header = droplr2 {identity_key}:{hmac(canonical, private_key)}:{password_term}

    Args:
        canonical: String to sign (see canonicalize)
        scheme: Authentication scheme
        key_material: Application key pair
        credentials: User identity
        identity_email: Email embedded in the identity key (defaults to credentials.email)

    Returns:
        Authorization header value

    Raises:
        SigningError: If scheme is not a known AuthScheme
    """
    email = identity_email if identity_email is not None else credentials.email
    key = identity_key(key_material.public_key, email)
    term = password_term(credentials)

    if scheme in (AuthScheme.ANONYMOUS, AuthScheme.LEGACY_PLAINTEXT):
        secret = Secret(f'{key_material.private_key.reveal()}:{term.reveal()}')
        return f'{scheme.token} {key}:{hmac_b64(canonical, secret)}'

    if scheme is AuthScheme.VERSIONED_HMAC:
        signature = hmac_b64(canonical, key_material.private_key)
        return f'{scheme.token} {key}:{signature}:{term.reveal()}'

    raise SigningError(f"Unsupported authentication scheme: {scheme!r}")


class RequestSigner:
    """
    Client-side request signing utility bound to one key pair and identity.

    Useful for:
    - Signing requests sent through a custom transport
    - Testing against a Droplr server
    - Inspecting the header a session would produce

    String to sign: {METHOD}\\n{PATH}\\nHTTP/1.1\\n{CONTENT_TYPE}\\n{DATE}
    """

    def __init__(
        self,
        key_material: KeyMaterial,
        credentials: Optional[Credentials] = None,
        scheme: AuthScheme = AuthScheme.VERSIONED_HMAC
    ):
        """
        Initialize the request signer.

        Args:
            key_material: Application key pair
            credentials: User identity (anonymous placeholder if None)
            scheme: Authentication scheme to sign with
        """
        self.key_material = key_material
        self.credentials = credentials or Credentials.anonymous()
        self.scheme = scheme

    def sign_request(
        self,
        method: str,
        path: str,
        content_type: Optional[str] = None,
        date: Optional[str] = None
    ) -> str:
        """
        Generate the Authorization header for a request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path, query string allowed
            content_type: Content-Type header value, if the request has one
            date: Date header value (current time in RFC 1123 format if None)

        Returns:
            Authorization header value
        """
        headers = {'Date': date or formatdate(usegmt=True)}
        if content_type:
            headers['Content-Type'] = content_type

        request = PendingRequest(method=method, path=path, headers=headers)
        return sign(canonicalize(request), self.scheme, self.key_material, self.credentials)

    def sign_get(self, path: str, date: Optional[str] = None) -> str:
        """Sign a GET request."""
        return self.sign_request('GET', path, date=date)

    def sign_post(self, path: str, content_type: str, date: Optional[str] = None) -> str:
        """Sign a POST request."""
        return self.sign_request('POST', path, content_type, date)

    def sign_put(self, path: str, content_type: str, date: Optional[str] = None) -> str:
        """Sign a PUT request."""
        return self.sign_request('PUT', path, content_type, date)

    def sign_delete(self, path: str, date: Optional[str] = None) -> str:
        """Sign a DELETE request."""
        return self.sign_request('DELETE', path, date=date)
