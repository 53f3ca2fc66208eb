"""
Client configuration.
"""
import os
from typing import Optional
from dataclasses import dataclass
from urllib.parse import urlsplit
from dotenv import load_dotenv

from droplr_client.errors import ConfigurationError
from droplr_client.auth.models import KeyMaterial, Secret

DEFAULT_USER_AGENT = 'droplr-node-client'
DEFAULT_API_VERSION = '0.9'

REQUIRED_SETTINGS = ('url', 'public_key', 'private_key')

# Accepted spellings of each setting in from_dict()
_ALIASES = {
    'publicKey': 'public_key',
    'privateKey': 'private_key',
    'userAgent': 'user_agent',
}


@dataclass(frozen=True)
class Config:
    """
    Settings for talking to a Droplr server.

    Attributes:
        url: Base URL of the Droplr server (e.g. https://api.droplr.com)
        public_key: Application public key
        private_key: Application private key
        user_agent: User-Agent header value
        plaintext: Use the legacy plaintext authentication scheme
    """
    url: str
    public_key: str
    private_key: Secret
    user_agent: str = DEFAULT_USER_AGENT
    plaintext: bool = False

    def __post_init__(self) -> None:
        self._validate_required()
        self._validate_url()
        if not isinstance(self.user_agent, str):
            raise ConfigurationError("Configuration setting user_agent must be a string")
        if not isinstance(self.plaintext, bool):
            raise ConfigurationError("Configuration setting plaintext must be a boolean")

    def _validate_required(self) -> None:
        """Every required setting must be present and a string."""
        for setting in REQUIRED_SETTINGS:
            value = getattr(self, setting)
            if isinstance(value, Secret):
                continue
            if not isinstance(value, str):
                raise ConfigurationError(f"Missing required configuration setting: {setting}")
        if not isinstance(self.private_key, Secret):
            object.__setattr__(self, 'private_key', Secret(self.private_key))

    def _validate_url(self) -> None:
        try:
            parts = urlsplit(self.url)
            parts.port  # raises ValueError when out of range
        except ValueError as e:
            raise ConfigurationError(f"Configuration setting url is invalid: {self.url!r} ({e})") from e
        if parts.scheme not in ('http', 'https') or not parts.hostname:
            raise ConfigurationError(f"Configuration setting url must be an http(s) URL: {self.url!r}")

    @property
    def key_material(self) -> KeyMaterial:
        return KeyMaterial(public_key=self.public_key, private_key=self.private_key)

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname

    @property
    def port(self) -> Optional[int]:
        return urlsplit(self.url).port

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """
        Create a Config from a dictionary.

        Accepts both snake_case keys and the camelCase keys used by the
        other Droplr clients (publicKey, privateKey, userAgent).

        Args:
            data: Dictionary of settings

        Returns:
            Config instance

        Raises:
            ConfigurationError: If a required setting is missing or not a string
        """
        settings = {}
        for key, value in data.items():
            settings[_ALIASES.get(key, key)] = value

        for setting in REQUIRED_SETTINGS:
            if not isinstance(settings.get(setting), str):
                raise ConfigurationError(f"Missing required configuration setting: {setting}")

        user_agent = settings.get('user_agent')
        plaintext = settings.get('plaintext')
        return cls(
            url=settings['url'],
            public_key=settings['public_key'],
            private_key=Secret(settings['private_key']),
            user_agent=DEFAULT_USER_AGENT if user_agent is None else user_agent,
            plaintext=False if plaintext is None else plaintext
        )

    @classmethod
    def from_env(cls) -> 'Config':
        """
        Create a Config from environment variables (and a .env file if present).

        Environment variables:
            DROPLR_API_URL: Server URL (required)
            DROPLR_PUBLIC_KEY: Application public key (required)
            DROPLR_PRIVATE_KEY: Application private key (required)
            DROPLR_USER_AGENT: User-Agent header (default: droplr-node-client)
            DROPLR_PLAINTEXT: 'true' to use legacy plaintext auth (default: false)

        Returns:
            Config instance

        Raises:
            ConfigurationError: If a required variable is not set
        """
        load_dotenv()

        return cls.from_dict({
            'url': os.environ.get('DROPLR_API_URL'),
            'public_key': os.environ.get('DROPLR_PUBLIC_KEY'),
            'private_key': os.environ.get('DROPLR_PRIVATE_KEY'),
            'user_agent': os.environ.get('DROPLR_USER_AGENT', DEFAULT_USER_AGENT),
            'plaintext': os.environ.get('DROPLR_PLAINTEXT', 'false').lower() == 'true'
        })
