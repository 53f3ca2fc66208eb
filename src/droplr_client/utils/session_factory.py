"""
Session construction helpers for scripts.
"""
import os
import sys
from typing import Optional

from droplr_client.config import Config
from droplr_client.errors import ConfigurationError
from droplr_client.session import DroplrSession
from droplr_client.transport import RequestsTransport


def get_session(verbose: bool = True, timeout: Optional[float] = None) -> DroplrSession:
    """
    Create a session from environment variables, binding an account if configured.

    Environment variables:
        DROPLR_API_URL, DROPLR_PUBLIC_KEY, DROPLR_PRIVATE_KEY: see Config.from_env
        DROPLR_EMAIL: Account email (anonymous session if unset)
        DROPLR_PASSWORD: Account password (plaintext)
        DROPLR_PASSWORD_HASHED: 'true' if DROPLR_PASSWORD is already a SHA-1 digest

    Args:
        verbose: Whether to print connection status messages
        timeout: Socket timeout in seconds

    Returns:
        DroplrSession instance

    Raises:
        SystemExit: If the configuration is incomplete
    """
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}")
        print("Set DROPLR_API_URL, DROPLR_PUBLIC_KEY and DROPLR_PRIVATE_KEY (or add them to .env)")
        sys.exit(1)

    session = DroplrSession(config, transport=RequestsTransport(timeout=timeout))

    email = os.environ.get('DROPLR_EMAIL')
    if email:
        password = os.environ.get('DROPLR_PASSWORD', '')
        is_hashed = os.environ.get('DROPLR_PASSWORD_HASHED', 'false').lower() == 'true'
        session.use_account(email, password, is_hashed=is_hashed)

    if verbose:
        print(f"Using {config.url} as {session.state.credentials.email} ({session.state.scheme.token})\n")

    return session
