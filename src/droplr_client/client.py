"""
Endpoint wrappers for the Droplr REST API.
"""
import os
import logging
import mimetypes
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from droplr_client.auth import digest
from droplr_client.config import Config
from droplr_client.session import ApiResponse, DroplrSession
from droplr_client.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = 'application/octet-stream'


class DroplrClient:
    """
    Convenience methods mapping Droplr operations to requests.

    Each method is a thin parameter-to-path mapping over
    DroplrSession.perform_request; authentication is handled by the session.
    """

    def __init__(
        self,
        config: Union[Config, Dict[str, Any], None] = None,
        transport: Optional[Transport] = None,
        session: Optional[DroplrSession] = None
    ):
        """
        Initialize the client.

        Args:
            config: Config or settings dictionary (ignored when session is given)
            transport: Transport for a newly created session
            session: Existing session to wrap
        """
        if session is None:
            session = DroplrSession(config, transport=transport)
        self.session = session

    def use_account(self, email: str, password: str, is_hashed: bool = False) -> 'DroplrClient':
        """
        Act as the given user for subsequent requests.

        Returns:
            self, for chaining
        """
        self.session.use_account(email, password, is_hashed=is_hashed)
        return self

    def create_account(self, user: Dict[str, Any]) -> ApiResponse:
        """
        Create a new account.

        Args:
            user: Account fields; 'password' is plaintext and is hashed before sending

        Returns:
            ApiResponse with the created account
        """
        payload = dict(user)
        payload['password'] = digest(user['password'])
        return self.session.perform_request('/account', method='POST', body=payload)

    def delete_account(self) -> ApiResponse:
        """Delete the account bound to the session."""
        return self.session.perform_request('/account', method='DELETE', skip_parse_response=True)

    def create_drop_for_link(self, url: str) -> ApiResponse:
        """Create a link drop pointing at url."""
        return self.session.perform_request(
            '/links',
            method='POST',
            headers={'Content-Type': 'text/plain'},
            body=url
        )

    def create_drop_from_file(self, file_path: str) -> ApiResponse:
        """
        Upload a file as a new drop.

        Args:
            file_path: Path of the file to upload

        Returns:
            ApiResponse with the created drop
        """
        with open(file_path, 'rb') as f:
            data = f.read()

        content_type = mimetypes.guess_type(file_path)[0] or DEFAULT_MIME_TYPE
        logger.info("Uploading file drop", extra={
            'drop_filename': os.path.basename(file_path),
            'content_type': content_type,
            'size': len(data)
        })

        return self.session.perform_request(
            '/files',
            method='POST',
            headers={
                'x-droplr-filename': os.path.basename(file_path),
                'Content-Type': content_type
            },
            body=data
        )

    def update_drop(self, drop_id: Union[str, int], update_fields: Dict[str, Any]) -> ApiResponse:
        """Update fields of an existing drop."""
        return self.session.perform_request(
            f'/drops/{quote(str(drop_id), safe="")}',
            method='PUT',
            body=update_fields
        )

    def get_drop(self, drop_id: Union[str, int]) -> ApiResponse:
        """Fetch a drop; the body is returned unparsed."""
        return self.session.perform_request(
            f'/drops/{quote(str(drop_id), safe="")}',
            skip_parse_response=True
        )

    def list_drops(self) -> ApiResponse:
        """List drops of the bound account."""
        return self.session.perform_request('/drops')

    def search_drops(self, query: str) -> ApiResponse:
        """Search drops of the bound account."""
        return self.session.perform_request(f'/search/drop/{quote(query, safe="")}')
