"""
Pytest configuration and fixtures for Droplr client tests.
No test talks to a real server: requests go through RecordingTransport.
"""
import json
import pytest

from droplr_client.config import Config
from droplr_client.session import DroplrSession
from droplr_client.transport import TransportResponse


class RecordingTransport:
    """
    Transport double that records sent requests and replays canned responses.
    """

    def __init__(self, responses=None):
        self.requests = []
        self.responses = list(responses or [])

    def queue(self, status_code=200, headers=None, body=b'{}'):
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode('utf-8')
        elif isinstance(body, str):
            body = body.encode('utf-8')
        self.responses.append(TransportResponse(status_code=status_code, headers=headers or {}, body=body))
        return self

    def send(self, request):
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)
        return TransportResponse(status_code=200, headers={}, body=b'{}')

    @property
    def last(self):
        return self.requests[-1]


@pytest.fixture
def config_dict():
    """Settings dictionary for a versioned-scheme session."""
    return {
        'url': 'http://localhost:8080',
        'publicKey': 'app_0',
        'privateKey': 'secret',
    }


@pytest.fixture
def plaintext_config_dict(config_dict):
    """Settings dictionary for a legacy plaintext session."""
    return dict(config_dict, plaintext=True)


@pytest.fixture
def transport():
    """Fresh recording transport for each test."""
    return RecordingTransport()


@pytest.fixture
def session(config_dict, transport):
    """Versioned-scheme session backed by the recording transport."""
    return DroplrSession(Config.from_dict(config_dict), transport=transport)


@pytest.fixture
def plaintext_session(plaintext_config_dict, transport):
    """Legacy plaintext session backed by the recording transport."""
    return DroplrSession(plaintext_config_dict, transport=transport)
