"""
Tests for Prometheus metrics and logging setup.
"""
import logging
import pytest
from prometheus_client import REGISTRY, CollectorRegistry, Counter
from pythonjsonlogger import jsonlogger

from droplr_client import monitoring
from droplr_client.auth import digest
from droplr_client.errors import BodyParseError, DroplrApiError


def sample(name, labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetrics:
    """Test request metrics recorded by the session."""

    def test_response_counted(self, session, transport):
        before = sample('droplr_requests_total', {'method': 'GET', 'status': '200'})

        session.perform_request('/drops')

        assert sample('droplr_requests_total', {'method': 'GET', 'status': '200'}) == before + 1

    def test_api_error_counted(self, session, transport):
        labels = {'code': 'ReadDrop.NoSuchDrop'}
        before = sample('droplr_api_errors_total', labels)
        transport.queue(404, headers={'droplr-errorcode': 'ReadDrop.NoSuchDrop'})

        with pytest.raises(DroplrApiError):
            session.perform_request('/drops/x')

        assert sample('droplr_api_errors_total', labels) == before + 1

    def test_duration_observed(self, session):
        before = sample('droplr_request_duration_seconds_count', {'method': 'DELETE'})

        session.perform_request('/account', method='DELETE', skip_parse_response=True)

        assert sample('droplr_request_duration_seconds_count', {'method': 'DELETE'}) == before + 1

    def test_get_metrics(self):
        data, content_type = monitoring.get_metrics()

        assert b'droplr_requests_total' in data
        assert content_type.startswith('text/plain')

    def test_get_metrics_custom_registry(self):
        registry = CollectorRegistry()
        Counter('host_app_requests_total', 'Host application requests', registry=registry).inc()

        data, _ = monitoring.get_metrics(registry)

        assert b'host_app_requests_total' in data
        assert b'droplr_requests_total' not in data

    def test_exported_from_package(self):
        import droplr_client

        assert droplr_client.get_metrics is monitoring.get_metrics


class TestConfigureLogging:
    """Test JSON logging setup."""

    def test_json_formatter_installed(self):
        previous_handlers = logging.root.handlers[:]
        previous_level = logging.root.level
        try:
            root = monitoring.configure_logging('debug')

            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
        finally:
            logging.root.handlers = previous_handlers
            logging.root.setLevel(previous_level)


STANDARD_RECORD_ATTRS = set(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}


def logged_text(records):
    """Messages plus every extra field attached to the records."""
    parts = []
    for record in records:
        parts.append(record.getMessage())
        parts.extend(
            repr(value) for key, value in record.__dict__.items()
            if key not in STANDARD_RECORD_ATTRS
        )
    return '\n'.join(parts)


class TestSecretsNotLogged:
    """Secrets and Authorization headers never reach log records."""

    def test_request_lifecycle(self, session, transport, caplog):
        caplog.set_level(logging.DEBUG)
        authorizations = []

        session.use_account('a@b.com', 'pw')

        session.perform_request('/drops')
        authorizations.append(transport.last.headers['Authorization'])

        transport.queue(401, headers={'droplr-errorcode': 'Authentication.UnknownUser'})
        with pytest.raises(DroplrApiError):
            session.perform_request('/search/drop/x')
        authorizations.append(transport.last.headers['Authorization'])

        transport.queue(200, body='not json')
        with pytest.raises(BodyParseError):
            session.perform_request('/drops')
        authorizations.append(transport.last.headers['Authorization'])

        text = logged_text(caplog.records)
        assert caplog.records
        assert 'secret' not in text
        assert 'pw' not in text
        assert digest('pw') not in text
        for authorization in authorizations:
            assert authorization not in text
            assert authorization.split(' ', 1)[1] not in text
