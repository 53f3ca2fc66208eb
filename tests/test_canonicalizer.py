"""
Unit tests for the string-to-sign canonicalizer.
"""
from droplr_client.auth import PendingRequest, canonicalize
from droplr_client.auth.canonicalizer import strip_query

DATE = 'Tue, 15 Nov 1994 08:12:31 GMT'


class TestStripQuery:
    """Test query string removal."""

    def test_path_without_query_unchanged(self):
        assert strip_query('/drops/abc') == '/drops/abc'

    def test_query_removed(self):
        assert strip_query('/a/b?x=1') == '/a/b'

    def test_only_first_question_mark_splits(self):
        assert strip_query('/a?b?c') == '/a'

    def test_empty_query(self):
        assert strip_query('/a?') == '/a'


class TestCanonicalize:
    """Test canonical string construction."""

    def test_field_order(self):
        """Fields are method, path, HTTP version, content type and date."""
        request = PendingRequest(
            method='POST',
            path='/links',
            headers={'Content-Type': 'text/plain', 'Date': DATE}
        )

        assert canonicalize(request) == f'POST\n/links\nHTTP/1.1\ntext/plain\n{DATE}'

    def test_query_string_excluded(self):
        """Query parameters never reach the canonical string."""
        request = PendingRequest(method='GET', path='/a/b?x=1', headers={'Date': DATE})

        canonical = canonicalize(request)

        assert '/a/b' in canonical
        assert 'x=1' not in canonical
        assert '?' not in canonical

    def test_missing_content_type_is_empty_field(self):
        """A missing Content-Type leaves an empty line, not a missing one."""
        request = PendingRequest(method='GET', path='/search/drop/x', headers={'Date': DATE})

        canonical = canonicalize(request)

        assert canonical.count('\n') == 4
        assert canonical.split('\n')[3] == ''
        assert canonical == f'GET\n/search/drop/x\nHTTP/1.1\n\n{DATE}'

    def test_missing_date_is_empty_field(self):
        request = PendingRequest(method='GET', path='/drops')

        canonical = canonicalize(request)

        assert canonical.count('\n') == 4
        assert canonical.endswith('\n')

    def test_header_lookup_case_insensitive(self):
        request = PendingRequest(
            method='PUT',
            path='/drops/1',
            headers={'content-type': 'application/json', 'date': DATE}
        )

        assert canonicalize(request).split('\n')[3:] == ['application/json', DATE]

    def test_method_verbatim(self):
        request = PendingRequest(method='delete', path='/account', headers={'Date': DATE})

        assert canonicalize(request).startswith('delete\n')

    def test_other_headers_ignored(self):
        base = PendingRequest(method='GET', path='/drops', headers={'Date': DATE})
        noisy = PendingRequest(
            method='GET',
            path='/drops',
            headers={'Date': DATE, 'User-Agent': 'x', 'Accept': 'application/json; version=0.9'}
        )

        assert canonicalize(base) == canonicalize(noisy)

    def test_deterministic(self):
        request = PendingRequest(method='GET', path='/drops?page=2', headers={'Date': DATE})

        assert canonicalize(request) == canonicalize(request)
