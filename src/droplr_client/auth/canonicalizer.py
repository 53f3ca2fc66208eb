"""
Builds the string-to-sign for a Droplr request.
"""
from .models import PendingRequest

HTTP_VERSION = 'HTTP/1.1'


def strip_query(path: str) -> str:
    """Return path without its query string (everything from the first '?')."""
    return path.split('?', 1)[0]


def canonicalize(request: PendingRequest) -> str:
    """
    Derive the canonical string a request signature is computed over.

    Format: {METHOD}\\n{PATH}\\nHTTP/1.1\\n{CONTENT_TYPE}\\n{DATE}

    Query parameters never take part in the signature. A missing
    Content-Type (or Date) header produces an empty field, so the result
    always holds exactly five fields.

    Args:
        request: Request to canonicalize

    Returns:
        String to sign
    """
    parts = [
        request.method,
        strip_query(request.path),
        HTTP_VERSION,
        request.get_header('Content-Type') or '',
        request.get_header('Date') or ''
    ]
    return '\n'.join(parts)
