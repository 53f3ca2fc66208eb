#!/usr/bin/env python
"""
Script to print the Authorization header a session would send for a request.

Usage:
  python scripts/sign_request.py <method> <path> [content_type]
"""

import sys
from dotenv import load_dotenv

from droplr_client.utils import get_session


def main():
    """Main function to sign a request without sending it."""
    load_dotenv()

    if len(sys.argv) not in (3, 4):
        print("Usage: python scripts/sign_request.py <method> <path> [content_type]")
        print("\nExample:")
        print("  python scripts/sign_request.py GET /search/drop/cats")
        sys.exit(1)

    method = sys.argv[1].upper()
    path = sys.argv[2]
    headers = {'Content-Type': sys.argv[3]} if len(sys.argv) == 4 else None

    session = get_session(verbose=False)
    request = session.build_request(method, path, headers=headers)
    authorization = session.authorization_for(request)

    print("=" * 80)
    print("Signed Request")
    print("=" * 80)
    print(f"Scheme:        {session.state.scheme.token}")
    print(f"Identity:      {session.state.credentials.email}")
    print(f"Date:          {request.headers['Date']}")
    print(f"Authorization: {authorization}")


if __name__ == "__main__":
    main()
