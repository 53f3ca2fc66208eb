#!/usr/bin/env python
"""
Script to search the drops of the configured account.

Usage:
  python scripts/search_drops.py <query>
"""

import sys
from dotenv import load_dotenv

from droplr_client import DroplrClient, DroplrError, DroplrApiError
from droplr_client.utils import get_session


def main():
    """Main function to search drops."""
    load_dotenv()

    if len(sys.argv) != 2:
        print("Usage: python scripts/search_drops.py <query>")
        sys.exit(1)

    query = sys.argv[1]
    client = DroplrClient(session=get_session(timeout=30))

    try:
        result = client.search_drops(query)
    except DroplrApiError as e:
        print(f"✗ API error {e.status_code}: {e.code}")
        if e.details:
            print(f"  {e.details}")
        sys.exit(1)
    except DroplrError as e:
        print(f"✗ Error: {e}")
        sys.exit(1)

    hits = result.body.get('hits', []) if isinstance(result.body, dict) else result.body
    print(f"Total hits: {len(hits)}\n")

    for hit in hits:
        code = hit.get('code', '?') if isinstance(hit, dict) else hit
        title = hit.get('title', '') if isinstance(hit, dict) else ''
        print(f"  {code:<12} {title}")


if __name__ == "__main__":
    main()
