#!/usr/bin/env python3
"""
Make authenticated API requests using the stored session token.

Usage:
    python scripts/auth_request.py GET /api/wl/booking/jon-14-03
    python scripts/auth_request.py PATCH /api/wl/booking/jon-14-03/field --data '{"field": "food", "approve": true}'
    python scripts/auth_request.py GET /api/wl/admin/reviews --anonymous
"""

import argparse
import json
import sys
from pathlib import Path

import httpx

BASE_URL = "http://localhost:8000"
TOKEN_FILE = Path(__file__).parent.parent / ".token"


def get_token() -> str:
    """Read stored session token."""
    if not TOKEN_FILE.exists():
        print("ERROR: No token found. Run issue_session_token.py first.")
        sys.exit(1)

    token = TOKEN_FILE.read_text().strip()
    if not token:
        print("ERROR: Token file is empty. Run issue_session_token.py first.")
        sys.exit(1)

    return token


def request(method: str, endpoint: str, data: str | None = None, anonymous: bool = False) -> None:
    """Make an API request, signed in unless ``anonymous``."""
    headers = {} if anonymous else {"Authorization": f"Bearer {get_token()}"}
    body = json.loads(data) if data else None

    response = httpx.request(
        method,
        f"{BASE_URL}{endpoint}",
        headers=headers,
        json=body,
        timeout=10.0,
        follow_redirects=True,
    )

    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    except json.JSONDecodeError:
        print(response.text)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Make authenticated API request")
    parser.add_argument("method", nargs="?", default="GET")
    parser.add_argument("endpoint", nargs="?", default="/health")
    parser.add_argument("--data", "-d", help="JSON request body")
    parser.add_argument("--anonymous", action="store_true", help="Send without a session (booking-link access)")
    args = parser.parse_args()

    if args.method.upper() not in ("GET", "POST", "PATCH"):
        print(f"ERROR: Unknown method {args.method}")
        sys.exit(1)

    request(args.method.upper(), args.endpoint, args.data, anonymous=args.anonymous)
