#!/usr/bin/env python3
"""
Mint a session token for local testing and store it.

Sign-in normally happens at the identity provider; this signs an equivalent
token with the configured JWT secret so the API can be exercised locally.

Usage:
    python scripts/issue_session_token.py --email team@whitelotus.is --role admin
    python scripts/issue_session_token.py --email jon@example.is
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.security import create_session_token  # noqa: E402

TOKEN_FILE = Path(__file__).parent.parent / ".token"


def issue(email: str, role: str) -> str:
    """Create a token and write it to the token file."""
    token = create_session_token(email, role=role)
    TOKEN_FILE.write_text(token)

    print(f"Token for {email} ({role}) written to {TOKEN_FILE}")
    print(f"Token: {token}")
    return token


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Issue a White Lotus session token")
    parser.add_argument("--email", default="team@whitelotus.is")
    parser.add_argument("--role", default="admin", choices=["admin", "host", "guest"])
    args = parser.parse_args()

    issue(args.email, args.role)
