#!/usr/bin/env python3
"""
Customer change and admin approval flow.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_field_approval.py --booking-ref jon-14-03 --customer-email jon@example.is
    python scripts/flow_field_approval.py --booking-ref jon-14-03 --field food.menu --value "Fiskur" --reject

Flow:
    1. Customer edits a field through the booking link (no session)
    2. Read the booking: field is pending approval
    3. Admin approves (or rejects) the change
    4. Read the booking again
"""

import argparse
import json
import sys
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.security import create_session_token  # noqa: E402

BASE_URL = "http://localhost:8000"
ADMIN_EMAIL = "team@whitelotus.is"


def api_request(token: str | None, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make an API request, optionally with a session token."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "PATCH":
        response = httpx.patch(url, headers=headers, json=data or {}, timeout=30.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, base_field: str | None = None):
    """Print result; with ``base_field``, only the approval markers of that field."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if base_field:
        document = result["data"]["booking"].get("booking_data") or {}
        markers = {k: v for k, v in document.items() if k == base_field or k.startswith(f"{base_field}_")}
        print(json.dumps(markers, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(result["data"], indent=2, ensure_ascii=False))
    return True


def main():
    parser = argparse.ArgumentParser(description="Customer change and admin approval flow")
    parser.add_argument("--booking-ref", required=True, help="Booking reference id")
    parser.add_argument("--field", default="food.menu", help="Dot path of the field to change")
    parser.add_argument("--value", default="Þriggja rétta matseðill", help="New value")
    parser.add_argument("--reject", action="store_true", help="Reject instead of approve")
    args = parser.parse_args()

    base_field = args.field.split(".")[0]
    endpoint = f"/api/wl/booking/{args.booking_ref}"

    # Step 1: Customer edit through the booking link
    print_step(1, "Customer edits field")
    edit_result = api_request(None, "PATCH", f"{endpoint}/field", {
        "field": args.field,
        "value": args.value,
    })
    if not print_result(edit_result, base_field):
        sys.exit(1)

    # Step 2: Check pending state
    print_step(2, "Read booking")
    if not print_result(api_request(None, "GET", endpoint), base_field):
        sys.exit(1)

    # Step 3: Admin decision
    admin_token = create_session_token(ADMIN_EMAIL, role="admin")
    decision = "reject" if args.reject else "approve"
    print_step(3, f"Admin {decision}s")
    decision_result = api_request(admin_token, "PATCH", f"{endpoint}/field", {
        "field": args.field,
        decision: True,
    })
    if not print_result(decision_result, base_field):
        sys.exit(1)

    # Step 4: Final state
    print_step(4, "Read booking")
    if not print_result(api_request(admin_token, "GET", endpoint), base_field):
        sys.exit(1)

    print("\n" + "="*60)
    print("FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
