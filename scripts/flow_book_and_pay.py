#!/usr/bin/env python3
"""
Complete booking lifecycle flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Requires a server started with IDENTITY_PROVIDER=jwt and PAYMENT_GATEWAY=manual,
sharing JWT_SECRET_KEY with this script's environment. The admin must already
exist (see scripts/create_admin.py); the guide must have an approved
application.

Usage:
    python scripts/flow_book_and_pay.py --package-id <UUID> --tour-date 2026-12-01 \
        --admin admin@explorebd.com --guide guide@explorebd.com

Flow:
    1. Sign in as traveler
    2. Create booking
    3. Create payment intent and confirm payment
    4. Admin marks the booking in review
    5. Admin assigns the guide
    6. Guide accepts the booking
"""

import argparse
import json
import sys

import httpx

from app.core.security import create_access_token

BASE_URL = "http://localhost:5000"

TRAVELER_EMAIL = "traveler@explorebd.com"


def sign_in(email: str) -> str:
    """Mint a token for email and record the sign-in."""
    token = create_access_token(email)
    result = api_request(token, "POST", "/api/v1/users", {"email": email})
    if result["status"] >= 400:
        print(f"ERROR: Sign-in failed for {email}: {result['status']}")
        print(json.dumps(result["data"], indent=2))
        sys.exit(1)
    return token


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    response = httpx.request(
        method,
        f"{BASE_URL}{endpoint}",
        headers=headers,
        json=data,
        timeout=10.0,
        follow_redirects=True,
    )
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


BOOKING_FIELDS = ["id", "booking_status", "payment_status", "guide_email", "price"]


def main():
    global BASE_URL

    parser = argparse.ArgumentParser(description="Complete booking lifecycle flow")
    parser.add_argument("--package-id", required=True, help="Tour package UUID")
    parser.add_argument("--tour-date", required=True, help="Tour date (YYYY-MM-DD)")
    parser.add_argument("--travelers", type=int, default=2, help="Number of travelers")
    parser.add_argument("--admin", required=True, help="Admin email")
    parser.add_argument("--guide", required=True, help="Guide email")
    parser.add_argument("--base-url", default=BASE_URL, help="Server base URL")
    args = parser.parse_args()
    BASE_URL = args.base_url

    # Step 1: Sign in as traveler
    print_step(1, "Sign in as traveler")
    traveler_token = sign_in(TRAVELER_EMAIL)
    print(f"Signed in as {TRAVELER_EMAIL}")

    # Step 2: Create booking
    print_step(2, "Create booking")
    booking_result = api_request(traveler_token, "POST", "/api/v1/bookings", {
        "packageId": args.package_id,
        "tourDate": args.tour_date,
        "travelers": args.travelers,
    })
    if not print_result(booking_result, BOOKING_FIELDS):
        sys.exit(1)
    booking_id = booking_result["data"]["id"]

    # Step 3: Pay
    print_step(3, "Create payment intent and confirm payment")
    intent_result = api_request(traveler_token, "POST", "/api/v1/payments/intent", {
        "bookingId": booking_id,
    })
    if not print_result(intent_result, ["gateway", "transaction_id", "amount", "currency"]):
        sys.exit(1)

    paid_result = api_request(traveler_token, "PATCH", f"/api/v1/bookings/{booking_id}", {
        "transactionId": intent_result["data"]["transaction_id"],
        "method": "manual",
        "amount": intent_result["data"]["amount"],
    })
    if not print_result(paid_result, BOOKING_FIELDS + ["payment"]):
        sys.exit(1)

    # Step 4: Review
    print_step(4, "Admin marks the booking in review")
    admin_token = sign_in(args.admin)
    review_result = api_request(admin_token, "PATCH", f"/api/v1/bookings/{booking_id}/review")
    if not print_result(review_result, BOOKING_FIELDS):
        sys.exit(1)

    # Step 5: Assign guide
    print_step(5, "Admin assigns the guide")
    assign_result = api_request(admin_token, "PATCH", f"/api/v1/bookings/{booking_id}/assign", {
        "guideEmail": args.guide,
    })
    if not print_result(assign_result, BOOKING_FIELDS):
        sys.exit(1)

    # Step 6: Guide accepts
    print_step(6, "Guide accepts the booking")
    guide_token = sign_in(args.guide)
    accept_result = api_request(
        guide_token, "PATCH", f"/api/v1/bookings/assigned/{booking_id}/status", {"status": "accepted"}
    )
    if not print_result(accept_result, BOOKING_FIELDS):
        sys.exit(1)

    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)
    print(f"Booking:  {booking_id}")
    print(f"Guide:    {args.guide}")


if __name__ == "__main__":
    main()
