#!/usr/bin/env python3
"""
Complete rental and payment flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/create_users.py   # prints OWNER_TOKEN / RENTER_TOKEN
    python scripts/flow_rent_and_pay.py --owner-token <JWT> --renter-token <JWT>
    python scripts/flow_rent_and_pay.py --owner-token <JWT> --renter-token <JWT> \
        --start-date 2025-01-01 --end-date 2025-03-01 --rent 1000 --deposit 500

Flow:
    1. List a property (as owner)
    2. Calculate booking price
    3. Request booking (as renter)
    4. Approve booking (as owner)
    5. Pay part of the total (as renter)
    6. Pay the balance (as renter)
    7. Activate booking (as owner)
    8. Complete booking (as owner)
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    elif method == "PUT":
        response = httpx.put(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

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


def set_status(token: str, booking_id: str, status: str, step: int, title: str) -> None:
    print_step(step, title)
    result = api_request(token, "PUT", f"/api/v1/bookings/{booking_id}/status", {"status": status})
    if not print_result(result, ["booking_number", "status", "payment_status"]):
        sys.exit(1)


def pay(token: str, booking_id: str, amount: int, step: int) -> None:
    print_step(step, f"Pay {amount}")
    result = api_request(token, "POST", f"/api/v1/bookings/{booking_id}/payments", {
        "amount": amount,
        "payment_method": "bank_transfer",
    })
    if not print_result(result, ["payment_status", "amount_paid", "balance_due"]):
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(description="Complete rental and payment flow")
    parser.add_argument("--owner-token", required=True, help="Bearer token of an owner")
    parser.add_argument("--renter-token", required=True, help="Bearer token of a renter")
    parser.add_argument("--start-date", default="2025-01-01", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end-date", default="2025-03-01", help="End date (YYYY-MM-DD)")
    parser.add_argument("--rent", type=int, default=1000, help="Monthly rent in cents")
    parser.add_argument("--deposit", type=int, default=500, help="Security deposit in cents")
    parser.add_argument("--first-payment", type=int, default=1500, help="First installment")
    parser.add_argument("--skip-complete", action="store_true", help="Stop after payments")
    args = parser.parse_args()

    # Step 1: List a property
    print_step(1, "List a property (as owner)")
    prop_result = api_request(args.owner_token, "POST", "/api/v1/properties", {
        "title": "Flow test flat",
        "rent_price": args.rent,
        "security_deposit": args.deposit,
    })
    if not print_result(prop_result, ["id", "rent_price", "security_deposit", "is_available"]):
        sys.exit(1)
    property_id = prop_result["data"]["id"]

    # Step 2: Calculate booking price
    print_step(2, "Calculate booking price")
    calc_result = api_request(args.renter_token, "POST", "/api/v1/bookings/calculate", {
        "property_id": property_id,
        "start_date": args.start_date,
        "end_date": args.end_date,
    })
    if not print_result(calc_result):
        sys.exit(1)
    if not calc_result["data"].get("available"):
        print(f"ERROR: Property not available - {calc_result['data'].get('unavailable_reason')}")
        sys.exit(1)

    breakdown = calc_result["data"]["price_breakdown"]
    print(f"\nPricing Summary:")
    print(f"  Months:         {breakdown['months']}")
    print(f"  Rent:           {breakdown['rent_total']:,}")
    print(f"  Deposit:        {breakdown['security_deposit']:,}")
    print(f"  Total:          {breakdown['total_amount']:,}")

    # Step 3: Request booking
    print_step(3, "Request booking (as renter)")
    booking_result = api_request(args.renter_token, "POST", "/api/v1/bookings", {
        "property_id": property_id,
        "start_date": args.start_date,
        "end_date": args.end_date,
    })
    if not print_result(booking_result, ["id", "booking_number", "total_amount", "status", "payment_status"]):
        sys.exit(1)
    booking_id = booking_result["data"]["id"]
    booking_number = booking_result["data"]["booking_number"]
    total = booking_result["data"]["total_amount"]

    # Step 4: Approve
    set_status(args.owner_token, booking_id, "approved", 4, "Approve booking (as owner)")

    # Steps 5-6: Pay in two installments
    first = min(args.first_payment, total)
    pay(args.renter_token, booking_id, first, 5)
    if total > first:
        pay(args.renter_token, booking_id, total - first, 6)

    if args.skip_complete:
        print("\n" + "="*60)
        print("FLOW COMPLETE (skipped activate and complete)")
        print("="*60)
        return

    # Steps 7-8: Move in and finish
    set_status(args.owner_token, booking_id, "active", 7, "Activate booking (as owner)")
    set_status(args.owner_token, booking_id, "completed", 8, "Complete booking (as owner)")

    # Final summary
    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)
    print(f"Booking:        {booking_number}")
    print(f"Total Paid:     {total:,}")


if __name__ == "__main__":
    main()
