"""
Traffic Simulation Script

Fires concurrent reservations, contact messages and orders at a running
instance so the admin dashboard can be watched updating live.
Run from project root: python scripts/simulate.py

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import date, datetime, timedelta
from typing import Any, Callable

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_REQUESTS = 30

# Sample data
FIRST_NAMES = ["Aarav", "Diya", "Rohan", "Priya", "Kabir", "Ananya", "Vikram", "Meera", "Arjun", "Isha"]
LAST_NAMES = ["Sharma", "Patel", "Iyer", "Reddy", "Nair", "Gupta", "Menon", "Singh", "Rao", "Das"]
TIME_SLOTS = ["12:00 PM", "12:30 PM", "1:00 PM", "7:00 PM", "7:30 PM", "8:00 PM", "8:30 PM"]
MENU_ITEMS = [
    {"name": "Royal Chicken Biryani", "price": 299},
    {"name": "Paneer Butter Masala", "price": 249},
    {"name": "Lamb Rogan Josh", "price": 399},
    {"name": "Dal Makhani", "price": 179},
    {"name": "Chicken Tikka", "price": 229},
    {"name": "Garlic Naan", "price": 99},
]
MESSAGES = [
    "Do you cater for office events?",
    "Is there parking near the restaurant?",
    "Can you make the biryani less spicy?",
    "Do you have vegan options?",
]


def generate_random_customer() -> dict[str, str]:
    """Generate random customer info."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "name": f"{first} {last}",
        "email": f"{first.lower()}.{last.lower()}@example.com",
        "phone": f"+91 9{random.randint(100000000, 999999999)}",
    }


def generate_random_items() -> list[dict]:
    """Generate random order items."""
    items = []
    for item in random.sample(MENU_ITEMS, random.randint(1, 4)):
        items.append({**item, "quantity": random.randint(1, 3)})
    return items


# =============================================================================
# PAYLOADS
# =============================================================================

def generate_reservation_form() -> dict[str, str]:
    customer = generate_random_customer()
    day = date.today() + timedelta(days=random.randint(0, 14))
    return {
        **customer,
        "date": day.isoformat(),
        "time": random.choice(TIME_SLOTS),
        "guests": str(random.randint(1, 10)),
        "specialRequest": random.choice(["", "Window seat", "Birthday celebration", "High chair"]),
    }


def generate_contact_form() -> dict[str, str]:
    customer = generate_random_customer()
    return {**customer, "message": random.choice(MESSAGES)}


def generate_order_payload() -> dict[str, Any]:
    customer = generate_random_customer()
    order_type = random.choice(["delivery", "pickup"])
    return {
        "customerName": customer["name"],
        "customerPhone": customer["phone"],
        "customerEmail": customer["email"],
        "address": f"{random.randint(1, 200)} MG Road, Bangalore" if order_type == "delivery" else "",
        "items": generate_random_items(),
        "orderType": order_type,
        "specialInstructions": random.choice([None, "Extra raita", "Less oil", "Call on arrival"]),
    }


# =============================================================================
# SENDERS
# =============================================================================

async def send_form(
    client: httpx.AsyncClient,
    num: int,
    path: str,
    payload: dict[str, str],
    expected_toast: str,
    mode: str,
) -> dict[str, Any]:
    """Post a public form; success is a 303 whose Location carries the success toast."""
    start_time = time.time()
    try:
        response = await client.post(f"{API_BASE_URL}{path}", data=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)
        location = response.headers.get("location", "")
        ok = response.status_code == 303 and f"toast={expected_toast}" in location
        result = {"num": num, "success": ok, "time": elapsed, "mode": mode}
        if not ok:
            result["error"] = location or response.text[:100]
        return result
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        return {"num": num, "success": False, "error": str(e)[:100], "time": elapsed, "mode": mode}


async def send_reservation(client: httpx.AsyncClient, num: int) -> dict[str, Any]:
    return await send_form(
        client, num, "/reservations", generate_reservation_form(), "reservation_sent", "reservation"
    )


async def send_contact(client: httpx.AsyncClient, num: int) -> dict[str, Any]:
    return await send_form(client, num, "/contact", generate_contact_form(), "inquiry_sent", "contact")


async def send_order(client: httpx.AsyncClient, num: int) -> dict[str, Any]:
    """Send order via the JSON API."""
    start_time = time.time()
    try:
        response = await client.post(f"{API_BASE_URL}/api/orders", json=generate_order_payload(), timeout=30.0)
        elapsed = round(time.time() - start_time, 3)
        if response.status_code == 201:
            data = response.json()
            return {
                "num": num,
                "success": True,
                "order_id": data.get("order_id"),
                "total": data.get("total_amount"),
                "time": elapsed,
                "mode": "order",
            }
        return {"num": num, "success": False, "error": response.text[:100], "time": elapsed, "mode": "order"}
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        return {"num": num, "success": False, "error": str(e)[:100], "time": elapsed, "mode": "order"}


SENDERS: dict[str, Callable] = {
    "reservation": send_reservation,
    "contact": send_contact,
    "order": send_order,
}


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(mode: str = "mixed", total: int = TOTAL_REQUESTS) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        mode: "reservation", "contact", "order" or "mixed"
        total: Number of requests to fire
    """
    print("=" * 70)
    print("🔥 TRAFFIC SIMULATION")
    print("=" * 70)
    print(f"📋 Total Requests: {total}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"🔧 Mode: {mode}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    kinds = list(SENDERS)
    start_time = time.time()

    async with httpx.AsyncClient(follow_redirects=False) as client:
        tasks = []
        for i in range(total):
            kind = kinds[i % len(kinds)] if mode == "mixed" else mode
            tasks.append(SENDERS[kind](client, i + 1))
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful: {len(successful)}/{total}")
    print(f"❌ Failed: {len(failed)}/{total}")
    print(f"⏱️  Total Time: {total_time}s")

    for kind in kinds:
        of_kind = [r for r in results if r["mode"] == kind]
        if of_kind:
            ok = len([r for r in of_kind if r["success"]])
            print(f"   {kind}: {ok}/{len(of_kind)} successful")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        order_total = sum(r.get("total") or 0 for r in successful)
        print("\n📈 Performance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Order Value: ₹{order_total:.2f}")

    if failed:
        print("\n⚠️  Failed Request Details (showing first 5):")
        for f in failed[:5]:
            print(f"   #{f['num']} [{f['mode']}]: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print(f"🔍 Open {API_BASE_URL}/admin to see the records arrive")
    print("=" * 70)

    return {
        "total": total,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health() -> bool:
    """Pre-flight health check."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health", timeout=10.0)
        except httpx.HTTPError as e:
            print(f"   ❌ Unreachable: {e}")
            return False
    if response.status_code != 200:
        print(f"   ❌ Failed: {response.text}")
        return False
    data = response.json()
    print(f"   ✅ Status: {data.get('status')}")
    print(f"   Realtime DB: {data.get('realtime_database')}")
    print(f"   Storage: {data.get('storage')}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Traffic Simulation Script")
    parser.add_argument(
        "--mode",
        choices=["reservation", "contact", "order", "mixed"],
        default="mixed",
        help="Kind of traffic to send",
    )
    parser.add_argument("--requests", type=int, default=TOTAL_REQUESTS, help="Number of requests")
    parser.add_argument("--url", default=API_BASE_URL, help="Base URL of the running app")
    parser.add_argument("--skip-health", action="store_true", help="Skip the pre-flight health check")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    if not args.skip_health:
        print("\n1️⃣ Health Check...")
        if not asyncio.run(check_health()):
            print("\n❌ Pre-flight check failed. Start the server first.")
            sys.exit(1)

    asyncio.run(run_simulation(mode=args.mode, total=args.requests))
