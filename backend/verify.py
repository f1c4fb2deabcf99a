"""
backend/verify.py

Purpose:
    CLI entrypoint for a quick deployment health check: database ping,
    required indexes and collection counts.

Dependencies:
    - app.database
"""

import asyncio
import os
import sys
from pprint import pprint

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.database import close_db, connect_db, get_db

REQUIRED_INDEXES = {
    "users": {"email_1", "username_1"},
    "bets": {"user_id_1_status_1", "match_id_1_status_1", "placed_at_-1"},
}


async def run_checks() -> dict:
    db = await get_db()
    report: dict = {"status": "HEALTHY", "checks": {}}

    ping = await db.command("ping")
    report["checks"]["ping"] = ping.get("ok") == 1.0

    for collection, expected in REQUIRED_INDEXES.items():
        info = await db[collection].index_information()
        missing = sorted(expected - set(info))
        report["checks"][f"{collection}_indexes"] = missing or "ok"
        report["checks"][f"{collection}_count"] = await db[collection].count_documents({})
        if missing:
            report["status"] = "DEGRADED"

    if not report["checks"]["ping"]:
        report["status"] = "UNHEALTHY"
    return report


async def main() -> int:
    print("\nSTARTING BIBET HEALTH CHECK")
    print("=" * 50)

    try:
        await connect_db()
        report = await run_checks()

        print("\n--- REPORT ---")
        pprint(report, indent=2)
        print("-" * 50)

        if report.get("status") == "HEALTHY":
            print("\nSYSTEM GREEN: database and indexes are in place.")
            return 0

        print(f"\nSYSTEM RED: Status is {report.get('status')}")
        print("Check the report above.")
        return 1
    except Exception as e:
        print(f"FATAL ERROR: {e}")
        return 1
    finally:
        await close_db()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
