#!/usr/bin/env python3
"""
Demo script for the compliance scanner API.

Sends the same document twice to show the analysis cache at work, then
prints and clears the cache statistics. Start the API first:

    compliance-api
"""

import os
import time

import httpx

BASE_URL = os.getenv("DEMO_API_URL", "http://localhost:8000")
ADMIN_KEY = os.getenv("ADMIN_API_KEY", "")

SAMPLE_DOCUMENT = (
    "Open a savings account today and enjoy GUARANTEED 12% annual returns! "
    "No KYC required. Offer valid for all customers."
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_analysis(client: httpx.Client) -> str:
    """Analyze the same document twice; the second call is a cache hit."""
    print_section("Memoized Analysis")

    body = {"text": SAMPLE_DOCUMENT, "content_type": "social_media"}
    key = ""
    for attempt in (1, 2):
        start = time.time()
        response = client.post("/analysis", json=body)
        response.raise_for_status()
        data = response.json()
        key = data["key"]
        elapsed = (time.time() - start) * 1000
        source = "cache" if data["cache_used"] else "AI provider"
        print(f"\n  Attempt {attempt}: served from {source} in {elapsed:.0f}ms")
        print(f"  Score: {data['result']['complianceScore']}  Status: {data['result']['overallStatus']}")
        for violation in data["result"]["violations"]:
            print(f"    - [{violation['severity']}] {violation['title']}")

    print(f"\n  Cache key: {key}")
    return key


def demo_cache_admin(client: httpx.Client) -> None:
    """Show and clear cache statistics."""
    print_section("Cache Administration")

    headers = {"X-Admin-Key": ADMIN_KEY} if ADMIN_KEY else {}
    stats = client.get("/admin/cache", headers=headers)
    stats.raise_for_status()
    data = stats.json()
    print(f"\n  Keys: {data['keys']}  Hits: {data['hits']}  Misses: {data['misses']}  Size: {data['size_kb']}KB")

    cleared = client.delete("/admin/cache", headers=headers)
    cleared.raise_for_status()
    print(f"  Cleared {cleared.json()['deleted_count']} entries")


def main() -> None:
    """Run all demos."""
    print("\n🚀 Compliance Scanner Demo")
    print("=" * 70)
    print(f"API: {BASE_URL}")

    try:
        with httpx.Client(base_url=BASE_URL, timeout=120.0) as client:
            demo_analysis(client)
            demo_cache_admin(client)

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except httpx.HTTPError as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure the API is running:")
        print("  compliance-api")
        print("\nand that OPENAI_API_KEY (or GEMINI_API_KEY) is set.")


if __name__ == "__main__":
    main()
