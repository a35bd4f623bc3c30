#!/usr/bin/env python3
"""
Polls a running gpsfix server and prints the fix as it changes.

Run the server first:
    gpsfix --tty /dev/ttyUSB0 --baudrate 9600
    # or: uv run uvicorn gpsfix.main:app --port 54321

Then run this script:
    uv run python examples/demo.py
    uv run python examples/demo.py --base-url http://192.168.2.100:54321
"""

import argparse
import sys
import time

import httpx

DEFAULT_BASE_URL = "http://localhost:54321"


def main():
    parser = argparse.ArgumentParser(description="gpsfix demo")
    parser.add_argument(
        "--base-url", default=DEFAULT_BASE_URL,
        help=f"Server URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--interval", type=float, default=1.0,
        help="Seconds between polls (default: 1.0)",
    )
    args = parser.parse_args()

    client = httpx.Client(base_url=args.base_url.rstrip("/"), timeout=5.0)

    # ── 1. Health check ────────────────────────────────────
    health = client.get("/health").json()
    print("=== Health ===")
    print(f"  Status:     {health['status']}")
    print(f"  Serial:     {health['serial_connected']}")
    print(f"  Sentences:  {health['sentences_received']} ok, "
          f"{health['decode_errors']} bad")

    if health["status"] == "disconnected":
        print("\n  The receiver is not connected. Check --tty and --baudrate.")
        sys.exit(1)

    # ── 2. Follow the fix ──────────────────────────────────
    print("\n=== Fix (Ctrl-C to stop) ===")
    try:
        while True:
            fix = client.get("/fix").json()
            print(
                f"  {fix['timestamp'] or '-':<24} "
                f"{fix['latitude_dms']:>16} {fix['longitude_dms']:>17} "
                f"alt {fix['altitude']:.1f}m  sats {fix['satellites']:>2}  "
                f"age {fix['age_s']:.1f}s"
            )
            time.sleep(args.interval)
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
