#!/usr/bin/env python3
"""Dump raw registers from a Vallox unit.

This diagnostic script prints the raw metric values next to the translated
status, useful for debugging translation issues or missing sensors.

Usage:
    python dump_raw_status.py <IP_ADDRESS>
    # or
    VALLOX_ADDRESS=192.168.1.50 python dump_raw_status.py
"""

import asyncio
import os
import sys

from vallox_bridge import translate_status
from vallox_bridge.connect import ValloxMetricsClient
from vallox_bridge.protocol import BASIC_INFO_METRICS, MODE_SPEED_METRICS, STATUS_METRICS


async def main(address: str):
    client = ValloxMetricsClient.create(address)

    keys = STATUS_METRICS | MODE_SPEED_METRICS | BASIC_INFO_METRICS
    raw = await client.fetch_metrics(keys)
    profile = await client.fetch_profile()

    print(f"{'Metric':<32} Value")
    print("-" * 44)
    for key in sorted(keys):
        print(f"{key:<32} {raw.get(key, '<missing>')}")
    print(f"{'profile':<32} {profile}")

    print("\nTranslated:")
    print(translate_status(raw, profile, client.profile_table))


if __name__ == "__main__":
    address = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("VALLOX_ADDRESS")
    if not address:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(address))
