#!/usr/bin/env python3
"""Basic usage example for vallox-bridge.

This example shows how to:
1. Read device identification
2. Poll status and display it using field metadata
3. Read the configured mode speeds
4. Change the fan mode (commented out)

Requirements:
    pip install vallox-bridge

Usage:
    python basic_usage.py [IP_ADDRESS] [PORT]

If no address is provided, VALLOX_ADDRESS / VALLOX_PORT are used.
"""

import asyncio
import logging
import sys

from vallox_bridge import CanonicalStatus, format_status
from vallox_bridge.connect import ValloxConfig, open_device


class PrintListener:
    def on_status(self, status: CanonicalStatus) -> None:
        print("\n--- Status ---")
        print(format_status(status))
        print(f"Air quality: {status.air_quality.value}")


async def main(config: ValloxConfig, duration: float = 130.0):
    device = open_device(config, PrintListener())

    info = await device.get_basic_info()
    print(f"--- {info.name} ---")
    print(f"Serial: {info.serial}")
    print(f"Software: {info.software_version}")

    speeds = await device.get_mode_speeds()
    print(f"Mode speeds: away={speeds.away}% home={speeds.home}% boost={speeds.boost}%")

    # Polls immediately, then every 60 seconds
    await device.start_polling()
    try:
        await asyncio.sleep(duration)
    finally:
        device.stop_polling()

    # Example: Change fan mode (commented out for safety)
    # await device.change_fan_mode(FanMode.BOOST)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) > 1:
        port = int(sys.argv[2]) if len(sys.argv) > 2 else 80
        cfg = ValloxConfig(sys.argv[1], port)
    else:
        cfg = ValloxConfig.from_env()
    asyncio.run(main(cfg))
