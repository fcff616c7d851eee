"""Vallox Bridge - Status synchronization for Vallox ventilation units.

This library polls a Vallox MV ventilation unit and translates its raw
registers into a protocol-agnostic status model that bridging hosts (Matter
bridges, home automation integrations) can consume. It also translates fan
commands back into the register writes the unit expects.

Disclaimer: This project is not affiliated with, endorsed by, or connected to
Vallox Oy. All trademarks are the property of their respective owners.

Basic Usage:
    from vallox_bridge import FanMode, format_status
    from vallox_bridge.connect import ValloxConfig, open_device

    class Printer:
        def on_status(self, status):
            print(format_status(status))

    device = open_device(ValloxConfig("192.168.1.50"), Printer())
    await device.start_polling()
    await device.change_fan_mode(FanMode.BOOST)

Custom transport:
    from vallox_bridge import ValloxDevice

    # Any object implementing MetricsClient works
    device = ValloxDevice(my_metrics_client, listener)
"""

from __future__ import annotations

from .air_quality import AirQuality, classify
from .client import ValloxDevice
from .mapping import (
    mode_to_approx_speed,
    mode_to_profile,
    profile_to_mode,
    speed_to_mode,
)
from .protocol import (
    # Constants
    POLL_INTERVAL,
    VALLOX_MODELS,
    Metric,
    ModeRegister,
    # Data classes
    BasicInfo,
    CanonicalStatus,
    FanMode,
    ModeSpeedTable,
    ProfileWrite,
    ValuesWrite,
    # Client capability
    MetricsClient,
    TransportError,
    # Functions
    format_status,
)
from .scheduler import PollingScheduler, StatusListener, read_status
from .translate import command_mode, command_speed, translate_status

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Primary interface
    "ValloxDevice",
    "PollingScheduler",
    "StatusListener",
    "MetricsClient",
    "TransportError",
    # Data classes
    "AirQuality",
    "BasicInfo",
    "CanonicalStatus",
    "FanMode",
    "ModeSpeedTable",
    "ProfileWrite",
    "ValuesWrite",
    # Constants
    "POLL_INTERVAL",
    "VALLOX_MODELS",
    "Metric",
    "ModeRegister",
    # Translation functions (for advanced use)
    "classify",
    "command_mode",
    "command_speed",
    "format_status",
    "mode_to_approx_speed",
    "mode_to_profile",
    "profile_to_mode",
    "read_status",
    "speed_to_mode",
    "translate_status",
]
