"""Pytest configuration for Vallox bridge tests."""

import asyncio
import os
from pathlib import Path

import pytest

from vallox_bridge.protocol import TransportError


def _load_dotenv() -> None:
    """Load .env file if it exists."""
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    os.environ.setdefault(key.strip(), value.strip())


# Load .env at import time
_load_dotenv()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom command-line options for E2E tests."""
    parser.addoption(
        "--device-address",
        action="store",
        default=None,
        help="IP address of the Vallox unit for E2E tests (e.g., 192.168.1.50)",
    )
    parser.addoption(
        "--device-port",
        action="store",
        default=None,
        help="Websocket port of the Vallox unit (default: 80)",
    )


@pytest.fixture
def device_address(request: pytest.FixtureRequest) -> str | None:
    """Fixture providing the device address from CLI, env, or None."""
    return request.config.getoption("--device-address") or os.environ.get("VALLOX_ADDRESS")


@pytest.fixture
def device_port(request: pytest.FixtureRequest) -> int:
    """Fixture providing the device port from CLI or env."""
    return int(request.config.getoption("--device-port") or os.environ.get("VALLOX_PORT", "80"))


PROFILE_TABLE = {"HOME": 1, "AWAY": 2, "BOOST": 3, "FIREPLACE": 4}


class FakeMetricsClient:
    """In-memory MetricsClient that records writes in order."""

    def __init__(self, metrics: dict | None = None, profile: int = 1):
        self.metrics = dict(metrics or {})
        self.profile = profile
        self.writes: list[tuple[str, object]] = []
        self.fetches = 0
        self.fail = False
        self.fail_next = 0
        self.delay = 0.0

    @property
    def profile_table(self):
        return PROFILE_TABLE

    async def fetch_metrics(self, keys):
        self.fetches += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_next:
            self.fail_next -= 1
            raise TransportError("unit unreachable")
        if self.fail:
            raise TransportError("unit unreachable")
        return {k: v for k, v in self.metrics.items() if k in keys}

    async def fetch_profile(self):
        if self.fail:
            raise TransportError("unit unreachable")
        return self.profile

    async def write_values(self, values):
        self.writes.append(("values", dict(values)))
        self.metrics.update(values)

    async def write_profile(self, value):
        self.writes.append(("profile", value))
        self.profile = value


class RecordingListener:
    """StatusListener that keeps every delivered snapshot."""

    def __init__(self):
        self.statuses = []

    def on_status(self, status):
        self.statuses.append(status)


@pytest.fixture
def profile_table() -> dict[str, int]:
    return dict(PROFILE_TABLE)


@pytest.fixture
def fake_client() -> FakeMetricsClient:
    return FakeMetricsClient(
        metrics={
            "A_CYC_MODE": 0,
            "A_CYC_FAN_SPEED": 40,
            "A_CYC_CO2_SENSOR_0": 650,
            "A_CYC_TEMP_SUPPLY_AIR": 19.5,
            "A_CYC_RH_VALUE": 45,
            "A_CYC_HOME_SPEED_SETTING": 40,
            "A_CYC_AWAY_SPEED_SETTING": 20,
            "A_CYC_BOOST_SPEED_SETTING": 60,
        },
        profile=1,
    )


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()
