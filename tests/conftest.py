import os
import time
from datetime import datetime, timedelta

import pytest

from src.adapters.storage_adapter import InMemoryStorage
from src.core.config import CensusConfig
from src.services.census_service import CensusService


class FixedClock:
    """Callable clock the tests can move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 18, 9, 30, 0))


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def config(tmp_path) -> CensusConfig:
    return CensusConfig(data_dir=str(tmp_path), date_format="%Y-%m-%d %H:%M:%S")


@pytest.fixture
def census(storage, config, clock) -> CensusService:
    return CensusService(storage, config, clock=clock)


@pytest.fixture(scope="session")
def fpath_reference() -> str:
    """
    Path to the reference dataset shipped under `data/`.
    """
    return os.path.join(os.path.dirname(__file__), "..", "data", "health_analysis.json")


@pytest.fixture
def utc_plus_nine():
    """Process-local timezone pinned to UTC+9 (POSIX rule, no tz database needed)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "JST-9"
    time.tzset()
    yield
    if previous is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = previous
    time.tzset()
