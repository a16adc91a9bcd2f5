import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Any

DEFAULT_DATA_DIR = "data/census"
DEFAULT_REFERENCE_SOURCE = "data/health_analysis.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class CensusConfig:
    """Runtime settings. Env > Arg > Default."""
    data_dir: str = DEFAULT_DATA_DIR
    reference_source: str = DEFAULT_REFERENCE_SOURCE
    reference_timeout: Optional[float] = None  # None waits indefinitely
    recent_limit: int = 10
    date_format: str = "%x %X"
    log_level: str = "INFO"
    storage_file: str = field(default="")

    def __post_init__(self):
        if not self.storage_file:
            self.storage_file = os.path.join(self.data_dir, "storage.json")
        if self.recent_limit < 1:
            raise ValueError(f"recent_limit must be positive, got {self.recent_limit}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "CensusConfig":
        env_values = {
            "data_dir": os.getenv("CENSUS_DATA_DIR"),
            "reference_source": os.getenv("CENSUS_REFERENCE_SOURCE"),
            "reference_timeout": _env_float("CENSUS_REFERENCE_TIMEOUT"),
            "recent_limit": _env_int("CENSUS_RECENT_LIMIT"),
            "date_format": os.getenv("CENSUS_DATE_FORMAT"),
            "log_level": os.getenv("CENSUS_LOG_LEVEL"),
        }
        values = {k: v for k, v in overrides.items() if v is not None}
        for key, value in env_values.items():
            if value is not None:
                values[key] = value
        return cls(**values)


def configure_logging(level: str = "INFO") -> None:
    """Installs the root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
