import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

LOG_FROM_STRING = {
  "IO": 5,
  "DEBUG": logging.DEBUG,
  "INFO": logging.INFO,
  "WARNING": logging.WARNING,
  "ERROR": logging.ERROR,
  "CRITICAL": logging.CRITICAL,
}

LOG_TO_STRING = {v: k for k, v in LOG_FROM_STRING.items()}


def _to_bool(value) -> bool:
  if isinstance(value, bool):
    return value
  return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
  """The configuration object for pigcs2."""

  @dataclass
  class Logging:
    """The logging configuration."""

    level: int = logging.INFO
    log_dir: Optional[Path] = None

  @dataclass
  class GCS2:
    """Defaults for GCS2 controllers that are not given explicitly to the constructor."""

    timeout: float = 30.0
    handshaking: bool = True
    pool_capacity: int = 1
    connect_backoff: float = 3.0

  logging: Logging = field(default_factory=Logging)
  gcs2: GCS2 = field(default_factory=GCS2)

  @classmethod
  def from_dict(cls, d: dict) -> "Config":
    log_data = d.get("logging", {})
    gcs2_data = d.get("gcs2", {})
    defaults = cls.GCS2()
    return cls(
      logging=cls.Logging(
        level=LOG_FROM_STRING[log_data.get("level", "INFO")],
        log_dir=Path(log_data["log_dir"]) if log_data.get("log_dir") is not None else None,
      ),
      gcs2=cls.GCS2(
        timeout=float(gcs2_data.get("timeout", defaults.timeout)),
        handshaking=_to_bool(gcs2_data.get("handshaking", defaults.handshaking)),
        pool_capacity=int(gcs2_data.get("pool_capacity", defaults.pool_capacity)),
        connect_backoff=float(gcs2_data.get("connect_backoff", defaults.connect_backoff)),
      ),
    )

  @property
  def as_dict(self) -> dict:
    return {
      "logging": {
        "level": LOG_TO_STRING[self.logging.level],
        "log_dir": str(self.logging.log_dir) if self.logging.log_dir is not None else None,
      },
      "gcs2": {
        "timeout": self.gcs2.timeout,
        "handshaking": self.gcs2.handshaking,
        "pool_capacity": self.gcs2.pool_capacity,
        "connect_backoff": self.gcs2.connect_backoff,
      },
    }
