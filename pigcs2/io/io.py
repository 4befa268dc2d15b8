import logging
from abc import ABC, abstractmethod

# Level for logging every byte sent and received, below DEBUG.
LOG_LEVEL_IO = 5
logging.addLevelName(LOG_LEVEL_IO, "IO")


class IOBase(ABC):
  """A byte stream to a device. Connections are opened in `setup` and closed in `stop`."""

  @abstractmethod
  async def setup(self):
    """Open the connection."""

  @abstractmethod
  async def stop(self):
    """Close the connection. Closing a connection that is not open does nothing."""

  @abstractmethod
  async def write(self, data: bytes, *args, **kwargs):
    ...

  @abstractmethod
  async def read(self, *args, **kwargs) -> bytes:
    ...

  @abstractmethod
  async def readuntil(self, separator: bytes = b"\n", *args, **kwargs) -> bytes:
    """Read up to and including `separator`."""

  def serialize(self) -> dict:
    return {"type": self.__class__.__name__}
