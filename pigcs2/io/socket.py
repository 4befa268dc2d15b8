import asyncio
import logging
from typing import Optional, Tuple

from pigcs2.io.io import LOG_LEVEL_IO, IOBase

logger = logging.getLogger(__name__)


class Socket(IOBase):
  """A TCP connection, e.g. to the Ethernet port of an E-727 (port 50000)."""

  def __init__(self, host: str, port: int, read_timeout: float = 30, write_timeout: float = 30):
    self.host = host
    self.port = port
    self.read_timeout = read_timeout
    self.write_timeout = write_timeout
    self._streams: Optional[Tuple[asyncio.StreamReader, asyncio.StreamWriter]] = None

  @property
  def address(self) -> str:
    return f"{self.host}:{self.port}"

  def _get_streams(self) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    if self._streams is None:
      raise RuntimeError(f"Not connected to {self.address}, forgot to call setup?")
    return self._streams

  async def setup(self):
    logger.info("Connecting to %s", self.address)
    self._streams = await asyncio.open_connection(self.host, self.port)

  async def stop(self):
    if self._streams is None:
      return
    _, writer = self._streams
    self._streams = None
    logger.info("Closing connection to %s", self.address)
    writer.close()
    try:
      await writer.wait_closed()
    except OSError as e:
      logger.warning("Error while closing connection to %s: %r", self.address, e)

  async def write(self, data: bytes, timeout: Optional[float] = None) -> None:
    _, writer = self._get_streams()
    logger.log(LOG_LEVEL_IO, "[%s] write %s", self.address, data)
    writer.write(data)
    await asyncio.wait_for(writer.drain(), timeout=timeout or self.write_timeout)

  async def read(self, num_bytes: int = 128, timeout: Optional[float] = None) -> bytes:
    reader, _ = self._get_streams()
    data = await asyncio.wait_for(reader.read(num_bytes), timeout=timeout or self.read_timeout)
    logger.log(LOG_LEVEL_IO, "[%s] read %s", self.address, data)
    return data

  async def readuntil(self, separator: bytes = b"\n", timeout: Optional[float] = None) -> bytes:
    """Read up to and including `separator`.

    Raises:
      asyncio.IncompleteReadError: if the connection was closed before `separator` arrived.
    """
    reader, _ = self._get_streams()
    data = await asyncio.wait_for(
      reader.readuntil(separator), timeout=timeout or self.read_timeout
    )
    logger.log(LOG_LEVEL_IO, "[%s] read %s", self.address, data)
    return data

  def serialize(self) -> dict:
    return {
      "type": "Socket",
      "host": self.host,
      "port": self.port,
      "read_timeout": self.read_timeout,
      "write_timeout": self.write_timeout,
    }

  @classmethod
  def deserialize(cls, data: dict) -> "Socket":
    return cls(**{k: v for k, v in data.items() if k != "type"})
