import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, cast

import serial

from pigcs2.io.io import LOG_LEVEL_IO, IOBase

logger = logging.getLogger(__name__)


class Serial(IOBase):
  """An RS-232 connection (8N1). pyserial blocks, so every call is handed to a single worker
  thread, which also keeps the calls in order.

  pyserial enforces `timeout` itself: a read that runs out of time returns what it got so far
  instead of raising.
  """

  def __init__(
    self,
    port: str,
    baudrate: int = 115200,
    timeout: float = 1,
    write_timeout: float = 1,
    rtscts: bool = False,
  ):
    self.port = port
    self.baudrate = baudrate
    self.timeout = timeout
    self.write_timeout = write_timeout
    self.rtscts = rtscts
    self._ser: Optional[serial.Serial] = None
    self._executor: Optional[ThreadPoolExecutor] = None

  @property
  def address(self) -> str:
    return self.port

  async def _run(self, func: Callable[..., Any], *args) -> Any:
    if self._ser is None or self._executor is None:
      raise RuntimeError(f"Serial port {self.port} is not open, forgot to call setup?")
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(self._executor, func, *args)

  async def setup(self):
    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=1)
    open_port = functools.partial(
      serial.Serial,
      port=self.port,
      baudrate=self.baudrate,
      bytesize=serial.EIGHTBITS,
      parity=serial.PARITY_NONE,
      stopbits=serial.STOPBITS_ONE,
      timeout=self.timeout,
      write_timeout=self.write_timeout,
      rtscts=self.rtscts,
    )
    try:
      self._ser = await loop.run_in_executor(executor, open_port)
    except serial.SerialException:
      logger.error("Could not open %s, is it in use by another process?", self.port)
      executor.shutdown(wait=True)
      raise
    self._executor = executor
    logger.info("Opened serial port %s at %d baud", self.port, self.baudrate)

  async def stop(self):
    if self._ser is not None:
      await self._run(self._ser.close)
      self._ser = None
      logger.info("Closed serial port %s", self.port)
    if self._executor is not None:
      self._executor.shutdown(wait=True)
      self._executor = None

  async def write(self, data: bytes):
    assert self._ser is not None, "forgot to call setup?"
    await self._run(self._ser.write, data)
    logger.log(LOG_LEVEL_IO, "[%s] write %s", self.port, data)

  async def read(self, num_bytes: int = 1) -> bytes:
    assert self._ser is not None, "forgot to call setup?"
    data = await self._run(self._ser.read, num_bytes)
    logger.log(LOG_LEVEL_IO, "[%s] read %s", self.port, data)
    return cast(bytes, data)

  async def readuntil(self, separator: bytes = b"\n") -> bytes:
    """Read up to and including `separator`, or less if the port timeout expires first."""
    assert self._ser is not None, "forgot to call setup?"
    data = await self._run(self._ser.read_until, separator)
    logger.log(LOG_LEVEL_IO, "[%s] read %s", self.port, data)
    return cast(bytes, data)

  def serialize(self) -> dict:
    return {
      "type": "Serial",
      "port": self.port,
      "baudrate": self.baudrate,
      "timeout": self.timeout,
      "write_timeout": self.write_timeout,
      "rtscts": self.rtscts,
    }

  @classmethod
  def deserialize(cls, data: dict) -> "Serial":
    return cls(**{k: v for k, v in data.items() if k != "type"})
