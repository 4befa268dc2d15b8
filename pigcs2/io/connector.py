import asyncio
import logging
from typing import Callable

from pigcs2.io.errors import ConnectFailed
from pigcs2.io.io import IOBase
from pigcs2.io.serial import Serial
from pigcs2.io.socket import Socket

logger = logging.getLogger(__name__)

DEFAULT_TCP_PORT = 50000
DEFAULT_BAUDRATE = 115200


class BackingOffConnector:
  """Connection factory for a `ConnectionPool`.

  Each call builds a new IO with `make_io` and sets it up, retrying with exponential backoff
  (starting at `initial_wait` seconds) until `max_wait` seconds have passed in total.
  """

  def __init__(self, make_io: Callable[[], IOBase], max_wait: float = 3, initial_wait: float = 0.1):
    self._make_io = make_io
    self.max_wait = max_wait
    self.initial_wait = initial_wait

  async def __call__(self) -> IOBase:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + self.max_wait
    wait = self.initial_wait
    attempt = 0
    while True:
      attempt += 1
      io = self._make_io()
      try:
        await io.setup()
        return io
      except (OSError, asyncio.TimeoutError) as e:
        remaining = deadline - loop.time()
        if remaining <= 0:
          raise ConnectFailed(f"Could not connect after {attempt} attempt(s): {e!r}") from e
        logger.warning(
          "Connect attempt %d failed with %r; retrying in %.2f s", attempt, e, min(wait, remaining)
        )
        await asyncio.sleep(min(wait, remaining))
        wait *= 2


def make_address_io(address: str, serial: bool = False, timeout: float = 30) -> IOBase:
  """Build an (unconnected) IO for an address.

  Args:
    address: `host` or `host:port` for TCP/IP (port defaults to 50000), or a device path such as
      `/dev/ttyS4` or `COM3` for RS-232.
    serial: whether `address` is a serial port.
    timeout: read and write timeout of the transport, in seconds.
  """
  if serial:
    return Serial(address, baudrate=DEFAULT_BAUDRATE, timeout=timeout, write_timeout=timeout)

  host, sep, port = address.rpartition(":")
  if sep == "":
    host, port = address, str(DEFAULT_TCP_PORT)
  if not port.isdigit():
    raise ValueError(f"Invalid TCP address '{address}'")
  return Socket(host=host, port=int(port), read_timeout=timeout, write_timeout=timeout)
