import asyncio
import logging
from typing import Optional, Union

from pigcs2.io.errors import DeadlineExceeded
from pigcs2.io.io import IOBase

logger = logging.getLogger(__name__)


class Terminator:
  """Line framing on top of an IO: appends `terminator` on write, reads up to it and strips it on
  read. Every read and write is bounded by `timeout` seconds (no bound if `None`).

  Example:
    >>> line_io = Terminator(socket, terminator=b"\\n", timeout=5)
    >>> await line_io.write_line("1 POS? 1")
    >>> await line_io.read_line()
    b'0 1 1=0.0025210'
  """

  def __init__(self, io: IOBase, terminator: bytes = b"\n", timeout: Optional[float] = None):
    if len(terminator) == 0:
      raise ValueError("terminator must not be empty")
    self.io = io
    self.terminator = terminator
    self.timeout = timeout

  async def _with_deadline(self, coro, action: str):
    try:
      return await asyncio.wait_for(coro, timeout=self.timeout)
    except asyncio.TimeoutError as e:
      raise DeadlineExceeded(f"{action} did not complete within {self.timeout} s") from e

  async def write_line(self, line: Union[str, bytes]) -> None:
    if isinstance(line, str):
      line = line.encode("ascii")
    await self._with_deadline(self.io.write(line + self.terminator), "write")

  async def read_line(self) -> bytes:
    """Read one line, without its terminator.

    Raises:
      DeadlineExceeded: if no complete line arrived in time. Transports with their own read
        timeout (serial) return a partial line instead of raising; that is treated the same way.
      ConnectionResetError: if the other end closed the connection mid-line.
    """
    try:
      data = await self._with_deadline(self.io.readuntil(self.terminator), "read")
    except asyncio.IncompleteReadError as e:
      raise ConnectionResetError(f"connection closed after partial read {e.partial!r}") from e
    if not data.endswith(self.terminator):
      raise DeadlineExceeded(f"read timed out after partial line {data!r}")
    return data[: -len(self.terminator)]
