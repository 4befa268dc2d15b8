import asyncio
import contextlib
import logging
import time
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Tuple

from pigcs2.io.errors import PoolExhausted
from pigcs2.io.io import IOBase

logger = logging.getLogger(__name__)


class ConnectionPool:
  """A bounded pool of connections to a single device.

  At most `capacity` connections are checked out at any time; further callers of `acquire` wait
  until one is released. A capacity of 1 serializes all transactions to the device.

  Connections are created lazily by `factory`. When a connection is released with an error it is
  stopped and dropped, so the next `acquire` gets a fresh one. Idle connections older than
  `idle_timeout` seconds are replaced as well.
  """

  def __init__(
    self,
    factory: Callable[[], Awaitable[IOBase]],
    capacity: int = 1,
    idle_timeout: Optional[float] = 30,
  ):
    if capacity < 1:
      raise ValueError(f"capacity must be at least 1, got {capacity}")
    self._factory = factory
    self._capacity = capacity
    self._idle_timeout = idle_timeout
    self._idle: List[Tuple[IOBase, float]] = []
    self._semaphore = asyncio.Semaphore(capacity)
    self._checked_out = 0
    self._closed = False

  @property
  def capacity(self) -> int:
    return self._capacity

  @property
  def checked_out(self) -> int:
    """The number of connections currently handed out."""
    return self._checked_out

  @property
  def num_idle(self) -> int:
    return len(self._idle)

  @property
  def closed(self) -> bool:
    return self._closed

  async def _take_idle(self) -> Optional[IOBase]:
    while len(self._idle) > 0:
      conn, returned_at = self._idle.pop()
      if self._idle_timeout is not None and time.monotonic() - returned_at > self._idle_timeout:
        logger.debug("dropping connection idle for more than %s s", self._idle_timeout)
        await self._discard(conn)
        continue
      return conn
    return None

  async def _discard(self, conn: IOBase) -> None:
    try:
      await conn.stop()
    except (OSError, asyncio.TimeoutError) as e:
      logger.warning("Error while closing discarded connection: %r", e)

  async def _acquire_slot(self, timeout: Optional[float]) -> bool:
    """Take a slot of the semaphore, waiting at most `timeout` seconds. A waiter that is given up
    on is cancelled while still pending, so it can never hold a slot nobody will release."""
    if not self._semaphore.locked():
      await self._semaphore.acquire()  # returns without suspending
      return True
    waiter = asyncio.ensure_future(self._semaphore.acquire())
    try:
      done, _ = await asyncio.wait({waiter}, timeout=timeout)
    except asyncio.CancelledError:
      self._abandon(waiter)
      raise
    if not done:
      self._abandon(waiter)
      return False
    return True

  def _abandon(self, waiter: "asyncio.Future[bool]") -> None:
    if not waiter.done():
      waiter.cancel()
    elif not waiter.cancelled() and waiter.exception() is None:
      self._semaphore.release()

  async def acquire(self, timeout: Optional[float] = None) -> IOBase:
    """Get a connection, waiting up to `timeout` seconds for one to become available.

    Raises:
      PoolExhausted: if all connections stay checked out for `timeout` seconds.
    """
    if self._closed:
      raise RuntimeError("Connection pool is closed.")
    if not await self._acquire_slot(timeout):
      raise PoolExhausted(
        f"No connection became available within {timeout} s (capacity {self._capacity})"
      )

    try:
      conn = await self._take_idle()
      if conn is None:
        conn = await self._factory()
    except BaseException:
      self._semaphore.release()
      raise

    self._checked_out += 1
    return conn

  async def release(self, conn: IOBase, error: Optional[BaseException] = None) -> None:
    """Return a connection to the pool. If `error` is given, the connection is in an unknown
    state: it is closed instead of being reused."""
    self._checked_out -= 1
    try:
      if error is not None:
        logger.warning("Discarding connection after error: %r", error)
        await self._discard(conn)
      elif self._closed:
        await self._discard(conn)
      else:
        self._idle.append((conn, time.monotonic()))
    finally:
      self._semaphore.release()

  @contextlib.asynccontextmanager
  async def connection(self, timeout: Optional[float] = None) -> AsyncIterator[IOBase]:
    """Acquire a connection for the duration of the block. The connection is always released;
    if the block raises, it is released with that error."""
    conn = await self.acquire(timeout=timeout)
    try:
      yield conn
    except BaseException as e:
      await self.release(conn, error=e)
      raise
    await self.release(conn)

  async def close(self) -> None:
    """Close all idle connections. Connections still checked out are closed when released."""
    self._closed = True
    idle, self._idle = self._idle, []
    for conn, _ in idle:
      await self._discard(conn)
