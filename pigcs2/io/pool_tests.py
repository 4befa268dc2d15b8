import asyncio
import unittest
from unittest.mock import AsyncMock, Mock

from pigcs2.io.errors import PoolExhausted
from pigcs2.io.io import IOBase
from pigcs2.io.pool import ConnectionPool


def _make_conn() -> Mock:
  conn = Mock(spec=IOBase)
  conn.stop = AsyncMock()
  return conn


class ConnectionPoolTests(unittest.IsolatedAsyncioTestCase):
  """ Tests for ConnectionPool """

  async def asyncSetUp(self):
    self.made = []

    async def factory():
      conn = _make_conn()
      self.made.append(conn)
      return conn

    self.pool = ConnectionPool(factory, capacity=1, idle_timeout=None)

  async def test_reuses_clean_connection(self):
    conn = await self.pool.acquire()
    self.assertEqual(self.pool.checked_out, 1)
    await self.pool.release(conn)
    self.assertEqual(self.pool.checked_out, 0)
    again = await self.pool.acquire()
    self.assertIs(again, conn)
    self.assertEqual(len(self.made), 1)
    await self.pool.release(again)

  async def test_discards_errored_connection(self):
    conn = await self.pool.acquire()
    await self.pool.release(conn, error=TimeoutError("late"))
    conn.stop.assert_awaited_once()
    self.assertEqual(self.pool.num_idle, 0)
    fresh = await self.pool.acquire()
    self.assertIsNot(fresh, conn)
    await self.pool.release(fresh)

  async def test_context_manager_tags_error(self):
    with self.assertRaises(ValueError):
      async with self.pool.connection() as conn:
        raise ValueError("bad reply")
    conn.stop.assert_awaited_once()
    self.assertEqual(self.pool.checked_out, 0)

    async with self.pool.connection() as conn2:
      self.assertIsNot(conn2, conn)
    conn2.stop.assert_not_awaited()
    self.assertEqual(self.pool.num_idle, 1)

  async def test_exhausted(self):
    conn = await self.pool.acquire()
    with self.assertRaises(PoolExhausted):
      await self.pool.acquire(timeout=0.01)
    self.assertEqual(self.pool.checked_out, 1)
    await self.pool.release(conn)

  async def test_timed_out_waiters_leave_no_slot_behind(self):
    conn = await self.pool.acquire()
    for _ in range(5):
      with self.assertRaises(PoolExhausted):
        await self.pool.acquire(timeout=0.001)
    await self.pool.release(conn)
    again = await self.pool.acquire(timeout=0.1)
    with self.assertRaises(PoolExhausted):
      await self.pool.acquire(timeout=0.01)
    await self.pool.release(again)

  async def test_cancelled_waiter_leaves_no_slot_behind(self):
    conn = await self.pool.acquire()
    waiting = asyncio.ensure_future(self.pool.acquire())
    await asyncio.sleep(0.01)
    waiting.cancel()
    with self.assertRaises(asyncio.CancelledError):
      await waiting
    await self.pool.release(conn)
    again = await self.pool.acquire(timeout=0.1)
    with self.assertRaises(PoolExhausted):
      await self.pool.acquire(timeout=0.01)
    await self.pool.release(again)
    self.assertEqual(self.pool.checked_out, 0)

  async def test_serializes_callers(self):
    order = []

    async def transaction(name: str):
      async with self.pool.connection():
        order.append(f"{name} start")
        await asyncio.sleep(0.01)
        order.append(f"{name} end")

    await asyncio.gather(transaction("a"), transaction("b"))
    self.assertEqual(order, ["a start", "a end", "b start", "b end"])

  async def test_factory_failure_frees_slot(self):
    async def failing_factory():
      raise ConnectionRefusedError()

    pool = ConnectionPool(failing_factory, capacity=1)
    with self.assertRaises(ConnectionRefusedError):
      await pool.acquire()
    self.assertEqual(pool.checked_out, 0)
    with self.assertRaises(ConnectionRefusedError):
      await pool.acquire(timeout=0.01)  # would raise PoolExhausted if the slot leaked

  async def test_idle_timeout(self):
    async def factory():
      return _make_conn()

    pool = ConnectionPool(factory, capacity=1, idle_timeout=0)
    conn = await pool.acquire()
    await pool.release(conn)
    await asyncio.sleep(0.01)
    fresh = await pool.acquire()
    self.assertIsNot(fresh, conn)
    conn.stop.assert_awaited_once()
    await pool.release(fresh)

  async def test_close(self):
    conn = await self.pool.acquire()
    await self.pool.release(conn)
    await self.pool.close()
    conn.stop.assert_awaited_once()
    with self.assertRaises(RuntimeError):
      await self.pool.acquire()

  def test_invalid_capacity(self):
    with self.assertRaises(ValueError):
      ConnectionPool(AsyncMock(), capacity=0)
