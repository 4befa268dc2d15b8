import asyncio
import unittest
from unittest.mock import AsyncMock, Mock

from pigcs2.io.errors import DeadlineExceeded
from pigcs2.io.io import IOBase
from pigcs2.io.terminator import Terminator


class TerminatorTests(unittest.IsolatedAsyncioTestCase):
  """ Tests for Terminator """

  def setUp(self):
    self.io = Mock(spec=IOBase)
    self.io.write = AsyncMock()
    self.io.readuntil = AsyncMock()
    self.line_io = Terminator(self.io, terminator=b"\n", timeout=0.05)

  async def test_write_appends_terminator(self):
    await self.line_io.write_line("1 POS? 1")
    self.io.write.assert_awaited_once_with(b"1 POS? 1\n")

  async def test_read_strips_terminator(self):
    self.io.readuntil.return_value = b"0 1 1=0.0025210\n"
    self.assertEqual(await self.line_io.read_line(), b"0 1 1=0.0025210")
    self.io.readuntil.assert_awaited_once_with(b"\n")

  async def test_read_deadline(self):
    async def never(*args, **kwargs):
      await asyncio.sleep(1)

    self.io.readuntil.side_effect = never
    with self.assertRaises(DeadlineExceeded):
      await self.line_io.read_line()

  async def test_write_deadline(self):
    async def never(*args, **kwargs):
      await asyncio.sleep(1)

    self.io.write.side_effect = never
    with self.assertRaises(DeadlineExceeded):
      await self.line_io.write_line(b"1 FRF 1")

  async def test_partial_line_is_a_timeout(self):
    self.io.readuntil.return_value = b"0 1 1=0.00"
    with self.assertRaises(DeadlineExceeded):
      await self.line_io.read_line()

  async def test_connection_closed(self):
    self.io.readuntil.side_effect = asyncio.IncompleteReadError(partial=b"0 1", expected=None)
    with self.assertRaises(ConnectionResetError):
      await self.line_io.read_line()

  def test_empty_terminator(self):
    with self.assertRaises(ValueError):
      Terminator(self.io, terminator=b"")
