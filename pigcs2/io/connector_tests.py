import unittest
from unittest.mock import AsyncMock, Mock

from pigcs2.io.connector import BackingOffConnector, make_address_io
from pigcs2.io.errors import ConnectFailed
from pigcs2.io.io import IOBase
from pigcs2.io.serial import Serial
from pigcs2.io.socket import Socket


class BackingOffConnectorTests(unittest.IsolatedAsyncioTestCase):
  """ Tests for BackingOffConnector """

  async def test_retries_until_success(self):
    attempts = []

    def make_io():
      io = Mock(spec=IOBase)
      io.setup = AsyncMock(side_effect=ConnectionRefusedError() if len(attempts) < 2 else None)
      attempts.append(io)
      return io

    connector = BackingOffConnector(make_io, max_wait=1, initial_wait=0.001)
    io = await connector()
    self.assertEqual(len(attempts), 3)
    self.assertIs(io, attempts[-1])

  async def test_gives_up(self):
    def make_io():
      io = Mock(spec=IOBase)
      io.setup = AsyncMock(side_effect=ConnectionRefusedError())
      return io

    connector = BackingOffConnector(make_io, max_wait=0.01, initial_wait=0.001)
    with self.assertRaises(ConnectFailed):
      await connector()


class MakeAddressIOTests(unittest.TestCase):
  """ Tests for make_address_io """

  def test_tcp_with_port(self):
    io = make_address_io("192.168.100.21:50001", timeout=5)
    self.assertIsInstance(io, Socket)
    self.assertEqual(io.serialize()["host"], "192.168.100.21")
    self.assertEqual(io.serialize()["port"], 50001)
    self.assertEqual(io.serialize()["read_timeout"], 5)

  def test_tcp_default_port(self):
    io = make_address_io("192.168.100.21")
    self.assertIsInstance(io, Socket)
    self.assertEqual(io.serialize()["port"], 50000)

  def test_tcp_invalid_port(self):
    with self.assertRaises(ValueError):
      make_address_io("192.168.100.21:abc")

  def test_serial(self):
    io = make_address_io("/dev/ttyS4", serial=True, timeout=10)
    self.assertIsInstance(io, Serial)
    self.assertEqual(io.port, "/dev/ttyS4")
    self.assertEqual(io.timeout, 10)
