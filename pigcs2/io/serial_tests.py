import unittest
from unittest.mock import Mock, patch

import serial

from pigcs2.io.serial import Serial


class SerialTests(unittest.IsolatedAsyncioTestCase):
  """ Tests for Serial, with pyserial mocked out. """

  async def asyncSetUp(self):
    self.port = Mock()
    self.port.read_until.return_value = b"0 1 1=0.5\n"
    patcher = patch("pigcs2.io.serial.serial.Serial", return_value=self.port)
    self.serial_cls = patcher.start()
    self.addCleanup(patcher.stop)
    self.io = Serial("/dev/ttyS4", baudrate=57600, timeout=10, write_timeout=10)
    await self.io.setup()

  async def asyncTearDown(self):
    await self.io.stop()

  async def test_opens_port(self):
    self.serial_cls.assert_called_once_with(
      port="/dev/ttyS4",
      baudrate=57600,
      bytesize=serial.EIGHTBITS,
      parity=serial.PARITY_NONE,
      stopbits=serial.STOPBITS_ONE,
      timeout=10,
      write_timeout=10,
      rtscts=False,
    )

  async def test_write_and_readuntil(self):
    await self.io.write(b"1 POS? 1\n")
    self.port.write.assert_called_once_with(b"1 POS? 1\n")
    self.assertEqual(await self.io.readuntil(b"\n"), b"0 1 1=0.5\n")
    self.port.read_until.assert_called_once_with(b"\n")

  async def test_stop_closes_port(self):
    await self.io.stop()
    self.port.close.assert_called_once()
    await self.io.stop()
    self.port.close.assert_called_once()

  async def test_serialize(self):
    data = self.io.serialize()
    self.assertEqual(data["type"], "Serial")
    self.assertEqual(Serial.deserialize(data).serialize(), data)


class SerialOpenFailureTests(unittest.IsolatedAsyncioTestCase):
  """ Tests for a port that cannot be opened. """

  async def test_setup_raises(self):
    with patch("pigcs2.io.serial.serial.Serial", side_effect=serial.SerialException("busy")):
      io = Serial("/dev/ttyS4")
      with self.assertRaises(serial.SerialException):
        await io.setup()
    with self.assertRaises(AssertionError):
      await io.write(b"1 ERR?\n")
