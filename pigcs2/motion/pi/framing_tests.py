import unittest

from pigcs2.motion.pi.errors import ProtocolMisuse
from pigcs2.motion.pi.framing import (
  build_error_query,
  build_query,
  build_wait_on_target,
  build_write,
  format_value,
  is_query,
)


class FramingTests(unittest.TestCase):
  """ Tests for framing outgoing command lines. """

  def test_is_query(self):
    self.assertTrue(is_query("POS? 1"))
    self.assertTrue(is_query("*IDN?"))
    self.assertFalse(is_query("MOV 1 1.0"))

  def test_format_value(self):
    self.assertEqual(format_value(123.456), "123.456000000")
    self.assertEqual(format_value(-1), "-1.000000000")
    self.assertEqual(format_value(0.0025210), "0.002521000")

  def test_build_write(self):
    self.assertEqual(build_write(1, "SVO A 1"), [b"1 SVO A 1"])
    self.assertEqual(build_write(7, "SVO A 1", "FRF A"), [b"7 SVO A 1", b"7 FRF A"])
    self.assertEqual(build_write(1), [])

  def test_build_write_rejects_queries(self):
    with self.assertRaises(ProtocolMisuse):
      build_write(1, "SVO A 1", "SVO? A")

  def test_build_query(self):
    self.assertEqual(build_query(2, "POS? 1"), b"2 POS? 1")

  def test_build_query_rejects_writes(self):
    with self.assertRaises(ProtocolMisuse):
      build_query(1, "MOV 1 2.0")

  def test_protocol_misuse_is_value_error(self):
    with self.assertRaises(ValueError):
      build_query(1, "FRF 1")

  def test_build_wait_on_target(self):
    self.assertEqual(build_wait_on_target(1, "1"), b"1 WAC ONT? 1 = 1")

  def test_build_error_query(self):
    self.assertEqual(build_error_query(3), b"3 ERR?")
