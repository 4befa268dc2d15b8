import unittest

from pigcs2.motion.pi.errors import ControllerError, GCS2_ERRORS, check_error_code


class ErrorDecoderTests(unittest.TestCase):
  """ Tests for mapping controller error codes to exceptions. """

  def test_no_error(self):
    self.assertIsNone(check_error_code(0))

  def test_known_error(self):
    error = check_error_code(6)
    assert error is not None
    self.assertIsInstance(error, ControllerError)
    self.assertEqual(error.errno, 6)
    self.assertEqual(error.strerror, GCS2_ERRORS[6])
    self.assertIn("6", str(error))

  def test_negative_error(self):
    error = check_error_code(-1024)
    assert error is not None
    self.assertEqual(error.errno, -1024)
    self.assertIn("position error too large", error.strerror)

  def test_unknown_error(self):
    error = check_error_code(99999)
    assert error is not None
    self.assertEqual(error.errno, 99999)
    self.assertEqual(error.strerror, "Unknown error")
