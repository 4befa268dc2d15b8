"""Outgoing GCS2 command lines.

Every line is prefixed with the network index of the addressed controller: `1 MOV A 1.5` moves
axis A of controller 1. A line containing `?` is a query and always gets exactly one reply; any
other line is a write and gets none. The line terminator is added by the transport.
"""

from typing import List

from pigcs2.motion.pi.errors import ProtocolMisuse


def is_query(msg: str) -> bool:
  return "?" in msg


def format_value(value: float) -> str:
  """Format a numeric argument the way it is sent to the controller (9 decimals)."""
  return f"{value:.9f}"


def _address(index: int, msg: str) -> bytes:
  return f"{index} {msg}".encode("ascii")


def build_write(index: int, *msgs: str) -> List[bytes]:
  """Frame write-only commands for controller `index`.

  Raises:
    ProtocolMisuse: if any of `msgs` is a query. Nothing is framed in that case.
  """
  for msg in msgs:
    if is_query(msg):
      raise ProtocolMisuse(f"Command '{msg}' is a query, but was sent as a write-only command")
  return [_address(index, msg) for msg in msgs]


def build_query(index: int, msg: str) -> bytes:
  """Frame a query for controller `index`.

  Raises:
    ProtocolMisuse: if `msg` is not a query.
  """
  if not is_query(msg):
    raise ProtocolMisuse(f"Command '{msg}' is not a query (it lacks a '?')")
  return _address(index, msg)


def build_wait_on_target(index: int, axis: str) -> bytes:
  """Frame `WAC ONT? <axis> = 1`: the controller holds off on the following commands until
  `axis` is on target. It is sent inside a write transaction and produces no reply of its own."""
  return _address(index, f"WAC ONT? {axis} = 1")


def build_error_query(index: int) -> bytes:
  return _address(index, "ERR?")
