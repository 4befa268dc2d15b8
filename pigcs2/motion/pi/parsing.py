"""Incoming GCS2 replies.

With explicit addressing a reply reads `<to> <from> <payload>`, e.g. `0 1 1=0.0025210` is sent to
address 0 (the host) from controller 1, and says that axis 1 is at 0.0025210. Without addressing
(single controller shorthand) only the payload is sent.
"""

from dataclasses import dataclass
from typing import Optional, Union

from pigcs2.motion.pi.errors import MalformedResponse, UnexpectedSource


@dataclass
class Reply:
  to: Optional[int]
  source: Optional[int]
  payload: str


def _parse_address(field: str, name: str, reply: str) -> int:
  try:
    return int(field)
  except ValueError as e:
    raise MalformedResponse(f"Could not parse {name} address from reply {reply!r}") from e


def is_continued(line: bytes) -> bool:
  """Whether more lines of the same answer follow. Every line of a multi-line answer but the last
  ends with a space (before the terminator)."""
  return line.endswith(b" ")


def decode_line(line: Union[bytes, str]) -> str:
  """Decode a reply line and strip surrounding whitespace, including a continuation space."""
  if isinstance(line, bytes):
    try:
      line = line.decode("ascii")
    except UnicodeDecodeError as e:
      raise MalformedResponse(f"Reply {line!r} is not ASCII") from e
  return line.strip()


def parse_reply(reply: Union[bytes, str], index: int) -> Reply:
  """Split a reply into its addresses and payload, and check it came from controller `index`.

  A reply without any space is taken to be in the unaddressed form, which only a controller with
  index 1 (alone on its network) uses. It is passed through as is.

  Raises:
    MalformedResponse: if the address fields are missing or not numeric, or if an unaddressed
      reply arrives for a controller other than 1.
    UnexpectedSource: if the reply was sent by another controller than `index`.
  """
  text = decode_line(reply)

  if " " not in text:
    if index != 1:
      raise MalformedResponse(f"Reply {text!r} has no address, expected one from controller {index}")
    return Reply(to=None, source=None, payload=text)

  fields = text.split(" ", 2)
  if len(fields) < 3:
    raise MalformedResponse(f"Reply {text!r} has an address but no payload")
  to = _parse_address(fields[0], "destination", text)
  source = _parse_address(fields[1], "source", text)
  if source != index:
    raise UnexpectedSource(expected=index, received=source)
  return Reply(to=to, source=source, payload=fields[2])


def strip_axis(axis: str, payload: str) -> str:
  """Remove the `<axis>=` echo in front of a value, if there is one."""
  prefix = f"{axis}="
  if payload.startswith(prefix):
    return payload[len(prefix):]
  return payload


def decode_bool(payload: str) -> bool:
  if len(payload) == 0:
    raise MalformedResponse("Expected a boolean, got an empty payload")
  return payload[0] == "1"


def decode_float(payload: str) -> float:
  try:
    return float(payload)
  except ValueError as e:
    raise MalformedResponse(f"Expected a number, got {payload!r}") from e


def decode_error_code(payload: str) -> int:
  """The error code is the last space separated field of the `ERR?` reply."""
  fields = payload.split()
  if len(fields) == 0:
    raise MalformedResponse("Expected an error code, got an empty payload")
  try:
    return int(fields[-1])
  except ValueError as e:
    raise MalformedResponse(f"Expected an error code, got {payload!r}") from e
