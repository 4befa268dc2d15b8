import logging
from typing import List, Optional

import pigcs2
from pigcs2.io import BackingOffConnector, ConnectionPool, IOBase, Terminator, make_address_io
from pigcs2.motion.backend import MotionControllerBackend
from pigcs2.motion.pi.errors import check_error_code
from pigcs2.motion.pi.framing import (
  build_error_query,
  build_query,
  build_wait_on_target,
  build_write,
  format_value,
  is_query,
)
from pigcs2.motion.pi.parsing import (
  decode_bool,
  decode_error_code,
  decode_float,
  decode_line,
  is_continued,
  parse_reply,
  strip_axis,
)

logger = logging.getLogger("pigcs2")

TERMINATOR = b"\n"


class GCS2Controller(MotionControllerBackend):
  """Backend for PI controllers that speak GCS 2.0 (E-509, E-727, C-884, ...).

  GCS2 in short: a command is a three letter verb followed by arguments, usually axis-value pairs
  (`MOV 1 123.456` moves axis 1 to 123.456). Queries end the verb with `?` and always get a reply;
  other commands get none, also when they fail. `ERR?` returns (and clears) the last error code.
  Axes are labelled 1..N or A..Z depending on the firmware.

  Several controllers can be daisy chained behind one connection. Each line is prefixed with the
  index of the addressed controller, and replies come back as `<to> <from> <payload>`, where
  `<to>` is 0 (the host) and `<from>` the index of the controller that answers.

  All transactions go through a connection pool of small capacity (1 by default), so commands to
  one controller never interleave: the protocol has no way to match replies to requests other
  than their order.
  """

  def __init__(
    self,
    address: str,
    index: int = 1,
    handshaking: Optional[bool] = None,
    serial: bool = False,
    timeout: Optional[float] = None,
    max_voltage_delta: Optional[float] = None,
    pool: Optional[ConnectionPool] = None,
  ):
    """
    Args:
      address: where to connect, `host:port` for TCP/IP (e.g. `192.168.100.21:50000`) or a device
        path for RS-232 (e.g. `/dev/ttyS4`).
      index: index of the controller in the daisy chain, 1 in a single controller network.
      handshaking: if true, every write is followed by `ERR?` and fails with `ControllerError`
        when the controller reports an error. Without it writes are faster, but failures go
        unnoticed. Defaults to the `gcs2.handshaking` config value.
      serial: whether `address` is a serial port rather than a TCP/IP address.
      timeout: deadline for each read and write, in seconds. Moves block until the axis is on
        target, so this must cover the longest move. Defaults to the `gcs2.timeout` config value.
      max_voltage_delta: largest allowed voltage change per `set_voltage`, enforced by the
        `MotionController` frontend.
      pool: an existing connection pool to use. Its lifecycle stays with the caller. If not
        given, a pool is created in `setup` and closed in `stop`.
    """
    super().__init__()
    if index < 1:
      raise ValueError(f"Controller index must be at least 1, got {index}")
    defaults = pigcs2.CONFIG.gcs2
    self.address = address
    self.index = index
    self.serial = serial
    self.handshaking = defaults.handshaking if handshaking is None else handshaking
    self.timeout = defaults.timeout if timeout is None else timeout
    self.max_voltage_delta = max_voltage_delta
    self._pool = pool
    self._owns_pool = pool is None

  @property
  def pool(self) -> ConnectionPool:
    if self._pool is None:
      raise RuntimeError("No connection pool, forgot to call setup?")
    return self._pool

  def _make_io(self) -> IOBase:
    return make_address_io(self.address, serial=self.serial, timeout=self.timeout)

  async def setup(self):
    if self._owns_pool and self._pool is None:
      defaults = pigcs2.CONFIG.gcs2
      connector = BackingOffConnector(self._make_io, max_wait=defaults.connect_backoff)
      self._pool = ConnectionPool(connector, capacity=defaults.pool_capacity)
    logger.info("Set up GCS2 controller %d at %s", self.index, self.address)

  async def stop(self):
    if self._owns_pool and self._pool is not None:
      await self._pool.close()
      self._pool = None

  def serialize(self) -> dict:
    return {
      **super().serialize(),
      "address": self.address,
      "index": self.index,
      "handshaking": self.handshaking,
      "serial": self.serial,
      "timeout": self.timeout,
      "max_voltage_delta": self.max_voltage_delta,
    }

  # Transactions

  def _line_io(self, conn: IOBase) -> Terminator:
    return Terminator(conn, terminator=TERMINATOR, timeout=self.timeout)

  async def _send(self, line_io: Terminator, line: bytes):
    logger.debug("[gcs2 %s] send %s", self.address, line)
    await line_io.write_line(line)

  async def _receive(self, line_io: Terminator) -> bytes:
    line = await line_io.read_line()
    logger.debug("[gcs2 %s] received %s", self.address, line)
    return line

  async def _write_lines(self, lines: List[bytes]):
    """Send framed write-only lines in one transaction, followed by the error check if
    handshaking is on."""
    async with self.pool.connection(timeout=self.timeout) as conn:
      line_io = self._line_io(conn)
      for line in lines:
        await self._send(line_io, line)

      if not self.handshaking:
        return

      await self._send(line_io, build_error_query(self.index))
      reply = parse_reply(await self._receive(line_io), self.index)
      error = check_error_code(decode_error_code(reply.payload))
      if error is not None:
        logger.warning("Controller %d reported %s", self.index, error)
        raise error

  async def write(self, *msgs: str):
    """Send write-only commands to the controller in a single transaction. The controller index
    is prepended to each.

    Raises:
      ProtocolMisuse: if any of the messages is a query. Nothing is sent in that case.
      ControllerError: if handshaking is on and the controller reports an error.
    """
    await self._write_lines(build_write(self.index, *msgs))

  async def query(self, msg: str) -> str:
    """Send a query to the controller and return the payload of its reply, without the address
    prefix (`0 1 `) and terminator. The lines of a multi-line answer (e.g. `POS?` for all axes)
    are all read and joined with newlines.

    Raises:
      ProtocolMisuse: if `msg` is not a query. Nothing is sent in that case.
      UnexpectedSource: if the reply came from another controller.
      MalformedResponse: if the reply could not be parsed.
    """
    line = build_query(self.index, msg)
    async with self.pool.connection(timeout=self.timeout) as conn:
      line_io = self._line_io(conn)
      await self._send(line_io, line)
      received = await self._receive(line_io)
      lines = [parse_reply(received, self.index).payload]
      while is_continued(received):
        received = await self._receive(line_io)
        lines.append(decode_line(received))
    return "\n".join(lines)

  async def _read_bool(self, cmd: str, axis: str) -> bool:
    payload = await self.query(f"{cmd} {axis}")
    return decode_bool(strip_axis(axis, payload))

  async def _read_float(self, cmd: str, axis: str) -> float:
    payload = await self.query(f"{cmd} {axis}")
    return decode_float(strip_axis(axis, payload))

  # Axis operations

  async def _move(self, verb: str, axis: str, value: float):
    lines = build_write(self.index, f"{verb} {axis} {format_value(value)}")
    lines.append(build_wait_on_target(self.index, axis))
    await self._write_lines(lines)

  async def move_absolute(self, axis: str, position: float):
    """Move an axis to an absolute position. Blocks until the axis is on target."""
    await self._move("MOV", axis, position)

  async def move_relative(self, axis: str, delta: float):
    """Move an axis by `delta`. Blocks until the axis is on target."""
    await self._move("MVR", axis, delta)

  async def get_position(self, axis: str) -> float:
    return await self._read_float("POS?", axis)

  async def enable(self, axis: str):
    await self.write(f"SVO {axis} 1")

  async def disable(self, axis: str):
    await self.write(f"SVO {axis} 0")

  async def get_enabled(self, axis: str) -> bool:
    return await self._read_bool("SVO?", axis)

  async def home(self, axis: str):
    """Find the reference of an axis (`FRF`)."""
    await self.write(f"FRF {axis}")

  async def set_voltage(self, axis: str, volts: float):
    await self.write(f"SVA {axis} {format_value(volts)}")

  async def get_voltage(self, axis: str) -> float:
    return await self._read_float("SVA?", axis)

  async def get_error(self) -> int:
    """Read (and clear) the error code of the controller. 0 means no error."""
    return decode_error_code(await self.query("ERR?"))

  async def raw(self, command: str) -> str:
    """Send a command as is (apart from the controller index). Queries return the payload of the
    reply, other commands an empty string."""
    if is_query(command):
      return await self.query(command)
    await self.write(command)
    return ""
