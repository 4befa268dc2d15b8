import functools
import logging
import sys
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar

from pigcs2.motion.backend import MotionControllerBackend
from pigcs2.motion.errors import LimitViolation

logger = logging.getLogger("pigcs2")

if sys.version_info < (3, 10):
  from typing_extensions import ParamSpec
else:
  from typing import ParamSpec

_P = ParamSpec("_P")
_R = TypeVar("_R", bound=Awaitable[Any])


def need_setup_finished(func: Callable[_P, _R]) -> Callable[_P, _R]:
  """Decorator for frontend methods that need `setup` to have been called.

  Raises:
    RuntimeError: If the controller is not set up.
  """

  @functools.wraps(func)
  async def wrapper(*args: _P.args, **kwargs: _P.kwargs):
    self = args[0]
    assert isinstance(self, MotionController)
    if not self.setup_finished:
      raise RuntimeError("The setup has not finished. See `setup`.")
    return await func(*args, **kwargs)

  return wrapper  # type: ignore[return-value]


class MotionController:
  """Frontend for multi-axis motion controllers.

  Guards the backend with per-axis soft limits and, if the backend has a `max_voltage_delta`,
  with a bound on how far a single `set_voltage` may change the voltage of an axis.

  Example:
    >>> backend = GCS2Controller("192.168.100.21:50000", index=1)
    >>> async with MotionController(backend, limits={"1": (0, 100)}) as mc:
    ...   await mc.move_absolute("1", 12.5)
  """

  def __init__(
    self,
    backend: MotionControllerBackend,
    limits: Optional[Dict[str, Tuple[float, float]]] = None,
  ):
    self.backend = backend
    self.limits: Dict[str, Tuple[float, float]] = dict(limits or {})
    for axis, (low, high) in self.limits.items():
      if low > high:
        raise ValueError(f"Lower limit of axis {axis} is above its upper limit ({low} > {high})")
    self._setup_finished = False

  @property
  def setup_finished(self) -> bool:
    return self._setup_finished

  async def setup(self, **backend_kwargs):
    await self.backend.setup(**backend_kwargs)
    self._setup_finished = True

  @need_setup_finished
  async def stop(self):
    await self.backend.stop()
    self._setup_finished = False

  async def __aenter__(self):
    await self.setup()
    return self

  async def __aexit__(self, exc_type, exc_value, traceback):
    await self.stop()

  def serialize(self) -> dict:
    return {
      "backend": self.backend.serialize(),
      "limits": {axis: list(limit) for axis, limit in self.limits.items()},
    }

  @classmethod
  def deserialize(cls, data: dict) -> "MotionController":
    limits = {axis: (limit[0], limit[1]) for axis, limit in data.get("limits", {}).items()}
    return cls(backend=MotionControllerBackend.deserialize(data["backend"]), limits=limits)

  def _check_limits(self, axis: str, position: float):
    if axis not in self.limits:
      return
    low, high = self.limits[axis]
    if not low <= position <= high:
      logger.warning("Refusing to move axis %s to %s, outside [%s, %s]", axis, position, low, high)
      raise LimitViolation(f"Position {position} of axis {axis} is outside [{low}, {high}]")

  @need_setup_finished
  async def move_absolute(self, axis: str, position: float, **backend_kwargs):
    """Move `axis` to `position`. Returns once the axis is on target."""
    self._check_limits(axis, position)
    await self.backend.move_absolute(axis, position, **backend_kwargs)

  @need_setup_finished
  async def move_relative(self, axis: str, delta: float, **backend_kwargs):
    """Move `axis` by `delta`. Returns once the axis is on target. With limits on `axis` the
    current position is read first to check the target."""
    if axis in self.limits:
      current = await self.backend.get_position(axis)
      self._check_limits(axis, current + delta)
    await self.backend.move_relative(axis, delta, **backend_kwargs)

  @need_setup_finished
  async def get_position(self, axis: str, **backend_kwargs) -> float:
    return await self.backend.get_position(axis, **backend_kwargs)

  @need_setup_finished
  async def enable(self, axis: str, **backend_kwargs):
    await self.backend.enable(axis, **backend_kwargs)

  @need_setup_finished
  async def disable(self, axis: str, **backend_kwargs):
    await self.backend.disable(axis, **backend_kwargs)

  @need_setup_finished
  async def get_enabled(self, axis: str, **backend_kwargs) -> bool:
    return await self.backend.get_enabled(axis, **backend_kwargs)

  @need_setup_finished
  async def home(self, axis: str, **backend_kwargs):
    await self.backend.home(axis, **backend_kwargs)

  @need_setup_finished
  async def set_voltage(self, axis: str, volts: float, **backend_kwargs):
    dv = self.backend.max_voltage_delta
    if dv is not None:
      current = await self.backend.get_voltage(axis)
      if abs(volts - current) > dv:
        logger.warning(
          "Refusing to change voltage of axis %s from %s to %s (max delta %s)", axis, current, volts, dv
        )
        raise LimitViolation(
          f"Voltage change on axis {axis} from {current} to {volts} exceeds the maximum of {dv}"
        )
    await self.backend.set_voltage(axis, volts, **backend_kwargs)

  @need_setup_finished
  async def get_voltage(self, axis: str, **backend_kwargs) -> float:
    return await self.backend.get_voltage(axis, **backend_kwargs)

  @need_setup_finished
  async def raw(self, command: str, **backend_kwargs) -> str:
    return await self.backend.raw(command, **backend_kwargs)
