import inspect
from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

T = TypeVar("T")


def find_subclass(class_name: str, cls: Type[T]) -> Optional[Type[T]]:
  """Depth-first search of the subclass tree of `cls` (including `cls`) for `class_name`."""
  if cls.__name__ == class_name:
    return cls
  for subclass in cls.__subclasses__():
    found = find_subclass(class_name, subclass)
    if found is not None:
      return found
  return None


class MotionControllerBackend(ABC):
  """Abstract backend for a multi-axis motion controller.

  Axes are addressed by their label on the controller ("1".."N" or "A".."Z"). Positions are in the
  controller's units, voltages in volts.
  """

  # Largest voltage change a single `set_voltage` may make; `None` for no limit. Enforced by the
  # `MotionController` frontend, not by the backend.
  max_voltage_delta: Optional[float] = None

  @abstractmethod
  async def setup(self):
    pass

  @abstractmethod
  async def stop(self):
    pass

  @abstractmethod
  async def move_absolute(self, axis: str, position: float):
    """Move `axis` to `position` and return once it is on target."""

  @abstractmethod
  async def move_relative(self, axis: str, delta: float):
    """Move `axis` by `delta` and return once it is on target."""

  @abstractmethod
  async def get_position(self, axis: str) -> float:
    ...

  @abstractmethod
  async def enable(self, axis: str):
    """Switch on the servo of `axis`."""

  @abstractmethod
  async def disable(self, axis: str):
    """Switch off the servo of `axis`."""

  @abstractmethod
  async def get_enabled(self, axis: str) -> bool:
    ...

  @abstractmethod
  async def home(self, axis: str):
    """Reference `axis`."""

  @abstractmethod
  async def set_voltage(self, axis: str, volts: float):
    ...

  @abstractmethod
  async def get_voltage(self, axis: str) -> float:
    ...

  @abstractmethod
  async def raw(self, command: str) -> str:
    """Send a command as is. Returns the reply, or an empty string if there is none."""

  def serialize(self) -> dict:
    return {"type": self.__class__.__name__}

  @classmethod
  def deserialize(cls, data: dict) -> "MotionControllerBackend":
    data = data.copy()
    class_name = data.pop("type")
    subclass = find_subclass(class_name, cls=cls)
    if subclass is None:
      raise ValueError(f'Could not find subclass with name "{class_name}"')
    if inspect.isabstract(subclass):
      raise ValueError(f'Subclass with name "{class_name}" is abstract')
    return subclass(**data)
