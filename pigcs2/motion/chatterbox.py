from typing import Dict

from pigcs2.motion.backend import MotionControllerBackend


class MotionControllerChatterboxBackend(MotionControllerBackend):
  """ Chatter box backend for device-free testing. Prints out all operations. """

  def __init__(self) -> None:
    self.positions: Dict[str, float] = {}
    self.voltages: Dict[str, float] = {}
    self.enabled: Dict[str, bool] = {}

  async def setup(self) -> None:
    print("Setting up the motion controller.")

  async def stop(self) -> None:
    print("Stopping the motion controller.")

  async def move_absolute(self, axis: str, position: float):
    print(f"Moving axis {axis} to {position}")
    self.positions[axis] = position

  async def move_relative(self, axis: str, delta: float):
    print(f"Moving axis {axis} by {delta}")
    self.positions[axis] = self.positions.get(axis, 0.0) + delta

  async def get_position(self, axis: str) -> float:
    print(f"Getting the position of axis {axis}")
    return self.positions.get(axis, 0.0)

  async def enable(self, axis: str):
    print(f"Enabling axis {axis}")
    self.enabled[axis] = True

  async def disable(self, axis: str):
    print(f"Disabling axis {axis}")
    self.enabled[axis] = False

  async def get_enabled(self, axis: str) -> bool:
    print(f"Getting the servo state of axis {axis}")
    return self.enabled.get(axis, False)

  async def home(self, axis: str):
    print(f"Homing axis {axis}")
    self.positions[axis] = 0.0

  async def set_voltage(self, axis: str, volts: float):
    print(f"Setting the voltage of axis {axis} to {volts}")
    self.voltages[axis] = volts

  async def get_voltage(self, axis: str) -> float:
    print(f"Getting the voltage of axis {axis}")
    return self.voltages.get(axis, 0.0)

  async def raw(self, command: str) -> str:
    print(f"Sending raw command: {command}")
    return ""
