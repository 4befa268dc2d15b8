"""Loaders and savers that read and write a `Config` from and to text streams."""

import configparser
import json
from abc import ABC, abstractmethod
from typing import IO, List

from pigcs2.config.config import Config


class ConfigLoader(ABC):
  """Reads a Config from an open stream."""

  extension: str

  @abstractmethod
  def load(self, r: IO) -> Config:
    """Load a Config object."""


class ConfigSaver(ABC):
  """Writes a Config to an open stream."""

  extension: str

  @abstractmethod
  def save(self, w: IO, cfg: Config):
    """Save a Config object."""


class IniLoader(ConfigLoader):
  extension = "ini"

  def load(self, r: IO) -> Config:
    parser = configparser.ConfigParser()
    parser.read_file(r)
    return Config.from_dict({section: dict(parser[section]) for section in parser.sections()})


class IniSaver(ConfigSaver):
  extension = "ini"

  def save(self, w: IO, cfg: Config):
    parser = configparser.ConfigParser()
    for section, values in cfg.as_dict.items():
      # INI has no null, so unset options are left out
      parser[section] = {k: str(v) for k, v in values.items() if v is not None}
    parser.write(w)


class JsonLoader(ConfigLoader):
  extension = "json"

  def load(self, r: IO) -> Config:
    return Config.from_dict(json.loads(r.read()))


class JsonSaver(ConfigSaver):
  extension = "json"

  def save(self, w: IO, cfg: Config):
    json.dump(cfg.as_dict, w, indent=2)


class MultiLoader(ConfigLoader):
  """Tries each loader in turn and returns the first Config that loads."""

  def __init__(self, loaders: List[ConfigLoader]):
    self.loaders = loaders

  def load(self, r: IO) -> Config:
    for loader in self.loaders:
      r.seek(0)
      try:
        return loader.load(r)
      # loaders fail with format specific exceptions, any of them means "not this format"
      except Exception: # pylint: disable=broad-except
        continue
    raise ValueError("No loader could load file.")
