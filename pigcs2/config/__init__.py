"""
Config module. Looks for a `pigcs2.ini` or `pigcs2.json` file in the current directory and all
its parents. Without one, the defaults of `Config` apply; `load_config` can optionally write those
defaults to a new file at the project root (the directory containing .git), or in the current
directory if there is no project root.
"""
from pathlib import Path
from typing import Optional, Union

from pigcs2.config.config import Config
from pigcs2.config.formats import (
  ConfigLoader,
  ConfigSaver,
  IniLoader,
  IniSaver,
  JsonLoader,
  JsonSaver,
  MultiLoader,
)

DEFAULT_LOADERS = [IniLoader(), JsonLoader()]
DEFAULT_LOADER = MultiLoader(DEFAULT_LOADERS)
DEFAULT_SAVER = IniSaver()


def read_config_file(path: Union[str, Path], loader: ConfigLoader = DEFAULT_LOADER) -> Config:
  with open(path, "r", encoding="utf-8") as f:
    return loader.load(f)


def write_config_file(path: Union[str, Path], cfg: Config, saver: ConfigSaver = DEFAULT_SAVER):
  with open(path, "w", encoding="utf-8") as f:
    saver.save(f, cfg)


def get_config_file(
  base_name: str,
  cur_dir: Optional[Union[str, Path]] = None
) -> Optional[Path]:
  """Find `<base_name>.ini` or `<base_name>.json` in `cur_dir` (default: cwd) or its parents.

  Returns:
    The path to the config file, or `None` if there is none.
  """
  cdir = Path(cur_dir) if cur_dir is not None else Path.cwd()
  for candidate in (cdir, *cdir.parents):
    for loader in DEFAULT_LOADERS:
      cfg = candidate / f"{base_name}.{loader.extension}"
      if cfg.exists():
        return cfg
  return None


def get_dir_to_create_config_file_in() -> Path:
  cur_dir = Path.cwd()
  for parent in (cur_dir, *cur_dir.parents):
    if (parent / ".git").exists():
      return parent
  return cur_dir


def load_config(base_file_name: str, create_default: bool = False,
                create_module_level: bool = True) -> Config:
  """Load a Config object from a file.

  Args:
    base_file_name: The base file name to load, without extension.
    create_default: Whether to write a default config file if none exists. It is written in INI
      format.
    create_module_level: Whether to create the default file at the project root rather than in
      the current directory.
  """
  config_path = get_config_file(base_file_name)
  if config_path is None:
    if not create_default:
      return Config()
    create_dir = get_dir_to_create_config_file_in() if create_module_level else Path.cwd()
    config_path = create_dir / f"{base_file_name}.{DEFAULT_SAVER.extension}"
    write_config_file(config_path, Config())

  return read_config_file(config_path)
