import datetime
import logging
from pathlib import Path
from typing import Optional, Union

from pigcs2.__version__ import __version__
from pigcs2.config import Config, load_config

CONFIG_FILE_NAME = "pigcs2"

CONFIG = load_config(CONFIG_FILE_NAME, create_default=False)


def project_root() -> Path:
  """The directory containing the `pigcs2` package."""
  return Path(__file__).parent.parent


def setup_logger(log_dir: Optional[Union[Path, str]], level: int):
  """Set the level of the `pigcs2` logger and (re)attach its file handler.

  Logs go to `<log_dir>/pigcs2-YYYYMMDD.log`; `log_dir` is created if needed. With `log_dir` set
  to `None` no file is written. Handlers from an earlier call are closed first, so calling this
  again replaces the configuration rather than adding to it.

  Args:
    log_dir: directory for the log files, or `None`.
    level: level of the `pigcs2` logger, e.g. `logging.DEBUG` or `LOG_LEVEL_IO`.
  """
  logger = logging.getLogger("pigcs2")
  logger.setLevel(level)

  for handler in list(logger.handlers):
    handler.close()
    logger.removeHandler(handler)

  if log_dir is None:
    return

  log_dir = Path(log_dir)
  log_dir.mkdir(parents=True, exist_ok=True)
  today = datetime.date.today().strftime("%Y%m%d")
  file_handler = logging.FileHandler(log_dir / f"pigcs2-{today}.log")
  file_handler.setLevel(logging.NOTSET)  # filtering is left to the logger level
  file_handler.setFormatter(
    logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
  )
  logger.addHandler(file_handler)


def configure(cfg: Config):
  """Replace the global configuration of pigcs2 and apply its logging settings."""
  global CONFIG  # pylint: disable=global-statement
  CONFIG = cfg
  setup_logger(cfg.logging.log_dir, cfg.logging.level)


configure(CONFIG)
