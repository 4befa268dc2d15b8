from .errors import (
  ControllerError,
  GCS2Error,
  MalformedResponse,
  ProtocolMisuse,
  UnexpectedSource,
  check_error_code,
)
from .gcs2 import GCS2Controller
