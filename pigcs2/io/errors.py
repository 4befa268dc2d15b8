class ConnectFailed(ConnectionError):
  """Raised when a connection to a device could not be established, even after backing off."""


class PoolExhausted(TimeoutError):
  """Raised when no pooled connection became available in time."""


class DeadlineExceeded(TimeoutError):
  """Raised when a read or write did not complete within the configured timeout."""
