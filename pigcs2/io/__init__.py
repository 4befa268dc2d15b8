from .connector import BackingOffConnector, make_address_io
from .errors import ConnectFailed, DeadlineExceeded, PoolExhausted
from .io import LOG_LEVEL_IO, IOBase
from .pool import ConnectionPool
from .serial import Serial
from .socket import Socket
from .terminator import Terminator
