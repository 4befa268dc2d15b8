from .backend import MotionControllerBackend
from .chatterbox import MotionControllerChatterboxBackend
from .errors import LimitViolation
from .motion_controller import MotionController
from .pi import GCS2Controller
