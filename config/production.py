from .base import *  # noqa: F401,F403
from .base import _flag


DEBUG = False
LOG_JSON = _flag("LOG_JSON", "1")

AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
