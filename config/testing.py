from .base import *  # noqa: F401,F403


DEBUG = False
TESTING = True

AUTO_INIT_DB = False
ANALYTICS_CACHE_SECONDS = 0
