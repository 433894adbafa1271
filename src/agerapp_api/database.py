"""
Convenience re-exports so callers can import models and sessions from one place
"""
from .db import *  # noqa: F401,F403
from .db import __all__  # noqa: F401
