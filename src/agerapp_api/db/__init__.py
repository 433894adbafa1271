"""
Database package for AgerApp API
"""
from .engine import engine, SessionLocal, get_db, init_db
from .base import Base
from .models import *  # noqa: F401,F403
from .models import __all__ as _model_names

__all__ = ["engine", "SessionLocal", "get_db", "init_db", "Base", *_model_names]
