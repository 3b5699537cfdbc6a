"""Infrastructure layer for recording purchase bundles.

This package provides core infrastructure components including:
- The record writer issuing the bundle's parameterised inserts
- Database models and a SQLAlchemy store with transaction scopes
- Environment helpers
"""

from .database import SqlAlchemyStore, UnknownScopeError, create_tables, get_engine
from .utils import MissingEnvironmentVariableError, get_env_flag, get_env_variable
from .writer import RecordWriter

__all__ = [
    "RecordWriter",
    "SqlAlchemyStore",
    "UnknownScopeError",
    "create_tables",
    "get_engine",
    "MissingEnvironmentVariableError",
    "get_env_flag",
    "get_env_variable",
]
