"""
Utility functions for infrastructure operations.

This module provides environment lookups shared by the service entry
point and the database layer.
"""

import logging
import os

logger = logging.getLogger(__name__)


class MissingEnvironmentVariableError(KeyError):
    """Raised when a required environment variable is not set."""


def get_env_variable(name: str) -> str:
    """
    Retrieve the value of a required environment variable.

    Parameters
    ----------
    name : str
        Name of the environment variable.

    Returns
    -------
    str
        The variable's value.

    Raises
    ------
    MissingEnvironmentVariableError
        If the variable is not set.
    """
    value = os.getenv(name)
    if value is None:
        logger.error(f"Environment variable {name} not set")
        raise MissingEnvironmentVariableError(f"Environment variable {name} not set")
    return value


def get_env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
