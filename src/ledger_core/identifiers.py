"""Identifier and timestamp helpers shared by the writers."""

import secrets
from datetime import datetime, timezone

HEX_DIGITS = "0123456789abcdef"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def gen_id(length: int) -> str:
    """
    Generate a random lowercase hexadecimal string.

    Parameters
    ----------
    length : int
        Number of hex characters to produce (32 for a 16-byte identifier).

    Returns
    -------
    str
        Random hex string, independent of any previous call.
    """
    return "".join(secrets.choice(HEX_DIGITS) for _ in range(length))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as 'YYYY-MM-DD HH:MM:SS' in UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)
