"""
Purchase bundle entry point.

This module records one purchase bundle read from a JSON request: it opens
a transaction scope on the configured database, runs the bundle, and prints
the generated identifiers as JSON.
"""

import json
import logging
import os
import sys
from typing import Any

from ledger_core import ValidationError, Violation, execute_bundle
from ledger_infrastructure import RecordWriter, SqlAlchemyStore, create_tables, get_engine, get_env_flag, get_env_variable

logger = logging.getLogger(__name__)


def _read_request(path: str | None) -> Any:
    if path is None or path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def main(argv: list[str] | None = None) -> int:
    """
    Record a purchase bundle from a JSON request.

    The request is an object with ``user_purchase_information`` and an
    optional ``promotion_information``. It is read from the file named by
    the first argument, or from stdin when absent or ``-``.

    Environment Variables
    ---------------------
    DATABASE_URL : str
        SQLAlchemy connection URL (required).
    CREATE_TABLES : bool
        Create the bundle tables before writing (default: false).
    LOG_LEVEL : str
        Logging level (default: 'INFO').

    Returns
    -------
    int
        Process exit status: 0 on success, 1 when the request is invalid.
    """
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(), format="%(asctime)s - %(levelname)s - %(message)s"
    )
    argv = sys.argv[1:] if argv is None else argv
    request = _read_request(argv[0] if argv else None)

    engine = get_engine(get_env_variable("DATABASE_URL"))
    store = SqlAlchemyStore(engine)
    try:
        if not isinstance(request, dict):
            raise ValidationError(
                [Violation(field="request", code="wrong_type", message="Input should be a JSON object")]
            )
        if get_env_flag("CREATE_TABLES"):
            create_tables(engine)

        with store.begin() as scope:
            result = execute_bundle(
                RecordWriter(store),
                request.get("user_purchase_information"),
                request.get("promotion_information"),
                scope,
            )
    except ValidationError as e:
        for violation in e.violations:
            print(violation, file=sys.stderr)
        return 1
    finally:
        engine.dispose()

    print(json.dumps(result.model_dump(by_alias=True, exclude_none=True)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
