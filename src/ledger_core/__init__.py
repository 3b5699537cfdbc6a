"""
Core business logic layer for purchase bundles.

This package provides core domain logic including:
- Pydantic models for purchase inputs and the correlation result
- Aggregated input validation
- Random identifier generation
- Orchestration of the writes making up one bundle
"""

from .data_validation import ValidationError, Violation, validate
from .identifiers import gen_id
from .model import PaymentMethod, PaymentStatus, ResultCorrelation
from .orchestrate import execute_bundle
from .protocol import RecordWriterProtocol, StoreProtocol

__all__ = [
    "ValidationError",
    "Violation",
    "validate",
    "gen_id",
    "PaymentMethod",
    "PaymentStatus",
    "ResultCorrelation",
    "execute_bundle",
    "RecordWriterProtocol",
    "StoreProtocol",
]
