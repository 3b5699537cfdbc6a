"""
Input validation module.

This module runs the Pydantic shapes from :mod:`ledger_core.model` and turns
their failures into a single ``ValidationError`` listing every violation,
so callers see all offending fields at once instead of the first one.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

ShapeT = TypeVar("ShapeT", bound=BaseModel)

# Pydantic error types mapped onto stable violation codes
_VIOLATION_CODES = {
    "missing": "missing",
    "string_too_short": "wrong_length",
    "string_too_long": "wrong_length",
    "string_pattern_mismatch": "not_hex",
    "greater_than_equal": "below_minimum",
    "enum": "invalid_choice",
    "too_short": "empty",
    "string_type": "wrong_type",
    "int_type": "wrong_type",
    "int_parsing": "wrong_type",
    "int_from_float": "wrong_type",
    "float_type": "wrong_type",
    "float_parsing": "wrong_type",
    "finite_number": "wrong_type",
    "list_type": "wrong_type",
    "model_type": "wrong_type",
    "model_attributes_type": "wrong_type",
    "dict_type": "wrong_type",
}


class Violation(BaseModel):
    """
    A single field-level validation failure.

    Attributes
    ----------
    field : str
        Dotted path of the offending field (e.g. ``user_purchase_information.payer_id``).
    code : str
        Stable violation code such as ``wrong_length`` or ``below_minimum``.
    message : str
        Human-readable description.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message} ({self.code})"


class ValidationError(ValueError):
    """Raised before any write when input does not match its shape."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        super().__init__("; ".join(str(violation) for violation in violations))

    @property
    def fields(self) -> list[str]:
        """Offending field paths, in reporting order."""
        return [violation.field for violation in self.violations]


def _to_violation(error: dict) -> Violation:
    field = ".".join(str(part) for part in error["loc"])
    return Violation(field=field, code=_VIOLATION_CODES.get(error["type"], error["type"]), message=error["msg"])


def validate(shape: type[ShapeT], data: Any) -> ShapeT:
    """
    Validate data against a Pydantic shape.

    Parameters
    ----------
    shape : type[BaseModel]
        Model class describing the expected input.
    data : Any
        Mapping (or an instance of ``shape``) to validate.

    Returns
    -------
    BaseModel
        Normalised instance of ``shape``.

    Raises
    ------
    ValidationError
        If any field is invalid. Carries every violation found.
    """
    try:
        return shape.model_validate(data)
    except PydanticValidationError as e:
        violations = [_to_violation(error) for error in e.errors()]
        logger.warning(f"{shape.__name__} rejected with {len(violations)} violation(s)")
        for violation in violations:
            logger.debug(f"  - {violation}")
        raise ValidationError(violations) from e
