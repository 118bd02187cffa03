"""Schema validation for recovered model output."""
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


class SchemaValidationError(Exception):
    """Raised when a recovered value does not match its output schema."""

    def __init__(self, field: str, expectation: str):
        self.field = field
        self.expectation = expectation
        super().__init__(f"{field}: {expectation}")


def _field_path(loc: tuple) -> str:
    """Render a pydantic error location as a dotted path, e.g. keyMoments.2.index."""
    return ".".join(str(part) for part in loc) or "<root>"


def validate(value: Any, schema: Type[T]) -> T:
    """Check a recovered value against an output schema.

    Every required field must be present with the right element type and a
    list length inside the schema's bounds. Values are not coerced.

    Args:
        value: Parsed JSON value
        schema: Output schema model class

    Returns:
        The value as an instance of `schema`

    Raises:
        SchemaValidationError: On the first violation, naming the field
    """
    if not isinstance(value, dict):
        raise SchemaValidationError("<root>", f"expected a JSON object, got {type(value).__name__}")

    try:
        return schema.model_validate(value)
    except ValidationError as e:
        first = e.errors()[0]
        raise SchemaValidationError(_field_path(first["loc"]), first["msg"]) from e


def conforms(value: Any, schema: Type[BaseModel]) -> bool:
    """True if `value` (a dict or schema instance) passes `validate`."""
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)
    try:
        validate(value, schema)
    except SchemaValidationError:
        return False
    return True
