"""
Input shape validation at the boundary of the stateful components.

Callers may hand the core either model instances or raw mappings (e.g.
decoded JSON). Everything is coerced into the pydantic model here so that
malformed input is rejected before it reaches the AlertStore, instead of a
genuine anomaly being silently dropped.
"""

from typing import Any, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from fieldwatch.exceptions import InputValidationError
from fieldwatch.models.alerts import Finding
from fieldwatch.models.readings import Reading

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_model(model_cls: Type[ModelT], data: Any) -> ModelT:
    """
    Coerce data into a model instance.

    Args:
        model_cls: Target pydantic model class.
        data: Model instance or mapping.

    Returns:
        The validated model instance.

    Raises:
        InputValidationError: If data does not match the model's shape.
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise InputValidationError(
            f"Invalid {model_cls.__name__}: {e}",
            field=_first_field(e),
            cause=e,
        ) from e


def validate_reading(data: Any) -> Reading:
    """Coerce data into a Reading."""
    return validate_model(Reading, data)


def validate_readings(items: Iterable[Any]) -> List[Reading]:
    """Coerce every item of a batch into a Reading."""
    return [validate_reading(item) for item in items]


def validate_finding(data: Any) -> Finding:
    """Coerce data into a Finding."""
    return validate_model(Finding, data)


def _first_field(error: ValidationError) -> Optional[str]:
    errors = error.errors()
    if not errors or not errors[0].get("loc"):
        return None
    return ".".join(str(part) for part in errors[0]["loc"])
