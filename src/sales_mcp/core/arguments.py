"""Tool argument models and validation.

Each tool declares its arguments as a pydantic model derived from
``ToolArguments``: strict types (no string-to-number coercion, booleans are
never integers) and unknown keys rejected. ``validate_arguments`` checks raw
caller arguments before any handler runs and returns the model instance, so
handlers receive typed, in-bounds values.

Example:
    ```python
    class TopProductsArgs(ToolArguments):
        limit: int = Field(5, ge=1, le=50)

    validate_arguments(TopProductsArgs, {"limit": 2})  # TopProductsArgs(limit=2)
    validate_arguments(TopProductsArgs, {"limit": 0})  # raises ArgumentValidationError
    ```
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ArgumentValidationError

ArgsT = TypeVar("ArgsT", bound=BaseModel)


class ToolArguments(BaseModel):
    """Base class for tool argument models."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class NoArguments(ToolArguments):
    """Argument model for tools that take no parameters."""


def input_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON Schema advertised for ``model`` through ``tools/list``."""
    return model.model_json_schema()


def _violation(error: Dict[str, Any]) -> str:
    location = ".".join(str(loc) for loc in error["loc"]) or "arguments"
    return f"{location}: {error['msg']}"


def validate_arguments(
    model: Type[ArgsT], raw: Optional[Mapping[str, Any]], *, target: str = ""
) -> ArgsT:
    """Validate raw caller arguments against ``model``.

    Args:
        model: The tool's argument model.
        raw: Arguments as received from the caller. None is treated as empty.
        target: Tool name used in the error message.

    Returns:
        A ``model`` instance with defaults filled in for omitted parameters.

    Raises:
        ArgumentValidationError: Listing every violated constraint.
    """
    if raw is None:
        raw = {}
    if isinstance(raw, Mapping):
        # JSON null for a declared parameter counts as omitted
        raw = {k: v for k, v in raw.items() if not (v is None and k in model.model_fields)}
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise ArgumentValidationError([_violation(e) for e in exc.errors()], target) from exc


__all__ = [
    "ToolArguments",
    "NoArguments",
    "input_schema",
    "validate_arguments",
]
