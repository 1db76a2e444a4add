"""Convert Pydantic validation errors to project ToolError contract."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from models.errors import ToolError, create_validation_error


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    return ".".join(parts)


def _clean_pydantic_message(message: str) -> str:
    if message.startswith("Value error, "):
        return message[len("Value error, ") :]
    return message


def map_pydantic_validation_error(error: ValidationError) -> ToolError:
    """Map Pydantic ValidationError to a single VALIDATION_ERROR."""
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")

    first = issues[0]
    field = _loc_to_field(first.get("loc", ()))
    message = _clean_pydantic_message(first.get("msg", "Invalid input"))

    if field:
        return create_validation_error(f"Invalid {field}: {message}")
    return create_validation_error(message)


def collect_field_errors(
    error: ValidationError, model_cls: Optional[Type[BaseModel]] = None
) -> Dict[str, str]:
    """
    Collect one message per field from a ValidationError.

    Keys are wire names: when ``model_cls`` is given, field names are
    translated to their aliases. The first message reported for a field wins.

    Returns:
        Mapping of field name to message, in error order
    """
    aliases: Dict[str, str] = {}
    if model_cls is not None:
        for name, info in model_cls.model_fields.items():
            if info.alias:
                aliases[name] = info.alias

    field_errors: Dict[str, str] = {}
    for issue in error.errors():
        field = _loc_to_field(issue.get("loc", ()))
        head, _, rest = field.partition(".")
        head = aliases.get(head, head)
        key = f"{head}.{rest}" if rest else head
        if key not in field_errors:
            field_errors[key] = _clean_pydantic_message(issue.get("msg", "Invalid value"))
    return field_errors
