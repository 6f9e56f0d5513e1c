"""
Package Collection Generator — Diagnostic text rendering.

Produces a deterministic, indented dump of any collection or input
record, driven by the model's field list. Absent optionals print as
"nil". The output is for logs only and is never parsed back.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, RootModel

INDENT = "    "
NIL = "nil"


def _field_label(name: str, field: Any) -> str:
    return field.serialization_alias or field.alias or name


def _render_scalar(value: Any) -> str:
    if value is None:
        return NIL
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _is_record(value: Any) -> bool:
    return isinstance(value, BaseModel) and not isinstance(value, RootModel)


def render(value: Any, level: int = 0) -> str:
    """Render a record, list or scalar at the given nesting level."""
    pad = INDENT * level

    if _is_record(value):
        lines = [f"{type(value).__name__} {{"]
        fields = list(type(value).model_fields.items())
        for i, (name, field) in enumerate(fields):
            label = _field_label(name, field)
            sep = "," if i < len(fields) - 1 else ""
            lines.append(f"{pad}{INDENT}{label}={render(getattr(value, name), level + 1)}{sep}")
        lines.append(f"{pad}}}")
        return "\n".join(lines)

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if not any(_is_record(item) for item in value):
            return "[" + ", ".join(_render_scalar(item) for item in value) + "]"
        inner = ",\n".join(
            f"{pad}{INDENT}{render(item, level + 1)}" for item in value
        )
        return f"[\n{inner}\n{pad}]"

    return _render_scalar(value)
