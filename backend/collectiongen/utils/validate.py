"""
Package Collection Generator — Input descriptor loading and validation.

Delegates to the pydantic GeneratorInput model for strict validation and
turns its errors into a MalformedInputError naming each offending field.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pydantic

from collectiongen.errors import MalformedInputError
from collectiongen.models.input import GeneratorInput


def describe_validation_errors(exc: pydantic.ValidationError) -> list[str]:
    """Flatten pydantic errors into "field.path: message" strings."""
    errors: list[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        errors.append(f"{location}: {err['msg']}")
    return errors


def validate_input_payload(data: Any) -> GeneratorInput:
    """
    Validate a decoded input payload.
    Returns the typed GeneratorInput.
    Raises MalformedInputError on failure.
    """
    if not isinstance(data, dict):
        raise MalformedInputError([f"<root>: expected an object, got {type(data).__name__}"])
    try:
        return GeneratorInput.model_validate(data)
    except pydantic.ValidationError as exc:
        raise MalformedInputError(describe_validation_errors(exc)) from exc


def load_input(text: str | bytes) -> GeneratorInput:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInputError([f"<root>: invalid JSON ({exc.msg} at line {exc.lineno})"]) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInputError([f"<root>: not valid UTF-8 (byte {exc.start})"]) from exc
    return validate_input_payload(data)


def load_input_file(path: str | Path) -> GeneratorInput:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedInputError([f"<file>: cannot read {path} ({exc.strerror or exc})"]) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInputError([f"<file>: {path} is not valid UTF-8 (byte {exc.start})"]) from exc
    return load_input(text)
