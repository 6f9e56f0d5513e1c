"""
Package Collection Generator — Collection wire format.

JSON with lexicographically sorted keys and 2-space indentation, so two
runs over the same inputs produce byte-identical files (generatedAt
aside). Absent optional fields are omitted, never written as null.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import pydantic
from pydantic_core import PydanticSerializationError

from collectiongen.errors import (
    InvalidCollectionError,
    SerializationFailureError,
    UnsupportedFormatVersionError,
)
from collectiongen.models.collection import Collection, FormatVersion
from collectiongen.utils.logging import logger
from collectiongen.utils.validate import describe_validation_errors


def collection_to_dict(collection: Collection) -> dict[str, Any]:
    return collection.model_dump(mode="json", by_alias=True)


def serialize_collection(collection: Collection) -> str:
    return json.dumps(
        collection_to_dict(collection),
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
    ) + "\n"


def collection_from_dict(data: Any) -> Collection:
    """
    Validate a decoded collection payload.

    The format version is checked first: a document written for a schema
    this build does not know is rejected outright, even if it happens to
    look compatible.
    """
    if not isinstance(data, dict):
        raise InvalidCollectionError([f"<root>: expected an object, got {type(data).__name__}"])

    found = data.get("formatVersion")
    if found not in FormatVersion.supported():
        raise UnsupportedFormatVersionError(found, FormatVersion.supported())

    try:
        return Collection.model_validate(data)
    except pydantic.ValidationError as exc:
        raise InvalidCollectionError(describe_validation_errors(exc)) from exc


def deserialize_collection(text: str | bytes) -> Collection:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidCollectionError([f"<root>: invalid JSON ({exc.msg} at line {exc.lineno})"]) from exc
    except UnicodeDecodeError as exc:
        raise InvalidCollectionError([f"<root>: not valid UTF-8 (byte {exc.start})"]) from exc
    return collection_from_dict(data)


def write_collection(collection: Collection, path: str | Path) -> Path:
    """Write the collection atomically: a partial file is never left behind."""
    target = Path(path)
    try:
        payload = serialize_collection(collection).encode("utf-8")
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise SerializationFailureError(str(target), str(exc)) from exc

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SerializationFailureError(str(target), exc.strerror or str(exc)) from exc

    logger.info("  Wrote %d bytes → %s", len(payload), target)
    return target


def read_collection(path: str | Path) -> Collection:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidCollectionError([f"<file>: cannot read {path} ({exc.strerror or exc})"]) from exc
    except UnicodeDecodeError as exc:
        raise InvalidCollectionError([f"<file>: {path} is not valid UTF-8 (byte {exc.start})"]) from exc
    return deserialize_collection(text)
