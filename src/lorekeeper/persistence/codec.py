# ABOUTME: Sequence codec storing an ordered list of strings as a JSON text column
# ABOUTME: Built on Pydantic's TypeAdapter so decoding validates the payload shape

from __future__ import annotations

from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from lorekeeper.persistence.results import SerializationError

_ELEMENTS = TypeAdapter(list[str])


def serialize_elements(elements: Sequence[str]) -> str:
    """Encode an ordered string sequence as an indented JSON array."""
    if isinstance(elements, (str, bytes)):
        raise SerializationError("Dialogue elements must be a sequence of strings, not a single string")
    try:
        validated = _ELEMENTS.validate_python(list(elements), strict=True)
    except ValidationError as e:
        raise SerializationError(f"Could not serialize dialogue elements: {e}") from e
    return _ELEMENTS.dump_json(validated, indent=2).decode("utf-8")


def deserialize_elements(payload: str | bytes | None) -> list[str]:
    """Decode a stored Elements payload back into its ordered list of strings."""
    if payload is None:
        raise SerializationError("Elements payload is NULL")
    try:
        return _ELEMENTS.validate_json(payload)
    except ValidationError as e:
        raise SerializationError(f"Elements payload is not a JSON array of strings: {e}") from e
