"""
json_guard.py
=============
LLM trust boundary: parse raw model text, check it against a pydantic
shape, and trim anything suspicious before it reaches a caller.
"""

import json
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from copilot.core.errors import ParseError, SchemaViolationError

T = TypeVar("T", bound=BaseModel)

MAX_ARRAY_LENGTH = 100
POLLUTION_KEYS = ("__proto__", "constructor")


def parse_json(raw_json_text: str) -> Any:
    try:
        return json.loads(raw_json_text)
    except (TypeError, ValueError) as e:
        raise ParseError(f"JSON validation failed: {e}") from e


def describe_violation(exc) -> str:
    """
    Flatten pydantic errors into `field a.b.c: reason` messages. Works on
    anything with a pydantic-style `errors()`, including FastAPI's
    RequestValidationError.
    """
    messages = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "<root>"
        messages.append(f"field `{path}`: {error['msg']}")
    return "; ".join(messages)


def check_shape(value: Any, shape: Type[T]) -> T:
    try:
        return shape.model_validate(value)
    except ValidationError as e:
        raise SchemaViolationError(describe_violation(e)) from e


def validate(raw_json_text: str, shape: Type[T]) -> T:
    """
    Parse `raw_json_text` and validate it against `shape`.

    Raises:
        ParseError: the text is not JSON
        SchemaViolationError: the JSON does not match `shape`
    """
    return check_shape(parse_json(raw_json_text), shape)


def sanitize(output: Any) -> Any:
    """
    Shallow clean-up of a model-produced object: drops prototype-pollution
    keys and caps every list field at MAX_ARRAY_LENGTH items.
    Non-mappings are returned untouched.
    """
    if not isinstance(output, dict):
        return output

    safe_output = {}
    for key, value in output.items():
        if key in POLLUTION_KEYS:
            continue
        if isinstance(value, list) and len(value) > MAX_ARRAY_LENGTH:
            value = value[:MAX_ARRAY_LENGTH]
        safe_output[key] = value
    return safe_output
