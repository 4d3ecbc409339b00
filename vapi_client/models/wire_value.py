"""
Generic JSON value used where the payload shape is not known statically.

Tool arguments and function-call parameters arrive either as an embedded JSON
string or as a nested object depending on the message family. Models store them
as a ``WireValue`` and callers inspect the runtime shape with the helpers below.
"""

import json
from typing import Any, Dict

from pydantic import JsonValue

from vapi_client.errors import EncodeError

# str | int | float | bool | None | List[WireValue] | Dict[str, WireValue]
WireValue = JsonValue


def is_object(value: WireValue) -> bool:
    return isinstance(value, dict)


def is_array(value: WireValue) -> bool:
    return isinstance(value, list)


def is_number(value: WireValue) -> bool:
    # bool is a subclass of int but is its own JSON type
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def expand_embedded_json(value: WireValue) -> WireValue:
    """
    Parse ``value`` again if it is a string holding JSON.

    Strings that are not valid JSON are returned unchanged, as is every
    non-string value.
    """
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def to_wire_value(obj: Any) -> WireValue:
    """
    Convert a Python object into a JSON-compatible wire value.

    Tuples become lists and mapping keys must be strings.

    Raises:
        EncodeError: If ``obj`` holds a value with no JSON representation
    """
    if obj is None or isinstance(obj, (str, bool, int)):
        return obj
    if isinstance(obj, float):
        if obj != obj or obj in (float("inf"), float("-inf")):
            raise EncodeError(f"Cannot encode non-finite number {obj!r}")
        return obj
    if isinstance(obj, (list, tuple)):
        return [to_wire_value(item) for item in obj]
    if isinstance(obj, dict):
        result: Dict[str, WireValue] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise EncodeError(f"Object keys must be strings, got {type(key).__name__}")
            result[key] = to_wire_value(item)
        return result
    raise EncodeError(f"Unsupported value of type {type(obj).__name__}")
