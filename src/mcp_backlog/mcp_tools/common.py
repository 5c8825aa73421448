"""Pure helpers and constants shared across MCP tool modules.

This module has NO dependency on ``mcp_server`` module globals, so it can
be imported freely without triggering circular-import issues.

Argument policy: a missing required argument raises ``ValidationError``
before any upstream call.  Optional numeric and enum arguments that are out
of range or of the wrong type silently fall back to their default.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, cast

from mcp.types import TextContent

from mcp_backlog.errors import ValidationError

if TYPE_CHECKING:
    from mcp_backlog.client import BacklogClient

ToolHandler = Callable[["BacklogClient", dict[str, Any]], Awaitable[list[TextContent]]]

_T = TypeVar("_T")

# Shared paging policy for list tools.
MIN_COUNT = 1
MAX_COUNT = 100
DEFAULT_COUNT = 20
DEFAULT_OFFSET = 0
DEFAULT_ORDER = "desc"
ORDERS = ("asc", "desc")


def _render(heading: str, payload: object) -> list[TextContent]:
    """Uniform tool result: a markdown heading followed by pretty JSON."""
    body = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    return [TextContent(type="text", text=f"# {heading}\n\n{body}")]


def _parse_args(arguments: dict[str, Any], cls: type[_T]) -> _T:
    """Cast MCP arguments to the tool's TypedDict for static analysis.

    No runtime validation happens here: JSON Schema validation is off for
    ``call_tool``, so every value is still checked by the helpers below.
    """
    return cast(_T, arguments)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_int(value: Any) -> int | None:
    """Return *value* as an int when it is integral (``50`` or ``50.0``), else ``None``."""
    if _is_int(value):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _is_digits(value: str) -> bool:
    return value.isascii() and value.isdigit()


def _require_str(arguments: Mapping[str, Any], name: str) -> str:
    """Return a required id-or-key style argument as a non-empty string.

    Numeric ids are accepted and stringified.
    """
    value = arguments.get(name)
    if _is_int(value):
        return str(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        msg = f"{name} is required"
        raise ValidationError(msg)
    if not isinstance(value, str):
        msg = f"{name} must be a string"
        raise ValidationError(msg)
    return value.strip()


def _require_text(arguments: Mapping[str, Any], name: str) -> str:
    """Like :func:`_require_str` but keeps the value verbatim; only ``""`` counts as missing."""
    value = arguments.get(name)
    if value is None or value == "":
        msg = f"{name} is required"
        raise ValidationError(msg)
    if not isinstance(value, str):
        msg = f"{name} must be a string"
        raise ValidationError(msg)
    return value


def _require_id(arguments: Mapping[str, Any], name: str) -> int:
    """Return a required numeric id; digit strings are accepted."""
    value = arguments.get(name)
    if value is None or value == "":
        msg = f"{name} is required"
        raise ValidationError(msg)
    number = _as_int(value)
    if number is not None and number >= 0:
        return number
    if isinstance(value, str) and _is_digits(value.strip()):
        return int(value.strip())
    msg = f"{name} must be a non-negative integer"
    raise ValidationError(msg)


def _optional_str(arguments: Mapping[str, Any], name: str) -> str | None:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"{name} must be a string"
        raise ValidationError(msg)
    return value


def _optional_bool(arguments: Mapping[str, Any], name: str) -> bool | None:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, bool):
        msg = f"{name} must be a boolean"
        raise ValidationError(msg)
    return value


def _int_or_default(value: Any, default: int, *, min_val: int | None = None, max_val: int | None = None) -> int:
    """Return *value* when it is integral and inside ``[min_val, max_val]``, else *default*."""
    number = _as_int(value)
    if number is None:
        return default
    if min_val is not None and number < min_val:
        return default
    if max_val is not None and number > max_val:
        return default
    return number


def _optional_int(value: Any, *, min_val: int = 0) -> int | None:
    """Return *value* when it is integral and ``>= min_val``, else ``None``."""
    number = _as_int(value)
    if number is not None and number >= min_val:
        return number
    return None


def _choice_or_default(value: Any, choices: tuple[_T, ...], default: _T) -> _T:
    return value if value in choices else default


def _count(arguments: Mapping[str, Any]) -> int:
    return _int_or_default(arguments.get("count"), DEFAULT_COUNT, min_val=MIN_COUNT, max_val=MAX_COUNT)


def _offset(arguments: Mapping[str, Any]) -> int:
    return _int_or_default(arguments.get("offset"), DEFAULT_OFFSET, min_val=0)


def _order(arguments: Mapping[str, Any]) -> Any:
    return _choice_or_default(arguments.get("order"), ORDERS, DEFAULT_ORDER)


def _id_list(arguments: Mapping[str, Any], name: str) -> tuple[int, ...]:
    """Return an array-of-ids filter as a tuple; a bare integer counts as one id."""
    value = arguments.get(name)
    if value is None:
        return ()
    single = _as_int(value)
    if single is not None:
        return (single,)
    if not isinstance(value, list):
        msg = f"{name} must be an array of integers"
        raise ValidationError(msg)
    ids: list[int] = []
    for item in value:
        number = _as_int(item)
        if number is not None:
            ids.append(number)
        elif isinstance(item, str) and _is_digits(item.strip()):
            ids.append(int(item.strip()))
        else:
            msg = f"{name} must be an array of integers"
            raise ValidationError(msg)
    return tuple(ids)


# JSON Schema fragments reused across tool definitions.
COUNT_SCHEMA: dict[str, Any] = {
    "type": "integer",
    "minimum": MIN_COUNT,
    "maximum": MAX_COUNT,
    "default": DEFAULT_COUNT,
    "description": f"Number of items to return ({MIN_COUNT}-{MAX_COUNT}, default {DEFAULT_COUNT})",
}
OFFSET_SCHEMA: dict[str, Any] = {
    "type": "integer",
    "minimum": 0,
    "default": DEFAULT_OFFSET,
    "description": "Skip first N items",
}
ORDER_SCHEMA: dict[str, Any] = {
    "type": "string",
    "enum": list(ORDERS),
    "default": DEFAULT_ORDER,
    "description": "Sort order",
}
ID_LIST_SCHEMA: dict[str, Any] = {"type": "array", "items": {"type": "integer"}}
