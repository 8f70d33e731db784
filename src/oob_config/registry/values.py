"""Conversions between string-only front-end values and typed attribute values."""
import re
from typing import Any, Union

from ..exceptions import NotAnInteger
from .registry import AttributeRegistry
from .schema import TYPE_INT

AttributeValue = Union[int, str]

# Plain base-10 integers only; int() alone would also accept "1_000" or " 7 "
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def coerce_attributes(
    raw_values: dict[str, str],
    registry: AttributeRegistry,
) -> dict[str, AttributeValue]:
    """Convert textual values to the type each attribute requires.

    Integer attributes are parsed as base-10 integers, everything else is
    passed through unchanged. Bounds and enumerations are checked later by
    AttributeRegistry.validate_all.

    Raises:
        AttributeNotFound, UnsupportedAttributeType: From classify
        NotAnInteger: If an Integer attribute's text does not parse
    """
    coerced: dict[str, AttributeValue] = {}
    for name, text in raw_values.items():
        if registry.classify(name) == TYPE_INT:
            if not _DECIMAL.fullmatch(text):
                raise NotAnInteger(name, text)
            coerced[name] = int(text)
        else:
            coerced[name] = text
    return coerced


def format_attribute_value(value: Any) -> str:
    """Render a value read from the device the way a front-end would write it.

    JSON numbers come back as floats for integer attributes, so 5.0 becomes
    "5". Unset values (e.g. passwords) become "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return f"{value:.0f}"
    return str(value)
