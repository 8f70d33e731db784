"""Attribute registry - validation and coercion of device settings."""
from .registry import ATTRIBUTES_PATH, AttributeRegistry
from .schema import (
    TYPE_INT,
    TYPE_STRING,
    AttributeDefinition,
    AttributeKind,
    EnumValue,
    RegistryInfo,
    SupportedSystem,
)
from .values import AttributeValue, coerce_attributes, format_attribute_value

__all__ = [
    "ATTRIBUTES_PATH",
    "AttributeRegistry",
    "AttributeDefinition",
    "AttributeKind",
    "EnumValue",
    "RegistryInfo",
    "SupportedSystem",
    "TYPE_INT",
    "TYPE_STRING",
    "AttributeValue",
    "coerce_attributes",
    "format_attribute_value",
]
