"""Attribute registry: typed catalog of device-configurable settings.

The registry is decoded once from the document the device publishes and is
read-only afterwards, so one instance can be shared by concurrent tasks.
"""
import json
import logging
from typing import Any, Iterator, Optional

from ..exceptions import (
    AttributeNotFound,
    AttributeValidationError,
    InvalidEnumValue,
    MalformedDocument,
    NodeNotFound,
    OutOfBounds,
    ReadOnlyAttribute,
    UnsupportedAttributeType,
    UnsupportedValueKind,
)
from ..extractor import RawResource, get_node
from .schema import (
    TEXT_KINDS,
    TYPE_INT,
    TYPE_STRING,
    AttributeDefinition,
    AttributeKind,
    RegistryInfo,
)

logger = logging.getLogger(__name__)

ATTRIBUTES_PATH = "RegistryEntries.Attributes"


class AttributeRegistry(RawResource):
    """Ordered collection of AttributeDefinition, addressable by name."""

    def __init__(
        self,
        attributes: list[AttributeDefinition],
        info: Optional[RegistryInfo] = None,
        raw_data: Optional[bytes] = None,
    ):
        super().__init__(raw_data=raw_data)
        self._attributes = tuple(attributes)
        self.info = info or RegistryInfo()

    @classmethod
    def from_json(cls, raw: bytes) -> "AttributeRegistry":
        """Decode a registry document.

        Raises:
            MalformedDocument: If the document or its attribute list is not valid JSON
        """
        try:
            document = json.loads(raw)
        except ValueError as e:
            raise MalformedDocument(f"registry document is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise MalformedDocument("registry document is not a JSON object")

        try:
            entries = json.loads(get_node(raw, ATTRIBUTES_PATH))
        except NodeNotFound:
            logger.warning(f"Registry {document.get('Id', '?')} has no {ATTRIBUTES_PATH}")
            entries = []
        if not isinstance(entries, list):
            raise MalformedDocument(f"{ATTRIBUTES_PATH} is not a list")

        attributes = [AttributeDefinition.from_dict(e) for e in entries]
        registry = cls(attributes, RegistryInfo.from_dict(document), raw_data=raw)
        logger.debug(f"Decoded registry {registry.info.id} with {len(attributes)} attributes")
        return registry

    def __len__(self) -> int:
        return len(self._attributes)

    def __iter__(self) -> Iterator[AttributeDefinition]:
        return iter(self._attributes)

    def __contains__(self, name: object) -> bool:
        return any(a.name == name for a in self._attributes)

    @property
    def attributes(self) -> tuple[AttributeDefinition, ...]:
        return self._attributes

    def get(self, name: str) -> AttributeDefinition:
        """Return the first definition with this name.

        Raises:
            AttributeNotFound: If no definition has this name
        """
        for attr in self._attributes:
            if attr.name == name:
                return attr
        raise AttributeNotFound(name)

    def names_with_id_prefix(self, prefix: str) -> list[str]:
        """Names of attributes whose Id starts with ``prefix``, e.g. "iDRAC"."""
        return [a.name for a in self._attributes if a.id.startswith(prefix)]

    def classify(self, name: str) -> str:
        """Return "int" for Integer attributes, "string" for text ones.

        Raises:
            AttributeNotFound: If no definition has this name
            UnsupportedAttributeType: For any other attribute type
        """
        attr = self.get(name)
        kind = attr.kind
        if kind is AttributeKind.INTEGER:
            return TYPE_INT
        if kind in TEXT_KINDS:
            return TYPE_STRING
        raise UnsupportedAttributeType(name, attr.type)

    def validate(self, name: str, value: Any) -> None:
        """Check that ``value`` may be written to attribute ``name``.

        Only ``str`` and ``int`` values are accepted, and the value kind must
        match the attribute type exactly: ``0.0`` or ``True`` are rejected
        even for Integer attributes.

        Raises:
            AttributeNotFound, ReadOnlyAttribute, UnsupportedValueKind,
            OutOfBounds, InvalidEnumValue
        """
        attr = self.get(name)

        if attr.read_only:
            raise ReadOnlyAttribute(name)

        if isinstance(value, str):
            if attr.kind not in TEXT_KINDS:
                raise UnsupportedValueKind(
                    name,
                    f"value passed is string but attribute {name} is of type {attr.type}",
                )
            if attr.kind is AttributeKind.ENUMERATION:
                if value not in attr.allowed_display_names:
                    raise InvalidEnumValue(name, value, attr.allowed_display_names)
            else:
                # Device lengths count UTF-8 bytes
                length = len(value.encode("utf-8"))
                if not attr.min_length <= length <= attr.max_length:
                    raise OutOfBounds(
                        name,
                        f"value to check is not compliant. Attribute length {length}, "
                        f"min length {attr.min_length}, max length {attr.max_length}",
                    )

        elif isinstance(value, int) and not isinstance(value, bool):
            if attr.kind is not AttributeKind.INTEGER:
                raise UnsupportedValueKind(
                    name,
                    f"value passed is integer but attribute {name} is of type {attr.type}",
                )
            if not attr.lower_bound <= value <= attr.upper_bound:
                raise OutOfBounds(
                    name,
                    f"value to check is not compliant. Value is {value}, "
                    f"lower bound is {attr.lower_bound}, upper bound is {attr.upper_bound}",
                )

        else:
            raise UnsupportedValueKind(
                name,
                f"only integers or strings are allowed for attributes, "
                f"got {type(value).__name__}",
            )

    def validate_all(self, changes: dict[str, Any]) -> None:
        """Validate every entry of a change set, reporting all failures at once.

        Raises:
            AttributeValidationError: Listing each failing attribute
        """
        errors: dict[str, Exception] = {}
        for name, value in changes.items():
            try:
                self.validate(name, value)
            except (AttributeNotFound, ReadOnlyAttribute, UnsupportedValueKind,
                    OutOfBounds, InvalidEnumValue) as e:
                errors[name] = e

        if errors:
            raise AttributeValidationError(errors)
