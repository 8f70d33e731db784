"""Schema definitions for the attribute registry.

Mirrors the ``RegistryEntries.Attributes`` entries of a Dell attribute
registry document.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class AttributeKind(str, Enum):
    """Attribute types understood by the validator."""
    STRING = "String"
    PASSWORD = "Password"
    ENUMERATION = "Enumeration"
    INTEGER = "Integer"


TEXT_KINDS = (AttributeKind.STRING, AttributeKind.PASSWORD, AttributeKind.ENUMERATION)

# Values returned by AttributeRegistry.classify
TYPE_INT = "int"
TYPE_STRING = "string"


@dataclass(frozen=True)
class EnumValue:
    """One permitted value of an Enumeration attribute."""
    display_name: str
    name: str


@dataclass(frozen=True)
class AttributeDefinition:
    """A single configurable device setting."""
    name: str
    type: str
    read_only: bool = False
    write_only: bool = False
    # String / Password
    min_length: int = 0
    max_length: int = 0
    # Integer
    lower_bound: int = 0
    upper_bound: int = 0
    # Enumeration
    allowed_values: tuple[EnumValue, ...] = ()
    # Descriptive fields, not used for validation
    id: str = ""
    display_name: str = ""
    default_value: Any = None
    help_text: str = ""
    hidden: bool = False
    menu_path: str = ""
    regex: str = ""
    display_order: int = 0

    @property
    def kind(self) -> Optional[AttributeKind]:
        """The known kind, or None for a type string we pass through as-is."""
        try:
            return AttributeKind(self.type)
        except ValueError:
            return None

    @property
    def allowed_display_names(self) -> list[str]:
        return [v.display_name for v in self.allowed_values]

    @classmethod
    def from_dict(cls, data: dict) -> "AttributeDefinition":
        values = tuple(
            EnumValue(
                display_name=v.get("ValueDisplayName", ""),
                name=v.get("ValueName", ""),
            )
            for v in data.get("Value") or []
        )
        return cls(
            name=data.get("AttributeName", ""),
            type=data.get("Type", ""),
            read_only=bool(data.get("Readonly", False)),
            write_only=bool(data.get("WriteOnly", False)),
            min_length=data.get("MinLength") or 0,
            max_length=data.get("MaxLength") or 0,
            lower_bound=data.get("LowerBound") or 0,
            upper_bound=data.get("UpperBound") or 0,
            allowed_values=values,
            id=data.get("Id", ""),
            display_name=data.get("DisplayName", ""),
            default_value=data.get("DefaultValue"),
            help_text=data.get("HelpText", ""),
            hidden=bool(data.get("Hidden", False)),
            menu_path=data.get("MenuPath", ""),
            regex=data.get("Regex", ""),
            display_order=data.get("DisplayOrder") or 0,
        )


@dataclass(frozen=True)
class SupportedSystem:
    """A system model the registry applies to."""
    product_name: str = ""
    firmware_version: str = ""
    system_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "SupportedSystem":
        return cls(
            product_name=data.get("ProductName", ""),
            firmware_version=data.get("FirmwareVersion", ""),
            system_id=data.get("SystemId", ""),
        )


@dataclass
class RegistryInfo:
    """Top-level metadata of a registry document."""
    odata_id: str = ""
    id: str = ""
    name: str = ""
    language: str = ""
    owning_entity: str = ""
    registry_prefix: str = ""
    registry_version: str = ""
    supported_systems: list[SupportedSystem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "RegistryInfo":
        return cls(
            odata_id=data.get("@odata.id", ""),
            id=data.get("Id", ""),
            name=data.get("Name", ""),
            language=data.get("Language", ""),
            owning_entity=data.get("OwningEntity", ""),
            registry_prefix=data.get("RegistryPrefix", ""),
            registry_version=data.get("RegistryVersion", ""),
            supported_systems=[
                SupportedSystem.from_dict(s)
                for s in data.get("SupportedSystems") or []
            ],
        )
