"""Dell OEM payload types.

Each type here is only a destination for data located with the extractor;
none of them tries to model the full vendor schema.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import MalformedDocument, NodeNotFound
from .extractor import RawResource, extract_and_decode, get_member


@dataclass
class SettingsObject:
    """``@Redfish.Settings.SettingsObject`` of a resource with pending settings."""
    odata_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "SettingsObject":
        return cls(odata_id=data["@odata.id"])


@dataclass
class DellOemJob:
    """``Oem.Dell`` block of a Redfish Task created for a Dell job."""
    job_state: str = ""
    job_type: str = ""
    message: str = ""
    message_id: str = ""
    name: str = ""
    completion_time: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "DellOemJob":
        return cls(
            job_state=data.get("JobState") or "",
            job_type=data.get("JobType") or "",
            message=data.get("Message") or "",
            message_id=data.get("MessageId") or "",
            name=data.get("Name") or "",
            completion_time=data.get("CompletionTime") or "",
        )


@dataclass(eq=False)
class DellAttributes(RawResource):
    """A DellAttributes resource (iDRAC, System or LifecycleController)."""
    odata_id: str = ""
    id: str = ""
    name: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    settings: Optional[SettingsObject] = None

    @classmethod
    def from_json(cls, raw: bytes) -> "DellAttributes":
        """Decode a DellAttributes resource, keeping its source bytes.

        Raises:
            MalformedDocument: If the body is not a JSON object
        """
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise MalformedDocument(f"attributes resource is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedDocument("attributes resource is not a JSON object")

        return cls(
            raw_data=raw,
            odata_id=data.get("@odata.id", ""),
            id=data.get("Id", ""),
            name=data.get("Name", ""),
            attributes=dict(data.get("Attributes") or {}),
            settings=_settings_object(raw),
        )


def _odata_ids(data: list) -> list[str]:
    return [link["@odata.id"] for link in data]


def dell_attribute_links(manager_raw: bytes) -> list[str]:
    """URIs of the DellAttributes resources linked from a Manager resource."""
    links = extract_and_decode(
        manager_raw, "Links.Oem.Dell.DellAttributes", _odata_ids
    )
    return links or []


def _settings_object(raw: bytes) -> Optional[SettingsObject]:
    try:
        settings = get_member(raw, "@Redfish.Settings")
    except NodeNotFound:
        return None
    return extract_and_decode(settings, "SettingsObject", SettingsObject.from_dict)
