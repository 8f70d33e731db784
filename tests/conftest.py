"""Shared fixtures: an in-memory Redfish transport and sample documents."""
import json
from typing import Any, Optional, Union

import pytest

from oob_config.transport.base import EndpointConfig, Transport


Reply = Union[bytes, dict, Exception, tuple]


def _encode(body: Union[bytes, dict]) -> bytes:
    if isinstance(body, bytes):
        return body
    return json.dumps(body).encode("utf-8")


class FakeTransport(Transport):
    """Transport answering from canned responses.

    ``routes`` maps a URI to a reply or a list of replies consumed in order
    (the last one repeats). A reply is a body (dict or bytes, status 200),
    a ``(body, status)`` tuple, or an exception to raise.
    """

    device_id = "fake-idrac"

    def __init__(self, routes: Optional[dict[str, Any]] = None):
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, str]] = []
        self.patches: list[tuple[str, Any]] = []
        self.patch_reply: tuple[bytes, int, Optional[str]] = (b"{}", 200, None)
        self.delete_status = 200

    def _next(self, uri: str) -> Reply:
        if uri not in self.routes:
            return (b'{"error": "not found"}', 404)
        reply = self.routes[uri]
        if isinstance(reply, list):
            return reply.pop(0) if len(reply) > 1 else reply[0]
        return reply

    async def get(self, uri: str) -> tuple[bytes, int]:
        self.calls.append(("GET", uri))
        reply = self._next(uri)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, tuple):
            return _encode(reply[0]), reply[1]
        return _encode(reply), 200

    async def patch(self, uri: str, payload: Any) -> tuple[bytes, int, Optional[str]]:
        self.calls.append(("PATCH", uri))
        self.patches.append((uri, payload))
        if isinstance(self.patch_reply, Exception):
            raise self.patch_reply
        return self.patch_reply

    async def delete(self, uri: str) -> int:
        self.calls.append(("DELETE", uri))
        return self.delete_status

    def count(self, method: str, uri: str) -> int:
        return self.calls.count((method, uri))


SAMPLE_REGISTRY = {
    "@odata.id": "/redfish/v1/Registries/ManagerAttributeRegistry/ManagerAttributeRegistry.v1_0_0.json",
    "@odata.type": "#DellAttributeRegistry.v1_1_0.DellAttributeRegistry",
    "Id": "ManagerAttributeRegistry.v1_0_0",
    "Language": "en",
    "Name": "ManagerAttributeRegistry",
    "OwningEntity": "Dell",
    "RegistryVersion": "v1_0_0",
    "SupportedSystems": [
        {"ProductName": "PowerEdge R740", "FirmwareVersion": "6.10.30.00", "SystemId": "0x0715"}
    ],
    "RegistryEntries": {
        "Attributes": [
            {
                "AttributeName": "Users.2.UserName",
                "Id": "iDRAC.Embedded.1#Users.2#UserName",
                "DisplayName": "User Name",
                "Type": "String",
                "MinLength": 1,
                "MaxLength": 16,
                "Readonly": False,
                "WriteOnly": False,
            },
            {
                "AttributeName": "Users.2.Password",
                "Id": "iDRAC.Embedded.1#Users.2#Password",
                "Type": "Password",
                "MinLength": 4,
                "MaxLength": 20,
                "Readonly": False,
                "WriteOnly": True,
            },
            {
                "AttributeName": "Time.1.Timezone",
                "Id": "iDRAC.Embedded.1#Time.1#Timezone",
                "Type": "Enumeration",
                "Readonly": False,
                "WriteOnly": False,
                "Value": [
                    {"ValueDisplayName": "UTC", "ValueName": "UTC"},
                    {"ValueDisplayName": "Europe/Madrid", "ValueName": "Europe/Madrid"},
                    {"ValueDisplayName": "US/Central", "ValueName": "US/Central"},
                ],
            },
            {
                "AttributeName": "SNMP.1.AgentCommunity",
                "Id": "iDRAC.Embedded.1#SNMP.1#AgentCommunity",
                "Type": "String",
                "MinLength": 0,
                "MaxLength": 31,
                "Readonly": False,
                "WriteOnly": False,
            },
            {
                "AttributeName": "SNMP.1.AlertPort",
                "Id": "iDRAC.Embedded.1#SNMP.1#AlertPort",
                "Type": "Integer",
                "LowerBound": 1,
                "UpperBound": 65535,
                "Readonly": False,
                "WriteOnly": False,
            },
            {
                "AttributeName": "Info.1.Version",
                "Id": "iDRAC.Embedded.1#Info.1#Version",
                "Type": "String",
                "MinLength": 0,
                "MaxLength": 64,
                "Readonly": True,
                "WriteOnly": False,
            },
            {
                "AttributeName": "ServerPwr.1.PSRapidOn",
                "Id": "System.Embedded.1#ServerPwr.1#PSRapidOn",
                "Type": "Enumeration",
                "Readonly": True,
                "WriteOnly": False,
                "Value": [
                    {"ValueDisplayName": "Enabled", "ValueName": "Enabled"},
                    {"ValueDisplayName": "Disabled", "ValueName": "Disabled"},
                ],
            },
            {
                "AttributeName": "Redundancy.1.Policy",
                "Id": "System.Embedded.1#Redundancy.1#Policy",
                "Type": "Boolean",
                "Readonly": False,
                "WriteOnly": False,
            },
        ]
    },
}


@pytest.fixture
def registry_json() -> bytes:
    return json.dumps(SAMPLE_REGISTRY, indent=4).encode("utf-8")


@pytest.fixture
def registry(registry_json):
    from oob_config.registry import AttributeRegistry
    return AttributeRegistry.from_json(registry_json)


@pytest.fixture
def endpoint() -> EndpointConfig:
    return EndpointConfig(
        host="https://idrac-test.example.net",
        username="root",
        password="calvin",
        name="idrac-test",
        verify_ssl=False,
        job_poll_interval=0.01,
        job_timeout=1,
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
