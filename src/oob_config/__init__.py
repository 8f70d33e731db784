"""Out-of-band server configuration through Redfish attribute registries.

Usage:
    from oob_config import AttributeService, KeyedLock, RedfishClient
    from oob_config.config import EndpointInventory

    locks = KeyedLock()
    endpoint = EndpointInventory().get_endpoint("r740-01")
    async with RedfishClient(endpoint) as client:
        service = AttributeService(client, endpoint, locks)
        await service.update_attributes({"Time.1.Timezone": "UTC"})
"""
from .exceptions import (
    AttributeNotFound,
    AttributeValidationError,
    InvalidEnumValue,
    JobDeletionFailed,
    JobFailed,
    JobTimedOut,
    LockNotHeld,
    MalformedDocument,
    NoRawData,
    NodeNotFound,
    NotAnInteger,
    OobConfigError,
    OutOfBounds,
    ReadOnlyAttribute,
    ResourceNotFound,
    TransportError,
    UnsupportedAttributeType,
    UnsupportedValueKind,
)
from .extractor import RawResource, extract_and_decode, get_member, get_node, get_raw_data
from .jobs import JobCoordinator, JobHandle, delete_dell_job, wait_for_job, wait_for_task
from .registry import AttributeRegistry, coerce_attributes, format_attribute_value
from .service import AttributeService
from .transport import EndpointConfig, RedfishClient, Transport
from .utils.locks import KeyedLock

__version__ = "0.1.0"

__all__ = [
    # Errors
    "OobConfigError",
    "NodeNotFound",
    "MalformedDocument",
    "NoRawData",
    "AttributeNotFound",
    "UnsupportedAttributeType",
    "ReadOnlyAttribute",
    "OutOfBounds",
    "InvalidEnumValue",
    "UnsupportedValueKind",
    "NotAnInteger",
    "AttributeValidationError",
    "JobFailed",
    "JobTimedOut",
    "JobDeletionFailed",
    "TransportError",
    "LockNotHeld",
    "ResourceNotFound",
    # Extractor
    "RawResource",
    "get_node",
    "get_member",
    "get_raw_data",
    "extract_and_decode",
    # Registry
    "AttributeRegistry",
    "coerce_attributes",
    "format_attribute_value",
    # Jobs
    "JobCoordinator",
    "JobHandle",
    "wait_for_task",
    "wait_for_job",
    "delete_dell_job",
    # Transport and orchestration
    "Transport",
    "EndpointConfig",
    "RedfishClient",
    "KeyedLock",
    "AttributeService",
]
