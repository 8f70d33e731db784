"""Reading and updating Dell manager attributes on one endpoint.

Ties the pieces together: the registry validates a change set, the endpoint
lock serializes it against other changes to the same controller, and the job
coordinator waits when the controller applies it asynchronously.

Usage:
    locks = KeyedLock()
    async with RedfishClient(endpoint) as client:
        service = AttributeService(client, endpoint, locks)
        current = await service.update_attributes({"Time.1.Timezone": "UTC"})
"""
import logging
from typing import Optional

from .constants import (
    MANAGER_REGISTRY_ID,
    MANAGERS_URI,
    REGISTRIES_URI,
    STATUS_ACCEPTED,
    STATUS_OK,
)
from .exceptions import (
    AttributeNotFound,
    AttributeValidationError,
    OobConfigError,
    ResourceNotFound,
    TransportError,
)
from .extractor import extract_and_decode
from .jobs.coordinator import wait_for_task
from .oem import DellAttributes, dell_attribute_links
from .registry import (
    AttributeKind,
    AttributeRegistry,
    coerce_attributes,
    format_attribute_value,
)
from .transport.base import EndpointConfig, Transport
from .transport.redfish import get_json
from .utils.audit_log import ChangeTracker
from .utils.connection import with_retry
from .utils.locks import KeyedLock
from .utils.logging_config import timed, timed_section

logger = logging.getLogger(__name__)

APPLY_TIME_IMMEDIATE = "Immediate"
IDRAC = "iDRAC"


def _member_uris(members: list) -> list[str]:
    return [m["@odata.id"] for m in members]


def _first_location(locations: list) -> str:
    return locations[0]["Uri"]


def _as_str(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


class AttributeService:
    """Attribute operations against a single Redfish endpoint."""

    def __init__(self, transport: Transport, endpoint: EndpointConfig, locks: KeyedLock):
        self.transport = transport
        self.endpoint = endpoint
        self.locks = locks
        # Opt-in retry of discovery reads; PATCH and job polling never retry
        self._get_json = with_retry(
            max_attempts=endpoint.read_retries,
            min_wait=endpoint.retry_wait,
            max_wait=endpoint.retry_wait * 10,
        )(get_json)

    @property
    def device_id(self) -> str:
        return self.endpoint.name or self.endpoint.host

    @property
    def lock_key(self) -> str:
        return self.endpoint.base_url

    async def _collection(self, uri: str) -> list[str]:
        body = await self._get_json(self.transport, uri)
        return extract_and_decode(body, "Members", _member_uris) or []

    @timed("fetch_registry")
    async def fetch_registry(self) -> AttributeRegistry:
        """Discover and decode the manager attribute registry.

        Raises:
            ResourceNotFound: If the service lists no ManagerAttributeRegistry
        """
        for uri in await self._collection(REGISTRIES_URI):
            entry = await self._get_json(self.transport, uri)
            if extract_and_decode(entry, "Id", _as_str) != MANAGER_REGISTRY_ID:
                continue
            location = extract_and_decode(entry, "Location", _first_location)
            if location is None:
                break
            logger.debug(f"Loading {MANAGER_REGISTRY_ID} from {location}")
            return AttributeRegistry.from_json(await self._get_json(self.transport, location))

        raise ResourceNotFound(
            f"couldn't retrieve {MANAGER_REGISTRY_ID} from {self.device_id}"
        )

    @timed("find_attributes")
    async def find_attributes_resource(self, kind: str = IDRAC) -> DellAttributes:
        """Return the DellAttributes resource whose Id contains ``kind``.

        Dell servers expose a single manager (the iDRAC); its OEM links list
        the iDRAC, System and LifecycleController attribute resources.
        """
        managers = await self._collection(MANAGERS_URI)
        if not managers:
            raise ResourceNotFound(f"no managers found on {self.device_id}")

        manager_raw = await self._get_json(self.transport, managers[0])
        for uri in dell_attribute_links(manager_raw):
            resource = DellAttributes.from_json(await self._get_json(self.transport, uri))
            if kind in resource.id:
                return resource

        raise ResourceNotFound(f"couldn't find {kind} attributes on {self.device_id}")

    async def read_attributes(
        self,
        names: Optional[list[str]] = None,
        kind: str = IDRAC,
    ) -> dict[str, str]:
        """Current attribute values rendered as strings.

        With ``names``, only those attributes are returned; attributes the
        device reports as unset (passwords) come back as "".
        """
        resource = await self.find_attributes_resource(kind)
        if names is None:
            return {k: format_attribute_value(v) for k, v in resource.attributes.items()}
        return {k: format_attribute_value(resource.attributes.get(k)) for k in names}

    async def check_importable(self, names: list[str], prefix: str = IDRAC) -> None:
        """Check that every name is an attribute of the ``prefix`` group.

        Raises:
            AttributeValidationError: Listing each unknown name
        """
        registry = await self.fetch_registry()
        known = set(registry.names_with_id_prefix(prefix))
        errors: dict[str, Exception] = {
            name: AttributeNotFound(name) for name in names if name not in known
        }
        if errors:
            raise AttributeValidationError(errors)

    async def update_attributes(
        self,
        values: dict[str, str],
        kind: str = IDRAC,
    ) -> dict[str, str]:
        """Validate and apply a change set, returning the values read back.

        Raises:
            NotAnInteger, AttributeNotFound, UnsupportedAttributeType: From coercion
            AttributeValidationError: If any value fails validation
            JobFailed, JobTimedOut: If the controller applies the change as a task
            TransportError: On communication failure or an unexpected status
        """
        registry = await self.fetch_registry()
        to_patch = coerce_attributes(values, registry)
        registry.validate_all(to_patch)

        masked = {
            name for name in to_patch
            if registry.get(name).kind is AttributeKind.PASSWORD
        }
        tracker = ChangeTracker(self.device_id, masked=masked)

        async with self.locks.hold(self.lock_key):
            resource = await self.find_attributes_resource(kind)
            before = {k: format_attribute_value(resource.attributes.get(k)) for k in to_patch}
            payload = {
                "@Redfish.OperationApplyTime": APPLY_TIME_IMMEDIATE,
                "Attributes": to_patch,
            }

            location: Optional[str] = None
            try:
                async with timed_section("patch_attributes", self.device_id):
                    _, status, location = await self.transport.patch(resource.odata_id, payload)
                if status == STATUS_ACCEPTED and location:
                    logger.info(f"Attribute update on {self.device_id} running as {location}")
                    await wait_for_task(
                        self.transport,
                        location,
                        poll_interval=self.endpoint.job_poll_interval,
                        timeout=self.endpoint.job_timeout,
                    )
                elif not STATUS_OK <= status < 300:
                    raise TransportError(
                        f"PATCH {resource.odata_id} returned status {status}",
                        uri=resource.odata_id,
                        status_code=status,
                    )
                after = await self.read_attributes(list(to_patch), kind)
            except OobConfigError as e:
                tracker.log_change(
                    "update_attributes", dict(to_patch), success=False,
                    before_state=before, job_uri=location, error=str(e),
                )
                raise

            tracker.log_change(
                "update_attributes", dict(to_patch), success=True,
                before_state=before, after_state=after, job_uri=location,
            )

        logger.info(f"Updated {len(to_patch)} attribute(s) on {self.device_id}")
        return after
