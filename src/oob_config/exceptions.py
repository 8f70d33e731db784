"""Exception taxonomy for out-of-band configuration management."""
from typing import Any, Optional


class OobConfigError(Exception):
    """Base class for all oob_config errors."""
    pass


# --- Document extraction ---

class DocumentError(OobConfigError):
    """Error locating data inside a JSON document."""
    pass


class NodeNotFound(DocumentError):
    """A path segment is absent from the document."""

    def __init__(self, path: str, segment: str):
        self.path = path
        self.segment = segment
        super().__init__(f"node:{segment} not found in rawData (path {path})")


class MalformedDocument(DocumentError):
    """The buffer does not decode as a JSON object."""
    pass


class NoRawData(DocumentError):
    """The object did not retain its source bytes."""
    pass


# --- Attribute registry ---

class RegistryError(OobConfigError):
    """Error validating a value against the attribute registry."""

    def __init__(self, attribute: str, message: str):
        self.attribute = attribute
        super().__init__(message)


class AttributeNotFound(RegistryError):
    def __init__(self, attribute: str):
        super().__init__(attribute, f"attribute {attribute} was not found")


class UnsupportedAttributeType(RegistryError):
    def __init__(self, attribute: str, attr_type: str):
        self.attr_type = attr_type
        super().__init__(
            attribute,
            f"attribute {attribute} has type {attr_type!r}, "
            f"expected one of Integer, Enumeration, Password or String",
        )


class ReadOnlyAttribute(RegistryError):
    def __init__(self, attribute: str):
        super().__init__(
            attribute,
            f"property {attribute} cannot be written as it is read only",
        )


class OutOfBounds(RegistryError):
    pass


class InvalidEnumValue(RegistryError):
    def __init__(self, attribute: str, value: str, allowed: list[str]):
        self.value = value
        self.allowed = allowed
        super().__init__(
            attribute,
            "enumeration value given is not permitted. "
            f"Allowed values: {', '.join(allowed)}",
        )


class UnsupportedValueKind(RegistryError):
    pass


class NotAnInteger(RegistryError):
    def __init__(self, attribute: str, value: str):
        self.value = value
        super().__init__(attribute, f"property {attribute} must be an integer")


class AttributeValidationError(OobConfigError):
    """Aggregate of every failing entry in a change set."""

    def __init__(self, errors: dict[str, Exception]):
        self.errors = errors
        lines = [f"{name} - {err}" for name, err in errors.items()]
        super().__init__("\n".join(lines))


# --- Jobs ---

class JobError(OobConfigError):
    """Error waiting for or managing a device-side job."""
    pass


class JobFailed(JobError):
    """The job reached a terminal failure state."""

    def __init__(self, uri: str, state: str, message: Optional[str] = None):
        self.uri = uri
        self.state = state
        self.message = message
        text = f"the job has finished unsuccessfully with a {state} state"
        if message:
            text += f": {message}"
        super().__init__(text)


class JobTimedOut(JobError):
    def __init__(self, uri: str, timeout: float):
        self.uri = uri
        self.timeout = timeout
        super().__init__(f"timeout waiting for the job {uri} to finish after {timeout}s")


class JobDeletionFailed(JobError):
    def __init__(self, job_id: str, status_code: int):
        self.job_id = job_id
        self.status_code = status_code
        super().__init__(
            f"error when deleting the task {job_id}, "
            f"delete status code was {status_code}"
        )


# --- Transport ---

class TransportError(OobConfigError):
    """Failure talking to the device."""

    def __init__(self, message: str, uri: str = "", status_code: Optional[int] = None):
        self.uri = uri
        self.status_code = status_code
        super().__init__(message)


# --- Locks ---

class LockNotHeld(OobConfigError):
    """Release of a key that is not currently held."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"lock for {key!r} released without a prior acquire")


class ResourceNotFound(OobConfigError):
    """An expected Redfish resource is missing from the service."""
    pass
