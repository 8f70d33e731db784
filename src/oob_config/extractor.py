"""Dotted-path extraction of raw JSON subtrees.

Redfish responses carry vendor extensions (``Oem.Dell``, ``Links.Oem.Dell``,
``@Redfish.Settings``) that are not worth modelling in full. The helpers here
locate such a subtree by path and hand back its raw bytes, leaving the
interpretation to the caller.

Usage:
    from oob_config.extractor import get_node, extract_and_decode

    raw = get_node(body, "Links.Oem.Dell")
    job = extract_and_decode(body, "Oem.Dell", DellOemJob.from_dict)
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from .exceptions import MalformedDocument, NodeNotFound, NoRawData

logger = logging.getLogger(__name__)

T = TypeVar("T")

PATH_DELIMITER = "."

_decoder = json.JSONDecoder()
_WHITESPACE = re.compile(r"[ \t\n\r]*")


@dataclass(eq=False)
class RawResource:
    """Base for decoded resources that keep the bytes they were decoded from."""
    raw_data: Optional[bytes] = field(default=None, repr=False, compare=False)


def _skip(text: str, idx: int) -> int:
    return _WHITESPACE.match(text, idx).end()


def _object_members(raw: bytes) -> dict[str, str]:
    """Split a JSON object into its members, keeping each value's source text."""
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"document is not valid UTF-8: {e}") from e

    members: dict[str, str] = {}
    try:
        idx = _skip(text, 0)
        if text[idx:idx + 1] != "{":
            raise MalformedDocument("document is not a JSON object")
        idx = _skip(text, idx + 1)

        if text[idx:idx + 1] == "}":
            end = idx + 1
        else:
            while True:
                key, idx = _decoder.raw_decode(text, idx)
                if not isinstance(key, str):
                    raise MalformedDocument(f"object key {key!r} is not a string")
                idx = _skip(text, idx)
                if text[idx:idx + 1] != ":":
                    raise MalformedDocument(f"expected ':' at offset {idx}")
                start = _skip(text, idx + 1)
                _, idx = _decoder.raw_decode(text, start)
                members[key] = text[start:idx]

                idx = _skip(text, idx)
                sep = text[idx:idx + 1]
                if sep == ",":
                    idx = _skip(text, idx + 1)
                    continue
                if sep == "}":
                    end = idx + 1
                    break
                raise MalformedDocument(f"expected ',' or '}}' at offset {idx}")
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"invalid JSON: {e}") from e

    if text[_skip(text, end):]:
        raise MalformedDocument(f"extra data after JSON object at offset {end}")
    return members


def get_member(raw: bytes, key: str) -> bytes:
    """Return the raw value of one top-level key, taken literally.

    Used for keys that contain the delimiter, such as ``@Redfish.Settings``.
    """
    members = _object_members(raw)
    if key not in members:
        raise NodeNotFound(key, key)
    return members[key].encode("utf-8")


def get_node(raw: bytes, path: str) -> bytes:
    """Return the raw JSON value found by following a dotted path.

    Each segment is looked up in the object decoded at the current level;
    the value is returned byte-for-byte as it appears in ``raw``.

    Segments cannot themselves contain the delimiter.

    Raises:
        NodeNotFound: If any segment is absent
        MalformedDocument: If the current level is not a JSON object
    """
    current = raw
    for segment in path.split(PATH_DELIMITER):
        members = _object_members(current)
        if segment not in members:
            raise NodeNotFound(path, segment)
        current = members[segment].encode("utf-8")
    return current


def get_raw_data(resource: Any) -> bytes:
    """Return the source bytes a resource captured when it was decoded.

    Raises:
        NoRawData: If the resource made no such capture
    """
    if not isinstance(resource, RawResource) or resource.raw_data is None:
        raise NoRawData(f"{type(resource).__name__} contains no rawData")
    return resource.raw_data


def extract_and_decode(
    raw: bytes,
    path: str,
    decode: Callable[[Any], T],
) -> Optional[T]:
    """Locate ``path`` in ``raw`` and decode it, or return None.

    An absent node, a malformed document or a value the decoder rejects all
    mean "leave the destination at its default".
    """
    try:
        node = get_node(raw, path)
        return decode(json.loads(node))
    except (NodeNotFound, MalformedDocument) as e:
        logger.debug(f"Skipping {path}: {e}")
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.debug(f"Skipping {path}: cannot decode node: {e}")
    return None
