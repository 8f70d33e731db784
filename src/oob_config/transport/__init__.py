"""Transports for talking to Redfish endpoints."""
from .base import EndpointConfig, Transport
from .redfish import RedfishClient, get_json

__all__ = ["EndpointConfig", "Transport", "RedfishClient", "get_json"]
