"""Endpoint configuration."""
from .inventory import EndpointInventory

__all__ = ["EndpointInventory"]
