"""Endpoint inventory management from YAML configuration."""
import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Optional

import yaml

from ..transport.base import EndpointConfig

logger = logging.getLogger(__name__)

INVENTORY_ENV = "OOB_CONFIG_INVENTORY"


class EndpointInventory:
    """Managed controllers loaded from a YAML file.

    ```yaml
    defaults:
      username: root
      password_env: REDFISH_PASSWORD
      verify_ssl: false
      job_poll_interval: 10
      job_timeout: 300

    endpoints:
      r740-01:
        host: https://10.0.0.5
      r750-02:
        host: 10.0.0.6
        username: admin
    ```
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._find_config()
        self._config: dict = {}
        self._endpoints: dict[str, EndpointConfig] = {}
        self._load_config()

    def _find_config(self) -> str:
        """Find the endpoints.yaml config file."""
        search_paths = [
            Path.cwd() / "configs" / "endpoints.yaml",
            Path.cwd() / "endpoints.yaml",
            Path.home() / ".config" / "oob-config" / "endpoints.yaml",
            Path("/etc/oob-config/endpoints.yaml"),
        ]
        env_path = os.environ.get(INVENTORY_ENV)
        if env_path:
            search_paths.insert(0, Path(env_path))

        for path in search_paths:
            if path.exists():
                return str(path)

        raise FileNotFoundError(
            "Could not find endpoints.yaml. Create one in ./configs/endpoints.yaml"
        )

    def _load_config(self) -> None:
        """Load the YAML configuration and merge defaults into each endpoint."""
        with open(self.config_path) as f:
            self._config = yaml.safe_load(f) or {}

        defaults = self._config.get("defaults", {})
        for endpoint_id, endpoint_config in self._config.get("endpoints", {}).items():
            for key, value in defaults.items():
                endpoint_config.setdefault(key, value)
            if "host" not in endpoint_config:
                logger.warning(f"Endpoint '{endpoint_id}' has no host")

    def get_endpoint_ids(self) -> list[str]:
        return list(self._config.get("endpoints", {}).keys())

    def get_endpoint_config(self, endpoint_id: str) -> dict:
        """Get the raw (defaults-merged) config for an endpoint."""
        endpoints = self._config.get("endpoints", {})
        if endpoint_id not in endpoints:
            raise KeyError(f"Unknown endpoint: {endpoint_id}")
        return endpoints[endpoint_id]

    def get_endpoint(self, endpoint_id: str) -> EndpointConfig:
        """Get the typed config for an endpoint, cached per id."""
        if endpoint_id not in self._endpoints:
            raw = self.get_endpoint_config(endpoint_id)
            known = {f.name for f in fields(EndpointConfig)}
            unknown = set(raw) - known
            if unknown:
                logger.warning(
                    f"Ignoring unknown keys for endpoint '{endpoint_id}': {sorted(unknown)}"
                )
            params = {k: v for k, v in raw.items() if k in known}
            params.setdefault("name", endpoint_id)
            self._endpoints[endpoint_id] = EndpointConfig(**params)
        return self._endpoints[endpoint_id]

    def get_all_endpoints(self) -> dict[str, EndpointConfig]:
        return {eid: self.get_endpoint(eid) for eid in self.get_endpoint_ids()}
