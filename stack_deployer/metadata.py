"""
Project Metadata - persisted project state.

The metadata file is a JSON document shaped like:

    {
        "providers": {
            "awscloudformation": {
                "StackName": "...",
                "StackId": "...",
                "DeploymentBucketName": "..."
            }
        },
        "<category>": {
            "<resourceName>": {"service": "...", "output": {...}}
        }
    }

Every top-level key other than "providers" is a resource category. Resource
outputs written after a deployment land under the resource's "output" key.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import stack_deployer.constants as CONSTANTS
from stack_deployer.core.exceptions import ConfigurationError
from stack_deployer.core.models import StackIdentifiers
from stack_deployer.logger import logger

PROVIDERS_KEY = "providers"
OUTPUT_KEY = "output"


class ProjectMetadataStore:
    """
    JSON-file backed metadata store.

    The file is re-read on every access so that repeated propagations
    always start from the persisted state.
    """

    def __init__(self, metadata_path: str | Path, provider_name: str = CONSTANTS.DEFAULT_PROVIDER_NAME):
        self.metadata_path = Path(metadata_path)
        self.provider_name = provider_name

    # ==========================================
    # File I/O
    # ==========================================

    def load(self) -> Dict[str, Any]:
        if not self.metadata_path.exists():
            return {}
        try:
            with open(self.metadata_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in project metadata: {e}",
                config_file=str(self.metadata_path)
            )
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Project metadata must be a JSON object",
                config_file=str(self.metadata_path)
            )
        return data

    def save(self, data: Dict[str, Any]) -> None:
        os.makedirs(self.metadata_path.parent, exist_ok=True)
        with open(self.metadata_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)

    # ==========================================
    # Stack identifiers
    # ==========================================

    def _provider_section(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Return the provider section of ``data``, creating empty sections as needed."""
        providers = data.setdefault(PROVIDERS_KEY, {})
        if not isinstance(providers, dict):
            raise ConfigurationError(
                f"'{PROVIDERS_KEY}' in project metadata must be a JSON object",
                config_file=str(self.metadata_path)
            )
        provider = providers.setdefault(self.provider_name, {})
        if not isinstance(provider, dict):
            raise ConfigurationError(
                f"'{PROVIDERS_KEY}.{self.provider_name}' in project metadata must be a JSON object",
                config_file=str(self.metadata_path)
            )
        return provider

    def read_stack_identifiers(self) -> StackIdentifiers:
        provider = self._provider_section(self.load())
        return StackIdentifiers(
            stack_name=provider.get("StackName", ""),
            deployment_bucket=provider.get("DeploymentBucketName", ""),
            stack_id=provider.get("StackId", ""),
        )

    def write_stack_identifiers(self, identifiers: StackIdentifiers) -> None:
        data = self.load()
        provider = self._provider_section(data)
        if identifiers.stack_name:
            provider["StackName"] = identifiers.stack_name
        if identifiers.stack_id:
            provider["StackId"] = identifiers.stack_id
        if identifiers.deployment_bucket:
            provider["DeploymentBucketName"] = identifiers.deployment_bucket
        self.save(data)
        logger.debug(f"Recorded stack identifiers for {identifiers.stack_name} in {self.metadata_path}")

    # ==========================================
    # Resources
    # ==========================================

    def resource_keys(self) -> List[Tuple[str, str]]:
        keys = []
        for category, resources in self.load().items():
            if category == PROVIDERS_KEY or not isinstance(resources, dict):
                continue
            for resource_name in resources:
                keys.append((category, resource_name))
        return keys

    def read_resource_outputs(self, category: str, resource_name: str) -> Dict[str, str]:
        return self.load().get(category, {}).get(resource_name, {}).get(OUTPUT_KEY, {})

    def write_resource_outputs(self, category: str, resource_name: str, outputs: Mapping[str, str]) -> None:
        data = self.load()
        resource = data.setdefault(category, {}).setdefault(resource_name, {})
        resource[OUTPUT_KEY] = dict(outputs)
        self.save(data)
