"""
Configuration loading utilities.

This module loads and validates the deployer configuration from JSON files
in a project directory.

File Loading Order:
    1. config_deployer.json - Polling, timeout and metadata settings (optional)
    2. config_credentials_aws.json - AWS credentials (optional)

Usage:
    from stack_deployer.core.config_loader import load_deployer_config

    config = load_deployer_config(
        project_path=Path("/projects/my-project")
    )
"""

import json
from pathlib import Path
from typing import Any, Dict

import stack_deployer.constants as CONSTANTS

from .context import DeployerConfig
from .exceptions import ConfigurationError


def _load_json_file(file_path: Path, required: bool = True) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Args:
        file_path: Path to the JSON file
        required: If True, raise error when file is missing. If False, return empty dict.

    Returns:
        Parsed JSON content as dictionary

    Raises:
        ConfigurationError: If file is missing (when required) or has invalid JSON
    """
    if not file_path.exists():
        if required:
            raise ConfigurationError(
                f"Required configuration file not found: {file_path.name}",
                config_file=str(file_path)
            )
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration file: {e}",
            config_file=str(file_path)
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a JSON object",
            config_file=str(file_path)
        )
    return data


def _positive_number(raw: Dict[str, Any], key: str, default: int, config_file: Path) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(
            f"Field '{key}' must be a positive number, got {value!r}",
            config_file=str(config_file)
        )
    return value


def load_deployer_config(project_path: Path) -> DeployerConfig:
    """
    Load the deployer configuration for a project.

    Missing fields fall back to the defaults in ``constants``.

    Args:
        project_path: Path to the project directory

    Returns:
        DeployerConfig with validated settings

    Raises:
        ConfigurationError: If the config file is invalid or a field fails validation
    """
    config_file = project_path / CONSTANTS.CONFIG_DEPLOYER_FILE
    raw = _load_json_file(config_file, required=False)

    capabilities = raw.get("capabilities", CONSTANTS.DEFAULT_CAPABILITIES)
    if not isinstance(capabilities, list) or not all(isinstance(c, str) for c in capabilities):
        raise ConfigurationError(
            "Field 'capabilities' must be a list of strings",
            config_file=str(config_file)
        )

    poll_interval = _positive_number(
        raw, "poll_interval_seconds", CONSTANTS.DEFAULT_POLL_INTERVAL_SECONDS, config_file
    )
    max_operation = _positive_number(
        raw, "max_operation_seconds", CONSTANTS.DEFAULT_MAX_OPERATION_SECONDS, config_file
    )
    waiter_delay = _positive_number(
        raw, "waiter_delay_seconds", CONSTANTS.DEFAULT_WAITER_DELAY_SECONDS, config_file
    )
    if poll_interval > max_operation:
        raise ConfigurationError(
            "poll_interval_seconds must not exceed max_operation_seconds",
            config_file=str(config_file)
        )

    return DeployerConfig(
        mode=raw.get("mode", "INFO"),
        poll_interval_seconds=poll_interval,
        max_operation_seconds=max_operation,
        waiter_delay_seconds=int(waiter_delay),
        capabilities=list(capabilities),
        metadata_file=raw.get("metadata_file", CONSTANTS.DEFAULT_METADATA_FILE),
        provider_name=raw.get("provider_name", CONSTANTS.DEFAULT_PROVIDER_NAME),
    )


def load_credentials(project_path: Path) -> Dict[str, Any]:
    """
    Load AWS credentials for a project.

    The credentials file is optional so that environment variables or IAM
    roles can be used instead. When present, both key fields are required.

    Args:
        project_path: Path to the project directory

    Returns:
        Credentials dict (possibly empty)

    Raises:
        ConfigurationError: If the file exists but lacks a required field
    """
    creds_file = project_path / CONSTANTS.CONFIG_CREDENTIALS_AWS_FILE
    credentials = _load_json_file(creds_file, required=False)

    if credentials:
        for field in CONSTANTS.REQUIRED_CREDENTIALS_FIELDS:
            if not credentials.get(field):
                raise ConfigurationError(
                    f"Missing required field '{field}' in {CONSTANTS.CONFIG_CREDENTIALS_AWS_FILE}",
                    config_file=str(creds_file)
                )

    return credentials
