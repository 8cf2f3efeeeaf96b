"""Configuration management for repowatch.

Handles loading and validation of YAML configuration files. Values
missing from the file fall back to the environment settings
(REPOWATCH_* variables, see settings.py).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..repos.base import DebianTarget
from .settings import get_settings


# Poll intervals used by the repository service oracles, in seconds
DEFAULT_AVAILABILITY_INTERVAL = 1.0
DEFAULT_INDEXATION_INTERVAL = 30.0

DEFAULT_AVAILABILITY_TIMEOUT = 300.0
DEFAULT_INDEXATION_TIMEOUT = 1800.0


@dataclass
class ClientConfig:
    """Connection settings for the repository service."""

    api_base_url: str
    dl_base_url: str
    username: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: float = 60.0


@dataclass
class WaitConfig:
    """Time budgets and probe intervals for convergence waits."""

    availability_timeout: float = DEFAULT_AVAILABILITY_TIMEOUT
    indexation_timeout: float = DEFAULT_INDEXATION_TIMEOUT
    availability_interval: float = DEFAULT_AVAILABILITY_INTERVAL
    indexation_interval: float = DEFAULT_INDEXATION_INTERVAL


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_dir: str = "/var/log/repowatch"
    file_logging: bool = False


@dataclass
class RepoWatchConfig:
    """Top-level configuration for repowatch."""

    client: ClientConfig
    wait: WaitConfig = field(default_factory=WaitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debian_targets: List[DebianTarget] = field(default_factory=list)


def parse_client_config(client_dict: Dict[str, Any]) -> ClientConfig:
    """Parse a client configuration dictionary.

    Args:
        client_dict: Client configuration dictionary

    Returns:
        ClientConfig instance
    """
    settings = get_settings()
    return ClientConfig(
        api_base_url=client_dict.get("api_base_url") or settings.api_base_url,
        dl_base_url=client_dict.get("dl_base_url") or settings.dl_base_url,
        username=client_dict.get("username") or settings.username,
        api_key=client_dict.get("api_key") or settings.api_key,
        request_timeout=float(
            client_dict.get("request_timeout", settings.request_timeout)
        ),
    )


def parse_wait_config(wait_dict: Dict[str, Any]) -> WaitConfig:
    """Parse wait configuration dictionary.

    Args:
        wait_dict: Wait configuration dictionary

    Returns:
        WaitConfig instance

    Raises:
        ValueError: If an interval is not strictly positive
    """
    wait = WaitConfig(
        availability_timeout=float(
            wait_dict.get("availability_timeout", DEFAULT_AVAILABILITY_TIMEOUT)
        ),
        indexation_timeout=float(
            wait_dict.get("indexation_timeout", DEFAULT_INDEXATION_TIMEOUT)
        ),
        availability_interval=float(
            wait_dict.get("availability_interval", DEFAULT_AVAILABILITY_INTERVAL)
        ),
        indexation_interval=float(
            wait_dict.get("indexation_interval", DEFAULT_INDEXATION_INTERVAL)
        ),
    )

    if wait.availability_interval <= 0 or wait.indexation_interval <= 0:
        raise ValueError("Poll intervals must be greater than zero")

    return wait


def parse_logging_config(logging_dict: Dict[str, Any]) -> LoggingConfig:
    """Parse logging configuration dictionary.

    Args:
        logging_dict: Logging configuration dictionary

    Returns:
        LoggingConfig instance
    """
    return LoggingConfig(
        level=logging_dict.get("level", get_settings().log_level),
        log_dir=logging_dict.get("log_dir", "/var/log/repowatch"),
        file_logging=logging_dict.get("file_logging", False),
    )


def parse_debian_targets(debian_dict: Dict[str, Any]) -> List[DebianTarget]:
    """Expand Debian distributions, components and architectures.

    Every combination of the three lists becomes one target, in
    distribution, component, architecture order.

    Args:
        debian_dict: Mapping with "distributions", "components" and
            "architectures" lists

    Returns:
        List of DebianTarget instances
    """
    return [
        DebianTarget(distribution, component, architecture)
        for distribution in debian_dict.get("distributions", [])
        for component in debian_dict.get("components", [])
        for architecture in debian_dict.get("architectures", [])
    ]


def parse_config(config_dict: Dict[str, Any]) -> RepoWatchConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        RepoWatchConfig instance
    """
    return RepoWatchConfig(
        client=parse_client_config(config_dict.get("client", {})),
        wait=parse_wait_config(config_dict.get("wait", {})),
        logging=parse_logging_config(config_dict.get("logging", {})),
        debian_targets=parse_debian_targets(config_dict.get("debian", {})),
    )


def load_config(config_path: str = "/etc/repowatch/config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        TypeError: If the YAML root is not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration.

    Args:
        obj: Configuration object (dict, list, str, etc.)

    Returns:
        Configuration with expanded environment variables
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(
    config_path: Optional[str] = None,
) -> RepoWatchConfig:
    """Load and parse configuration into typed dataclasses.

    Without a path, the configuration is built from environment
    settings and defaults only.

    Args:
        config_path: Path to configuration file

    Returns:
        RepoWatchConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    config_dict = load_config(config_path) if config_path else {}
    return parse_config(config_dict)
