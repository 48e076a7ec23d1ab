"""
ConfigLoader module for loading and validating Satellite connection configuration
"""

import os
import tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

import yaml

from .errors import SatelliteAdapterError


class ConfigurationError(SatelliteAdapterError):
    """Raised when configuration is invalid or incomplete"""
    pass


class EnvironmentVariableError(SatelliteAdapterError):
    """Raised when required environment variables are missing"""
    pass


@dataclass
class SatelliteConfig:
    """Connection configuration for a Satellite server"""
    name: str
    base_url: str
    authentication: Dict[str, Any]
    organisation: Optional[str] = None
    location: Optional[str] = None
    timeout_seconds: float = 30.0
    verify_tls: bool = True
    per_page: Optional[int] = None
    rate_limits: Dict[str, Any] = field(default_factory=dict)
    retries: Dict[str, Any] = field(default_factory=dict)
    cache: Dict[str, Any] = field(default_factory=dict)
    logging: Dict[str, Any] = field(default_factory=dict)
    resolution: Dict[str, Any] = field(default_factory=dict)

    @property
    def default_query_parameters(self) -> Dict[str, str]:
        """Query parameters added to every request (organisation/location scoping)"""
        params = {}
        if self.organisation is not None:
            params['organization_id'] = str(self.organisation)
        if self.location is not None:
            params['location_id'] = str(self.location)
        return params

    @property
    def log_level(self) -> str:
        return str(self.logging.get('level', 'INFO')).upper()


class ConfigLoader:
    """Loads and validates TOML (or YAML) configuration files"""

    # Required configuration sections and their mandatory keys
    REQUIRED_SECTIONS = {
        'api': ['name', 'base_url'],
        'authentication': ['type'],
    }

    SUPPORTED_AUTHENTICATION_TYPES = {'basic'}

    @staticmethod
    def load_config(config_path: Path) -> SatelliteConfig:
        """
        Load Satellite configuration from a TOML or YAML file

        Args:
            config_path: Path to the configuration file

        Returns:
            SatelliteConfig object with all configuration data

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If required configuration is missing or the syntax is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() in ('.yaml', '.yml'):
            config_data = ConfigLoader._read_yaml(config_path)
        else:
            config_data = ConfigLoader._read_toml(config_path)

        return ConfigLoader.from_dict(config_data)

    @staticmethod
    def from_dict(config_data: Dict[str, Any]) -> SatelliteConfig:
        """
        Build a SatelliteConfig from already parsed configuration data

        Args:
            config_data: Parsed configuration mapping

        Returns:
            SatelliteConfig object

        Raises:
            ConfigurationError: If any required section or key is missing
        """
        ConfigLoader._validate_required_sections(config_data)

        api = config_data['api']
        authentication = config_data['authentication']
        if authentication['type'] not in ConfigLoader.SUPPORTED_AUTHENTICATION_TYPES:
            raise ConfigurationError(f"Unsupported authentication type: {authentication['type']}")

        per_page = api.get('per_page')
        if per_page is not None:
            try:
                per_page = int(per_page)
            except (TypeError, ValueError):
                raise ConfigurationError(f"per_page must be an integer, got {per_page!r}") from None
            if per_page <= 0:
                raise ConfigurationError(f"per_page must be positive, got {per_page}")

        try:
            timeout_seconds = float(api.get('timeout_seconds', 30.0))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"timeout_seconds must be a number, got {api.get('timeout_seconds')!r}"
            ) from None

        return SatelliteConfig(
            name=api['name'],
            base_url=api['base_url'],
            authentication=authentication,
            organisation=api.get('organisation'),
            location=api.get('location'),
            timeout_seconds=timeout_seconds,
            verify_tls=bool(api.get('verify_tls', True)),
            per_page=per_page,
            rate_limits=config_data.get('rate_limits', {}),
            retries=config_data.get('retries', {}),
            cache=config_data.get('cache', {}),
            logging=config_data.get('logging', {}),
            resolution=config_data.get('resolution', {})
        )

    @staticmethod
    def _read_toml(config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'rb') as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {config_path}: {e}")

    @staticmethod
    def _read_yaml(config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}")
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration in {config_path} is not a mapping")
        return config_data

    @staticmethod
    def _validate_required_sections(config_data: Dict[str, Any]) -> None:
        """
        Validate that all required configuration sections and keys are present

        Args:
            config_data: Parsed configuration data

        Raises:
            ConfigurationError: If any required section or key is missing
        """
        missing_items = []

        for section_name, required_keys in ConfigLoader.REQUIRED_SECTIONS.items():
            if section_name not in config_data:
                missing_items.append(f"Section [{section_name}]")
            else:
                section_data = config_data[section_name]
                for key in required_keys:
                    if key not in section_data:
                        missing_items.append(f"Key '{key}' in section [{section_name}]")

        if missing_items:
            raise ConfigurationError(
                f"Missing required configuration items: {', '.join(missing_items)}"
            )

    @staticmethod
    def validate_environment_variables(config: SatelliteConfig) -> bool:
        """
        Validate that all environment variables referenced by the configuration are set

        Args:
            config: SatelliteConfig object to validate

        Returns:
            True if all environment variables are present

        Raises:
            EnvironmentVariableError: If any referenced environment variables are missing
        """
        missing_vars = []

        for key, value in config.authentication.items():
            if key.endswith('_env') and isinstance(value, str):
                if not os.getenv(value):
                    missing_vars.append(value)

        if missing_vars:
            raise EnvironmentVariableError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )

        return True

    @staticmethod
    def resolve_credentials(config: SatelliteConfig) -> Dict[str, str]:
        """
        Resolve basic authentication credentials from literals or environment references

        Args:
            config: SatelliteConfig object holding the [authentication] section

        Returns:
            Dictionary with 'username' and 'password'

        Raises:
            EnvironmentVariableError: If a referenced environment variable is not set
            ConfigurationError: If no username or password is configured
        """
        credentials = {}
        for key in ('username', 'password'):
            env_reference = config.authentication.get(f"{key}_env")
            if env_reference:
                credentials[key] = ConfigLoader.get_environment_value(env_reference)
            elif config.authentication.get(key):
                credentials[key] = str(config.authentication[key])

        if 'username' not in credentials or 'password' not in credentials:
            raise ConfigurationError("no authentication info available")

        return credentials

    @staticmethod
    def get_environment_value(env_var_name: str) -> str:
        """
        Get environment variable value with proper error handling

        Args:
            env_var_name: Name of the environment variable

        Returns:
            Value of the environment variable

        Raises:
            EnvironmentVariableError: If environment variable is not set
        """
        value = os.getenv(env_var_name)
        if value is None:
            raise EnvironmentVariableError(f"Environment variable '{env_var_name}' is not set")
        return value
