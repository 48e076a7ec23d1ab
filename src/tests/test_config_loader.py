"""
Test suite for ConfigLoader component
Following TDD approach with AAA pattern and descriptive naming
"""

import pytest
import tempfile
import os
from pathlib import Path
from unittest.mock import patch
from satellite_adapter.config_loader import (
    ConfigLoader, SatelliteConfig, ConfigurationError, EnvironmentVariableError
)


VALID_TOML = """
[api]
name = "satellite"
base_url = "https://satellite.example.com"
organisation = "1"
location = "2"
timeout_seconds = 15
verify_tls = false
per_page = 50

[authentication]
type = "basic"
username_env = "SATELLITE_USERNAME"
password_env = "SATELLITE_PASSWORD"

[rate_limits]
requests_per_second = 4

[retries]
max_attempts = 3
backoff_factor = 2

[cache]
enabled = true
expiration_seconds = 600

[logging]
level = "debug"
log_file_name = "logs/satellite.log"

[resolution]
policy = "strict"
"""

VALID_YAML = """
api:
  name: satellite
  base_url: https://satellite.example.com
authentication:
  type: basic
  username: admin
  password: secret
"""


def write_temp_config(content, suffix):
    with tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False) as f:
        f.write(content)
        return Path(f.name)


class TestConfigLoader:
    """Test suite for ConfigLoader configuration loading functionality"""

    def test_load_config_with_valid_toml_returns_satellite_config(self):
        """
        Test that loading a valid TOML file returns a populated SatelliteConfig
        """
        # Arrange
        config_path = write_temp_config(VALID_TOML, '.toml')

        try:
            # Act
            config = ConfigLoader.load_config(config_path)

            # Assert
            assert isinstance(config, SatelliteConfig)
            assert config.name == 'satellite'
            assert config.base_url == 'https://satellite.example.com'
            assert config.timeout_seconds == 15.0
            assert config.verify_tls is False
            assert config.per_page == 50
            assert config.rate_limits['requests_per_second'] == 4
            assert config.retries['max_attempts'] == 3
            assert config.cache['enabled'] is True
            assert config.resolution['policy'] == 'strict'
            assert config.log_level == 'DEBUG'
            assert config.default_query_parameters == {'organization_id': '1', 'location_id': '2'}
        finally:
            os.unlink(config_path)

    def test_load_config_with_valid_yaml_returns_satellite_config(self):
        """
        Test that YAML files are accepted as an alternative format
        """
        # Arrange
        config_path = write_temp_config(VALID_YAML, '.yaml')

        try:
            # Act
            config = ConfigLoader.load_config(config_path)

            # Assert
            assert config.name == 'satellite'
            assert config.authentication['username'] == 'admin'
            assert config.per_page is None
            assert config.default_query_parameters == {}
            assert config.log_level == 'INFO'
        finally:
            os.unlink(config_path)

    def test_load_config_with_missing_file_raises_file_not_found_error(self):
        """
        Test that a missing configuration file raises FileNotFoundError
        """
        # Act & Assert
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load_config(Path('/nonexistent/satellite.toml'))

    def test_load_config_with_invalid_toml_raises_configuration_error(self):
        """
        Test that TOML syntax errors are reported as ConfigurationError
        """
        # Arrange
        config_path = write_temp_config('[api\nname = ', '.toml')

        try:
            # Act & Assert
            with pytest.raises(ConfigurationError) as exc_info:
                ConfigLoader.load_config(config_path)

            assert "Invalid TOML syntax" in str(exc_info.value)
        finally:
            os.unlink(config_path)

    def test_load_config_with_non_mapping_yaml_raises_configuration_error(self):
        """
        Test that a YAML document which is not a mapping is rejected
        """
        # Arrange
        config_path = write_temp_config('- just\n- a list\n', '.yml')

        try:
            # Act & Assert
            with pytest.raises(ConfigurationError):
                ConfigLoader.load_config(config_path)
        finally:
            os.unlink(config_path)

    def test_from_dict_with_missing_sections_lists_all_missing_items(self):
        """
        Test that every missing section and key is named in the error
        """
        # Arrange
        config_data = {'api': {'name': 'satellite'}}

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.from_dict(config_data)

        message = str(exc_info.value)
        assert "Key 'base_url' in section [api]" in message
        assert "Section [authentication]" in message

    def test_from_dict_with_unsupported_authentication_raises_configuration_error(self):
        """
        Test that only basic authentication is accepted
        """
        # Arrange
        config_data = {
            'api': {'name': 'satellite', 'base_url': 'https://satellite.example.com'},
            'authentication': {'type': 'oauth'}
        }

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.from_dict(config_data)

        assert "Unsupported authentication type: oauth" in str(exc_info.value)

    def test_from_dict_with_non_positive_page_size_raises_configuration_error(self):
        """
        Test that per_page must be positive
        """
        # Arrange
        config_data = {
            'api': {'name': 'satellite', 'base_url': 'https://satellite.example.com', 'per_page': 0},
            'authentication': {'type': 'basic'}
        }

        # Act & Assert
        with pytest.raises(ConfigurationError):
            ConfigLoader.from_dict(config_data)

    @pytest.mark.parametrize("key, value", [('per_page', 'fifty'), ('timeout_seconds', 'soon')])
    def test_from_dict_with_non_numeric_setting_raises_configuration_error(self, key, value):
        """
        Test that non-numeric page size or timeout is reported as ConfigurationError
        """
        # Arrange
        config_data = {
            'api': {'name': 'satellite', 'base_url': 'https://satellite.example.com', key: value},
            'authentication': {'type': 'basic'}
        }

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.from_dict(config_data)

        assert key in str(exc_info.value)

    @patch.dict(os.environ, {'SATELLITE_USERNAME': 'admin', 'SATELLITE_PASSWORD': 'secret'})
    def test_resolve_credentials_with_environment_references_returns_values(self):
        """
        Test that *_env keys are resolved from the environment
        """
        # Arrange
        config = SatelliteConfig(
            name='satellite', base_url='https://satellite.example.com',
            authentication={'type': 'basic', 'username_env': 'SATELLITE_USERNAME',
                            'password_env': 'SATELLITE_PASSWORD'}
        )

        # Act
        credentials = ConfigLoader.resolve_credentials(config)

        # Assert
        assert credentials == {'username': 'admin', 'password': 'secret'}

    @patch.dict(os.environ, {}, clear=True)
    def test_resolve_credentials_with_unset_variable_raises_environment_variable_error(self):
        """
        Test that a referenced but unset variable is reported by name
        """
        # Arrange
        config = SatelliteConfig(
            name='satellite', base_url='https://satellite.example.com',
            authentication={'type': 'basic', 'username_env': 'SATELLITE_USERNAME', 'password': 'secret'}
        )

        # Act & Assert
        with pytest.raises(EnvironmentVariableError) as exc_info:
            ConfigLoader.resolve_credentials(config)

        assert "SATELLITE_USERNAME" in str(exc_info.value)

    def test_resolve_credentials_without_password_raises_configuration_error(self):
        """
        Test that incomplete credentials are rejected
        """
        # Arrange
        config = SatelliteConfig(
            name='satellite', base_url='https://satellite.example.com',
            authentication={'type': 'basic', 'username': 'admin'}
        )

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.resolve_credentials(config)

        assert "no authentication info available" in str(exc_info.value)

    @patch.dict(os.environ, {'SATELLITE_USERNAME': 'admin'}, clear=True)
    def test_validate_environment_variables_lists_missing_variables(self):
        """
        Test that every unset variable is named in the error
        """
        # Arrange
        config = SatelliteConfig(
            name='satellite', base_url='https://satellite.example.com',
            authentication={'type': 'basic', 'username_env': 'SATELLITE_USERNAME',
                            'password_env': 'SATELLITE_PASSWORD'}
        )

        # Act & Assert
        with pytest.raises(EnvironmentVariableError) as exc_info:
            ConfigLoader.validate_environment_variables(config)

        assert "SATELLITE_PASSWORD" in str(exc_info.value)
        assert "SATELLITE_USERNAME" not in str(exc_info.value)
