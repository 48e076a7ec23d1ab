"""
Test suite for the command line entry point
Following TDD approach with AAA pattern and descriptive naming
"""

import json
import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch
import pytest
from satellite_adapter.cli import main
from satellite_adapter.models import Host, HostPackage
from satellite_adapter.name_resolver import NotFound
from satellite_adapter.streaming_sink import HostScopedRecord


CONFIG_TOML = """
[api]
name = "satellite"
base_url = "https://satellite.example.com"

[authentication]
type = "basic"
username_env = "SATELLITE_USERNAME"
password_env = "SATELLITE_PASSWORD"

[logging]
level = "WARNING"
"""


@pytest.fixture
def config_path():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
        f.write(CONFIG_TOML)
    yield f.name
    os.unlink(f.name)


@pytest.fixture
def mock_configure_logging():
    with patch('satellite_adapter.cli.configure_logging') as mock_configure_logging:
        yield mock_configure_logging


@pytest.fixture
def mock_client(mock_configure_logging):
    with patch('satellite_adapter.cli.SatelliteClient') as mock_client_class:
        client = MagicMock()
        client.__enter__.return_value = client
        mock_client_class.from_config.return_value = client
        yield client


class TestCli:
    """Test suite for satellite-adapter command line"""

    def test_parse_nvra_prints_components_without_config(self, capsys):
        """
        Test that --parse-nvra works without a configuration file
        """
        # Act
        exit_code = main(['--parse-nvra', 'foo-1.0-1.i386'])

        # Assert
        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {
            'name': 'foo', 'version': '1.0', 'release': '1', 'arch': 'i386'
        }

    def test_parse_nvra_with_malformed_identifier_returns_error(self, capsys):
        """
        Test that malformed identifiers give a non-zero exit code
        """
        # Act
        exit_code = main(['--parse-nvra', 'foo'])

        # Assert
        assert exit_code == 1
        assert "no arch info" in capsys.readouterr().out

    def test_missing_config_returns_error(self, capsys):
        """
        Test that listing commands require --config
        """
        # Act
        exit_code = main(['--hosts'])

        # Assert
        assert exit_code == 1
        assert "--config is required" in capsys.readouterr().out

    @patch.dict(os.environ, {'SATELLITE_USERNAME': 'admin', 'SATELLITE_PASSWORD': 'secret'})
    def test_validate_only_prints_summary(self, config_path, capsys):
        """
        Test that --validate-only checks configuration and environment
        """
        # Act
        exit_code = main(['--config', config_path, '--validate-only'])

        # Assert
        output = capsys.readouterr().out
        assert exit_code == 0
        assert "Configuration validation passed!" in output
        assert "Base URL: https://satellite.example.com" in output

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_only_with_missing_environment_returns_error(self, config_path, capsys):
        """
        Test that unset credential variables fail validation
        """
        # Act
        exit_code = main(['--config', config_path, '--validate-only'])

        # Assert
        assert exit_code == 1
        assert "SATELLITE_USERNAME" in capsys.readouterr().out

    def test_hosts_prints_one_json_line_per_host(self, config_path, mock_client, mock_configure_logging, capsys):
        """
        Test that host records are printed as JSON lines
        """
        # Arrange
        mock_client.list_hosts.return_value = iter([
            Host(id=1, name='web01.example.com'),
            Host(id=2, name='db01.example.com'),
        ])

        # Act
        exit_code = main(['--config', config_path, '--hosts', '--search', 'os = RedHat'])

        # Assert
        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert [json.loads(line)['name'] for line in lines] == ['web01.example.com', 'db01.example.com']
        mock_client.list_hosts.assert_called_once_with(search='os = RedHat', thin=False)
        mock_configure_logging.assert_called_once_with(level='WARNING', log_file=None)

    def test_packages_for_host_name_prints_joined_records(self, config_path, mock_client, capsys):
        """
        Test that package records include host and derived fields
        """
        # Arrange
        mock_client.list_host_packages.return_value = iter([
            HostScopedRecord(host_id=3, host_name='db01.example.com',
                             record=HostPackage(id=10, name='bash', nvra='bash-5.1.8-6.el9.x86_64')),
        ])

        # Act
        exit_code = main(['--config', config_path, '--packages', '--host-name', 'db01.example.com'])

        # Assert
        record = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert record['host_id'] == 3
        assert record['version'] == '5.1.8'
        mock_client.list_host_packages.assert_called_once_with(host_id=None, host_name='db01.example.com')

    def test_errata_with_unknown_host_returns_error(self, config_path, mock_client, capsys):
        """
        Test that adapter errors are reported with a non-zero exit code
        """
        # Arrange
        mock_client.list_host_errata.side_effect = NotFound('ghost')

        # Act
        exit_code = main(['--config', config_path, '--errata', '--host-name', 'ghost'])

        # Assert
        assert exit_code == 1
        assert "no host found" in capsys.readouterr().out

    def test_verbose_enables_debug_logging(self, config_path, mock_client, mock_configure_logging):
        """
        Test that --verbose overrides the configured level
        """
        # Arrange
        mock_client.list_hosts.return_value = iter([])

        # Act
        main(['--config', config_path, '--hosts', '--verbose'])

        # Assert
        mock_configure_logging.assert_called_once_with(level='DEBUG', log_file=None)

    def test_config_without_listing_flag_returns_error(self, config_path, capsys):
        """
        Test that a listing flag is required
        """
        # Act
        exit_code = main(['--config', config_path])

        # Assert
        assert exit_code == 1
        assert "--hosts, --packages or --errata" in capsys.readouterr().out

    def test_missing_config_file_returns_error(self, capsys):
        """
        Test that a missing configuration file is reported
        """
        # Act
        exit_code = main(['--config', str(Path('/nonexistent/satellite.toml')), '--hosts'])

        # Assert
        assert exit_code == 1
        assert "Configuration file not found" in capsys.readouterr().out
