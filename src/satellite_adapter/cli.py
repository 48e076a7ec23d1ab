"""
Command line entry point for listing Satellite hosts, packages and errata

Records are printed as one JSON object per line.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config_loader import ConfigLoader
from .errors import SatelliteAdapterError
from .logging_config import configure_logging
from .nvra_parser import parse_nvra
from .satellite_client import SatelliteClient

logger = logging.getLogger(__name__)


def print_record(record) -> None:
    """Print one record as a JSON line"""
    data = record.to_dict() if hasattr(record, 'to_dict') else record
    print(json.dumps(data, default=str))


def validate_configuration(config_path: str) -> int:
    """Load the configuration and check its environment variables"""
    print("Validating configuration and environment...")
    config = ConfigLoader.load_config(Path(config_path))
    ConfigLoader.validate_environment_variables(config)
    print("Configuration validation passed!")
    print(f"API: {config.name}")
    print(f"Base URL: {config.base_url}")
    print(f"Organisation: {config.organisation or '-'}")
    print(f"Location: {config.location or '-'}")
    print(f"Page size: {config.per_page or 'server default'}")
    print(f"Rate limit: {config.rate_limits.get('requests_per_second', 0)} req/sec")
    return 0


def main(argv=None) -> int:
    """Main execution function with CLI"""
    parser = argparse.ArgumentParser(
        description="Red Hat Satellite API adapter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List all hosts
  satellite-adapter --config configs/satellite.toml --hosts

  # List hosts matching a search expression
  satellite-adapter --config configs/satellite.toml --hosts --search 'os = RedHat'

  # List installed packages of one host
  satellite-adapter --config configs/satellite.toml --packages --host-name web01.example.com

  # List installed packages of every host
  satellite-adapter --config configs/satellite.toml --packages

  # List errata applicable to a host
  satellite-adapter --config configs/satellite.toml --errata --host-id 42

  # Split a package identifier
  satellite-adapter --parse-nvra tuned-profiles-cpu-partitioning-2.10.0-15.el8.noarch

  # Validate configuration only
  satellite-adapter --config configs/satellite.toml --validate-only
        """
    )

    parser.add_argument("--config", help="Path to TOML or YAML configuration file")
    parser.add_argument("--hosts", action="store_true", help="List hosts")
    parser.add_argument("--packages", action="store_true", help="List installed packages")
    parser.add_argument("--errata", action="store_true", help="List applicable errata")
    parser.add_argument("--host-id", type=int, help="Restrict packages or errata to this host id")
    parser.add_argument("--host-name", help="Restrict packages or errata to this host name")
    parser.add_argument("--search", help="Satellite search expression for --hosts")
    parser.add_argument("--parse-nvra", metavar="NVRA", help="Split a package identifier and exit")
    parser.add_argument("--validate-only", action="store_true", help="Only validate configuration")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    # No configuration needed for parsing
    if args.parse_nvra:
        try:
            identifier = parse_nvra(args.parse_nvra)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        print(json.dumps(identifier._asdict()))
        return 0

    if not args.config:
        print("--config is required for most operations")
        parser.print_help()
        return 1

    try:
        if args.validate_only:
            return validate_configuration(args.config)

        if not (args.hosts or args.packages or args.errata):
            print("One of --hosts, --packages or --errata is required")
            return 1

        config = ConfigLoader.load_config(Path(args.config))
        log_file = config.logging.get('log_file_name')
        configure_logging(
            level="DEBUG" if args.verbose else config.log_level,
            log_file=Path(log_file) if log_file else None
        )

        with SatelliteClient.from_config(config) as client:
            if args.hosts:
                records = client.list_hosts(search=args.search, thin=False)
            elif args.packages:
                records = client.list_host_packages(host_id=args.host_id, host_name=args.host_name)
            else:
                records = client.list_host_errata(host_id=args.host_id, host_name=args.host_name)

            count = 0
            for record in records:
                print_record(record)
                count += 1
            logger.info(f"{count} records listed")

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except (SatelliteAdapterError, ValueError) as e:
        logger.error(f"Listing failed: {e}")
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
