"""
Typed records for the Satellite resources exposed by the adapter
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Any, List, Optional

from .nvra_parser import parse_nvra, PackageIdentifier
from .timestamps import parse_satellite_time, format_satellite_time, format_uptime, coerce_int_field


@dataclass
class Host:
    """A host registered with Satellite (thin or full representation)"""
    id: int
    name: str
    organization: Optional[str] = None
    location: Optional[str] = None
    model: Optional[str] = None
    ipv4_address: Optional[str] = None
    ipv6_address: Optional[str] = None
    mac_address: Optional[str] = None
    architecture: Optional[str] = None
    operating_system: Optional[str] = None
    environment: Optional[str] = None
    host_group_name: Optional[str] = None
    host_group_title: Optional[str] = None
    compute_resource: Optional[str] = None
    compute_profile: Optional[str] = None
    realm: Optional[str] = None
    image_file: Optional[str] = None
    provision_method: Optional[str] = None
    pxe_loader: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    installed_at: Optional[datetime] = None
    enabled: bool = False
    managed: bool = False
    uptime_seconds: int = 0
    global_status: Optional[str] = None
    errata_status: Optional[str] = None
    purpose_status: Optional[str] = None
    subscription_status: Optional[str] = None

    # wire name -> attribute name, for fields copied as-is
    FIELD_MAP = {
        'organization_name': 'organization',
        'location_name': 'location',
        'model_name': 'model',
        'ip': 'ipv4_address',
        'ip6': 'ipv6_address',
        'mac': 'mac_address',
        'architecture_name': 'architecture',
        'operatingsystem_name': 'operating_system',
        'environment_name': 'environment',
        'hostgroup_name': 'host_group_name',
        'hostgroup_title': 'host_group_title',
        'compute_resource_name': 'compute_resource',
        'compute_profile_name': 'compute_profile',
        'realm_name': 'realm',
        'image_file': 'image_file',
        'provision_method': 'provision_method',
        'pxe_loader': 'pxe_loader',
        'global_status_label': 'global_status',
        'errata_status_label': 'errata_status',
        'purpose_status_label': 'purpose_status',
        'subscription_status_label': 'subscription_status',
    }

    TIMESTAMP_FIELDS = ('created_at', 'updated_at', 'installed_at')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Host':
        values = {attr: data.get(wire) for wire, attr in cls.FIELD_MAP.items()}
        return cls(
            id=coerce_int_field(data.get('id')),
            name=data.get('name') or "",
            created_at=parse_satellite_time(data.get('created_at')),
            updated_at=parse_satellite_time(data.get('updated_at')),
            installed_at=parse_satellite_time(data.get('installed_at')),
            enabled=bool(data.get('enabled', False)),
            managed=bool(data.get('managed', False)),
            uptime_seconds=coerce_int_field(data.get('uptime_seconds')),
            **values
        )

    @property
    def uptime_duration(self) -> str:
        return format_uptime(self.uptime_seconds)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to wire-style values: timestamps in the API layout, uptime as a duration"""
        data = asdict(self)
        for name in self.TIMESTAMP_FIELDS:
            data[name] = format_satellite_time(data[name]) or None
        data['uptime_duration'] = self.uptime_duration
        return data


@dataclass
class HostPackage:
    """An installed package as reported for one host"""
    id: int
    name: str
    nvrea: str = ""
    nvra: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HostPackage':
        return cls(
            id=coerce_int_field(data.get('id')),
            name=data.get('name') or "",
            nvrea=data.get('nvrea') or "",
            nvra=data.get('nvra') or ""
        )

    @property
    def identifier(self) -> PackageIdentifier:
        """NVRA components; raises MalformedIdentifier for an identifier without arch"""
        return parse_nvra(self.nvra)

    @property
    def version(self) -> str:
        return self.identifier.version

    @property
    def release(self) -> str:
        return self.identifier.release

    @property
    def architecture(self) -> str:
        return self.identifier.arch

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        identifier = self.identifier
        data.update(version=identifier.version, release=identifier.release,
                    architecture=identifier.arch)
        return data


@dataclass
class ErrataReference:
    """A CVE or bug referenced by an erratum"""
    bug_id: str
    href: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ErrataReference':
        # CVE entries may carry their identifier as cve_id instead of bug_id
        identifier = data.get('bug_id') or data.get('cve_id') or ""
        return cls(bug_id=identifier, href=data.get('href') or "")


@dataclass
class HostErrata:
    """An erratum applicable to a host"""
    id: int
    errata_id: str = ""
    pulp_id: str = ""
    title: str = ""
    name: str = ""
    type: str = ""
    severity: str = ""
    issued: str = ""
    updated: str = ""
    description: str = ""
    solution: str = ""
    summary: str = ""
    uuid: str = ""
    reboot_suggested: bool = False
    installable: bool = False
    hosts_available_count: int = 0
    hosts_applicable_count: int = 0
    cves: List[ErrataReference] = field(default_factory=list)
    bugs: List[ErrataReference] = field(default_factory=list)
    packages: List[str] = field(default_factory=list)
    module_streams: List[Any] = field(default_factory=list)

    STRING_FIELDS = (
        'errata_id', 'pulp_id', 'title', 'name', 'type', 'severity', 'issued',
        'updated', 'description', 'solution', 'summary', 'uuid'
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HostErrata':
        strings = {name: data.get(name) or "" for name in cls.STRING_FIELDS}
        return cls(
            id=coerce_int_field(data.get('id')),
            reboot_suggested=bool(data.get('reboot_suggested', False)),
            installable=bool(data.get('installable', False)),
            hosts_available_count=coerce_int_field(data.get('hosts_available_count')),
            hosts_applicable_count=coerce_int_field(data.get('hosts_applicable_count')),
            cves=[ErrataReference.from_dict(item) for item in data.get('cves') or []],
            bugs=[ErrataReference.from_dict(item) for item in data.get('bugs') or []],
            packages=list(data.get('packages') or []),
            module_streams=list(data.get('module_streams') or []),
            **strings
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
